"""
API Routes Package
"""

from api.routes import auth

__all__ = ["auth"]
