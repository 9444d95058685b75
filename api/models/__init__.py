"""
API data models.
"""
