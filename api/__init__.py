"""
API Package

FastAPI application exposing the WeChat login strategy over HTTP.
"""
