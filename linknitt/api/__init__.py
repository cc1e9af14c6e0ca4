"""
API module for linknitt.

Provides the FastAPI application factory and routes.
"""

from linknitt.api.app import create_app
from linknitt.api.routes import router

__all__ = ["create_app", "router"]
