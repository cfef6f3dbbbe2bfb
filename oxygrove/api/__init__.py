"""
API Module - HTTP front door for tree farm sessions.

Provides:
- Pydantic request/response schemas
- APIService, a framework-agnostic layer over SessionManager
- create_app(), the FastAPI application factory
"""

from .service import APIService, SessionNotFoundError
from .app import create_app

__all__ = [
    "APIService",
    "SessionNotFoundError",
    "create_app",
]
