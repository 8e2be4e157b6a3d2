# app/auth/__init__.py
"""
Session-based authentication.

This package contains:
- identity.py: the request-scoped SessionContext threaded through handlers
"""
from app.auth.identity import SessionContext

__all__ = ["SessionContext"]
