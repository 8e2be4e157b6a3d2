# app/dependencies/session.py
from __future__ import annotations

import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.auth.identity import SessionContext
from app.core.database import get_db
from app.core.errors import NotAuthenticated
from app.models.user import User
from app.services.sessions import read_session_cookie, resolve_session

logger = logging.getLogger(__name__)


def get_session_context(request: Request, db: Session = Depends(get_db)) -> SessionContext:
    """
    Resolves the session cookie to a user. Never fails: an unknown or expired
    token yields an anonymous context.
    """
    raw = read_session_cookie(request)
    if not raw:
        return SessionContext.anonymous()

    resolved = resolve_session(db, raw)
    if resolved is None:
        logger.debug("Session cookie did not resolve to an active session")
        return SessionContext.anonymous(raw_token=raw)

    _, user = resolved
    return SessionContext(raw_token=raw, user=user)


def require_user(ctx: SessionContext = Depends(get_session_context)) -> User:
    """
    Gate for mutation endpoints: no session is an authorization failure (401).
    """
    if ctx.user is None:
        raise NotAuthenticated()
    return ctx.user
