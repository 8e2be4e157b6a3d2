from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from fastapi import Request, Response
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import write_transaction
from app.core.security import generate_token, hash_session_token
from app.models.user import User
from app.models.user_session import UserSession

logger = logging.getLogger(__name__)


# -----------------------------
# Session settings
# -----------------------------
def session_expiry() -> datetime:
    hours = int(getattr(settings, "SESSION_EXPIRE_HOURS", 720))
    return datetime.now(timezone.utc) + timedelta(hours=hours)


def session_cookie_max_age_seconds() -> int:
    hours = int(getattr(settings, "SESSION_EXPIRE_HOURS", 720))
    return hours * 3600


# -----------------------------
# Server-side session records
# -----------------------------
def open_session(db: Session, user: User) -> str:
    """
    Creates a session for user, stores its hash, returns the raw token for the cookie.
    """
    raw = generate_token()
    with write_transaction(db, "open session"):
        db.add(
            UserSession(
                user_id=user.id,
                token_hash=hash_session_token(raw),
                expires_at=session_expiry(),
            )
        )
    logger.info("Session opened: user_id=%s", user.id)
    return raw


def resolve_session(db: Session, raw_token: str) -> tuple[UserSession, User] | None:
    token_hash = hash_session_token(raw_token)
    record = db.query(UserSession).filter(UserSession.token_hash == token_hash).first()
    if not record:
        return None

    now = datetime.now(timezone.utc)
    # SQLite may round-trip tz-aware datetimes as naive. Compare consistently.
    expires_at = record.expires_at
    if getattr(expires_at, "tzinfo", None) is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    if expires_at <= now:
        return None

    user = db.query(User).filter(User.id == record.user_id, User.active()).first()
    if user is None:
        return None
    return record, user


def close_session(db: Session, raw_token: str | None) -> None:
    """
    Deletes the session row if there is one. Safe to call repeatedly.
    """
    if not raw_token:
        return
    with write_transaction(db, "close session"):
        (
            db.query(UserSession)
            .filter(UserSession.token_hash == hash_session_token(raw_token))
            .delete(synchronize_session=False)
        )


# -----------------------------
# Cookie helpers
# -----------------------------
def cookie_name() -> str:
    return str(getattr(settings, "SESSION_COOKIE_NAME", "gform_session")).strip() or "gform_session"


def cookie_secure() -> bool:
    # Prod => HTTPS => Secure cookies. Dev http://localhost => must be False.
    return settings.is_prod


def cookie_samesite() -> str:
    v = str(getattr(settings, "SESSION_COOKIE_SAMESITE", "lax")).lower().strip()
    if v not in {"lax", "strict", "none"}:
        return "lax"
    return v


def set_session_cookie(resp: Response, raw_token: str) -> None:
    resp.set_cookie(
        key=cookie_name(),
        value=raw_token,
        httponly=True,
        secure=cookie_secure(),
        samesite=cookie_samesite(),
        max_age=session_cookie_max_age_seconds(),
        path="/",
    )


def clear_session_cookie(resp: Response) -> None:
    resp.delete_cookie(key=cookie_name(), path="/")


def read_session_cookie(req: Request) -> str | None:
    val = req.cookies.get(cookie_name())
    if not val:
        return None
    val = val.strip()
    return val or None
