from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import Expired, InvalidCode
from app.core.security import generate_token, hash_verification_code
from app.models.user import User
from app.models.verification import Verification

logger = logging.getLogger(__name__)


def verification_expiry(now: datetime | None = None) -> datetime:
    hours = int(getattr(settings, "VERIFICATION_TOKEN_EXPIRE_HOURS", 150))
    return (now or datetime.now(timezone.utc)) + timedelta(hours=hours)


def issue_verification(db: Session, user: User, *, now: datetime | None = None) -> str:
    """
    Creates a Verification row for the user and returns the raw code.

    Only the code's hash is stored; the caller delivers the raw value out-of-band.
    Any still-pending codes for the user are dropped so only the latest one works.
    Does not commit.
    """
    (
        db.query(Verification)
        .filter(Verification.user_id == user.id)
        .delete(synchronize_session=False)
    )

    code = generate_token()
    db.add(
        Verification(
            user_id=user.id,
            code_hash=hash_verification_code(code),
            expires_at=verification_expiry(now),
        )
    )
    db.flush()
    return code


def consume_verification(db: Session, code: str, *, now: datetime | None = None) -> User:
    """
    Marks the bound user verified and deletes the Verification row. Does not commit.

    Raises InvalidCode for unknown (or already consumed) codes and Expired when the
    code is past its expiry. Expired rows are left in place and the user is untouched.
    """
    if not code:
        raise InvalidCode()

    record = (
        db.query(Verification)
        .filter(Verification.code_hash == hash_verification_code(code))
        .first()
    )
    if record is None:
        raise InvalidCode()

    now = now or datetime.now(timezone.utc)
    if record.is_expired(now):
        logger.info("Verification code expired: verification_id=%s user_id=%s", record.id, record.user_id)
        raise Expired()

    user = db.get(User, record.user_id)
    if user is None or user.deleted_at is not None:
        raise InvalidCode()

    # Single consumption: a concurrent verify that already deleted the row wins.
    deleted = (
        db.query(Verification)
        .filter(Verification.id == record.id)
        .delete(synchronize_session=False)
    )
    if deleted != 1:
        raise InvalidCode()

    user.verified = True
    db.add(user)
    return user
