# app/services/accounts.py
"""
Account lifecycle: Unregistered -> Pending-Verification -> Verified.

Responsibilities:
- signup with duplicate detection (the DB unique constraints are the final arbiter)
- verification code consumption
- credential checks for sign-in, including transparent rehash of old digests
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import write_transaction
from app.core.errors import DuplicateEmail, DuplicateUsername, InvalidCredentials, NotVerified
from app.core.security import CredentialStore
from app.models.user import User
from app.services.verification import consume_verification, issue_verification

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email, User.active()).first()


def _raise_duplicate(db: Session, *, username: str, email: str) -> None:
    # Exact, case-sensitive match on the stored values; soft-deleted accounts still hold their names.
    if db.query(User.id).filter(User.email == email).first() is not None:
        raise DuplicateEmail()
    if db.query(User.id).filter(User.username == username).first() is not None:
        raise DuplicateUsername()


def signup(
    db: Session,
    credentials: CredentialStore,
    *,
    username: str,
    email: str,
    password: str,
    send_code: Callable[[User, str], None] | None = None,
) -> tuple[User, str]:
    """
    Creates an unverified user plus its verification code in one transaction.

    ``send_code(user, code)`` runs inside the transaction, so a delivery failure
    rolls the account back. Returns the user and the raw code.
    """
    _raise_duplicate(db, username=username, email=email)

    password_hash = credentials.hash(password)

    with write_transaction(db, "create account"):
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            verified=False,
        )
        db.add(user)
        try:
            db.flush()
        except IntegrityError:
            # Lost a race with a concurrent signup; report it like the pre-check would.
            db.rollback()
            _raise_duplicate(db, username=username, email=email)
            raise

        code = issue_verification(db, user)
        # Delivery precedes commit: a failed send rolls the account back, while a
        # failed commit after a send leaves the recipient with a dead link.
        if send_code is not None:
            send_code(user, code)

    db.refresh(user)
    logger.info("Account created: user_id=%s username=%s", user.id, user.username)
    return user, code


def verify(db: Session, code: str, *, now: datetime | None = None) -> User:
    with write_transaction(db, "verify account"):
        user = consume_verification(db, code, now=now)

    logger.info("Account verified: user_id=%s", user.id)
    return user


def resend_verification(
    db: Session,
    email: str,
    send_code: Callable[[User, str], None] | None = None,
) -> bool:
    """
    Issues a fresh code for an existing, unverified account.
    Returns False (and does nothing) otherwise so callers can answer uniformly.
    """
    user = get_user_by_email(db, email)
    if user is None or user.verified:
        return False

    with write_transaction(db, "issue verification code"):
        code = issue_verification(db, user)
        if send_code is not None:
            send_code(user, code)
    return True


def authenticate(
    db: Session,
    credentials: CredentialStore,
    *,
    email: str,
    password: str,
    require_verified: bool,
) -> User:
    user = get_user_by_email(db, email)
    if user is None:
        raise InvalidCredentials()

    if require_verified and not user.verified:
        raise NotVerified()

    if not credentials.verify(password, user.password_hash):
        logger.info("Sign-in rejected: user_id=%s", user.id)
        raise InvalidCredentials()

    if credentials.needs_rehash(user.password_hash):
        with write_transaction(db, "rotate credential"):
            user.password_hash = credentials.hash(password)
            db.add(user)
        logger.info("Credential rehashed with current profile: user_id=%s", user.id)

    return user
