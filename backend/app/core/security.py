# app/core/security.py
from __future__ import annotations

import hashlib
import hmac
import logging
import secrets

from fastapi import Request
from passlib.context import CryptContext

from app.core.config import Settings, settings

logger = logging.getLogger(__name__)


# -------------------------
# Password hashing
# -------------------------
class CredentialStore:
    """
    Argon2id password hashing.

    Built once at startup and handed to request handlers through
    ``get_credential_store``; it holds no per-request state.
    """

    def __init__(self, *, time_cost: int, memory_kib: int, parallelism: int) -> None:
        self._context = CryptContext(
            schemes=["argon2"],
            deprecated="auto",
            argon2__type="ID",
            argon2__rounds=time_cost,
            argon2__memory_cost=memory_kib,
            argon2__parallelism=parallelism,
        )
        # Misconfiguration must surface at startup, not on the first signup.
        self._context.hash("startup-self-check")

    @classmethod
    def from_settings(cls, cfg: Settings = settings) -> CredentialStore:
        return cls(
            time_cost=cfg.PASSWORD_HASH_TIME_COST,
            memory_kib=cfg.PASSWORD_HASH_MEMORY_KIB,
            parallelism=cfg.PASSWORD_HASH_PARALLELISM,
        )

    def hash(self, plaintext: str) -> str:
        return self._context.hash(plaintext)

    def verify(self, plaintext: str, digest: str | None) -> bool:
        if not digest:
            return False
        try:
            return self._context.verify(plaintext, digest)
        except (ValueError, TypeError):
            # Unknown or malformed digest is a mismatch, never a crash.
            logger.warning("Password digest could not be parsed; treating as mismatch")
            return False

    def needs_rehash(self, digest: str) -> bool:
        try:
            return self._context.needs_update(digest)
        except (ValueError, TypeError):
            return False


def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.credentials


# -------------------------
# Opaque token helpers
# -------------------------
def generate_token() -> str:
    """
    Cryptographically secure opaque token (verification codes, session ids).
    The raw value is only ever handed to the client; storage keeps a hash.
    """
    return secrets.token_urlsafe(32)


def hash_verification_code(code: str) -> str:
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


def hash_session_token(raw_token: str) -> str:
    """
    HMAC keyed by SESSION_SECRET so a leaked sessions table can't be replayed.
    """
    secret = (settings.SESSION_SECRET or "").encode("utf-8")
    if not secret:
        raise RuntimeError("SESSION_SECRET must be set to hash session tokens.")
    return hmac.new(secret, raw_token.encode("utf-8"), hashlib.sha256).hexdigest()
