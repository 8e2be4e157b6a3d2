# app/routes/account.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.auth.identity import SessionContext
from app.core.config import settings
from app.core.database import get_db
from app.core.errors import NotAuthenticated, StoreError
from app.core.security import CredentialStore, get_credential_store
from app.dependencies.session import get_session_context
from app.models.user import User
from app.schemas.account import (
    MessageOut,
    ProfileOut,
    ResendVerificationIn,
    SigninIn,
    SignupIn,
    UserOut,
)
from app.services import accounts
from app.services.email import EmailDeliveryError, EmailNotConfiguredError, send_email
from app.services.sessions import (
    clear_session_cookie,
    close_session,
    open_session,
    set_session_cookie,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/account", tags=["account"])


# -----------------------------
# Verification delivery
# -----------------------------
def verification_link(code: str) -> str:
    return f"{settings.PUBLIC_BASE_URL}/api/account/verify?verificationCode={code}"


def send_verification_email(user: User, code: str) -> None:
    subject = "Verify your account"
    body = "\n".join(
        [
            f"Hi {user.username},",
            "",
            "Please verify your account by opening the link below:",
            verification_link(code),
            "",
            f"The link expires in {settings.VERIFICATION_TOKEN_EXPIRE_HOURS} hours.",
            "If you did not create this account, you can ignore this email.",
        ]
    )

    try:
        send_email(to_email=user.email, subject=subject, body=body)
    except (EmailNotConfiguredError, EmailDeliveryError) as e:
        logger.error("Verification email failed: user=%s error=%s", user.username, e)
        raise StoreError("Could not send verification email")


# -----------------------------
# Routes
# -----------------------------
@router.post("/signup", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def signup(
    payload: SignupIn,
    db: Session = Depends(get_db),
    credentials: CredentialStore = Depends(get_credential_store),
):
    user, _ = accounts.signup(
        db,
        credentials,
        username=payload.username.strip(),
        email=str(payload.email).strip(),
        password=payload.password,
        send_code=send_verification_email,
    )
    return user


@router.post("/verify", response_model=MessageOut)
@router.get("/verify", response_model=MessageOut)
def verify(
    verificationCode: str = Query(default=""),  # noqa: N803
    db: Session = Depends(get_db),
):
    accounts.verify(db, verificationCode.strip())
    return {"message": "Account verified successfully. You can now sign in."}


@router.post("/resend-verification", response_model=MessageOut)
def resend_verification(payload: ResendVerificationIn, db: Session = Depends(get_db)):
    accounts.resend_verification(db, str(payload.email).strip(), send_code=send_verification_email)
    return {"message": "If that account exists and is not verified, a new link was sent."}


@router.post("/signin", response_model=ProfileOut)
def signin(
    payload: SigninIn,
    response: Response,
    db: Session = Depends(get_db),
    credentials: CredentialStore = Depends(get_credential_store),
):
    user = accounts.authenticate(
        db,
        credentials,
        email=str(payload.email).strip(),
        password=payload.password,
        require_verified=settings.FF_USER_VERIFICATION,
    )

    raw = open_session(db, user)
    set_session_cookie(response, raw)

    return {"username": user.username, "email": user.email, "message": "Signed in successfully"}


@router.post("/signout", response_model=MessageOut)
def signout(
    response: Response,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    close_session(db, ctx.raw_token)
    clear_session_cookie(response)
    return {"message": "Signed out"}


@router.get("/whoami", response_model=ProfileOut)
def whoami(ctx: SessionContext = Depends(get_session_context)):
    if ctx.user is None:
        raise NotAuthenticated()
    return {
        "username": ctx.user.username,
        "email": ctx.user.email,
        "message": "User details retrieved successfully",
    }
