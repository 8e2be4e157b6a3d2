# app/core/errors.py
"""
Domain error taxonomy.

Services raise these; ``app.main`` renders every one of them with the standard
``{"error": ..., "message": ..., "details": ...}`` body. Keep them free of
FastAPI imports so services stay testable without an app.
"""
from __future__ import annotations

from typing import Any
from uuid import UUID


class DomainError(Exception):
    status_code: int = 400
    error: str = "HTTP_ERROR"
    code: str | None = None

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = {k: v for k, v in details.items() if v is not None}

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error, "message": self.message}
        details = dict(self.details)
        if self.code:
            details.setdefault("code", self.code)
        if details:
            payload["details"] = details
        return payload


# -----------------------------
# Taxonomy roots
# -----------------------------
class ValidationError(DomainError):
    status_code = 400
    error = "VALIDATION_ERROR"


class AuthorizationError(DomainError):
    status_code = 401
    error = "UNAUTHORIZED"


class AuthenticationError(DomainError):
    status_code = 403
    error = "FORBIDDEN"


class NotFoundError(DomainError):
    status_code = 404
    error = "NOT_FOUND"


class ConflictError(DomainError):
    status_code = 400
    error = "CONFLICT"


class StoreError(DomainError):
    status_code = 500
    error = "INTERNAL_ERROR"

    def __init__(self, message: str = "Storage failure") -> None:
        super().__init__(message)


# -----------------------------
# Accounts
# -----------------------------
class DuplicateEmail(ConflictError):
    code = "DUPLICATE_EMAIL"

    def __init__(self) -> None:
        super().__init__("Email already exists")


class DuplicateUsername(ConflictError):
    code = "DUPLICATE_USERNAME"

    def __init__(self) -> None:
        super().__init__("Username already exists")


class InvalidCode(NotFoundError):
    code = "INVALID_CODE"

    def __init__(self) -> None:
        super().__init__("Invalid verification code")


class Expired(ValidationError):
    code = "VERIFICATION_EXPIRED"

    def __init__(self) -> None:
        super().__init__("Verification code has expired")


class InvalidCredentials(AuthenticationError):
    error = "INVALID_CREDENTIALS"

    def __init__(self) -> None:
        super().__init__("Wrong credentials")


class NotVerified(AuthenticationError):
    error = "NOT_VERIFIED"

    def __init__(self) -> None:
        super().__init__("Account not verified")


class NotAuthenticated(AuthorizationError):
    def __init__(self, message: str = "Not signed in") -> None:
        super().__init__(message)


# -----------------------------
# Forms / responses
# -----------------------------
class FormNotFound(NotFoundError):
    def __init__(self, form_id: UUID | str | None = None) -> None:
        super().__init__("Form not found", form_id=str(form_id) if form_id else None)


class ResponseNotFound(NotFoundError):
    def __init__(self, response_id: UUID | str | None = None) -> None:
        super().__init__("Response not found", response_id=str(response_id) if response_id else None)


class TooManyQuestions(ValidationError):
    code = "TOO_MANY_QUESTIONS"

    def __init__(self, limit: int) -> None:
        super().__init__(f"Too many questions (max length is {limit})", limit=limit)


class UnknownQuestion(ValidationError):
    code = "UNKNOWN_QUESTION"

    def __init__(self, question_id: UUID | str) -> None:
        self.question_id = question_id
        super().__init__(f"Invalid question ID in response: {question_id}", question_id=str(question_id))


class MissingRequiredAnswer(ValidationError):
    code = "MISSING_REQUIRED_ANSWER"

    def __init__(self, question_id: UUID | str, text: str | None = None) -> None:
        self.question_id = question_id
        label = text or str(question_id)
        super().__init__(f"Missing answer for required question: {label}", question_id=str(question_id))
