# app/schemas/account.py
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class SignupIn(BaseModel):
    username: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class SigninIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class ResendVerificationIn(BaseModel):
    email: EmailStr


class UserOut(BaseModel):
    id: UUID
    username: str
    email: str
    verified: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProfileOut(BaseModel):
    username: str
    email: str
    message: str


class MessageOut(BaseModel):
    message: str
