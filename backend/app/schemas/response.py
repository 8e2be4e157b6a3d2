from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AnswerIn(BaseModel):
    question_id: UUID
    value: str = ""


class ResponseCreate(BaseModel):
    # Ignored when the request carries a signed-in session.
    respondent_user_id: str | None = Field(default=None, max_length=255)
    answers: list[AnswerIn] = []


class AnswerOut(BaseModel):
    id: UUID
    question_id: UUID
    value: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ResponseOut(BaseModel):
    id: UUID
    form_id: UUID
    respondent_user_id: str
    answers: list[AnswerOut] = Field(default=[], validation_alias="active_answers")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
