from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.question import DEFAULT_QUESTION_TYPE


class QuestionIn(BaseModel):
    text: str = Field(min_length=1)
    type: str = Field(default=DEFAULT_QUESTION_TYPE, max_length=50)
    is_required: bool = False
    extra_info: str = ""

    @field_validator("type")
    @classmethod
    def _default_type(cls, v: str) -> str:
        v = (v or "").strip()
        return v or DEFAULT_QUESTION_TYPE


class QuestionOut(BaseModel):
    id: UUID
    text: str
    type: str
    is_required: bool
    extra_info: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FormCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    questions: list[QuestionIn] = []


class FormOut(BaseModel):
    id: UUID
    title: str
    description: str
    creator_user_id: UUID
    questions: list[QuestionOut] = Field(default=[], validation_alias="active_questions")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
