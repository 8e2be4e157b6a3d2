from __future__ import annotations

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, status
from fastapi.exceptions import RequestValidationError
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.dependencies.session import require_user
from app.models.user import User
from app.schemas.form import FormCreate, FormOut, QuestionIn
from app.services import forms as forms_service

router = APIRouter(prefix="/forms", tags=["forms"])

_question_list = TypeAdapter(list[QuestionIn])


@router.post("", response_model=FormOut, status_code=status.HTTP_201_CREATED)
def create_form(
    payload: FormCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    return forms_service.create_form(db, user, payload)


@router.get("", response_model=list[FormOut])
def list_forms(
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    return forms_service.list_forms_for_user(db, user)


@router.get("/{form_id}", response_model=FormOut)
def get_form(form_id: UUID, db: Session = Depends(get_db)):
    return forms_service.get_form(db, form_id)


@router.put("/{form_id}/questions", response_model=FormOut)
def replace_questions(
    form_id: UUID,
    payload: Any = Body(...),
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    # The form is looked up before the body is parsed: a missing form is 404
    # whatever the payload looks like.
    forms_service.get_form_for_owner(db, form_id, user)
    try:
        questions = _question_list.validate_python(payload)
    except PydanticValidationError as e:
        raise RequestValidationError(e.errors(), body=payload)
    return forms_service.replace_questions(db, form_id, questions, owner=user)


@router.delete("/{form_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_form(
    form_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    forms_service.delete_form(db, form_id, owner=user)
    return None
