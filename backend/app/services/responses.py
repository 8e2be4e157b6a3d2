# app/services/responses.py
"""
Response validation and persistence.

A submission is checked against the form's *current* question schema in two
passes:

1. every answer must reference a question that exists on the form right now,
   and a required question may not be answered with an empty value;
2. every required question must have received an answer.

The second pass exists because omission can't be seen from the answers alone.
Nothing is written unless both passes succeed.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from app.core.database import write_transaction
from app.core.errors import MissingRequiredAnswer, ResponseNotFound, UnknownQuestion, ValidationError
from app.models.answer import Answer
from app.models.question import Question
from app.models.response import Response
from app.models.user import User
from app.schemas.response import AnswerIn, ResponseCreate
from app.services.forms import get_form, get_form_for_owner

logger = logging.getLogger(__name__)


def validate_answers(questions: Sequence[Question], answers: Iterable[AnswerIn]) -> set[UUID]:
    """
    Raises UnknownQuestion / MissingRequiredAnswer on the first violation.
    Returns the set of answered question IDs.
    """
    by_id = {q.id: q for q in questions}

    answered: set[UUID] = set()
    for ans in answers:
        q = by_id.get(ans.question_id)
        if q is None:
            raise UnknownQuestion(ans.question_id)
        if ans.value == "" and q.is_required:
            raise MissingRequiredAnswer(q.id, q.text)
        answered.add(ans.question_id)

    for q in questions:
        if q.is_required and q.id not in answered:
            raise MissingRequiredAnswer(q.id, q.text)

    return answered


def _respondent_id(payload: ResponseCreate, respondent: User | None) -> str:
    if respondent is not None:
        return str(respondent.id)
    rid = (payload.respondent_user_id or "").strip()
    if not rid:
        raise ValidationError("respondent_user_id is required", field="respondent_user_id")
    return rid


def submit_response(
    db: Session,
    form_id: UUID,
    payload: ResponseCreate,
    *,
    respondent: User | None = None,
) -> Response:
    form = get_form(db, form_id)
    validate_answers(form.active_questions, payload.answers)
    respondent_user_id = _respondent_id(payload, respondent)

    with write_transaction(db, "save response"):
        response = Response(form_id=form.id, respondent_user_id=respondent_user_id)
        response.answers = [
            Answer(question_id=a.question_id, value=a.value, position=i)
            for i, a in enumerate(payload.answers)
        ]
        db.add(response)

    db.refresh(response)
    logger.info(
        "Response submitted: form_id=%s respondent=%s response_id=%s",
        form.id,
        respondent_user_id,
        response.id,
    )
    return response


def list_responses(db: Session, form_id: UUID) -> list[Response]:
    return (
        db.query(Response)
        .filter(Response.form_id == form_id, Response.active())
        .order_by(desc(Response.created_at))
        .all()
    )


def get_response(db: Session, form_id: UUID, response_id: UUID) -> Response:
    response = (
        db.query(Response)
        .filter(
            Response.id == response_id,
            Response.form_id == form_id,
            Response.active(),
        )
        .first()
    )
    if not response:
        raise ResponseNotFound(response_id)
    return response


def delete_response(db: Session, form_id: UUID, response_id: UUID, *, owner: User) -> None:
    with write_transaction(db, "delete response"):
        get_form_for_owner(db, form_id, owner)
        response = get_response(db, form_id, response_id)
        now = datetime.now(timezone.utc)
        for a in response.active_answers:
            a.mark_deleted(now)
        response.mark_deleted(now)

    logger.info("Response deleted: form_id=%s response_id=%s", form_id, response_id)
