from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Sequence
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import write_transaction
from app.core.errors import FormNotFound, TooManyQuestions
from app.models.form import Form
from app.models.question import DEFAULT_QUESTION_TYPE, Question
from app.models.response import Response
from app.models.user import User
from app.schemas.form import FormCreate, QuestionIn

logger = logging.getLogger(__name__)


def max_questions() -> int:
    return int(getattr(settings, "MAX_QUESTIONS_PER_FORM", 50))


def ensure_question_cap(questions: Sequence) -> None:
    limit = max_questions()
    if len(questions) > limit:
        raise TooManyQuestions(limit)


def _build_questions(form_id: UUID | None, questions: Sequence[QuestionIn]) -> list[Question]:
    now = datetime.now(timezone.utc)
    built: list[Question] = []
    for position, q in enumerate(questions):
        built.append(
            Question(
                form_id=form_id,
                position=position,
                text=q.text,
                type=q.type or DEFAULT_QUESTION_TYPE,
                is_required=q.is_required,
                extra_info=q.extra_info or "",
                created_at=now,
                updated_at=now,
            )
        )
    return built


def get_form(db: Session, form_id: UUID) -> Form:
    form = db.query(Form).filter(Form.id == form_id, Form.active()).first()
    if not form:
        raise FormNotFound(form_id)
    return form


def get_form_for_owner(db: Session, form_id: UUID, owner: User, *, lock: bool = False) -> Form:
    """
    Same 404 for "missing" and "someone else's" so existence is never leaked.
    """
    qry = db.query(Form).filter(
        Form.id == form_id,
        Form.creator_user_id == owner.id,
        Form.active(),
    )
    if lock:
        qry = qry.with_for_update()
    form = qry.first()
    if not form:
        raise FormNotFound(form_id)
    return form


def list_forms_for_user(db: Session, user: User) -> list[Form]:
    return (
        db.query(Form)
        .filter(Form.creator_user_id == user.id, Form.active())
        .order_by(desc(Form.created_at))
        .all()
    )


def create_form(db: Session, owner: User, payload: FormCreate) -> Form:
    ensure_question_cap(payload.questions)

    with write_transaction(db, "save form"):
        form = Form(
            title=payload.title.strip(),
            description=payload.description or "",
            creator_user_id=owner.id,
        )
        form.questions = _build_questions(None, payload.questions)
        db.add(form)

    db.refresh(form)
    logger.info("Form created: id=%s title=%s owner=%s", form.id, form.title, owner.id)
    return form


def replace_questions(
    db: Session,
    form_id: UUID,
    new_questions: Sequence[QuestionIn],
    *,
    owner: User,
) -> Form:
    """
    Swap the whole question list of a form in one transaction.

    Every active question is soft-deleted and the new list is inserted with fresh
    IDs. The form row is locked for the duration so concurrent replacements
    serialize; readers see either the old or the new schema, never a mix. Answers
    from earlier responses keep pointing at the retired question IDs.
    """
    get_form_for_owner(db, form_id, owner)
    ensure_question_cap(new_questions)

    with write_transaction(db, "save questions"):
        form = get_form_for_owner(db, form_id, owner, lock=True)

        now = datetime.now(timezone.utc)
        retired = 0
        for q in form.active_questions:
            q.mark_deleted(now)
            retired += 1

        fresh = _build_questions(form.id, new_questions)
        db.add_all(fresh)
        form.updated_at = now
        db.flush()

    form = get_form(db, form_id)
    logger.info(
        "Questions replaced: form_id=%s retired=%s inserted=%s",
        form.id,
        retired,
        len(new_questions),
    )
    return form


def delete_form(db: Session, form_id: UUID, *, owner: User) -> None:
    """
    Soft-deletes the form along with its questions, responses and their answers.
    """
    with write_transaction(db, "delete form"):
        form = get_form_for_owner(db, form_id, owner, lock=True)
        now = datetime.now(timezone.utc)

        for q in form.active_questions:
            q.mark_deleted(now)

        responses = (
            db.query(Response)
            .filter(Response.form_id == form.id, Response.active())
            .all()
        )
        for r in responses:
            for a in r.active_answers:
                a.mark_deleted(now)
            r.mark_deleted(now)

        form.mark_deleted(now)

    logger.info("Form deleted: id=%s owner=%s", form_id, owner.id)
