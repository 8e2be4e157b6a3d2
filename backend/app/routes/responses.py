from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth.identity import SessionContext
from app.core.database import get_db
from app.dependencies.session import get_session_context, require_user
from app.models.user import User
from app.schemas.response import ResponseCreate, ResponseOut
from app.services import responses as responses_service

router = APIRouter(prefix="/forms/{form_id}/responses", tags=["responses"])


@router.post("", response_model=ResponseOut, status_code=status.HTTP_201_CREATED)
def submit_response(
    form_id: UUID,
    payload: ResponseCreate,
    db: Session = Depends(get_db),
    ctx: SessionContext = Depends(get_session_context),
):
    return responses_service.submit_response(db, form_id, payload, respondent=ctx.user)


@router.get("", response_model=list[ResponseOut])
def list_responses(form_id: UUID, db: Session = Depends(get_db)):
    return responses_service.list_responses(db, form_id)


@router.get("/{response_id}", response_model=ResponseOut)
def get_response(form_id: UUID, response_id: UUID, db: Session = Depends(get_db)):
    return responses_service.get_response(db, form_id, response_id)


@router.delete("/{response_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_response(
    form_id: UUID,
    response_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    responses_service.delete_response(db, form_id, response_id, owner=user)
    return None
