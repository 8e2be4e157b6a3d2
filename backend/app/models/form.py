# app/models/form.py
import uuid

from sqlalchemy import Column, DateTime, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.base import Base
from app.models.lifecycle import SoftDeleteMixin


class Form(SoftDeleteMixin, Base):
    __tablename__ = "forms"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="", server_default="")

    # ownership
    creator_user_id = Column(Uuid, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # Full history including retired questions; used for writes only.
    questions = relationship(
        "Question",
        back_populates="form",
        cascade="all, delete-orphan",
        order_by="Question.position",
    )

    # Current schema, filtered in SQL.
    active_questions = relationship(
        "Question",
        primaryjoin="and_(Form.id == Question.form_id, Question.deleted_at.is_(None))",
        order_by="Question.position",
        viewonly=True,
        lazy="selectin",
    )

    responses = relationship(
        "Response",
        back_populates="form",
        cascade="all, delete-orphan",
    )
