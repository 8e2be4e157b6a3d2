# app/models/response.py
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.base import Base
from app.models.lifecycle import SoftDeleteMixin


class Response(SoftDeleteMixin, Base):
    __tablename__ = "responses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    form_id = Column(
        Uuid,
        ForeignKey("forms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    respondent_user_id = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    form = relationship("Form", back_populates="responses")

    answers = relationship(
        "Answer",
        back_populates="response",
        cascade="all, delete-orphan",
        order_by="Answer.position",
        lazy="selectin",
    )

    @property
    def active_answers(self) -> list:
        return [a for a in self.answers if a.deleted_at is None]
