import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.base import Base
from app.models.lifecycle import SoftDeleteMixin

DEFAULT_QUESTION_TYPE = "text"


class Question(SoftDeleteMixin, Base):
    __tablename__ = "questions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    form_id = Column(
        Uuid,
        ForeignKey("forms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # order within the form's schema
    position = Column(Integer, nullable=False, default=0)

    text = Column(Text, nullable=False)
    # free-form tag, e.g. text / rating / choice
    type = Column(String(50), nullable=False, default=DEFAULT_QUESTION_TYPE)
    is_required = Column(Boolean, nullable=False, default=False)
    extra_info = Column(Text, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    form = relationship("Form", back_populates="questions")
