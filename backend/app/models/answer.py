import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.base import Base
from app.models.lifecycle import SoftDeleteMixin


class Answer(SoftDeleteMixin, Base):
    __tablename__ = "answers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    response_id = Column(
        Uuid,
        ForeignKey("responses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Plain value reference, not a foreign key: answers outlive schema replacement.
    question_id = Column(Uuid, nullable=False, index=True)

    position = Column(Integer, nullable=False, default=0)
    value = Column(Text, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    response = relationship("Response", back_populates="answers")
