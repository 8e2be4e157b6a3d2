# app/models/lifecycle.py
"""
Soft-delete lifecycle shared by forms, questions, responses and answers.

Rows are never physically removed; ``deleted_at`` marks them. Readers see the
state as a tagged value (``Active()`` or ``Deleted(at)``) and every query path
filters with ``Model.active()`` explicitly.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Union

from sqlalchemy import Column, DateTime


@dataclass(frozen=True)
class Active:
    pass


@dataclass(frozen=True)
class Deleted:
    at: datetime


Lifecycle = Union[Active, Deleted]


class SoftDeleteMixin:
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    @property
    def lifecycle(self) -> Lifecycle:
        if self.deleted_at is None:
            return Active()
        return Deleted(at=self.deleted_at)

    @property
    def is_active(self) -> bool:
        return isinstance(self.lifecycle, Active)

    def mark_deleted(self, when: datetime | None = None) -> None:
        if self.deleted_at is None:
            self.deleted_at = when or datetime.now(timezone.utc)

    @classmethod
    def active(cls):
        """Filter expression selecting rows that have not been soft-deleted."""
        return cls.deleted_at.is_(None)
