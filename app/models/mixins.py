"""Soft delete support shared by all top-level models.

A row's lifecycle is either ``Active()`` or ``Deleted(at=...)``. Queries go
through ``active_only`` or ``include_deleted`` so every caller states whether
soft-deleted rows are wanted.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Union

from sqlalchemy import Column, TIMESTAMP
from sqlalchemy.orm import Query, Session


@dataclass(frozen=True)
class Active:
    """Row is live."""


@dataclass(frozen=True)
class Deleted:
    """Row was soft-deleted at ``at``."""

    at: datetime


Lifecycle = Union[Active, Deleted]


class SoftDeleteMixin:
    """Adds a nullable ``deleted_at`` timestamp and lifecycle helpers."""

    deleted_at = Column(TIMESTAMP, nullable=True, default=None)

    @property
    def lifecycle(self) -> Lifecycle:
        if self.deleted_at is None:
            return Active()
        return Deleted(at=self.deleted_at)

    @property
    def is_deleted(self) -> bool:
        return isinstance(self.lifecycle, Deleted)

    def soft_delete(self, at: datetime | None = None) -> None:
        """Mark the row deleted. Deleting twice keeps the first timestamp."""
        if self.deleted_at is None:
            self.deleted_at = at or datetime.utcnow()

    def restore(self) -> None:
        self.deleted_at = None


def active_only(db: Session, model) -> Query:
    """Query ``model`` restricted to live rows."""
    return db.query(model).filter(model.deleted_at.is_(None))


def include_deleted(db: Session, model) -> Query:
    """Query ``model`` including soft-deleted rows."""
    return db.query(model)
