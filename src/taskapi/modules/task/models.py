"""Task ORM model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from taskapi.core.models import Base
from taskapi.core.types import RFC3339Timestamp, utc_now


class Task(Base):
    """ORM model for a unit of work with a one-way completion state."""

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        "time_of_create", RFC3339Timestamp, nullable=False, default=utc_now
    )
    completed_at: Mapped[datetime | None] = mapped_column("time_of_complete", RFC3339Timestamp, nullable=True)
    complete: Mapped[bool] = mapped_column(
        Boolean(create_constraint=False), nullable=False, default=False, server_default="0"
    )

    __table_args__ = (
        CheckConstraint("complete IN (0, 1)", name="ck_tasks_complete_bool"),
        CheckConstraint(
            "(complete = 0 AND time_of_complete IS NULL) OR (complete = 1 AND time_of_complete IS NOT NULL)",
            name="ck_tasks_completed_at",
        ),
    )

    def __repr__(self) -> str:
        return f"Task(id={self.id!r}, name={self.name!r}, complete={self.complete!r})"
