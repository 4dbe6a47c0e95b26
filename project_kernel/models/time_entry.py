"""
Module: project_kernel.models.time_entry
Responsibility: ORM model for one booked working period on a project.
Architecture position: Kernel > Models.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from project_kernel.db.base import TimestampedBase, UUIDString


class TimeEntry(TimestampedBase):
    """
    Working time booked against a project.

    Entries without an end time are still running and contribute no hours.
    ``break_duration`` is in minutes.
    """

    __tablename__ = "time_entries"

    __table_args__ = (
        Index("idx_time_entry_project", "project_id"),
    )

    project_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("projects.id"),
        nullable=False,
    )

    employee_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        nullable=True,
    )

    start_time: Mapped[datetime | None] = mapped_column(
        nullable=True,
    )

    end_time: Mapped[datetime | None] = mapped_column(
        nullable=True,
    )

    break_duration: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )

    description: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<TimeEntry {self.project_id} {self.start_time}-{self.end_time}>"
