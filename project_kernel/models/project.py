"""
Module: project_kernel.models.project
Responsibility: ORM model for a project and its planned targets.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - Target columns (planned_hours, target_revenue, end_date,
      project_manager_id) are nullable.  NULL means "not set"; it is never
      written as zero.
    - No health columns.  Project health is computed on demand and never
      stored, so there is no materialised status to drift.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from project_kernel.db.base import TimestampedBase, UUIDString
from project_kernel.domain.health import ProjectStatus


class Project(TimestampedBase):
    """
    A customer project with its planned targets.

    Non-goals:
        - Does NOT validate lifecycle transitions.
        - Does NOT hold actuals; those are summed from time, material and
          invoice records at query time.
    """

    __tablename__ = "projects"

    __table_args__ = (
        Index("idx_project_status", "status"),
        Index("idx_project_manager", "project_manager_id"),
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    status: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        default=ProjectStatus.PLANNED.value,
    )

    # Targets
    planned_hours: Mapped[Decimal | None] = mapped_column(
        nullable=True,
    )

    target_revenue: Mapped[Decimal | None] = mapped_column(
        nullable=True,
    )

    end_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
    )

    project_manager_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        nullable=True,
    )

    budget: Mapped[Decimal | None] = mapped_column(
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Project {self.name} ({self.status})>"
