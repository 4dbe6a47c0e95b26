"""
Module: project_kernel.selectors.project_selector
Responsibility: Read-only queries feeding the health engine: the target
    record of a project and the raw sums behind its aggregates (booked
    hours, material costs, invoice existence).
Architecture position: Kernel > Selectors.

Invariants enforced:
    - No stored actuals.  Hours and costs are summed from the underlying
      rows at query time.
    - Hours are computed in Python from start/end/break for portability
      across PostgreSQL and SQLite.

Failure modes:
    - Database errors (SQLAlchemyError) propagate to the caller.  The data
      loader decides how each source degrades.
    - A project id that is not a valid UUID matches no rows.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select

from project_kernel.domain.health import ProjectTargets
from project_kernel.models.invoice import Invoice
from project_kernel.models.material_entry import MaterialEntry
from project_kernel.models.project import Project
from project_kernel.models.time_entry import TimeEntry
from project_kernel.selectors.base import BaseSelector

_SECONDS_PER_HOUR = Decimal("3600")
_MINUTES_PER_HOUR = Decimal("60")


def _as_uuid(project_id: str | UUID) -> UUID | None:
    if isinstance(project_id, UUID):
        return project_id
    try:
        return UUID(str(project_id))
    except ValueError:
        return None


def entry_hours(
    start_time: datetime | None,
    end_time: datetime | None,
    break_minutes: int | None,
) -> Decimal:
    """Net hours of one time entry, never negative.

    Entries without a start or an end contribute nothing.
    """
    if start_time is None or end_time is None:
        return Decimal("0")
    gross = Decimal(str((end_time - start_time).total_seconds())) / _SECONDS_PER_HOUR
    net = gross - Decimal(break_minutes or 0) / _MINUTES_PER_HOUR
    return max(Decimal("0"), net)


class ProjectSelector(BaseSelector):
    """
    Selector for project targets and actuals.

    Non-goals:
        - Does not round.  Rounding to the published precision is the
          loader's job.
    """

    def get_targets(self, project_id: str | UUID) -> ProjectTargets | None:
        """Target record for a project, or None if it does not exist."""
        pid = _as_uuid(project_id)
        if pid is None:
            return None

        project = self.session.execute(
            select(Project).where(Project.id == pid)
        ).scalar_one_or_none()
        if project is None:
            return None

        return ProjectTargets(
            project_id=str(project.id),
            status=project.status,
            planned_hours=project.planned_hours,
            target_revenue=project.target_revenue,
            end_date=project.end_date,
            project_manager_id=(
                str(project.project_manager_id)
                if project.project_manager_id is not None
                else None
            ),
            budget=project.budget,
        )

    def total_hours(self, project_id: str | UUID) -> Decimal:
        """Unrounded sum of net hours over all time entries."""
        pid = _as_uuid(project_id)
        if pid is None:
            return Decimal("0")

        rows = self.session.execute(
            select(
                TimeEntry.start_time,
                TimeEntry.end_time,
                TimeEntry.break_duration,
            ).where(TimeEntry.project_id == pid)
        ).all()

        total = Decimal("0")
        for start_time, end_time, break_duration in rows:
            total += entry_hours(start_time, end_time, break_duration)
        return total

    def total_material_costs(self, project_id: str | UUID) -> Decimal:
        """Unrounded sum of material ``total_cost``; unset costs count as 0."""
        pid = _as_uuid(project_id)
        if pid is None:
            return Decimal("0")

        total = self.session.execute(
            select(func.coalesce(func.sum(MaterialEntry.total_cost), 0)).where(
                MaterialEntry.project_id == pid
            )
        ).scalar_one()
        return Decimal(str(total))

    def has_invoice(self, project_id: str | UUID) -> bool:
        """True if at least one invoice is linked to the project."""
        pid = _as_uuid(project_id)
        if pid is None:
            return False

        row = self.session.execute(
            select(Invoice.id).where(Invoice.project_id == pid).limit(1)
        ).first()
        return row is not None
