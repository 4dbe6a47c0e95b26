"""
ProjectDataLoader -- target and aggregate retrieval for the health engine.

Responsibility:
    Fetch a project's target record and compute its three aggregates
    (actual hours, actual material costs, invoice existence) from the
    database.  This is the only I/O in the health pipeline.

Architecture position:
    Services -- may import project_kernel (selectors, domain, exceptions).
    Consumed by ``ProjectHealthService`` through the ``ProjectDataSource``
    protocol.

Invariants enforced:
    - Each aggregate source degrades independently: a failing time-entry
      query leaves material costs and invoice lookup untouched.  Failed
      sources fall back to 0 hours, 0 costs, no invoice.
    - The three aggregate queries are issued concurrently and joined
      before ``load_aggregates`` returns.  Each runs in its own session;
      a Session is never shared across threads.
    - Hours are rounded to one decimal, costs to two, half away from zero.

Failure modes:
    - ``load_targets`` raises ``ProjectNotFoundError`` for an unknown id
      and ``ProjectDataUnavailableError`` when the query itself fails.
    - ``load_aggregates`` never raises for database errors.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from project_kernel.domain.health import ProjectAggregates, ProjectTargets
from project_kernel.exceptions import (
    ProjectDataUnavailableError,
    ProjectNotFoundError,
)
from project_kernel.logging_config import get_logger
from project_kernel.selectors.project_selector import ProjectSelector

logger = get_logger("services.project_data_loader")

T = TypeVar("T")

_HOURS_PRECISION = Decimal("0.1")
_MONEY_PRECISION = Decimal("0.01")


class ProjectDataSource(Protocol):
    """Contract the health service needs from its data collaborator."""

    def load_targets(self, project_id: str) -> ProjectTargets:
        """Target record; raises ProjectNotFoundError if there is none."""
        ...

    def load_aggregates(self, project_id: str) -> ProjectAggregates:
        """Aggregates with per-source defaults; never raises."""
        ...


class ProjectDataLoader:
    """
    SQLAlchemy-backed ``ProjectDataSource``.

    Contract:
        Takes a session factory, not a session: every query opens and
        closes its own session so the aggregate queries can run in
        parallel threads.

    Non-goals:
        - No retries.  A failed aggregate query degrades to its default
          on this call; the next call queries again.
        - No caching of targets or aggregates.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        max_workers: int = 3,
    ):
        self._session_factory = session_factory
        self._max_workers = max_workers

    def _with_selector(self, query: Callable[[ProjectSelector], T]) -> T:
        session = self._session_factory()
        try:
            return query(ProjectSelector(session))
        finally:
            session.close()

    def load_targets(self, project_id: str) -> ProjectTargets:
        """Load the target record of one project.

        Raises:
            ProjectNotFoundError: No project with this id.
            ProjectDataUnavailableError: The project query failed.
        """
        try:
            targets = self._with_selector(lambda s: s.get_targets(project_id))
        except SQLAlchemyError as exc:
            logger.error(
                "project_targets_unavailable",
                extra={"project_id": str(project_id)},
                exc_info=True,
            )
            raise ProjectDataUnavailableError(
                str(project_id), "projects", str(exc)
            ) from exc

        if targets is None:
            raise ProjectNotFoundError(str(project_id))
        return targets

    def _fetch_source(
        self,
        source: str,
        project_id: str,
        query: Callable[[ProjectSelector], T],
        default: T,
    ) -> T:
        try:
            return self._with_selector(query)
        except SQLAlchemyError:
            logger.warning(
                "aggregate_source_failed",
                extra={
                    "project_id": str(project_id),
                    "source": source,
                    "fallback": default,
                },
                exc_info=True,
            )
            return default

    def load_aggregates(self, project_id: str) -> ProjectAggregates:
        """Compute hours, costs and invoice flag, each source independently."""
        with ThreadPoolExecutor(
            max_workers=self._max_workers,
            thread_name_prefix="project-aggregates",
        ) as pool:
            hours_future = pool.submit(
                self._fetch_source,
                "time_entries",
                project_id,
                lambda s: s.total_hours(project_id),
                Decimal("0"),
            )
            costs_future = pool.submit(
                self._fetch_source,
                "material_entries",
                project_id,
                lambda s: s.total_material_costs(project_id),
                Decimal("0"),
            )
            invoice_future = pool.submit(
                self._fetch_source,
                "invoices",
                project_id,
                lambda s: s.has_invoice(project_id),
                False,
            )
            hours = hours_future.result()
            costs = costs_future.result()
            has_invoice = invoice_future.result()

        aggregates = ProjectAggregates(
            actual_hours=hours.quantize(_HOURS_PRECISION, rounding=ROUND_HALF_UP),
            actual_costs=costs.quantize(_MONEY_PRECISION, rounding=ROUND_HALF_UP),
            has_invoice=has_invoice,
        )
        logger.debug(
            "project_aggregates_loaded",
            extra={
                "project_id": str(project_id),
                "actual_hours": aggregates.actual_hours,
                "actual_costs": aggregates.actual_costs,
                "has_invoice": aggregates.has_invoice,
            },
        )
        return aggregates
