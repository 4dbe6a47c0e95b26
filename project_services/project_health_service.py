"""
ProjectHealthService -- computes the health of one project on demand.

Responsibility:
    Sequence the data loader and the pure engines for one project id:
    load targets, load aggregates, run the seven rules, aggregate status,
    resolve the next action, summarise economics and stamp the result.

Architecture position:
    Services -- imports project_engines (pure) and a ``ProjectDataSource``
    (I/O).  Owns the Clock; the engines never read time.

Invariants enforced:
    - Always live: nothing is cached or persisted between calls.  Two
      calls with the same data on the same calendar day produce the same
      status, reasons and next action.
    - ``compute_health`` never raises for a missing or unreadable project;
      it returns the fixed fallback from ``not_found_health``.
    - ``evaluate`` reports the same conditions as a typed
      ``HealthLookup`` so callers can tell "not found" from "incomplete".

Failure modes:
    - Exceptions from the engines are defects and propagate.
"""

from __future__ import annotations

from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, tzinfo
from decimal import Decimal
from enum import Enum
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session, sessionmaker

from project_config.schema import HealthEngineConfig
from project_engines import (
    determine_next_action,
    determine_status,
    evaluate_rules,
    summarize_economy,
)
from project_kernel.domain.clock import Clock, SystemClock, calendar_day
from project_kernel.domain.health import (
    EconomySummary,
    HealthReason,
    HealthReasonCode,
    ProjectAggregates,
    ProjectHealth,
    ProjectTargets,
    Severity,
    TrafficLight,
)
from project_kernel.exceptions import (
    ProjectDataUnavailableError,
    ProjectNotFoundError,
)
from project_kernel.logging_config import LogContext, get_logger
from project_services.project_data_loader import ProjectDataLoader, ProjectDataSource

logger = get_logger("services.project_health")

NOT_FOUND_REASON = HealthReason(
    code=HealthReasonCode.MISSING_TARGETS,
    severity=Severity.YELLOW,
    title="Projekt nicht gefunden",
    detail="Die Projektdaten konnten nicht geladen werden.",
)


def not_found_health(computed_at: datetime) -> ProjectHealth:
    """Fixed result for a project whose targets could not be loaded."""
    return ProjectHealth(
        status=TrafficLight.YELLOW,
        reasons=(NOT_FOUND_REASON,),
        next_action=None,
        economy=EconomySummary(target_revenue=None, actual_costs=Decimal("0")),
        computed_at=computed_at,
    )


class HealthLookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class HealthLookup:
    """Result-typed outcome of ``ProjectHealthService.evaluate``."""

    project_id: str
    status: HealthLookupStatus
    health: ProjectHealth | None = None
    error_code: str | None = None

    @property
    def found(self) -> bool:
        return self.status == HealthLookupStatus.FOUND


class ProjectHealthService:
    """
    Orchestrates one health computation per call.

    Contract:
        Stateless apart from its collaborators; safe to call from many
        threads at once for different (or the same) projects.

    Guarantees:
        - ``reasons`` are in rule declaration order.
        - The calendar day for deadline arithmetic is the clock's instant
          seen in ``business_timezone``.
        - ``computed_at`` is the same instant.
    """

    def __init__(
        self,
        data_source: ProjectDataSource,
        clock: Clock | None = None,
        business_timezone: tzinfo | str = "Europe/Berlin",
        max_workers: int = 4,
    ):
        self._data_source = data_source
        self._clock = clock or SystemClock()
        if isinstance(business_timezone, str):
            business_timezone = ZoneInfo(business_timezone)
        self._tz = business_timezone
        self._max_workers = max_workers

    @classmethod
    def from_config(
        cls,
        config: HealthEngineConfig,
        session_factory: sessionmaker[Session],
        clock: Clock | None = None,
    ) -> ProjectHealthService:
        """Wire a service with a database-backed loader."""
        loader = ProjectDataLoader(
            session_factory, max_workers=config.loader.max_workers
        )
        return cls(
            loader,
            clock=clock,
            business_timezone=config.calendar.timezone,
            max_workers=config.loader.project_workers,
        )

    def build_health(
        self,
        project_id: str,
        targets: ProjectTargets,
        aggregates: ProjectAggregates,
    ) -> ProjectHealth:
        """Evaluate already-loaded data.  No I/O besides the clock."""
        now = self._clock.now()
        as_of = calendar_day(now, self._tz)

        reasons = evaluate_rules(targets, aggregates, as_of)
        status = determine_status(reasons)
        next_action = determine_next_action(project_id, targets, aggregates, reasons)
        economy = summarize_economy(targets, aggregates)

        return ProjectHealth(
            status=status,
            reasons=reasons,
            next_action=next_action,
            economy=economy,
            computed_at=now,
        )

    def evaluate(self, project_id: str) -> HealthLookup:
        """Compute health, reporting a missing project as a distinct outcome."""
        project_id = str(project_id)
        with LogContext.bind(project_id=project_id):
            try:
                targets = self._data_source.load_targets(project_id)
            except ProjectNotFoundError as exc:
                logger.warning("project_not_found", extra={"error_code": exc.code})
                return HealthLookup(
                    project_id=project_id,
                    status=HealthLookupStatus.NOT_FOUND,
                    error_code=exc.code,
                )
            except ProjectDataUnavailableError as exc:
                logger.warning(
                    "project_targets_unavailable",
                    extra={"error_code": exc.code, "source": exc.source},
                )
                return HealthLookup(
                    project_id=project_id,
                    status=HealthLookupStatus.UNAVAILABLE,
                    error_code=exc.code,
                )

            aggregates = self._data_source.load_aggregates(project_id)
            health = self.build_health(project_id, targets, aggregates)

            logger.info(
                "project_health_computed",
                extra={
                    "health_status": health.status,
                    "reason_codes": [c.value for c in health.reason_codes],
                    "next_action": (
                        health.next_action.key if health.next_action else None
                    ),
                },
            )
            return HealthLookup(
                project_id=project_id,
                status=HealthLookupStatus.FOUND,
                health=health,
            )

    def compute_health(self, project_id: str) -> ProjectHealth:
        """Health of one project; a missing project yields the fallback."""
        lookup = self.evaluate(project_id)
        if lookup.health is not None:
            return lookup.health
        return not_found_health(self._clock.now())

    def compute_health_many(
        self,
        project_ids: Iterable[str],
    ) -> dict[str, ProjectHealth]:
        """Health of several projects, computed concurrently.

        Keys follow the input order; duplicate ids are computed once.
        """
        ids = list(dict.fromkeys(str(pid) for pid in project_ids))
        if not ids:
            return {}
        with ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(ids)),
            thread_name_prefix="project-health",
        ) as pool:
            results = list(pool.map(self.compute_health, ids))
        return dict(zip(ids, results))
