"""
Project health domain types (``project_kernel.domain.health``).

Responsibility
--------------
Pure value objects for the project health engine: the planned targets and
observed aggregates that go in, and the traffic-light result that comes
out (reasons, next action, economy summary).

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.  No imports
from ``db/``, ``models/``, ``selectors/`` or outer layers.

Invariants enforced
-------------------
* Optional target fields are ``None`` when unset; ``None`` is never
  conflated with a legitimate zero.
* ``ProjectAggregates`` is always fully populated (zero/false defaults).
* A ``HealthReason`` is only ever yellow or red.  Green is the absence
  of reasons.
* ``ProjectHealth`` is never persisted.  It is rebuilt on every request
  so that it cannot drift from the live project data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


class TrafficLight(str, Enum):
    """Overall project status."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class Severity(str, Enum):
    """Severity of a single reason.  There is no green severity."""

    YELLOW = "yellow"
    RED = "red"


class ProjectStatus(str, Enum):
    """Project lifecycle values as stored on the project record."""

    INQUIRY = "anfrage"
    SITE_VISIT = "besichtigung"
    PLANNED = "geplant"
    IN_PROGRESS = "in_bearbeitung"
    COMPLETED = "abgeschlossen"


class HealthReasonCode(str, Enum):
    """Closed set of deviations the rule evaluators can report."""

    MISSING_TARGETS = "MISSING_TARGETS"
    NO_TIME_ENTRIES = "NO_TIME_ENTRIES"
    NO_PROJECT_MANAGER = "NO_PROJECT_MANAGER"
    TIME_OVER_PLANNED = "TIME_OVER_PLANNED"
    COST_OVER_TARGET = "COST_OVER_TARGET"
    DEADLINE_RISK = "DEADLINE_RISK"
    MISSING_INVOICE = "MISSING_INVOICE"


class NextActionKey(str, Enum):
    """Closed catalogue of remedial actions."""

    SET_TARGETS = "SET_TARGETS"
    BOOK_FIRST_TIME = "BOOK_FIRST_TIME"
    ASSIGN_MANAGER = "ASSIGN_MANAGER"
    REVIEW_DEADLINE = "REVIEW_DEADLINE"
    CREATE_INVOICE = "CREATE_INVOICE"
    ADD_MATERIAL = "ADD_MATERIAL"


def _number(value: Decimal | None) -> int | float | None:
    """Render a Decimal as a JSON number (int when integral)."""
    if value is None:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# =========================================================================
# Inputs
# =========================================================================


@dataclass(frozen=True)
class ProjectTargets:
    """Planned values for one project, read-only for one computation.

    ``status`` is kept as the raw stored string so that an unknown
    lifecycle value never breaks evaluation; compare it against
    ``ProjectStatus`` members.
    """

    project_id: str
    status: str
    planned_hours: Decimal | None = None
    target_revenue: Decimal | None = None
    end_date: date | None = None
    project_manager_id: str | None = None
    budget: Decimal | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == ProjectStatus.COMPLETED.value


@dataclass(frozen=True)
class ProjectAggregates:
    """Observed actuals summed from time, material and invoice records.

    Every field is always present.  ``actual_hours`` is rounded to one
    decimal and ``actual_costs`` to two decimals by the loader.
    """

    actual_hours: Decimal = Decimal("0")
    actual_costs: Decimal = Decimal("0")
    has_invoice: bool = False

    @classmethod
    def empty(cls) -> ProjectAggregates:
        return cls()


# =========================================================================
# Outputs
# =========================================================================


@dataclass(frozen=True)
class HealthReason:
    """One detected deviation between targets and aggregates."""

    code: HealthReasonCode
    severity: Severity
    title: str
    detail: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "severity": self.severity.value,
            "title": self.title,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class NextActionDefinition:
    """Static catalogue entry; ``cta_route`` holds an ``{id}`` placeholder.

    Lower ``priority`` means the action is suggested first.
    """

    priority: int
    title: str
    description: str
    cta_label: str
    cta_route: str


@dataclass(frozen=True)
class NextAction:
    """The single recommended remedy, route already bound to a project."""

    key: NextActionKey
    title: str
    description: str
    cta_label: str
    cta_route: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key.value,
            "title": self.title,
            "description": self.description,
            "ctaLabel": self.cta_label,
            "ctaRoute": self.cta_route,
        }


@dataclass(frozen=True)
class EconomySummary:
    """Profitability snapshot.

    ``gross_profit`` and ``gross_margin_pct`` are ``None`` unless the
    target revenue is a positive number.
    """

    target_revenue: Decimal | None
    actual_costs: Decimal
    gross_profit: Decimal | None = None
    gross_margin_pct: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "targetRevenue": _number(self.target_revenue),
            "actualCosts": _number(self.actual_costs),
            "grossProfit": _number(self.gross_profit),
            "grossMarginPct": self.gross_margin_pct,
        }


@dataclass(frozen=True)
class ProjectHealth:
    """Result of one health computation.

    Has no identity and is never stored.  ``reasons`` keeps the rule
    declaration order for readability only; status is derived from
    severities, not from position or count.
    """

    status: TrafficLight
    economy: EconomySummary
    computed_at: datetime
    reasons: tuple[HealthReason, ...] = field(default_factory=tuple)
    next_action: NextAction | None = None

    @property
    def reason_codes(self) -> tuple[HealthReasonCode, ...]:
        return tuple(r.code for r in self.reasons)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "reasons": [r.to_dict() for r in self.reasons],
            "nextAction": (
                self.next_action.to_dict() if self.next_action is not None else None
            ),
            "economy": self.economy.to_dict(),
            "computedAtISO": self.computed_at.isoformat(),
        }
