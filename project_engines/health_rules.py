"""
project_engines.health_rules -- Rule evaluators and deadline calculator.

Responsibility:
    Seven independent evaluators, each inspecting a project's targets and
    aggregates and returning one ``HealthReason`` or ``None``, plus the
    calendar-day deadline arithmetic used by the deadline rule.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import project_kernel/domain types and sibling engine modules.

Invariants enforced:
    - Purity: no clock access.  The calendar day is passed in as ``as_of``.
    - Totality: evaluators never raise on well-typed input; absent targets
      and non-positive denominators short-circuit to ``None``.
    - Independence: no evaluator reads another evaluator's output.  Order
      in ``RULES`` only fixes the order of the reasons list.
    - Red before yellow: a ratio beyond both thresholds yields red.

Failure modes:
    - None.  An exception from an evaluator means the loader
      handed over an ill-typed value.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from project_kernel.domain.health import (
    HealthReason,
    HealthReasonCode,
    ProjectAggregates,
    ProjectTargets,
    Severity,
)
from project_engines.health_thresholds import (
    MISSING_FIELD_LABELS,
    REASON_TEXTS,
    THRESHOLDS,
)
from project_engines.tracer import traced_engine


def _round_int(value: Decimal) -> int:
    """Round half away from zero to an integer."""
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def _plain(value: Decimal) -> str:
    """Render a Decimal without trailing zeros or exponent (20.000 -> 20)."""
    return format(value.normalize(), "f")


def _reason(
    code: HealthReasonCode,
    severity: Severity,
    detail: str | None = None,
) -> HealthReason:
    text = REASON_TEXTS[code]
    return HealthReason(
        code=code,
        severity=severity,
        title=text.title,
        detail=detail if detail is not None else text.detail_template,
    )


def _over_ratio(actual: Decimal, planned: Decimal) -> Decimal:
    return (actual - planned) / planned


# ---------------------------------------------------------------------------
# Deadline calculator
# ---------------------------------------------------------------------------


def _calendar_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def days_until_deadline(
    end_date: date | datetime | None,
    as_of: date | datetime,
) -> int | None:
    """Whole calendar days from ``as_of`` until ``end_date``.

    Both sides are reduced to their calendar day before subtracting, so a
    deadline today is 0 regardless of time of day, and a missed deadline
    is negative.

    Returns:
        None only when there is no end date.
    """
    if end_date is None:
        return None
    return (_calendar_day(end_date) - _calendar_day(as_of)).days


# ---------------------------------------------------------------------------
# Rule evaluators
# ---------------------------------------------------------------------------


def check_missing_targets(targets: ProjectTargets) -> HealthReason | None:
    """Yellow when planned hours, target revenue or end date is unset.

    All missing fields are listed in canonical order.  A zero is a set
    value, not a missing one.
    """
    missing = [
        label
        for attribute, label in MISSING_FIELD_LABELS
        if getattr(targets, attribute) is None
    ]
    if not missing:
        return None

    detail = REASON_TEXTS[HealthReasonCode.MISSING_TARGETS].detail_template.format(
        fields=", ".join(missing)
    )
    return _reason(HealthReasonCode.MISSING_TARGETS, Severity.YELLOW, detail)


def check_no_time_entries(aggregates: ProjectAggregates) -> HealthReason | None:
    """Yellow when no hours have been booked at all."""
    if aggregates.actual_hours == 0:
        return _reason(HealthReasonCode.NO_TIME_ENTRIES, Severity.YELLOW)
    return None


def check_no_project_manager(targets: ProjectTargets) -> HealthReason | None:
    """Yellow when no project manager is assigned."""
    if targets.project_manager_id is None:
        return _reason(HealthReasonCode.NO_PROJECT_MANAGER, Severity.YELLOW)
    return None


def check_time_over_planned(
    targets: ProjectTargets,
    aggregates: ProjectAggregates,
) -> HealthReason | None:
    """Booked hours above planned hours by more than 10% (yellow) / 25% (red)."""
    planned = targets.planned_hours
    if planned is None or planned <= 0:
        return None

    over = _over_ratio(aggregates.actual_hours, planned)

    if over > THRESHOLDS.time_red_pct_over:
        severity = Severity.RED
    elif over > THRESHOLDS.time_yellow_pct_over:
        severity = Severity.YELLOW
    else:
        return None

    detail = REASON_TEXTS[HealthReasonCode.TIME_OVER_PLANNED].detail_template.format(
        actual=aggregates.actual_hours.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP),
        planned=_plain(planned),
        percent=_round_int(over * 100),
    )
    return _reason(HealthReasonCode.TIME_OVER_PLANNED, severity, detail)


def check_cost_over_target(
    targets: ProjectTargets,
    aggregates: ProjectAggregates,
) -> HealthReason | None:
    """Actual costs above target revenue by more than 5% (yellow) / 15% (red)."""
    revenue = targets.target_revenue
    if revenue is None or revenue <= 0:
        return None

    over = _over_ratio(aggregates.actual_costs, revenue)

    if over > THRESHOLDS.cost_red_pct_over:
        severity = Severity.RED
    elif over > THRESHOLDS.cost_yellow_pct_over:
        severity = Severity.YELLOW
    else:
        return None

    detail = REASON_TEXTS[HealthReasonCode.COST_OVER_TARGET].detail_template.format(
        actual=_round_int(aggregates.actual_costs),
        target=_plain(revenue),
        percent=_round_int(over * 100),
    )
    return _reason(HealthReasonCode.COST_OVER_TARGET, severity, detail)


def check_deadline_risk(
    targets: ProjectTargets,
    as_of: date | datetime,
) -> HealthReason | None:
    """End date within 7 days (yellow) or 3 days (red).

    An already-missed deadline is not reported here.
    """
    days_left = days_until_deadline(targets.end_date, as_of)
    if days_left is None or days_left < 0:
        return None

    if days_left <= THRESHOLDS.deadline_red_days:
        severity = Severity.RED
    elif days_left <= THRESHOLDS.deadline_yellow_days:
        severity = Severity.YELLOW
    else:
        return None

    detail = REASON_TEXTS[HealthReasonCode.DEADLINE_RISK].detail_template.format(
        days=days_left,
        unit="Tag" if days_left == 1 else "Tage",
    )
    return _reason(HealthReasonCode.DEADLINE_RISK, severity, detail)


def check_missing_invoice(
    targets: ProjectTargets,
    aggregates: ProjectAggregates,
) -> HealthReason | None:
    """Yellow for a completed project without a linked invoice."""
    if targets.is_completed and not aggregates.has_invoice:
        return _reason(HealthReasonCode.MISSING_INVOICE, Severity.YELLOW)
    return None


# ---------------------------------------------------------------------------
# Rule set
# ---------------------------------------------------------------------------

RuleEvaluator = Callable[
    [ProjectTargets, ProjectAggregates, date], HealthReason | None
]

# Declaration order; fixes the order of reasons in the result.
RULES: tuple[tuple[HealthReasonCode, RuleEvaluator], ...] = (
    (HealthReasonCode.MISSING_TARGETS, lambda t, a, d: check_missing_targets(t)),
    (HealthReasonCode.NO_TIME_ENTRIES, lambda t, a, d: check_no_time_entries(a)),
    (HealthReasonCode.NO_PROJECT_MANAGER, lambda t, a, d: check_no_project_manager(t)),
    (HealthReasonCode.TIME_OVER_PLANNED, lambda t, a, d: check_time_over_planned(t, a)),
    (HealthReasonCode.COST_OVER_TARGET, lambda t, a, d: check_cost_over_target(t, a)),
    (HealthReasonCode.DEADLINE_RISK, lambda t, a, d: check_deadline_risk(t, d)),
    (HealthReasonCode.MISSING_INVOICE, lambda t, a, d: check_missing_invoice(t, a)),
)


@traced_engine(
    "health_rules", "1.0", fingerprint_fields=("targets", "aggregates", "as_of")
)
def evaluate_rules(
    targets: ProjectTargets,
    aggregates: ProjectAggregates,
    as_of: date,
) -> tuple[HealthReason, ...]:
    """Run every evaluator and keep the reasons that fired, in rule order."""
    reasons: list[HealthReason] = []
    for _code, rule in RULES:
        reason = rule(targets, aggregates, as_of)
        if reason is not None:
            reasons.append(reason)
    return tuple(reasons)
