"""
project_engines.health_status -- Status aggregation and economy summary.

Responsibility:
    Reduce a list of reasons to one traffic light by worst-case
    precedence, and compute gross profit and margin from target revenue
    and actual costs.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Worst case wins: red if any reason is red, else yellow if any is
      yellow, else green.  The number of reasons never matters.
    - ``determine_status`` is the only place overall status is derived.
    - Division-by-zero safe: no margin is computed for a missing or
      non-positive target revenue.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_FLOOR, Decimal

from project_kernel.domain.health import (
    EconomySummary,
    HealthReason,
    ProjectAggregates,
    ProjectTargets,
    Severity,
    TrafficLight,
)
from project_engines.tracer import traced_engine


@traced_engine("health_status", "1.0", fingerprint_fields=("reasons",))
def determine_status(reasons: Iterable[HealthReason]) -> TrafficLight:
    """Overall status of a project from its reasons (empty -> green)."""
    severities = {reason.severity for reason in reasons}
    if Severity.RED in severities:
        return TrafficLight.RED
    if Severity.YELLOW in severities:
        return TrafficLight.YELLOW
    return TrafficLight.GREEN


@traced_engine(
    "economy_summary", "1.0", fingerprint_fields=("targets", "aggregates")
)
def summarize_economy(
    targets: ProjectTargets,
    aggregates: ProjectAggregates,
) -> EconomySummary:
    """Gross profit and margin against target revenue.

    Formula:
        profit = target_revenue - actual_costs
        margin = floor(profit / target_revenue * 100 + 0.5)

    Halves round toward +infinity: 12.5 -> 13, -12.5 -> -12.
    """
    revenue = targets.target_revenue
    costs = aggregates.actual_costs

    if revenue is None or revenue <= 0:
        return EconomySummary(target_revenue=revenue, actual_costs=costs)

    profit = revenue - costs
    margin = (profit / revenue * Decimal("100") + Decimal("0.5")).to_integral_value(
        rounding=ROUND_FLOOR
    )
    return EconomySummary(
        target_revenue=revenue,
        actual_costs=costs,
        gross_profit=profit,
        gross_margin_pct=int(margin),
    )
