"""
project_engines.health_thresholds -- Threshold table and reason texts.

Responsibility:
    Named constants deciding when an over/under condition becomes a
    warning (yellow) or critical (red) reason, and the user-facing German
    texts for each reason code.

Architecture position:
    Engines -- pure data, no behaviour.  Read by ``health_rules``.

Invariants enforced:
    - Thresholds are compile-time constants, not runtime configuration.
    - Ratios are Decimal; comparisons are strict (``>``) for over-plan
      ratios and inclusive (``<=``) for remaining days.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from project_kernel.domain.health import HealthReasonCode


@dataclass(frozen=True)
class HealthThresholds:
    """Over-plan ratios and remaining-day limits."""

    # Time overrun: ratio of (actual - planned) / planned
    time_yellow_pct_over: Decimal
    time_red_pct_over: Decimal

    # Cost overrun: ratio of (actual_costs - target_revenue) / target_revenue
    cost_yellow_pct_over: Decimal
    cost_red_pct_over: Decimal

    # Days remaining until end date
    deadline_yellow_days: int
    deadline_red_days: int


THRESHOLDS = HealthThresholds(
    time_yellow_pct_over=Decimal("0.10"),  # +10% -> yellow
    time_red_pct_over=Decimal("0.25"),  # +25% -> red
    cost_yellow_pct_over=Decimal("0.05"),  # +5% -> yellow
    cost_red_pct_over=Decimal("0.15"),  # +15% -> red
    deadline_yellow_days=7,  # <= 7 days -> yellow
    deadline_red_days=3,  # <= 3 days -> red
)


@dataclass(frozen=True)
class ReasonText:
    title: str
    detail_template: str


REASON_TEXTS: dict[HealthReasonCode, ReasonText] = {
    HealthReasonCode.MISSING_TARGETS: ReasonText(
        title="Soll-Werte fehlen",
        detail_template="Fehlend: {fields}",
    ),
    HealthReasonCode.NO_TIME_ENTRIES: ReasonText(
        title="Keine Zeiteinträge",
        detail_template="Es wurden noch keine Arbeitsstunden erfasst.",
    ),
    HealthReasonCode.NO_PROJECT_MANAGER: ReasonText(
        title="Kein Projektleiter",
        detail_template="Bitte einen Projektleiter zuweisen.",
    ),
    HealthReasonCode.TIME_OVER_PLANNED: ReasonText(
        title="Stundenüberschreitung",
        detail_template="{actual}h von {planned}h geplant ({percent}% über Plan)",
    ),
    HealthReasonCode.COST_OVER_TARGET: ReasonText(
        title="Kostenüberschreitung",
        detail_template="{actual}€ Kosten bei {target}€ Ziel-Umsatz ({percent}% über Plan)",
    ),
    HealthReasonCode.DEADLINE_RISK: ReasonText(
        title="Deadline-Risiko",
        detail_template="Nur noch {days} {unit} bis zum geplanten Ende.",
    ),
    HealthReasonCode.MISSING_INVOICE: ReasonText(
        title="Rechnung fehlt",
        detail_template="Projekt ist abgeschlossen, aber keine Rechnung verknüpft.",
    ),
}

# Canonical order of target field labels in the MISSING_TARGETS detail
MISSING_FIELD_LABELS: tuple[tuple[str, str], ...] = (
    ("planned_hours", "geplante Stunden"),
    ("target_revenue", "Ziel-Umsatz"),
    ("end_date", "Enddatum"),
)
