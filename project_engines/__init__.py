"""
Module: project_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    health calculation engines.  This is the canonical import surface for
    project_services.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import project_kernel/domain (and sibling engine modules).
    MUST NOT import project_services or project_config.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      The calendar day is passed in as an explicit ``as_of`` parameter.
    - Decimal-only arithmetic for hours, money and ratios.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from project_engines import evaluate_rules, determine_status
    from project_engines import determine_next_action, summarize_economy
"""

from project_engines.health_rules import (
    RULES,
    check_cost_over_target,
    check_deadline_risk,
    check_missing_invoice,
    check_missing_targets,
    check_no_project_manager,
    check_no_time_entries,
    check_time_over_planned,
    days_until_deadline,
    evaluate_rules,
)
from project_engines.health_status import determine_status, summarize_economy
from project_engines.health_thresholds import (
    REASON_TEXTS,
    THRESHOLDS,
    HealthThresholds,
)
from project_engines.next_action import (
    NEXT_ACTIONS,
    REASON_TO_ACTION,
    bind_action,
    determine_next_action,
)

__all__ = [
    "HealthThresholds",
    "NEXT_ACTIONS",
    "REASON_TEXTS",
    "REASON_TO_ACTION",
    "RULES",
    "THRESHOLDS",
    "bind_action",
    "check_cost_over_target",
    "check_deadline_risk",
    "check_missing_invoice",
    "check_missing_targets",
    "check_no_project_manager",
    "check_no_time_entries",
    "check_time_over_planned",
    "days_until_deadline",
    "determine_next_action",
    "determine_status",
    "evaluate_rules",
    "summarize_economy",
]
