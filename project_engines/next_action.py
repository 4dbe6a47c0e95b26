"""
project_engines.next_action -- Next recommended action resolver.

Responsibility:
    Map the reasons that occurred to a ranked catalogue of remedies and
    pick the single most urgent one, with two fallbacks for projects that
    look healthy but have nothing booked yet.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Deterministic precedence: candidates are ranked by the static
      ``priority`` (lower = first).  SET_TARGETS outranks everything, so a
      project missing targets never gets "book time" first.
    - TIME_OVER_PLANNED and COST_OVER_TARGET have no remedy in the
      catalogue and never produce a candidate.
    - At most one action is returned.
"""

from __future__ import annotations

from collections.abc import Iterable

from project_kernel.domain.health import (
    HealthReason,
    HealthReasonCode,
    NextAction,
    NextActionDefinition,
    NextActionKey,
    ProjectAggregates,
    ProjectTargets,
)
from project_engines.tracer import traced_engine

NEXT_ACTIONS: dict[NextActionKey, NextActionDefinition] = {
    NextActionKey.SET_TARGETS: NextActionDefinition(
        priority=1,
        title="Soll-Werte festlegen",
        description="Geplante Stunden, Ziel-Umsatz und Enddatum definieren",
        cta_label="Projekt bearbeiten",
        cta_route="/projects/{id}/edit",
    ),
    NextActionKey.BOOK_FIRST_TIME: NextActionDefinition(
        priority=2,
        title="Erste Zeit buchen",
        description="Arbeitszeit für dieses Projekt erfassen",
        cta_label="Zeit erfassen",
        cta_route="/projects/{id}?tab=time",
    ),
    NextActionKey.ASSIGN_MANAGER: NextActionDefinition(
        priority=3,
        title="Projektleiter zuweisen",
        description="Einen verantwortlichen Projektleiter festlegen",
        cta_label="Team bearbeiten",
        cta_route="/projects/{id}/edit",
    ),
    NextActionKey.REVIEW_DEADLINE: NextActionDefinition(
        priority=4,
        title="Deadline prüfen",
        description="Das Enddatum liegt in Kürze - Fortschritt prüfen",
        cta_label="Projekt ansehen",
        cta_route="/projects/{id}",
    ),
    NextActionKey.CREATE_INVOICE: NextActionDefinition(
        priority=5,
        title="Rechnung erstellen",
        description="Projekt ist abgeschlossen - Rechnung erstellen",
        cta_label="Rechnung erstellen",
        cta_route="/invoices/new?project={id}",
    ),
    NextActionKey.ADD_MATERIAL: NextActionDefinition(
        priority=6,
        title="Material erfassen",
        description="Verwendete Materialien zum Projekt hinzufügen",
        cta_label="Material hinzufügen",
        cta_route="/projects/{id}?tab=materials",
    ),
}

REASON_TO_ACTION: dict[HealthReasonCode, NextActionKey] = {
    HealthReasonCode.MISSING_TARGETS: NextActionKey.SET_TARGETS,
    HealthReasonCode.NO_TIME_ENTRIES: NextActionKey.BOOK_FIRST_TIME,
    HealthReasonCode.NO_PROJECT_MANAGER: NextActionKey.ASSIGN_MANAGER,
    HealthReasonCode.DEADLINE_RISK: NextActionKey.REVIEW_DEADLINE,
    HealthReasonCode.MISSING_INVOICE: NextActionKey.CREATE_INVOICE,
}


def bind_action(key: NextActionKey, project_id: str) -> NextAction:
    """Instantiate a catalogue entry for one project."""
    definition = NEXT_ACTIONS[key]
    return NextAction(
        key=key,
        title=definition.title,
        description=definition.description,
        cta_label=definition.cta_label,
        cta_route=definition.cta_route.replace("{id}", str(project_id)),
    )


@traced_engine(
    "next_action", "1.0", fingerprint_fields=("project_id", "aggregates", "reasons")
)
def determine_next_action(
    project_id: str,
    targets: ProjectTargets,
    aggregates: ProjectAggregates,
    reasons: Iterable[HealthReason],
) -> NextAction | None:
    """Pick the single highest-priority remedy for a project.

    Steps:
        1. Map each reason code to its remedy, deduplicated.
        2. No candidates and no hours booked -> BOOK_FIRST_TIME.
        3. Still none and no material costs -> ADD_MATERIAL.
        4. None left -> None; otherwise the lowest priority number wins.

    ``targets`` is accepted for symmetry with the rule evaluators; the
    current catalogue only needs the aggregates.
    """
    candidates: set[NextActionKey] = set()
    for reason in reasons:
        key = REASON_TO_ACTION.get(reason.code)
        if key is not None:
            candidates.add(key)

    if not candidates and aggregates.actual_hours == 0:
        candidates.add(NextActionKey.BOOK_FIRST_TIME)

    if not candidates and aggregates.actual_costs == 0:
        candidates.add(NextActionKey.ADD_MATERIAL)

    if not candidates:
        return None

    selected = min(candidates, key=lambda k: NEXT_ACTIONS[k].priority)
    return bind_action(selected, project_id)
