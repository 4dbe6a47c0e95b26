"""Tests for the project health value objects and their JSON shape."""

import dataclasses
import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from project_kernel.domain.health import (
    EconomySummary,
    HealthReason,
    HealthReasonCode,
    NextAction,
    NextActionKey,
    ProjectAggregates,
    ProjectHealth,
    ProjectStatus,
    ProjectTargets,
    Severity,
    TrafficLight,
)

COMPUTED_AT = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def _health() -> ProjectHealth:
    return ProjectHealth(
        status=TrafficLight.YELLOW,
        reasons=(
            HealthReason(
                code=HealthReasonCode.NO_PROJECT_MANAGER,
                severity=Severity.YELLOW,
                title="Kein Projektleiter",
                detail="Bitte einen Projektleiter zuweisen.",
            ),
        ),
        next_action=NextAction(
            key=NextActionKey.ASSIGN_MANAGER,
            title="Projektleiter zuweisen",
            description="Einen verantwortlichen Projektleiter festlegen",
            cta_label="Team bearbeiten",
            cta_route="/projects/p-1/edit",
        ),
        economy=EconomySummary(
            target_revenue=Decimal("10000"),
            actual_costs=Decimal("1300.50"),
            gross_profit=Decimal("8699.50"),
            gross_margin_pct=87,
        ),
        computed_at=COMPUTED_AT,
    )


class TestInputs:
    def test_targets_default_to_unset(self):
        targets = ProjectTargets(project_id="p-1", status="geplant")
        assert targets.planned_hours is None
        assert targets.target_revenue is None
        assert targets.end_date is None
        assert targets.project_manager_id is None

    def test_completed(self):
        assert ProjectTargets("p-1", ProjectStatus.COMPLETED.value).is_completed
        assert not ProjectTargets("p-1", "in_bearbeitung").is_completed
        assert not ProjectTargets("p-1", "unbekannt").is_completed

    def test_empty_aggregates(self):
        aggregates = ProjectAggregates.empty()
        assert aggregates.actual_hours == 0
        assert aggregates.actual_costs == 0
        assert aggregates.has_invoice is False

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            ProjectAggregates().actual_hours = Decimal("1")  # type: ignore[misc]


class TestSerialization:
    def test_to_dict_shape(self):
        data = _health().to_dict()
        assert data == {
            "status": "yellow",
            "reasons": [
                {
                    "code": "NO_PROJECT_MANAGER",
                    "severity": "yellow",
                    "title": "Kein Projektleiter",
                    "detail": "Bitte einen Projektleiter zuweisen.",
                }
            ],
            "nextAction": {
                "key": "ASSIGN_MANAGER",
                "title": "Projektleiter zuweisen",
                "description": "Einen verantwortlichen Projektleiter festlegen",
                "ctaLabel": "Team bearbeiten",
                "ctaRoute": "/projects/p-1/edit",
            },
            "economy": {
                "targetRevenue": 10000,
                "actualCosts": 1300.5,
                "grossProfit": 8699.5,
                "grossMarginPct": 87,
            },
            "computedAtISO": "2026-03-02T09:00:00+00:00",
        }

    def test_json_encodable(self):
        assert json.loads(json.dumps(_health().to_dict()))["status"] == "yellow"

    def test_green_without_action(self):
        health = ProjectHealth(
            status=TrafficLight.GREEN,
            economy=EconomySummary(target_revenue=None, actual_costs=Decimal("0")),
            computed_at=COMPUTED_AT,
        )
        data = health.to_dict()
        assert data["reasons"] == []
        assert data["nextAction"] is None
        assert data["economy"] == {
            "targetRevenue": None,
            "actualCosts": 0,
            "grossProfit": None,
            "grossMarginPct": None,
        }

    def test_reason_codes(self):
        assert _health().reason_codes == (HealthReasonCode.NO_PROJECT_MANAGER,)
