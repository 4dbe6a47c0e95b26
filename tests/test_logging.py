"""Tests for the structured logging system (project_kernel/logging_config.py)."""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timezone
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from project_kernel.domain.clock import DeterministicClock
from project_kernel.domain.health import (
    NextActionKey,
    ProjectAggregates,
    ProjectTargets,
    TrafficLight,
)
from project_kernel.exceptions import ProjectNotFoundError
from project_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)
from project_services import ProjectHealthService


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def stream() -> StringIO:
    """Configure project_kernel logging into a fresh stream."""
    out = StringIO()
    handler = logging.StreamHandler(out)
    configure_logging(handler=handler, level=logging.DEBUG)
    return out


def _records(stream: StringIO) -> list[dict]:
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


def _ours(logger: logging.Logger) -> list[logging.Handler]:
    """Handlers formatting with StructuredFormatter (pytest adds its own)."""
    return [h for h in logger.handlers if isinstance(h.formatter, StructuredFormatter)]


class _OneProjectSource:
    def __init__(self, targets: ProjectTargets, aggregates: ProjectAggregates):
        self._targets = targets
        self._aggregates = aggregates

    def load_targets(self, project_id):
        if project_id != self._targets.project_id:
            raise ProjectNotFoundError(project_id)
        return self._targets

    def load_aggregates(self, project_id):
        return self._aggregates


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    def test_envelope(self, stream):
        get_logger("services.project_health").info("project_health_computed")

        record = _records(stream)[0]
        assert record["level"] == "INFO"
        assert record["message"] == "project_health_computed"
        assert record["logger"] == "project_kernel.services.project_health"
        assert datetime.fromisoformat(record["ts"]).tzinfo is not None

    def test_health_fields_serialized(self, stream):
        get_logger("test").info(
            "project_health_computed",
            extra={
                "health_status": TrafficLight.YELLOW,
                "reason_codes": ["NO_TIME_ENTRIES", "NO_PROJECT_MANAGER"],
                "next_action": NextActionKey.BOOK_FIRST_TIME,
            },
        )

        record = _records(stream)[0]
        assert record["health_status"] == "yellow"
        assert record["reason_codes"] == ["NO_TIME_ENTRIES", "NO_PROJECT_MANAGER"]
        assert record["next_action"] == "BOOK_FIRST_TIME"

    def test_aggregate_values_serialized(self, stream):
        uid = uuid4()
        get_logger("test").debug(
            "project_aggregates_loaded",
            extra={
                "entry_id": uid,
                "actual_hours": Decimal("13.3"),
                "actual_costs": Decimal("1300.50"),
                "as_of": date(2026, 3, 2),
                "has_invoice": False,
            },
        )

        record = _records(stream)[0]
        assert record["entry_id"] == str(uid)
        assert record["actual_hours"] == "13.3"
        assert record["actual_costs"] == "1300.50"
        assert record["as_of"] == "2026-03-02"
        assert record["has_invoice"] is False

    def test_german_text_kept_readable(self, stream):
        get_logger("test").info("reason", extra={"title": "Stundenüberschreitung"})
        assert "Stundenüberschreitung" in stream.getvalue()

    def test_context_fields_included(self, stream):
        LogContext.set(correlation_id="req-7", project_id="p-1")
        get_logger("test").info("project_not_found")

        record = _records(stream)[0]
        assert record["correlation_id"] == "req-7"
        assert record["project_id"] == "p-1"

    def test_no_context_fields_when_empty(self, stream):
        get_logger("test").info("bare_message")

        record = _records(stream)[0]
        assert "correlation_id" not in record
        assert "project_id" not in record

    def test_kernel_exception_fields(self, stream):
        from project_kernel.exceptions import ProjectDataUnavailableError

        try:
            raise ProjectDataUnavailableError("p-9", "projects", "timeout")
        except ProjectDataUnavailableError:
            get_logger("test").error("project_targets_unavailable", exc_info=True)

        record = _records(stream)[0]
        assert record["exc_code"] == "PROJECT_DATA_UNAVAILABLE"
        assert record["exc_type"] == "ProjectDataUnavailableError"
        assert record["exc_project_id"] == "p-9"
        assert record["exc_source"] == "projects"
        assert record["exc_detail"] == "timeout"
        assert "traceback" in record

    def test_database_error_still_valid_json(self, stream):
        try:
            raise OperationalError("SELECT 1", {}, Exception("database is down"))
        except OperationalError:
            get_logger("test").warning("aggregate_source_failed", exc_info=True)

        record = _records(stream)[0]
        assert record["exc_type"] == "OperationalError"
        assert "database is down" in record["exc_message"]

    def test_level_threshold(self):
        out = StringIO()
        configure_logging(handler=logging.StreamHandler(out))
        logger = get_logger("test")
        logger.info("first")
        logger.warning("second")
        logger.debug("third")

        assert [r["message"] for r in _records(out)] == ["first", "second"]


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    def test_set_and_get(self):
        LogContext.set(correlation_id="x", project_id="y")
        assert LogContext.get_all() == {"correlation_id": "x", "project_id": "y"}

    def test_none_leaves_field_unchanged(self):
        LogContext.set(project_id="p-1")
        LogContext.set(project_id=None, actor_id="a-1")
        assert LogContext.get_all() == {"project_id": "p-1", "actor_id": "a-1"}

    def test_clear(self):
        LogContext.set(correlation_id="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_restores_previous_value(self):
        LogContext.set(project_id="outer")
        with LogContext.bind(project_id="inner"):
            assert LogContext.get_all()["project_id"] == "inner"
        assert LogContext.get_all()["project_id"] == "outer"

    def test_bind_restores_on_error(self):
        with pytest.raises(RuntimeError):
            with LogContext.bind(project_id="temp"):
                raise RuntimeError("boom")
        assert "project_id" not in LogContext.get_all()

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError):
            LogContext.set(event_id="e-1")

    def test_bindings_in_worker_threads_stay_separate(self):
        def bound(project_id):
            with LogContext.bind(project_id=project_id):
                return LogContext.get_all()["project_id"]

        with ThreadPoolExecutor(max_workers=4) as pool:
            seen = list(pool.map(bound, [f"p-{i}" for i in range(8)]))

        assert seen == [f"p-{i}" for i in range(8)]
        assert "project_id" not in LogContext.get_all()


# ---------------------------------------------------------------------------
# Service records
# ---------------------------------------------------------------------------


class TestServiceRecords:
    def _service(self) -> ProjectHealthService:
        targets = ProjectTargets(
            project_id="p-42",
            status="in_bearbeitung",
            planned_hours=Decimal("40"),
            target_revenue=Decimal("10000"),
            end_date=date(2026, 3, 4),
        )
        source = _OneProjectSource(targets, ProjectAggregates(actual_hours=Decimal("52")))
        clock = DeterministicClock(datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc))
        return ProjectHealthService(source, clock=clock)

    def test_engine_traces_carry_project_context(self, stream):
        self._service().compute_health("p-42")

        traces = [r for r in _records(stream) if r["message"] == "PROJECT_ENGINE_TRACE"]
        assert {t["engine_name"] for t in traces} == {
            "health_rules", "health_status", "next_action", "economy_summary",
        }
        assert all(t["project_id"] == "p-42" for t in traces)

    def test_computed_record(self, stream):
        self._service().compute_health("p-42")

        computed = [r for r in _records(stream) if r["message"] == "project_health_computed"]
        assert len(computed) == 1
        assert computed[0]["project_id"] == "p-42"
        assert computed[0]["health_status"] == "red"
        assert computed[0]["reason_codes"] == [
            "NO_PROJECT_MANAGER", "TIME_OVER_PLANNED", "DEADLINE_RISK",
        ]
        assert computed[0]["next_action"] == "ASSIGN_MANAGER"

    def test_not_found_record(self, stream):
        self._service().compute_health("p-missing")

        record = [r for r in _records(stream) if r["message"] == "project_not_found"][0]
        assert record["level"] == "WARNING"
        assert record["project_id"] == "p-missing"
        assert record["error_code"] == "PROJECT_NOT_FOUND"
        assert "project_id" not in LogContext.get_all()


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    def test_idempotent(self):
        h1 = logging.StreamHandler(StringIO())
        h2 = logging.StreamHandler(StringIO())
        configure_logging(handler=h1)
        configure_logging(handler=h2)

        handlers = logging.getLogger("project_kernel").handlers
        assert h1 in handlers
        assert h2 not in handlers

    def test_does_not_propagate(self):
        configure_logging(handler=logging.StreamHandler(StringIO()))
        assert logging.getLogger("project_kernel").propagate is False

    def test_reset_detaches_handler(self):
        handler = logging.StreamHandler(StringIO())
        configure_logging(handler=handler)
        reset_logging()

        root = logging.getLogger("project_kernel")
        assert handler not in root.handlers
        assert _ours(root) == []

    def test_get_logger_returns_child(self):
        logger = get_logger("services.project_data_loader")
        assert logger.name == "project_kernel.services.project_data_loader"
