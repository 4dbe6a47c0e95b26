"""
Pytest fixtures for the project health test suite.

Provides:
- Structured logging configured for the whole session
- A captured_logs fixture returning parsed JSON log records
- A file-backed SQLite database per test (one connection per thread, so
  the loader's concurrent aggregate queries behave as on PostgreSQL)
- Record factories for projects, time entries, materials and invoices
"""

import json
import logging
import warnings
from datetime import datetime
from decimal import Decimal
from io import StringIO
from uuid import UUID, uuid4

import pytest
from sqlalchemy.exc import SAWarning

from project_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
from project_kernel.domain.health import ProjectStatus
from project_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from project_kernel.models import Invoice, MaterialEntry, Project, TimeEntry

# SQLite stores Numeric as floating point; precision is fine for test values.
warnings.filterwarnings(
    "ignore", message=".*does \\*not\\* support Decimal objects natively.*",
    category=SAWarning,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture project_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, service):
            service.compute_health(project_id)
            logs = captured_logs()
            assert any(r["message"] == "project_health_computed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("project_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def session_factory(tmp_path):
    """Fresh SQLite database file with all tables created."""
    init_engine_from_url(f"sqlite:///{tmp_path / 'project_health.db'}")
    create_tables()
    yield get_session_factory()
    drop_tables()
    reset_engine()


@pytest.fixture
def add_project(session_factory):
    """Insert a project and return its id.  Targets default to fully set."""

    def _add(
        *,
        status: str = ProjectStatus.IN_PROGRESS.value,
        planned_hours: Decimal | None = Decimal("40"),
        target_revenue: Decimal | None = Decimal("10000"),
        end_date=None,
        project_manager_id: UUID | None = None,
        budget: Decimal | None = Decimal("8000"),
        name: str = "Badsanierung Müller",
    ) -> UUID:
        project = Project(
            name=name,
            status=status,
            planned_hours=planned_hours,
            target_revenue=target_revenue,
            end_date=end_date,
            project_manager_id=project_manager_id,
            budget=budget,
        )
        with session_scope() as session:
            session.add(project)
            session.flush()
            return project.id

    return _add


@pytest.fixture
def add_time_entry(session_factory):
    def _add(
        project_id: UUID,
        start_time: datetime | None,
        end_time: datetime | None,
        break_duration: int | None = None,
    ) -> None:
        with session_scope() as session:
            session.add(
                TimeEntry(
                    project_id=project_id,
                    employee_id=uuid4(),
                    start_time=start_time,
                    end_time=end_time,
                    break_duration=break_duration,
                )
            )

    return _add


@pytest.fixture
def add_material(session_factory):
    def _add(project_id: UUID, total_cost: Decimal | None, name: str = "Fliesenkleber") -> None:
        with session_scope() as session:
            session.add(
                MaterialEntry(
                    project_id=project_id,
                    material_name=name,
                    total_cost=total_cost,
                )
            )

    return _add


@pytest.fixture
def add_invoice(session_factory):
    def _add(project_id: UUID | None, number: str = "RE-2026-001") -> None:
        with session_scope() as session:
            session.add(Invoice(project_id=project_id, invoice_number=number))

    return _add
