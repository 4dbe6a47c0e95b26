"""
Module: project_kernel.db.engine
Responsibility: Process-wide SQLAlchemy engine and session factory for the
    health engine's read path, plus ``session_scope`` for writers (tests,
    seed scripts).
Architecture position: Kernel > DB.  create_tables/drop_tables import
    project_kernel.models so that Base.metadata is complete.

Invariants enforced:
    - PostgreSQL is the production backend: QueuePool with pre-ping and
      READ COMMITTED, so each of the loader's concurrent aggregate queries
      sees committed data as of its own start.
    - SQLite is accepted for tests and local runs.  Connections may cross
      threads; an in-memory database uses a single shared connection.

Failure modes:
    - RuntimeError if a session is requested before init_engine_from_url().
"""

import atexit
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from project_kernel.logging_config import configure_logging, get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None


def _engine_options(url: URL, **pool: Any) -> dict[str, Any]:
    if url.get_backend_name() == "sqlite":
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        return options
    return {
        "poolclass": QueuePool,
        "isolation_level": "READ COMMITTED",
        **pool,
    }


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 20,
    max_overflow: int = 10,
    pool_pre_ping: bool = True,
    pool_timeout: int = 30,
    pool_recycle: int = 1800,
) -> Engine:
    """
    Create the engine and session factory, replacing any previous ones.

    Pool arguments apply to server databases only; SQLite ignores them.
    """
    global _engine, _SessionFactory

    url = make_url(database_url)
    _engine = create_engine(
        url,
        echo=echo,
        **_engine_options(
            url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=pool_pre_ping,
            pool_timeout=pool_timeout,
            pool_recycle=pool_recycle,
        ),
    )
    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)

    configure_logging()
    logger.info(
        "engine_initialized",
        extra={
            "dialect": url.get_backend_name(),
            "database": url.render_as_string(hide_password=True),
            "pool_size": pool_size,
            "echo": echo,
        },
    )
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """
    Session factory bound to the current engine.

    The data loader opens one session per concurrent query, so it takes
    the factory rather than a session.
    """
    if _SessionFactory is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _SessionFactory


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    Commit on normal exit, roll back and re-raise on error, always close.

    Usage:
        with session_scope() as session:
            session.add(project)
    """
    session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.warning("transaction_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def create_tables() -> None:
    """Create all model tables on the current engine."""
    from project_kernel.db.base import Base
    import project_kernel.models  # noqa: F401  (registers all tables)

    Base.metadata.create_all(get_engine())


def drop_tables() -> None:
    """Drop all model tables.  For tests and local resets."""
    from project_kernel.db.base import Base
    import project_kernel.models  # noqa: F401

    Base.metadata.drop_all(get_engine())


def reset_engine() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionFactory = None


atexit.register(reset_engine)
