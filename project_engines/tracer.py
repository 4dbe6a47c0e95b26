"""
project_engines.tracer -- ``@traced_engine`` decorator.

Every call of a decorated engine emits one ``PROJECT_ENGINE_TRACE`` record
on ``project_kernel.engines.tracer`` carrying the engine name and version,
a fingerprint of the selected inputs, and the wall time spent.  Two calls
with equal inputs carry equal fingerprints, so a health result can be
matched to the exact inputs that produced it.

The decorator reads the arguments and writes a log record; it never
changes results, and only turns one-shot iterators into tuples, so
decorated engines stay pure.

Usage::

    @traced_engine("health_status", "1.0", fingerprint_fields=("reasons",))
    def determine_status(reasons):
        ...
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import logging
import time
from collections.abc import Callable, Iterator
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

_logger = logging.getLogger("project_kernel.engines.tracer")

TRACE_TYPE = "PROJECT_ENGINE_TRACE"


def _canonicalize(value: Any) -> str:
    """Stable text form of an engine input.

    Decimals are normalized so that 40 and 40.0 fingerprint alike.  Sets
    are sorted by their elements' canonical text.
    """
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (str, bool, int, float)):
        return str(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return type(value).__name__ + _canonicalize(
            {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
        )
    if isinstance(value, dict):
        body = ",".join(f"{k}:{_canonicalize(value[k])}" for k in sorted(value))
        return "{" + body + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize(v) for v in value) + "]"
    if isinstance(value, (set, frozenset)):
        return "{" + ",".join(sorted(_canonicalize(v) for v in value)) + "}"
    return repr(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: dict[str, Any],
) -> str:
    """16 hex chars of SHA-256 over the named arguments (absent -> null)."""
    canonical = "|".join(
        f"{name}={_canonicalize(arguments.get(name))}" for name in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


@dataclasses.dataclass(frozen=True)
class EngineTrace:
    engine_name: str
    engine_version: str
    function: str
    input_fingerprint: str
    duration_ms: float

    def as_log_extra(self) -> dict[str, Any]:
        return {"trace_type": TRACE_TYPE, **dataclasses.asdict(self)}


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorate a pure engine function so each call is traced.

    Args:
        engine_name: Engine identifier, e.g. "health_rules".
        engine_version: Bumped whenever the engine's semantics change.
        fingerprint_fields: Parameter names hashed into the fingerprint.
            Positional and keyword arguments are bound to names first.

    Iterator arguments (generators included) are materialized into tuples
    before the call, so the fingerprint sees the same values the engine does.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            bound = signature.bind_partial(*args, **kwargs)
            # one-shot iterators are read once here; the engine gets the tuple
            for name, value in bound.arguments.items():
                if isinstance(value, Iterator):
                    bound.arguments[name] = tuple(value)
            arguments = bound.arguments

            started = time.perf_counter()
            result = func(*bound.args, **bound.kwargs)
            elapsed = time.perf_counter() - started

            trace = EngineTrace(
                engine_name=engine_name,
                engine_version=engine_version,
                function=func.__qualname__,
                input_fingerprint=compute_input_fingerprint(
                    fingerprint_fields, arguments
                ),
                duration_ms=round(elapsed * 1000, 3),
            )
            _logger.info(TRACE_TYPE, extra=trace.as_log_extra())
            return result

        return wrapper

    return decorator
