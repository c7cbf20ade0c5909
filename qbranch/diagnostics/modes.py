"""Process-wide runtime modes for qbranch.

Debug mode (``QBRANCH_DEBUG``)
    Unitary gate application asserts that the squared norm is preserved, and
    committed Kraus branches assert that renormalization restored the
    pre-channel squared norm.

Strict trace mode (``QBRANCH_STRICT_TRACE``)
    A ChannelMap or MeasurementInstrument that cannot commit a Kraus branch
    (the branches fail to cover the random draw, or the state has no finite
    mass) raises TracePreservationError instead of logging a warning and
    leaving the state untouched. Operations constructed with an
    explicit ``strict=`` argument ignore this setting.

Both flags are read from the environment at import time and can be changed
at runtime with the setters or the context managers below.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Dict, Iterator

_DEBUG = "debug"
_STRICT_TRACE = "strict_trace"

_ENV_VARS = {
    _DEBUG: "QBRANCH_DEBUG",
    _STRICT_TRACE: "QBRANCH_STRICT_TRACE",
}


def _env_flag(var: str) -> bool:
    return os.getenv(var, "0").lower() in ("1", "true", "yes", "on")


_flags: Dict[str, bool] = {mode: _env_flag(var) for mode, var in _ENV_VARS.items()}


@contextmanager
def _override(mode: str, enabled: bool) -> Iterator[None]:
    prev = _flags[mode]
    _flags[mode] = bool(enabled)
    try:
        yield
    finally:
        _flags[mode] = prev


def is_debug_enabled() -> bool:
    """Return whether debug mode is currently enabled."""
    return _flags[_DEBUG]


def set_debug_enabled(enabled: bool) -> None:
    """Globally enable or disable debug mode."""
    _flags[_DEBUG] = bool(enabled)


def debug_context(enabled: bool = True):
    """
    Context manager to temporarily enable or disable debug mode.

    Example
    -------
    >>> with debug_context(True):
    ...     pass
    """
    return _override(_DEBUG, enabled)


def is_strict_trace_enabled() -> bool:
    """Return whether trace-preservation violations raise by default."""
    return _flags[_STRICT_TRACE]


def set_strict_trace_enabled(enabled: bool) -> None:
    """Globally enable or disable strict trace-preservation checking."""
    _flags[_STRICT_TRACE] = bool(enabled)


def strict_trace_context(enabled: bool = True):
    """Temporarily enable or disable strict trace-preservation checking."""
    return _override(_STRICT_TRACE, enabled)
