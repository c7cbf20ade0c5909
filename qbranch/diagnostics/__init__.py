"""Diagnostics and runtime-mode toggles for qbranch."""

from .core import (
    assert_squared_norm,
    squared_norm,
)
from .modes import (
    debug_context,
    is_debug_enabled,
    set_debug_enabled,
    is_strict_trace_enabled,
    set_strict_trace_enabled,
    strict_trace_context,
)

__all__ = [
    "squared_norm",
    "assert_squared_norm",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    "is_strict_trace_enabled",
    "set_strict_trace_enabled",
    "strict_trace_context",
]
