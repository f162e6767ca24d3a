r"""Utility functions shared across the package."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_operation_id",
    "get_operation_id",
    "log_structured",
    "set_operation_id",
]

from aresume.utils.structured_logging import (
    StructuredFormatter,
    clear_operation_id,
    get_operation_id,
    log_structured,
    set_operation_id,
)
