"""Utility functions for dualdiff package."""

from .validate import (
    is_scalar,
    require_callable,
    require_scalar_input,
    require_scalar_output,
)

__all__ = [
    "is_scalar",
    "require_callable",
    "require_scalar_input",
    "require_scalar_output",
]
