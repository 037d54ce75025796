"""Validation utilities for dualdiff."""

from __future__ import annotations

from typing import Any

from dualdiff.dual import is_scalar_dual
from dualdiff.errors import UnsupportedInputError, UnsupportedOutputError
from dualdiff.utils.types import Scalar

__all__ = [
    "is_scalar",
    "require_callable",
    "require_scalar_input",
    "require_scalar_output",
]


def is_scalar(x: Any) -> bool:
    """Checks that ``x`` is a plain number or a dual value wrapping one.

    Args:
        x: Value to check.

    Returns:
        True for numbers (including NumPy scalars) and scalar dual values;
        False for containers, arrays and non-numeric types.
    """
    return isinstance(x, Scalar) or is_scalar_dual(x)


def require_callable(function: Any, *, where: str) -> None:
    """Raises ``TypeError`` if ``function`` is not callable."""
    if not callable(function):
        raise TypeError(f"{where}: expected a callable; got {type(function).__name__}.")


def require_scalar_input(x: Any, *, where: str) -> None:
    """Checks a seed point before any evaluation.

    Args:
        x: Seed point.
        where: Context string for error messages.

    Raises:
        UnsupportedInputError: If ``x`` is not scalar.
    """
    if not is_scalar(x):
        raise UnsupportedInputError(
            f"{where}: expected a scalar input; got {type(x).__name__}."
        )


def require_scalar_output(y: Any, *, where: str) -> None:
    """Checks the result of a differentiated function.

    Args:
        y: Function output.
        where: Context string for error messages.

    Raises:
        UnsupportedOutputError: If ``y`` is not scalar.
    """
    if not is_scalar(y):
        raise UnsupportedOutputError(
            f"{where}: expected a scalar output; got {type(y).__name__}."
        )
