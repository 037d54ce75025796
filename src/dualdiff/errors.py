"""Error kinds raised by dualdiff."""

from __future__ import annotations

__all__ = [
    "DualDiffError",
    "UnsupportedInputError",
    "UnsupportedOutputError",
    "MalformedCatalogError",
    "ContextMismatchError",
]


class DualDiffError(Exception):
    """Base class for all dualdiff errors."""


class UnsupportedInputError(DualDiffError, TypeError):
    """Raises when the seed point passed to ``diff`` is not a scalar."""


class UnsupportedOutputError(DualDiffError, TypeError):
    """Raises when a differentiated function returns a non-scalar result."""


class MalformedCatalogError(DualDiffError, ValueError):
    """Raises when a derivative-rule catalog entry lacks a valid derivative expression.

    Only raised while building a rule table, never during evaluation.
    """


class ContextMismatchError(DualDiffError, AssertionError):
    """Raises when a dual value is read under a context that does not own it.

    This signals a broken invariant (for example a dual value that escaped
    the ``diff`` call that created it), not a recoverable condition.
    """
