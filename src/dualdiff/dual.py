"""Dual values: a primal value and its tangent, stamped with an owning context.

A :class:`Dual` is immutable. Its primal and tangent are read through
:func:`unwrap_primal` and :func:`unwrap_tangent`, which refuse to read a dual
value under a context that does not own it.

Arithmetic operators and ``__array_ufunc__`` are bound onto :class:`Dual` by
:mod:`dualdiff.dispatch`.
"""

from __future__ import annotations

import numbers
from typing import Any, Sequence

from dualdiff.context import Context
from dualdiff.errors import ContextMismatchError

__all__ = [
    "Dual",
    "wrap",
    "unwrap_primal",
    "unwrap_tangent",
    "is_scalar_dual",
    "plain_value",
    "numeric_type",
    "one_like",
    "zero_like",
]


class Dual:
    """Immutable (primal, tangent) pair owned by one differentiation context.

    Attributes:
        owner: The context that created this value. Fixed at construction.
    """

    __slots__ = ("_owner", "_primal", "_tangent")

    # makes NumPy defer binary operators to the dual operand
    __array_priority__ = 1000

    def __init__(self, owner: Context, primal: Any, tangent: Sequence[Any]):
        """Initializes a dual value.

        Args:
            owner: Owning context.
            primal: Primal value (a number, or a dual value of an outer context).
            tangent: Derivative components; stored as a tuple.
        """
        object.__setattr__(self, "_owner", owner)
        object.__setattr__(self, "_primal", primal)
        object.__setattr__(self, "_tangent", tuple(tangent))

    @property
    def owner(self) -> Context:
        """The owning context."""
        return self._owner

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable.")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable.")

    def __repr__(self) -> str:
        return f"Dual({self._owner!r}, {self._primal!r}, {self._tangent!r})"

    # Comparisons and truthiness look at the primal only; they are not
    # differentiable and carry no tangent.
    def __eq__(self, other: Any) -> bool:
        return self._primal == _primal_of(other)

    def __ne__(self, other: Any) -> bool:
        return self._primal != _primal_of(other)

    def __lt__(self, other: Any) -> bool:
        return self._primal < _primal_of(other)

    def __le__(self, other: Any) -> bool:
        return self._primal <= _primal_of(other)

    def __gt__(self, other: Any) -> bool:
        return self._primal > _primal_of(other)

    def __ge__(self, other: Any) -> bool:
        return self._primal >= _primal_of(other)

    __hash__ = None

    def __bool__(self) -> bool:
        return bool(self._primal)

    def __float__(self) -> float:
        raise TypeError(
            "Cannot convert a Dual to float; the tangent would be lost. "
            "Use dualdiff.ops or NumPy functions instead of the math module."
        )

    def __int__(self) -> int:
        raise TypeError("Cannot convert a Dual to int; the tangent would be lost.")

    def __complex__(self) -> complex:
        raise TypeError("Cannot convert a Dual to complex; the tangent would be lost.")


def _primal_of(value: Any) -> Any:
    """Returns the primal of a dual value of any context, else ``value`` itself."""
    return value._primal if isinstance(value, Dual) else value


def wrap(ctx: Context, primal: Any, tangent: Sequence[Any]) -> Dual:
    """Creates a new dual value owned by ``ctx``.

    Args:
        ctx: Owning context.
        primal: Primal value.
        tangent: Derivative components.

    Returns:
        The new dual value.
    """
    return Dual(ctx, primal, tangent)


def _check_owner(ctx: Context, v: Dual, where: str) -> None:
    """Raises ContextMismatchError unless ``v`` is a dual value owned by ``ctx``."""
    if not isinstance(v, Dual):
        raise ContextMismatchError(f"{where}: expected a Dual; got {type(v).__name__}.")
    if v._owner is not ctx:
        raise ContextMismatchError(
            f"{where}: dual value owned by {v._owner!r} read under {ctx!r}."
        )


def unwrap_primal(ctx: Context, v: Dual) -> Any:
    """Reads the primal of ``v``.

    Args:
        ctx: Context the caller acts for.
        v: Dual value owned by ``ctx``.

    Returns:
        The primal value.

    Raises:
        ContextMismatchError: If ``v`` is not owned by ``ctx``.
    """
    _check_owner(ctx, v, "unwrap_primal")
    return v._primal


def unwrap_tangent(ctx: Context, v: Dual) -> tuple[Any, ...]:
    """Reads the tangent of ``v``.

    Args:
        ctx: Context the caller acts for.
        v: Dual value owned by ``ctx``.

    Returns:
        The tangent components.

    Raises:
        ContextMismatchError: If ``v`` is not owned by ``ctx``.
    """
    _check_owner(ctx, v, "unwrap_tangent")
    return v._tangent


def plain_value(v: Any) -> Any:
    """Returns the plain number underneath any dual wrapping, discarding tangents.

    Only meant for piecewise-constant helpers (such as a sign function) whose
    derivative is zero wherever it is defined.
    """
    while isinstance(v, Dual):
        v = v._primal
    return v


def is_scalar_dual(v: Any) -> bool:
    """Checks whether ``v`` is a dual value wrapping a plain number.

    Nested wrapping is followed, so a dual whose primal is a dual of an outer
    context is scalar if that one is.
    """
    return isinstance(v, Dual) and isinstance(plain_value(v), numbers.Number)


def numeric_type(v: Any) -> type:
    """Returns the type of the plain number underneath any dual wrapping."""
    return type(plain_value(v))


def one_like(v: Any) -> Any:
    """Returns the multiplicative identity of ``numeric_type(v)``."""
    return numeric_type(v)(1)


def zero_like(v: Any) -> Any:
    """Returns the additive identity of ``numeric_type(v)``."""
    return numeric_type(v)(0)
