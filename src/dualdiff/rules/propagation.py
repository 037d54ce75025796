"""Chain-rule arithmetic on tangents.

A tangent is a tuple of derivative components. Both functions are pure and
work for any component type supporting ``*`` and ``+``, including dual values
of an outer context.
"""

from __future__ import annotations

from typing import Any

from dualdiff.utils.types import Tangent

__all__ = [
    "propagate_unary",
    "propagate_binary",
]


def propagate_unary(dfdx: Any, dx: Tangent) -> Tangent:
    """Applies the chain rule for a one-argument composition.

    Args:
        dfdx: Partial derivative of the operation at the primal operand.
        dx: Tangent of the operand.

    Returns:
        Tangent of the result, ``dfdx * dx[i]`` for each component.
    """
    return tuple(dfdx * d for d in dx)


def propagate_binary(dfdx: Any, dx: Tangent, dfdy: Any, dy: Tangent) -> Tangent:
    """Applies the chain rule (total derivative) for a two-argument composition.

    Args:
        dfdx: Partial derivative with respect to the first operand.
        dx: Tangent of the first operand.
        dfdy: Partial derivative with respect to the second operand.
        dy: Tangent of the second operand.

    Returns:
        Tangent of the result, the componentwise sum of both contributions.

    Raises:
        ValueError: If ``dx`` and ``dy`` differ in length.
    """
    if len(dx) != len(dy):
        raise ValueError(
            f"propagate_binary: tangent lengths differ ({len(dx)} != {len(dy)})."
        )
    return tuple(
        a + b for a, b in zip(propagate_unary(dfdx, dx), propagate_unary(dfdy, dy))
    )
