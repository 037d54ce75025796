"""Provides the ``diff`` entry point.

``diff(f, x)`` computes the exact derivative of a scalar function ``f`` at
``x`` by evaluating ``f`` once on a dual value seeded with a unit tangent.

Examples:
    Basic usage:

        >>> import numpy as np
        >>> from dualdiff import diff
        >>> print(diff(lambda x: x**3 + 2 * x, 2.0))
        14.0
        >>> diff(lambda x: np.sin(x) * np.exp(x), 0.0)  # doctest: +SKIP
        1.0

    Nested differentiation:

        >>> print(diff(lambda x: x * diff(lambda y: y**2, x), 3.0))
        12.0

Notes:
    - ``f`` must use Python operators, :mod:`dualdiff.ops` or NumPy ufuncs;
      :mod:`math` functions reject dual values.
    - For a function whose output does not depend on ``x`` the result is
      the zero of the output's numeric type.
    - At a domain edge the derivative follows IEEE arithmetic like the NumPy
      primal: ``diff(np.log, 0.0)`` is ``inf``, with a NumPy warning.
"""

from __future__ import annotations

from typing import Any, Callable

from dualdiff.context import activate, new_context
from dualdiff.dual import Dual, one_like, unwrap_tangent, wrap, zero_like
from dualdiff.utils.validate import (
    require_callable,
    require_scalar_input,
    require_scalar_output,
)

__all__ = ["diff"]


def diff(f: Callable[[Any], Any], x: Any) -> Any:
    """Computes the derivative of a scalar function at a point.

    Args:
        f: Callable mapping a scalar to a scalar.
        x: Point at which to differentiate; a number, or a dual value of an
            enclosing ``diff`` call.

    Returns:
        ``f'(x)``. Inside a nested call this may itself be a dual value of
        the enclosing call.

    Raises:
        TypeError: If ``f`` is not callable.
        UnsupportedInputError: If ``x`` is not scalar.
        UnsupportedOutputError: If ``f(x)`` is not scalar.
    """
    require_callable(f, where="diff")
    require_scalar_input(x, where="diff")

    ctx = new_context()
    with activate(ctx):
        y = f(wrap(ctx, x, (one_like(x),)))
        require_scalar_output(y, where="diff")
        if isinstance(y, Dual) and y.owner is ctx:
            (dy,) = unwrap_tangent(ctx, y)
            return dy
    return zero_like(y)
