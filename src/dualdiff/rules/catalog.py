"""Derivative-rule catalog.

The catalog maps ``(namespace, name, arity)`` to a primal function and the
symbolic partial derivatives of that function, written as SymPy expressions
over placeholder symbols (``vx`` for the first operand, ``vy`` for the
second). It only describes derivatives; turning entries into propagation
rules is the job of :func:`dualdiff.rules.rule_table.build_rule_table`.

Namespaces:

- ``"base"``: Python arithmetic operators and the elementary NumPy functions.
  This is the namespace the dispatch layer intercepts.
- ``"special"``: SciPy special functions. Listed for completeness; not
  intercepted by default.

Derivative expressions may call two helpers that SymPy has no direct
counterpart for: ``signum`` (the sign of the operand, treated as a constant)
and ``cbrt`` (the real cube root).

Example:
    Adding an entry:

        >>> import numpy as np
        >>> import sympy as sp
        >>> from dualdiff.rules.catalog import define_diffrule
        >>> define_diffrule(
        ...     "base", "softplus", 1,
        ...     lambda x: np.log1p(np.exp(x)),
        ...     lambda vx: 1 / (1 + sp.exp(-vx)),
        ... )  # doctest: +SKIP
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import Any, Callable

import numpy as np
import sympy as sp
from scipy import special

__all__ = [
    "BASE_NAMESPACE",
    "PLACEHOLDERS",
    "DiffRule",
    "add_diffrule",
    "define_diffrule",
    "make_diffrule",
    "diffrule",
    "diffrules",
]

BASE_NAMESPACE = "base"

vx, vy = PLACEHOLDERS = sp.symbols("vx vy")

signum = sp.Function("signum")
cbrt = sp.Function("cbrt")


@dataclass(frozen=True)
class DiffRule:
    """One catalog entry.

    Attributes:
        namespace: Namespace the operation belongs to (e.g. ``"base"``).
        name: Operation name, unique within its namespace.
        arity: Number of operands.
        function: The primal function.
        derivatives: Partial derivatives, one per operand, in operand order.
            Whatever the catalog author supplied is kept as is; validation
            happens when a rule table is built.
    """
    namespace: str
    name: str
    arity: int
    function: Callable[..., Any]
    derivatives: tuple[Any, ...]


_DIFFRULES: dict[tuple[str, str, int], DiffRule] = {}


def _placeholders(arity: int) -> tuple[sp.Symbol, ...]:
    """Returns the placeholder symbols for an operation of the given arity."""
    if arity <= len(PLACEHOLDERS):
        return PLACEHOLDERS[:arity]
    return sp.symbols(f"v1:{arity + 1}")


def make_diffrule(
    namespace: str,
    name: str,
    arity: int,
    function: Callable[..., Any],
    rule: Callable[..., Any],
) -> DiffRule:
    """Creates a catalog entry without adding it to the catalog.

    Args:
        namespace: Namespace of the operation.
        name: Operation name.
        arity: Number of operands.
        function: Primal function.
        rule: Callable receiving one placeholder symbol per operand and
            returning the partial derivative (arity 1) or a tuple of partial
            derivatives (arity 2 and above).

    Returns:
        The new entry.
    """
    derivatives = rule(*_placeholders(arity))
    if derivatives is None:
        derivatives = ()
    elif not isinstance(derivatives, tuple):
        derivatives = (derivatives,)
    return DiffRule(namespace, name, arity, function, derivatives)


def add_diffrule(entry: DiffRule) -> DiffRule:
    """Adds ``entry`` to the catalog, replacing any entry with the same key."""
    _DIFFRULES[(entry.namespace, entry.name, entry.arity)] = entry
    return entry


def define_diffrule(
    namespace: str,
    name: str,
    arity: int,
    function: Callable[..., Any],
    rule: Callable[..., Any],
) -> DiffRule:
    """Adds (or replaces) a catalog entry.

    Arguments are those of :func:`make_diffrule`.

    Returns:
        The stored entry.
    """
    return add_diffrule(make_diffrule(namespace, name, arity, function, rule))


def diffrule(namespace: str, name: str, arity: int) -> DiffRule:
    """Looks up one catalog entry.

    Raises:
        KeyError: If no such entry exists.
    """
    return _DIFFRULES[(namespace, name, arity)]


def diffrules() -> list[DiffRule]:
    """Lists all catalog entries in definition order."""
    return list(_DIFFRULES.values())


# base: operators
define_diffrule("base", "add", 2, operator.add, lambda x, y: (1, 1))
define_diffrule("base", "sub", 2, operator.sub, lambda x, y: (1, -1))
define_diffrule("base", "mul", 2, operator.mul, lambda x, y: (y, x))
define_diffrule("base", "truediv", 2, operator.truediv, lambda x, y: (1 / y, -x / y**2))
# d/dy is 0 where log(x) is not real (x <= 0)
define_diffrule("base", "pow", 2, operator.pow,
                lambda x, y: (y * x ** (y - 1),
                              sp.Piecewise((x**y * sp.log(x), x > 0), (0, True))))
define_diffrule("base", "neg", 1, operator.neg, lambda x: -1)
define_diffrule("base", "pos", 1, operator.pos, lambda x: 1)
define_diffrule("base", "abs", 1, operator.abs, lambda x: signum(x))

# base: roots, exponentials and logarithms
define_diffrule("base", "sqrt", 1, np.sqrt, lambda x: 1 / (2 * sp.sqrt(x)))
define_diffrule("base", "cbrt", 1, np.cbrt, lambda x: 1 / (3 * cbrt(x) ** 2))
define_diffrule("base", "square", 1, np.square, lambda x: 2 * x)
define_diffrule("base", "exp", 1, np.exp, lambda x: sp.exp(x))
define_diffrule("base", "expm1", 1, np.expm1, lambda x: sp.exp(x))
define_diffrule("base", "exp2", 1, np.exp2, lambda x: 2**x * sp.log(2))
define_diffrule("base", "log", 1, np.log, lambda x: 1 / x)
define_diffrule("base", "log2", 1, np.log2, lambda x: 1 / (x * sp.log(2)))
define_diffrule("base", "log10", 1, np.log10, lambda x: 1 / (x * sp.log(10)))
define_diffrule("base", "log1p", 1, np.log1p, lambda x: 1 / (1 + x))

# base: trigonometric and hyperbolic
define_diffrule("base", "sin", 1, np.sin, lambda x: sp.cos(x))
define_diffrule("base", "cos", 1, np.cos, lambda x: -sp.sin(x))
define_diffrule("base", "tan", 1, np.tan, lambda x: 1 + sp.tan(x) ** 2)
define_diffrule("base", "arcsin", 1, np.arcsin, lambda x: 1 / sp.sqrt(1 - x**2))
define_diffrule("base", "arccos", 1, np.arccos, lambda x: -1 / sp.sqrt(1 - x**2))
define_diffrule("base", "arctan", 1, np.arctan, lambda x: 1 / (1 + x**2))
define_diffrule("base", "sinh", 1, np.sinh, lambda x: sp.cosh(x))
define_diffrule("base", "cosh", 1, np.cosh, lambda x: sp.sinh(x))
define_diffrule("base", "tanh", 1, np.tanh, lambda x: 1 - sp.tanh(x) ** 2)
define_diffrule("base", "arcsinh", 1, np.arcsinh, lambda x: 1 / sp.sqrt(x**2 + 1))
define_diffrule("base", "arccosh", 1, np.arccosh, lambda x: 1 / sp.sqrt(x**2 - 1))
define_diffrule("base", "arctanh", 1, np.arctanh, lambda x: 1 / (1 - x**2))
define_diffrule("base", "deg2rad", 1, np.deg2rad, lambda x: sp.pi / 180)
define_diffrule("base", "rad2deg", 1, np.rad2deg, lambda x: 180 / sp.pi)
define_diffrule("base", "hypot", 2, np.hypot,
                lambda x, y: (x / sp.sqrt(x**2 + y**2), y / sp.sqrt(x**2 + y**2)))
define_diffrule("base", "arctan2", 2, np.arctan2,
                lambda x, y: (y / (x**2 + y**2), -x / (x**2 + y**2)))

# special
define_diffrule("special", "erf", 1, special.erf,
                lambda x: 2 * sp.exp(-x**2) / sp.sqrt(sp.pi))
define_diffrule("special", "erfc", 1, special.erfc,
                lambda x: -2 * sp.exp(-x**2) / sp.sqrt(sp.pi))
