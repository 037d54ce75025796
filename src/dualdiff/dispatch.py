"""Interception of elementary operations on dual values.

Every elementary operation, whether reached through a Python operator on a
:class:`~dualdiff.dual.Dual`, through a function of :mod:`dualdiff.ops`, or
through a NumPy ufunc, ends up in :func:`call`. ``call`` decides which
context the operation is differentiated for and propagates that context's
tangents with the rule from the installed rule table:

- With no dual operand the primal function runs unchanged.
- Otherwise the dispatch context is the innermost active context owning one
  of the operands. Operands owned by that context are unwrapped; any other
  operand (a plain value, or a dual value of an outer context) is passed
  through untouched as a constant. Outer contexts see their own dual values
  again when the primal function and the partial derivatives run, one level
  further out. This is what keeps nested ``diff`` calls from mixing up
  their tangents.

The installed rule table is built once from the ``"base"`` namespace of the
catalog. Its partial derivatives are compiled against the intercepting
functions of this module, so a partial evaluated at an outer-context dual
value keeps propagating the outer tangent.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Callable

from dualdiff.context import Context, innermost
from dualdiff.dual import Dual, unwrap_primal, unwrap_tangent, wrap
from dualdiff.errors import ContextMismatchError
from dualdiff.logger import dualdiff_logger
from dualdiff.rules.catalog import (
    BASE_NAMESPACE,
    add_diffrule,
    diffrules,
    make_diffrule,
)
from dualdiff.rules.propagation import propagate_binary, propagate_unary
from dualdiff.rules.rule_table import Rule, RuleTable, build_rule_table, signum

__all__ = [
    "UFUNC_ALIASES",
    "call",
    "elementary",
    "register_rule",
    "rule_table",
]

# NumPy ufunc names that differ from the catalog names.
UFUNC_ALIASES: dict[str, str] = {
    "subtract": "sub",
    "multiply": "mul",
    "divide": "truediv",
    "true_divide": "truediv",
    "power": "pow",
    "negative": "neg",
    "positive": "pos",
    "absolute": "abs",
}

# Functions the catalog's derivative expressions call.
_SYMBOL_FUNCTIONS = ("sin", "cos", "tan", "sinh", "cosh", "tanh", "sqrt", "cbrt", "exp", "log")


def elementary(name: str) -> Callable[..., Any]:
    """Returns a function applying the named elementary operation via :func:`call`.

    Args:
        name: Operation name in the installed rule table.

    Returns:
        A function of the operation's operands.
    """
    def apply(*args: Any) -> Any:
        return call(name, *args)

    apply.__name__ = apply.__qualname__ = name
    apply.__doc__ = f"Elementary operation ``{name}``; differentiable by :func:`dualdiff.diff`."
    return apply


def _symbol_namespace() -> dict[str, Any]:
    """Lambdify namespace that routes derivative expressions through :func:`call`."""
    namespace: dict[str, Any] = {name: elementary(name) for name in _SYMBOL_FUNCTIONS}
    namespace["signum"] = signum
    return namespace


@lru_cache(maxsize=1)
def rule_table() -> RuleTable:
    """Returns the installed rule table, building it on first use.

    The cache is cleared by :func:`register_rule`.
    """
    return build_rule_table(
        diffrules(), namespace=BASE_NAMESPACE, modules=_symbol_namespace()
    )


def _owned_by(ctx: Context, value: Any) -> bool:
    return isinstance(value, Dual) and value.owner is ctx


def _apply_unary(ctx: Context, rule: Rule, x: Dual) -> Dual:
    (dfdx,) = rule.partials
    vx, dx = unwrap_primal(ctx, x), unwrap_tangent(ctx, x)
    return wrap(ctx, rule.primal(vx), propagate_unary(dfdx(vx), dx))


def _apply_binary(ctx: Context, rule: Rule, x: Any, y: Any) -> Dual:
    dfdx, dfdy = rule.partials
    x_owned, y_owned = _owned_by(ctx, x), _owned_by(ctx, y)
    if x_owned and y_owned:
        vx, dx = unwrap_primal(ctx, x), unwrap_tangent(ctx, x)
        vy, dy = unwrap_primal(ctx, y), unwrap_tangent(ctx, y)
        tangent = propagate_binary(dfdx(vx, vy), dx, dfdy(vx, vy), dy)
    elif x_owned:
        vx, dx = unwrap_primal(ctx, x), unwrap_tangent(ctx, x)
        vy = y
        tangent = propagate_unary(dfdx(vx, vy), dx)
    else:
        vx = x
        vy, dy = unwrap_primal(ctx, y), unwrap_tangent(ctx, y)
        tangent = propagate_unary(dfdy(vx, vy), dy)
    return wrap(ctx, rule.primal(vx, vy), tangent)


def call(name: str, *args: Any) -> Any:
    """Applies an elementary operation, propagating tangents of dual operands.

    Args:
        name: Operation name in the installed rule table.
        *args: The operands.

    Returns:
        The plain result if no operand is a dual value, else a dual value
        owned by the dispatch context.

    Raises:
        ValueError: If ``name`` is not in the installed rule table.
        TypeError: If the number of operands does not match the rule's arity.
        ContextMismatchError: If dual operands are present but none of them
            belongs to an active context.
    """
    try:
        rule = rule_table()[name]
    except KeyError:
        raise ValueError(f"call: unknown elementary operation '{name}'.") from None
    if len(args) != rule.arity:
        raise TypeError(f"{name}() takes {rule.arity} argument(s); got {len(args)}.")

    owners = [a.owner for a in args if isinstance(a, Dual)]
    if not owners:
        return rule.primal(*args)

    ctx = innermost(owners)
    if ctx is None:
        raise ContextMismatchError(
            f"{name}: dual operand owned by {owners[0]!r}, which is not active; "
            "a dual value escaped the diff call that created it."
        )
    if rule.arity == 1:
        return _apply_unary(ctx, rule, args[0])
    return _apply_binary(ctx, rule, *args)


def register_rule(
    name: str,
    arity: int,
    function: Callable[..., Any],
    derivatives: Callable[..., Any],
    *,
    namespace: str = BASE_NAMESPACE,
) -> None:
    """Registers a new elementary operation (or replaces an existing one).

    The namespace is compiled with the new entry in place before the entry is
    added to the catalog, so a malformed entry (including a name already
    defined with another arity) raises here and leaves the catalog and the
    installed rule table unchanged. The installed rule table is rebuilt
    immediately.

    Args:
        name: Operation name.
        arity: Number of operands (1 or 2 to be intercepted).
        function: Primal function.
        derivatives: Callable receiving placeholder symbols and returning the
            SymPy partial derivative(s), as in
            :func:`dualdiff.rules.catalog.make_diffrule`.
        namespace: Catalog namespace; only ``"base"`` entries are intercepted.

    Raises:
        MalformedCatalogError: If the derivatives do not match the arity, or
            ``name`` already exists in ``namespace`` with a different arity.

    Example:
        >>> import numpy as np
        >>> import sympy as sp
        >>> from dualdiff import diff
        >>> from dualdiff.dispatch import call, register_rule
        >>> register_rule(
        ...     "softplus", 1,
        ...     lambda x: np.log1p(np.exp(x)),
        ...     lambda vx: 1 / (1 + sp.exp(-vx)),
        ... )  # doctest: +SKIP
        >>> diff(lambda x: call("softplus", x), 0.0)  # doctest: +SKIP
        0.5
    """
    entry = make_diffrule(namespace, name, arity, function, derivatives)
    key = (namespace, name, arity)
    candidate = [e for e in diffrules() if (e.namespace, e.name, e.arity) != key]
    build_rule_table(
        candidate + [entry], namespace=namespace, modules=_symbol_namespace()
    )
    add_diffrule(entry)
    rule_table.cache_clear()
    rule_table()
    dualdiff_logger.info("Registered rule %s.%s (arity %d).", namespace, name, arity)


def _array_ufunc(self: Dual, ufunc: Any, method: str, *inputs: Any, **kwargs: Any) -> Any:
    """Routes NumPy ufunc calls on dual values through :func:`call`."""
    if method != "__call__" or kwargs:
        return NotImplemented
    name = UFUNC_ALIASES.get(ufunc.__name__, ufunc.__name__)
    rule = rule_table().get(name)
    if rule is None or rule.arity != ufunc.nin:
        return NotImplemented
    return call(name, *inputs)


def _dual_pow(self: Dual, other: Any, modulo: Any = None) -> Any:
    if modulo is not None:
        return NotImplemented
    return call("pow", self, other)


# Bind Python operators to Dual
Dual.__add__ = lambda self, other: call("add", self, other)
Dual.__radd__ = lambda self, other: call("add", other, self)
Dual.__sub__ = lambda self, other: call("sub", self, other)
Dual.__rsub__ = lambda self, other: call("sub", other, self)
Dual.__mul__ = lambda self, other: call("mul", self, other)
Dual.__rmul__ = lambda self, other: call("mul", other, self)
Dual.__truediv__ = lambda self, other: call("truediv", self, other)
Dual.__rtruediv__ = lambda self, other: call("truediv", other, self)
Dual.__pow__ = _dual_pow
Dual.__rpow__ = lambda self, other: call("pow", other, self)
Dual.__neg__ = lambda self: call("neg", self)
Dual.__pos__ = lambda self: call("pos", self)
Dual.__abs__ = lambda self: call("abs", self)
Dual.__array_ufunc__ = _array_ufunc

# catalog errors must surface at import, never during evaluation
rule_table()
