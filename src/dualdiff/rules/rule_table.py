"""Builds propagation rules from the derivative-rule catalog.

Each catalog entry of the designated namespace becomes one :class:`Rule`:
the primal function plus one compiled partial-derivative function per
operand. The SymPy expressions are compiled once, here, with
:func:`sympy.lambdify`; nothing symbolic happens during evaluation.

Partials of unary rules take ``(vx,)``; partials of binary rules always take
``(vx, vy)``, even when only one operand carries a tangent.

Plain Python ``int``/``float`` operands are converted to ``np.float64``
before a partial runs, so a partial at a domain edge (``1/x`` at 0) follows
IEEE semantics and yields ``inf``/``nan`` like the NumPy primal, instead of
raising ``ZeroDivisionError``.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Sequence

import numpy as np
import sympy as sp

from dualdiff.dual import plain_value
from dualdiff.errors import MalformedCatalogError
from dualdiff.logger import dualdiff_logger
from dualdiff.rules.catalog import BASE_NAMESPACE, PLACEHOLDERS, DiffRule
from dualdiff.utils.types import Partial

__all__ = [
    "Rule",
    "RuleTable",
    "build_rule_table",
    "signum",
]

SUPPORTED_ARITIES = (1, 2)


@dataclass(frozen=True)
class Rule:
    """Propagation rule for one elementary operation.

    Attributes:
        name: Operation name.
        arity: 1 or 2.
        primal: The primal function.
        partials: ``df/dx`` (and ``df/dy`` for binary rules) as plain functions.
    """
    name: str
    arity: int
    primal: Callable[..., Any]
    partials: tuple[Partial, ...]


RuleTable = dict[str, Rule]


def signum(v: Any) -> Any:
    """Sign of the plain value underneath ``v``; its derivative is zero."""
    return np.sign(plain_value(v))


def _default_modules() -> list[Any]:
    """Lambdify namespace evaluating partials with plain NumPy."""
    return [{"signum": signum}, "numpy"]


def _ieee_operand(v: Any) -> Any:
    """Converts plain Python ints and floats to ``np.float64``."""
    if type(v) in (int, float):
        return np.float64(v)
    return v


def _with_ieee_operands(partial: Partial) -> Partial:
    """Wraps a compiled partial so plain operands use NumPy scalar arithmetic."""
    @functools.wraps(partial)
    def evaluate(*args: Any) -> Any:
        return partial(*(_ieee_operand(a) for a in args))

    return evaluate


def _symbolic(expr: Any, entry: DiffRule) -> sp.Expr:
    """Converts one derivative expression to SymPy and checks its placeholders.

    Args:
        expr: Derivative as supplied by the catalog.
        entry: The catalog entry, for error messages.

    Returns:
        The SymPy expression.

    Raises:
        MalformedCatalogError: If ``expr`` is not symbolic or refers to
            placeholders beyond the entry's arity.
    """
    try:
        sym = sp.sympify(expr, strict=True)
    except (sp.SympifyError, TypeError) as exc:
        raise MalformedCatalogError(
            f"build_rule_table: {entry.namespace}.{entry.name} has a non-symbolic "
            f"derivative {expr!r}."
        ) from exc
    stray = sym.free_symbols - set(PLACEHOLDERS[: entry.arity])
    if stray:
        names = ", ".join(sorted(str(s) for s in stray))
        raise MalformedCatalogError(
            f"build_rule_table: {entry.namespace}.{entry.name} derivative uses "
            f"unknown symbols {{{names}}}."
        )
    return sym


def _build_rule(entry: DiffRule, modules: Sequence[Any]) -> Rule:
    """Compiles one catalog entry into a rule.

    Raises:
        MalformedCatalogError: If the number of derivatives does not match the arity.
    """
    if len(entry.derivatives) != entry.arity:
        raise MalformedCatalogError(
            f"build_rule_table: {entry.namespace}.{entry.name} declares arity "
            f"{entry.arity} but has {len(entry.derivatives)} derivative expression(s)."
        )
    args = PLACEHOLDERS[: entry.arity]
    partials = tuple(
        _with_ieee_operands(
            sp.lambdify(args, _symbolic(expr, entry), modules=list(modules))
        )
        for expr in entry.derivatives
    )
    return Rule(entry.name, entry.arity, entry.function, partials)


def build_rule_table(
    catalog: Iterable[DiffRule],
    *,
    namespace: str = BASE_NAMESPACE,
    modules: Sequence[Any] | Mapping[str, Any] | None = None,
) -> RuleTable:
    """Builds a rule table from the entries of one catalog namespace.

    Entries of other namespaces are ignored. Entries whose arity is neither 1
    nor 2 are skipped.

    Args:
        catalog: Catalog entries, e.g. :func:`dualdiff.rules.catalog.diffrules`.
        namespace: The namespace to keep.
        modules: Namespace in which the compiled partials look up the
            functions their expressions call (``sin``, ``sqrt``, ``signum``, ...).
            Anything :func:`sympy.lambdify` accepts as ``modules``. Defaults
            to NumPy plus :func:`signum`.

    Returns:
        Mapping from operation name to rule.

    Raises:
        MalformedCatalogError: If an entry's derivatives do not match its
            arity, are not symbolic, or a name is defined twice with
            different arities.
    """
    if modules is None:
        modules = _default_modules()
    elif isinstance(modules, (str, Mapping)):
        modules = [modules]

    table: RuleTable = {}
    skipped = 0
    for entry in catalog:
        if entry.namespace != namespace:
            continue
        if entry.arity not in SUPPORTED_ARITIES:
            dualdiff_logger.debug(
                "Skipping %s.%s: arity %d is not supported.",
                entry.namespace, entry.name, entry.arity,
            )
            skipped += 1
            continue
        if entry.name in table:
            raise MalformedCatalogError(
                f"build_rule_table: {entry.namespace}.{entry.name} is defined "
                "with more than one arity."
            )
        table[entry.name] = _build_rule(entry, modules)

    dualdiff_logger.debug(
        "Built %d rules from namespace %r (%d skipped).", len(table), namespace, skipped
    )
    return table
