"""Unit tests for dualdiff.rules.catalog."""

from __future__ import annotations

import operator

import numpy as np
import pytest
import sympy as sp
from scipy import special

from dualdiff.rules.catalog import (
    BASE_NAMESPACE,
    DiffRule,
    define_diffrule,
    diffrule,
    diffrules,
    make_diffrule,
    vx,
    vy,
)

BASE_UNARY = {
    "neg", "pos", "abs", "sqrt", "cbrt", "square", "exp", "expm1", "exp2",
    "log", "log2", "log10", "log1p", "sin", "cos", "tan", "arcsin", "arccos",
    "arctan", "sinh", "cosh", "tanh", "arcsinh", "arccosh", "arctanh",
    "deg2rad", "rad2deg",
}
BASE_BINARY = {"add", "sub", "mul", "truediv", "pow", "hypot", "arctan2"}


def test_base_namespace_lists_operators_and_numpy_functions() -> None:
    """Tests that the base namespace holds every expected entry with its arity."""
    base = {(e.name, e.arity) for e in diffrules() if e.namespace == BASE_NAMESPACE}
    assert {(n, 1) for n in BASE_UNARY} <= base
    assert {(n, 2) for n in BASE_BINARY} <= base


def test_special_functions_live_outside_base() -> None:
    """Tests that SciPy special functions are kept in their own namespace."""
    entry = diffrule("special", "erf", 1)
    assert entry.function is special.erf
    with pytest.raises(KeyError):
        diffrule(BASE_NAMESPACE, "erf", 1)


def test_entry_holds_primal_and_symbolic_partials() -> None:
    """Tests one entry's primal function and partial derivatives."""
    entry = diffrule("base", "mul", 2)
    assert isinstance(entry, DiffRule)
    assert entry.function is operator.mul
    assert entry.derivatives == (vy, vx)


def test_unary_derivative_is_stored_as_one_tuple() -> None:
    """Tests that a bare unary expression is wrapped in a tuple."""
    entry = diffrule("base", "sin", 1)
    assert entry.derivatives == (sp.cos(vx),)


def test_make_diffrule_does_not_touch_the_catalog() -> None:
    """Tests that make_diffrule only builds the entry."""
    entry = make_diffrule("base", "twice", 1, lambda x: 2 * x, lambda x: 2)
    assert entry.derivatives == (2,)
    with pytest.raises(KeyError):
        diffrule("base", "twice", 1)


def test_make_diffrule_keeps_missing_derivatives_empty() -> None:
    """Tests that a rule returning None yields no derivative expressions."""
    entry = make_diffrule("base", "nothing", 1, np.sin, lambda x: None)
    assert entry.derivatives == ()


def test_make_diffrule_uses_fresh_placeholders_above_two() -> None:
    """Tests that arities above two get their own placeholder symbols."""
    entry = make_diffrule("base", "fma", 3, lambda a, b, c: a * b + c,
                          lambda a, b, c: (b, a, 1))
    assert len(entry.derivatives) == 3
    assert entry.derivatives[2] == 1


def test_define_diffrule_adds_and_replaces(isolated_catalog) -> None:
    """Tests that define_diffrule stores an entry and replaces it by key."""
    first = define_diffrule("base", "softsign", 1, lambda x: x / (1 + abs(x)),
                            lambda x: 1)
    assert diffrule("base", "softsign", 1) is first
    second = define_diffrule("base", "softsign", 1, lambda x: x / (1 + abs(x)),
                             lambda x: 2)
    assert diffrule("base", "softsign", 1) is second
    assert sum(1 for e in diffrules() if e.name == "softsign") == 1
