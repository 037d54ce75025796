"""Unit tests for dualdiff.derivative.diff."""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from dualdiff import diff, ops
from dualdiff.context import active_contexts
from dualdiff.errors import UnsupportedInputError, UnsupportedOutputError


def test_identity() -> None:
    """Tests that the derivative of x is one."""
    assert diff(lambda x: x, 4.0) == 1.0


def test_polynomial() -> None:
    """Tests a polynomial built from operators."""
    assert diff(lambda x: x**3 + 2 * x, 2.0) == pytest.approx(14.0)


def test_composition() -> None:
    """Tests the chain rule through a NumPy function."""
    got = diff(lambda x: np.sin(x**2), 2.0)
    assert got == pytest.approx(math.cos(4.0) * 4.0)


def test_nested_composition() -> None:
    """Tests a deeper composition mixing ops and NumPy."""
    got = diff(lambda x: np.exp(ops.sin(x)) * x, 0.5)
    expected = math.exp(math.sin(0.5)) * (math.cos(0.5) * 0.5 + 1.0)
    assert got == pytest.approx(expected)


def test_linear_forms() -> None:
    """Tests x*c and x+x."""
    assert diff(lambda x: x * 7.5, 3.0) == 7.5
    assert diff(lambda x: x + x, 3.0) == 2.0


def test_constant_function_returns_zero_of_output_type() -> None:
    """Tests that a function ignoring x has derivative zero of its output type."""
    out = diff(lambda x: 5.0, 1.0)
    assert out == 0.0 and type(out) is float
    out = diff(lambda x: 5, 1.0)
    assert out == 0 and type(out) is int
    out = diff(lambda x: np.float32(2.0), 1.0)
    assert type(out) is np.float32


def test_integer_input() -> None:
    """Tests that an integer seed differentiates like the equal float."""
    out = diff(lambda x: x**2, 3)
    assert out == 6


def test_branches_use_primal() -> None:
    """Tests that control flow on comparisons takes the primal branch."""

    def f(x):
        return x**2 if x > 0 else -x

    assert diff(f, 3.0) == pytest.approx(6.0)
    assert diff(f, -1.0) == -1.0


def test_nested_diff() -> None:
    """Tests x * d/dy(y**2) at y = x, which is 2*x**2 with derivative 4*x."""
    assert diff(lambda x: x * diff(lambda y: y**2, x), 3.0) == pytest.approx(12.0)


def test_nested_diff_keeps_tangents_apart() -> None:
    """Tests d/dx (x * d/dy (x + y)) at 1, which is 1 and not 2."""
    assert diff(lambda x: x * diff(lambda y: x + y, 1.0), 1.0) == 1.0


def test_second_derivative() -> None:
    """Tests d2/dx2 x**3 = 6x via nesting."""
    assert diff(lambda x: diff(lambda y: y**3, x), 2.0) == pytest.approx(12.0)


def test_inner_function_constant_in_inner_variable() -> None:
    """Tests an inner function depending only on the outer variable."""
    assert diff(lambda x: diff(lambda y: x**2, 1.0), 3.0) == 0.0


def test_third_level_nesting() -> None:
    """Tests three nested calls, d3/dx3 sin(x) = -cos(x)."""

    def d(f):
        return lambda x: diff(f, x)

    assert d(d(d(np.sin)))(0.4) == pytest.approx(-math.cos(0.4))


def test_plain_values_inside_diff_are_bit_identical() -> None:
    """Tests that computations not involving x are unaffected by diff."""
    outside = np.sin(0.7) * 0.7**2 + 3.0
    seen = []

    def f(x):
        seen.append(np.sin(0.7) * 0.7**2 + 3.0)
        return x

    diff(f, 1.0)
    assert seen == [outside]


@pytest.mark.parametrize("bad", [[1.0], np.array([1.0, 2.0]), "a", None])
def test_unsupported_input(bad) -> None:
    """Tests that non-scalar seeds are rejected before f is called."""
    calls = []
    with pytest.raises(UnsupportedInputError):
        diff(lambda x: calls.append(x) or x, bad)
    assert calls == []


def test_unsupported_input_is_a_type_error() -> None:
    """Tests that the input error can be caught as TypeError."""
    with pytest.raises(TypeError):
        diff(lambda x: x, [1.0])


def test_unsupported_output() -> None:
    """Tests that non-scalar results are rejected."""
    with pytest.raises(UnsupportedOutputError):
        diff(lambda x: [x, x], 1.0)
    with pytest.raises(UnsupportedOutputError):
        diff(lambda x: x * np.ones(2), 1.0)
    with pytest.raises(UnsupportedOutputError):
        diff(lambda x: "text", 1.0)


def test_not_callable() -> None:
    """Tests that f must be callable."""
    with pytest.raises(TypeError, match="callable"):
        diff(3.0, 1.0)


def test_math_module_rejects_dual() -> None:
    """Tests that math functions refuse dual values instead of dropping tangents."""
    with pytest.raises(TypeError, match="tangent"):
        diff(math.sin, 1.0)


def test_context_is_popped_after_failure() -> None:
    """Tests that a failing function leaves no active context behind."""

    def f(x):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        diff(f, 1.0)
    assert active_contexts() == ()


def test_concurrent_calls_from_threads() -> None:
    """Tests that diff calls in different threads do not interfere."""
    points = [0.1 * k for k in range(1, 41)]

    def second(x):
        return diff(lambda u: diff(lambda v: v**3, u), x)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(second, points))

    assert results == pytest.approx([6.0 * p for p in points])
