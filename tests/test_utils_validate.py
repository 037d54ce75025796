"""Tests for dualdiff.utils.validate."""

import numpy as np
import pytest

from dualdiff.context import new_context
from dualdiff.dual import wrap
from dualdiff.errors import UnsupportedInputError, UnsupportedOutputError
from dualdiff.utils.validate import (
    is_scalar,
    require_callable,
    require_scalar_input,
    require_scalar_output,
)


def test_is_scalar_accepts_numbers_and_scalar_duals():
    """Tests that Python, NumPy and dual scalars are accepted."""
    assert is_scalar(1)
    assert is_scalar(2.5)
    assert is_scalar(1 + 2j)
    assert is_scalar(np.float64(1.0))
    assert is_scalar(np.int32(3))
    assert is_scalar(wrap(new_context(), 1.0, (1.0,)))


def test_is_scalar_rejects_containers():
    """Tests that arrays, sequences and strings are rejected."""
    assert not is_scalar(np.array([1.0]))
    assert not is_scalar([1.0])
    assert not is_scalar((1.0,))
    assert not is_scalar("1.0")
    assert not is_scalar(None)
    assert not is_scalar(wrap(new_context(), np.ones(3), (1.0,)))


def test_require_callable():
    """Tests that non-callables raise TypeError naming the caller."""
    require_callable(np.sin, where="here")
    with pytest.raises(TypeError, match="here"):
        require_callable(1.0, where="here")


def test_require_scalar_input_message():
    """Tests the input error message."""
    require_scalar_input(1.0, where="diff")
    with pytest.raises(UnsupportedInputError, match="diff: expected a scalar input; got list"):
        require_scalar_input([1.0], where="diff")


def test_require_scalar_output_message():
    """Tests the output error message."""
    require_scalar_output(1.0, where="diff")
    with pytest.raises(UnsupportedOutputError, match="scalar output; got ndarray"):
        require_scalar_output(np.zeros(2), where="diff")
