"""Shared typing aliases for dualdiff."""

from __future__ import annotations

import numbers
from typing import Any, Callable, TypeAlias

Scalar: TypeAlias = numbers.Number
Tangent: TypeAlias = tuple[Any, ...]
Partial: TypeAlias = Callable[..., Any]
