"""Forward-mode automatic differentiation with tagged dual values."""

from importlib.metadata import PackageNotFoundError, version

from dualdiff import ops
from dualdiff.derivative import diff
from dualdiff.dispatch import register_rule
from dualdiff.dual import Dual
from dualdiff.errors import (
    ContextMismatchError,
    DualDiffError,
    MalformedCatalogError,
    UnsupportedInputError,
    UnsupportedOutputError,
)

try:
    __version__ = version("dualdiff")
except PackageNotFoundError:
    pass

__all__ = [
    "ContextMismatchError",
    "Dual",
    "DualDiffError",
    "MalformedCatalogError",
    "UnsupportedInputError",
    "UnsupportedOutputError",
    "diff",
    "ops",
    "register_rule",
]
