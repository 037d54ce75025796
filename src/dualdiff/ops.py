"""Elementary functions that dual values differentiate through.

Each function evaluates the plain NumPy (or :mod:`operator`) primal when
called with plain numbers and propagates tangents when called with dual
values. NumPy ufuncs of the same name (``np.sin``, ``np.exp``, ...) are
intercepted as well, so user code written against NumPy differentiates
unchanged. Functions of the :mod:`math` module are not: they convert their
argument to ``float``, which a dual value refuses.

Example:
    >>> from dualdiff import diff, ops
    >>> diff(lambda x: ops.sin(x**2), 2.0)  # doctest: +SKIP
    -2.6145744834544478
"""

from __future__ import annotations

from dualdiff.dispatch import elementary

__all__ = [
    "add", "sub", "mul", "truediv", "pow", "neg", "pos", "abs",
    "sqrt", "cbrt", "square",
    "exp", "expm1", "exp2", "log", "log2", "log10", "log1p",
    "sin", "cos", "tan", "arcsin", "arccos", "arctan",
    "sinh", "cosh", "tanh", "arcsinh", "arccosh", "arctanh",
    "deg2rad", "rad2deg", "hypot", "arctan2",
]

add = elementary("add")
sub = elementary("sub")
mul = elementary("mul")
truediv = elementary("truediv")
pow = elementary("pow")
neg = elementary("neg")
pos = elementary("pos")
abs = elementary("abs")

sqrt = elementary("sqrt")
cbrt = elementary("cbrt")
square = elementary("square")
exp = elementary("exp")
expm1 = elementary("expm1")
exp2 = elementary("exp2")
log = elementary("log")
log2 = elementary("log2")
log10 = elementary("log10")
log1p = elementary("log1p")

sin = elementary("sin")
cos = elementary("cos")
tan = elementary("tan")
arcsin = elementary("arcsin")
arccos = elementary("arccos")
arctan = elementary("arctan")
sinh = elementary("sinh")
cosh = elementary("cosh")
tanh = elementary("tanh")
arcsinh = elementary("arcsinh")
arccosh = elementary("arccosh")
arctanh = elementary("arctanh")
deg2rad = elementary("deg2rad")
rad2deg = elementary("rad2deg")
hypot = elementary("hypot")
arctan2 = elementary("arctan2")
