"""
metrion.core.functions
======================

Free-function forms of the measurement operations.

Each function accepts a `Measurement` (or `UncertainMeasurement`) and
delegates to the method of the same name, so dimension checks and
uncertainty propagation stay in one place. Plain numbers are evaluated with
`math`, which lets numeric code call ``sqrt(x)`` without caring whether
``x`` carries a dimension.
"""

from __future__ import annotations

import math
from typing import Union

from metrion.core.dimensions import ANGLE
from metrion.core.measurement import Measurement, _is_number, _label, _make
from metrion.core.umeasurement import UncertainMeasurement, _make_u
from metrion.errors import DimensionMismatchError, DomainError

Operand = Union[Measurement, int, float]


def _dispatch(name: str, x: Operand, fallback):
    if isinstance(x, Measurement):
        return getattr(x, name)()
    if _is_number(x):
        return fallback(float(x))
    raise TypeError(f"{name}() expects a Measurement or a number, got {type(x).__name__}")


def _real_sqrt(x: float) -> float:
    if x < 0.0:
        raise DomainError(f"Cannot take the square root of a negative value ({x!r})")
    return math.sqrt(x)


def _real_log(fn):
    def wrapped(x: float) -> float:
        if x <= 0.0:
            raise DomainError(f"{fn.__name__}() is undefined for non-positive values ({x!r})")
        return fn(x)
    return wrapped


def sqrt(x: Operand):
    return _dispatch("sqrt", x, _real_sqrt)


def cbrt(x: Operand):
    return _dispatch("cbrt", x, math.cbrt)


def square(x: Operand):
    return _dispatch("square", x, lambda v: v * v)


def cube(x: Operand):
    return _dispatch("cube", x, lambda v: v * v * v)


def inv(x: Operand):
    return 1.0 / x


def root(x: Operand, n: int):
    if isinstance(x, Measurement):
        return x.root(n)
    return Measurement(x).root(n).value


def exp(x: Operand):
    return _dispatch("exp", x, math.exp)


def exp10(x: Operand):
    return _dispatch("exp10", x, lambda v: 10.0 ** v)


def log(x: Operand):
    return _dispatch("log", x, _real_log(math.log))


def log10(x: Operand):
    return _dispatch("log10", x, _real_log(math.log10))


def sin(x: Operand):
    return _dispatch("sin", x, math.sin)


def cos(x: Operand):
    return _dispatch("cos", x, math.cos)


def tan(x: Operand):
    return _dispatch("tan", x, math.tan)


def sinh(x: Operand):
    return _dispatch("sinh", x, math.sinh)


def cosh(x: Operand):
    return _dispatch("cosh", x, math.cosh)


def tanh(x: Operand):
    return _dispatch("tanh", x, math.tanh)


def asin(x: Operand):
    return _dispatch("asin", x, math.asin)


def acos(x: Operand):
    return _dispatch("acos", x, math.acos)


def atan(x: Operand):
    return _dispatch("atan", x, math.atan)


def asinh(x: Operand):
    return _dispatch("asinh", x, math.asinh)


def acosh(x: Operand):
    return _dispatch("acosh", x, math.acosh)


def atanh(x: Operand):
    return _dispatch("atanh", x, math.atanh)


def atan2(y: Operand, x: Operand):
    """
    Angle of the point ``(x, y)`` in radians.

    Both arguments must share a dimension; the result is an angle. When either
    argument carries an uncertainty it is propagated through the partial
    derivatives ``x/(x²+y²)`` and ``-y/(x²+y²)``.
    """
    if not isinstance(y, Measurement) and not isinstance(x, Measurement):
        return math.atan2(y, x)
    ym = y if isinstance(y, Measurement) else Measurement(y)
    xm = x if isinstance(x, Measurement) else Measurement(x)
    if ym.dim != xm.dim:
        raise DimensionMismatchError(
            f"atan2() requires arguments of the same dimension, got "
            f"'{_label(ym.dim)}' and '{_label(xm.dim)}'",
            ym.dim,
            xm.dim,
        )
    yv, xv = ym.value, xm.value
    angle = math.atan2(yv, xv)
    uy = ym.uncertainty if isinstance(ym, UncertainMeasurement) else None
    ux = xm.uncertainty if isinstance(xm, UncertainMeasurement) else None
    if uy is None and ux is None:
        return _make(angle, ANGLE)
    uy, ux = uy or 0.0, ux or 0.0
    if uy == 0.0 and ux == 0.0:
        return _make_u(angle, 0.0, ANGLE)
    r2 = xv * xv + yv * yv
    if r2 == 0.0:
        raise DomainError("Derivative of atan2() is undefined at the origin")
    return _make_u(angle, math.hypot(xv * uy / r2, yv * ux / r2), ANGLE)


__all__ = [
    "sqrt", "cbrt", "square", "cube", "inv", "root",
    "exp", "exp10", "log", "log10",
    "sin", "cos", "tan", "sinh", "cosh", "tanh",
    "asin", "acos", "atan", "asinh", "acosh", "atanh", "atan2",
]
