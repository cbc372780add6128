"""
metrion.core.umeasurement
=========================

Defines `UncertainMeasurement`: a `Measurement` carrying a non-negative
absolute uncertainty that is propagated through every operation.

Sums, differences, products and quotients combine independent uncertainties
in quadrature by default; the ``simple_*`` methods expose the linear
(worst-case) rules instead. Powers, roots and the transcendental functions
propagate through the absolute value of the analytic derivative at the
canonical value.
"""

from __future__ import annotations

import math
from typing import Callable, Tuple

from metrion.core.dimensions import ANGLE, DIM_0, Dim
from metrion.core.measurement import (
    Measurement,
    Number,
    UnitLike,
    _as_int_exponent,
    _check_unit_interval,
    _int_power,
    _is_number,
    _label,
    _make,
    _real_root,
    _resolve_unit,
    _sum_dimension,
)
from metrion.core.unit import Unit
from metrion.core.utils import tolerant_equal
from metrion.errors import (
    DimensionMismatchError,
    DivideByZeroError,
    DomainError,
    NegativeUncertaintyError,
)

_Parts = Tuple[float, float, Dim]


def _make_u(value: float, uncertainty: float, dim: Dim) -> "UncertainMeasurement":
    obj = UncertainMeasurement.__new__(UncertainMeasurement)
    obj._value = float(value)
    obj._uncertainty = float(uncertainty)
    obj.dim = dim
    return obj


def _parts(other: object) -> "_Parts | None":
    """(value, uncertainty, dimension) of an operand; exact operands have zero uncertainty."""
    if isinstance(other, UncertainMeasurement):
        return other._value, other._uncertainty, other.dim
    if isinstance(other, Measurement):
        return other._value, 0.0, other.dim
    if _is_number(other):
        return float(other), 0.0, DIM_0
    return None


def _propagated(uncertainty: float, derivative: Callable[[], float]) -> float:
    # exact inputs stay exact, even where the derivative is undefined
    if uncertainty == 0.0:
        return 0.0
    return abs(derivative()) * uncertainty


def _quotient_uncertainty(v1: float, u1: float, v2: float, u2: float) -> float:
    return math.hypot(u1 / v2, u2 * v1 / (v2 * v2))


class UncertainMeasurement(Measurement):
    """
    A measurement with an absolute uncertainty.

    Attributes
    ----------
    _value : float
        The value expressed with multiplier 1 (canonical form).
    _uncertainty : float
        Non-negative absolute uncertainty, in the same canonical unit.
    dim : Dimension
        The physical dimension shared by value and uncertainty.
    """
    __slots__ = ["_uncertainty"]

    def __init__(
        self,
        value: "Number | Measurement" = 0.0,
        uncertainty: "Number | Measurement" = 0.0,
        unit: UnitLike = None,
    ):
        if isinstance(value, Measurement) or isinstance(uncertainty, Measurement):
            if unit is not None:
                raise TypeError("A unit cannot be applied to Measurement arguments")
            v, _, dim = _parts(value)
            u, _, udim = _parts(uncertainty)
            if udim != dim and u != 0.0:
                raise DimensionMismatchError(
                    f"Uncertainty dimension '{_label(udim)}' does not match "
                    f"value dimension '{_label(dim)}'",
                    dim,
                    udim,
                )
        else:
            unit = _resolve_unit(unit)
            v = float(value) * unit.multiplier
            u = float(uncertainty) * unit.multiplier
            dim = unit.dimension
        if u < 0.0 or math.isnan(u):
            raise NegativeUncertaintyError(uncertainty)
        self._value = v
        self._uncertainty = u
        self.dim = dim

    # --- Accessors ---
    @property
    def uncertainty(self) -> float:
        """Canonical absolute uncertainty."""
        return self._uncertainty

    @property
    def relative_uncertainty(self) -> float:
        if self._value == 0.0:
            raise DivideByZeroError("Relative uncertainty of a zero-valued measurement is undefined")
        return self._uncertainty / abs(self._value)

    def uncertainty_as(self, unit: "Unit | str") -> float:
        """Return the uncertainty expressed in ``unit``."""
        return self.uncertainty_as_measurement().value_as(unit)

    def as_measurement(self) -> Measurement:
        """Drop the uncertainty."""
        return _make(self._value, self.dim)

    def uncertainty_as_measurement(self) -> Measurement:
        return _make(self._uncertainty, self.dim)

    def weight(self) -> float:
        """Statistical weight ``1/u²`` in canonical units."""
        if self._uncertainty == 0.0:
            raise DivideByZeroError("Cannot weight a measurement with zero uncertainty")
        return 1.0 / (self._uncertainty * self._uncertainty)

    def as_angle(self) -> "UncertainMeasurement":
        self._require_dimensionless("as_angle")
        return _make_u(self._value, self._uncertainty, ANGLE)

    # --- Comparison ---
    def __eq__(self, other: object) -> bool:
        if isinstance(other, UncertainMeasurement):
            return (
                self.dim == other.dim
                and tolerant_equal(self._value, other._value)
                and tolerant_equal(self._uncertainty, other._uncertainty)
            )
        p = _parts(other)
        if p is None:
            return NotImplemented
        v, _, dim = p
        if dim != self.dim and not (_is_number(other) and other == 0):
            return False
        if self._uncertainty > 0.0:
            return self._value - self._uncertainty <= v <= self._value + self._uncertainty
        return tolerant_equal(self._value, v)

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None  # type: ignore[assignment]

    # --- Sums (quadrature) ---
    def __add__(self, other: object) -> "UncertainMeasurement":
        p = _parts(other)
        if p is None:
            return NotImplemented
        v, u, dim = p
        dim = _sum_dimension(self._value, self.dim, v, dim, "add")
        return _make_u(self._value + v, math.hypot(self._uncertainty, u), dim)

    def __radd__(self, other: object) -> "UncertainMeasurement":
        p = _parts(other)
        if p is None:
            return NotImplemented
        v, u, dim = p
        dim = _sum_dimension(v, dim, self._value, self.dim, "add")
        return _make_u(v + self._value, math.hypot(u, self._uncertainty), dim)

    def __sub__(self, other: object) -> "UncertainMeasurement":
        p = _parts(other)
        if p is None:
            return NotImplemented
        v, u, dim = p
        dim = _sum_dimension(self._value, self.dim, v, dim, "subtract")
        return _make_u(self._value - v, math.hypot(self._uncertainty, u), dim)

    def __rsub__(self, other: object) -> "UncertainMeasurement":
        p = _parts(other)
        if p is None:
            return NotImplemented
        v, u, dim = p
        dim = _sum_dimension(v, dim, self._value, self.dim, "subtract")
        return _make_u(v - self._value, math.hypot(u, self._uncertainty), dim)

    # --- Sums (linear) ---
    def _linear_parts(self, other: object, op: str) -> _Parts:
        p = _parts(other)
        if p is None:
            raise TypeError(f"Cannot {op} {type(other).__name__} and UncertainMeasurement")
        v, u, dim = p
        return v, u, _sum_dimension(self._value, self.dim, v, dim, op)

    def simple_add(self, other: "Measurement | Number") -> "UncertainMeasurement":
        """Sum with linearly added uncertainties (``u1 + u2``)."""
        v, u, dim = self._linear_parts(other, "add")
        return _make_u(self._value + v, self._uncertainty + u, dim)

    def simple_subtract(self, other: "Measurement | Number") -> "UncertainMeasurement":
        """Difference with linearly added uncertainties (``u1 + u2``)."""
        v, u, dim = self._linear_parts(other, "subtract")
        return _make_u(self._value - v, self._uncertainty + u, dim)

    # --- Products and quotients ---
    def __mul__(self, other: object) -> "UncertainMeasurement":
        if isinstance(other, Unit):
            m = other.multiplier
            return _make_u(self._value * m, self._uncertainty * m, self.dim * other.dimension)
        p = _parts(other)
        if p is None:
            return NotImplemented
        v, u, dim = p
        unc = math.hypot(self._uncertainty * v, u * self._value)
        return _make_u(self._value * v, unc, self.dim * dim)

    def __rmul__(self, other: object) -> "UncertainMeasurement":
        p = _parts(other)
        if p is None:
            return NotImplemented
        v, u, dim = p
        unc = math.hypot(u * self._value, self._uncertainty * v)
        return _make_u(v * self._value, unc, dim * self.dim)

    def __truediv__(self, other: object) -> "UncertainMeasurement":
        if isinstance(other, Unit):
            m = other.multiplier
            return _make_u(self._value / m, self._uncertainty / m, self.dim / other.dimension)
        p = _parts(other)
        if p is None:
            return NotImplemented
        v, u, dim = p
        if v == 0.0:
            raise DivideByZeroError(
                f"Cannot divide '{_label(self.dim)}' by a zero measurement ('{_label(dim)}')"
            )
        unc = _quotient_uncertainty(self._value, self._uncertainty, v, u)
        return _make_u(self._value / v, unc, self.dim / dim)

    def __rtruediv__(self, other: object) -> "UncertainMeasurement":
        p = _parts(other)
        if p is None:
            return NotImplemented
        v, u, dim = p
        if self._value == 0.0:
            raise DivideByZeroError(f"Cannot divide by a zero measurement ('{_label(self.dim)}')")
        unc = _quotient_uncertainty(v, u, self._value, self._uncertainty)
        return _make_u(v / self._value, unc, dim / self.dim)

    def simple_product(self, other: "Measurement | Number") -> "UncertainMeasurement":
        """Product with linearly added relative uncertainties."""
        p = _parts(other)
        if p is None:
            raise TypeError(f"Cannot multiply UncertainMeasurement by {type(other).__name__}")
        v, u, dim = p
        unc = abs(self._value) * u + abs(v) * self._uncertainty
        return _make_u(self._value * v, unc, self.dim * dim)

    def simple_divide(self, other: "Measurement | Number") -> "UncertainMeasurement":
        """Quotient with linearly added relative uncertainties."""
        p = _parts(other)
        if p is None:
            raise TypeError(f"Cannot divide UncertainMeasurement by {type(other).__name__}")
        v, u, dim = p
        if v == 0.0:
            raise DivideByZeroError(
                f"Cannot divide '{_label(self.dim)}' by a zero measurement ('{_label(dim)}')"
            )
        unc = self._uncertainty / abs(v) + abs(self._value) * u / (v * v)
        return _make_u(self._value / v, unc, self.dim / dim)

    # --- Unary ---
    def __neg__(self) -> "UncertainMeasurement":
        return _make_u(-self._value, self._uncertainty, self.dim)

    def __pos__(self) -> "UncertainMeasurement":
        return _make_u(self._value, self._uncertainty, self.dim)

    def __abs__(self) -> "UncertainMeasurement":
        return _make_u(abs(self._value), self._uncertainty, self.dim)

    # --- Powers and roots ---
    def pow(self, n: int) -> "UncertainMeasurement":
        n = _as_int_exponent(n)
        dim = self.dim ** n
        if n == 0:
            return _make_u(1.0, 0.0, dim)
        value = _int_power(self._value, n)
        unc = _propagated(self._uncertainty, lambda: n * _int_power(self._value, n - 1))
        return _make_u(value, unc, dim)

    def root(self, n: int) -> "UncertainMeasurement":
        n = _as_int_exponent(n)
        dim = self.dim.root(n)
        r = _real_root(self._value, n)

        def derivative() -> float:
            if self._value == 0.0:
                raise DomainError(f"Derivative of root {n} is undefined at zero")
            return r / (n * self._value)

        return _make_u(r, _propagated(self._uncertainty, derivative), dim)

    def sqrt(self) -> "UncertainMeasurement":
        if self._value < 0.0:
            raise DomainError(f"Cannot take the square root of a negative measurement ({self!r})")
        return self.root(2)

    # --- Exponentials and logarithms ---
    def exp(self) -> "UncertainMeasurement":
        self._require_dimensionless("exp")
        value = math.exp(self._value)
        return _make_u(value, _propagated(self._uncertainty, lambda: value), DIM_0)

    def exp10(self) -> "UncertainMeasurement":
        self._require_dimensionless("exp10")
        value = 10.0 ** self._value
        return _make_u(value, _propagated(self._uncertainty, lambda: value * math.log(10.0)), DIM_0)

    def log(self) -> "UncertainMeasurement":
        self._require_dimensionless("log")
        if self._value <= 0.0:
            raise DomainError(f"log() is undefined for non-positive values ({self._value!r})")
        v = self._value
        return _make_u(math.log(v), _propagated(self._uncertainty, lambda: 1.0 / v), DIM_0)

    def log10(self) -> "UncertainMeasurement":
        self._require_dimensionless("log10")
        if self._value <= 0.0:
            raise DomainError(f"log10() is undefined for non-positive values ({self._value!r})")
        v = self._value
        unc = _propagated(self._uncertainty, lambda: 1.0 / (v * math.log(10.0)))
        return _make_u(math.log10(v), unc, DIM_0)

    # --- Trigonometric and hyperbolic ---
    def sin(self) -> "UncertainMeasurement":
        self._require_angle("sin")
        v = self._value
        return _make_u(math.sin(v), _propagated(self._uncertainty, lambda: math.cos(v)), DIM_0)

    def cos(self) -> "UncertainMeasurement":
        self._require_angle("cos")
        v = self._value
        return _make_u(math.cos(v), _propagated(self._uncertainty, lambda: math.sin(v)), DIM_0)

    def tan(self) -> "UncertainMeasurement":
        self._require_angle("tan")
        v = self._value
        unc = _propagated(self._uncertainty, lambda: 1.0 / math.cos(v) ** 2)
        return _make_u(math.tan(v), unc, DIM_0)

    def sinh(self) -> "UncertainMeasurement":
        self._require_angle("sinh")
        v = self._value
        return _make_u(math.sinh(v), _propagated(self._uncertainty, lambda: math.cosh(v)), DIM_0)

    def cosh(self) -> "UncertainMeasurement":
        self._require_angle("cosh")
        v = self._value
        return _make_u(math.cosh(v), _propagated(self._uncertainty, lambda: math.sinh(v)), DIM_0)

    def tanh(self) -> "UncertainMeasurement":
        self._require_angle("tanh")
        v = self._value
        unc = _propagated(self._uncertainty, lambda: 1.0 / math.cosh(v) ** 2)
        return _make_u(math.tanh(v), unc, DIM_0)

    # --- Inverse functions ---
    def asin(self) -> "UncertainMeasurement":
        self._require_dimensionless("asin")
        _check_unit_interval(self._value, "asin")
        v = self._value
        unc = _propagated(self._uncertainty, lambda: 1.0 / _positive_sqrt(1.0 - v * v, "asin"))
        return _make_u(math.asin(v), unc, ANGLE)

    def acos(self) -> "UncertainMeasurement":
        self._require_dimensionless("acos")
        _check_unit_interval(self._value, "acos")
        v = self._value
        unc = _propagated(self._uncertainty, lambda: 1.0 / _positive_sqrt(1.0 - v * v, "acos"))
        return _make_u(math.acos(v), unc, ANGLE)

    def atan(self) -> "UncertainMeasurement":
        self._require_dimensionless("atan")
        v = self._value
        return _make_u(math.atan(v), _propagated(self._uncertainty, lambda: 1.0 / (1.0 + v * v)), ANGLE)

    def asinh(self) -> "UncertainMeasurement":
        self._require_dimensionless("asinh")
        v = self._value
        unc = _propagated(self._uncertainty, lambda: 1.0 / math.sqrt(v * v + 1.0))
        return _make_u(math.asinh(v), unc, ANGLE)

    def acosh(self) -> "UncertainMeasurement":
        self._require_dimensionless("acosh")
        if self._value < 1.0:
            raise DomainError(f"acosh() is undefined below 1 ({self._value!r})")
        v = self._value
        unc = _propagated(self._uncertainty, lambda: 1.0 / _positive_sqrt(v * v - 1.0, "acosh"))
        return _make_u(math.acosh(v), unc, ANGLE)

    def atanh(self) -> "UncertainMeasurement":
        self._require_dimensionless("atanh")
        if abs(self._value) >= 1.0:
            raise DomainError(f"atanh() is undefined outside (-1, 1) ({self._value!r})")
        v = self._value
        return _make_u(math.atanh(v), _propagated(self._uncertainty, lambda: 1.0 / (1.0 - v * v)), ANGLE)

    # --- Text ---
    def to_string(self, unit: "Unit | str | None" = None) -> str:
        from metrion.io.text import format_uncertain_measurement
        return format_uncertain_measurement(self, unit)

    def __repr__(self) -> str:
        from metrion.io.text import format_uncertain_measurement
        return format_uncertain_measurement(self)

    def __format__(self, spec: str) -> str:
        if not spec:
            return repr(self)
        text = f"{format(self._value, spec)} ± {format(self._uncertainty, spec)}"
        symbol = self.dim.symbol
        return f"{text} {symbol}" if symbol else text


def _positive_sqrt(x: float, fname: str) -> float:
    if x <= 0.0:
        raise DomainError(f"Derivative of {fname}() is undefined at this value")
    return math.sqrt(x)


__all__ = ["UncertainMeasurement"]
