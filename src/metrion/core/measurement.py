"""
metrion.core.measurement
========================

Defines the `Measurement` class: a canonical numeric value tagged with a
`Dimension`, supporting dimension-checked arithmetic.

The value is always stored in canonical form (the unit with multiplier 1 for
its dimension), so arithmetic never has to reconcile scale factors; units only
matter when a measurement is built (`value * unit`) and when it is read back
(`value_as(unit)`).

The system supports:
- Addition and subtraction of measurements sharing a dimension.
- Multiplication, division, integer powers and roots, combining dimensions.
- Exponential/logarithmic functions of dimensionless measurements and
  trigonometric/hyperbolic functions of angles.
- Rounding-tolerant equality that absorbs floating-point noise from unit
  conversions.
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import TYPE_CHECKING, Union

from metrion.core.dimensions import ANGLE, DIM_0, Dim
from metrion.core.unit import UNITLESS, Unit
from metrion.core.utils import tolerant_equal
from metrion.errors import (
    DimensionMismatchError,
    DivideByZeroError,
    DomainError,
    InvalidRootError,
)

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from metrion.core.umeasurement import UncertainMeasurement

Number = Union[int, float]
UnitLike = Union[Unit, str, None]


# --- Shared helpers (also used by UncertainMeasurement) -----------------------

def _resolve_unit(unit: UnitLike) -> Unit:
    if unit is None:
        return UNITLESS
    if isinstance(unit, Unit):
        return unit
    if isinstance(unit, str):
        from metrion.units.registry import DEFAULT_REGISTRY
        return DEFAULT_REGISTRY.get(unit)
    raise TypeError(f"Expected a Unit or unit expression, got {type(unit).__name__}")


def _label(dim: Dim) -> str:
    return dim.symbol or "1"


def _is_number(x: object) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)


def _is_zero_default(value: float, dim: Dim) -> bool:
    """A plain dimensionless zero: the neutral start value of a sum."""
    return value == 0.0 and dim.is_dimensionless and not dim.radians


def _sum_dimension(v1: float, d1: Dim, v2: float, d2: Dim, op: str) -> Dim:
    """Dimension of ``a ± b``; a dimensionless zero adopts the other side's dimension."""
    if d1 == d2:
        return d1 if d1.radians or not d2.radians else d2
    if _is_zero_default(v1, d1):
        return d2
    if _is_zero_default(v2, d2):
        return d1
    raise DimensionMismatchError(
        f"Cannot {op} measurements with different dimensions: "
        f"'{_label(d1)}' and '{_label(d2)}'",
        d1,
        d2,
    )


def _as_int_exponent(n: object) -> int:
    if isinstance(n, int) and not isinstance(n, bool):
        return n
    if isinstance(n, float) and n.is_integer():
        return int(n)
    raise TypeError(f"Exponent must be an integer, got {n!r}")


def _rational_exponent(n: object) -> Fraction:
    """Exact rational for a power exponent; floats must be a simple fraction like 1/3."""
    if isinstance(n, Fraction):
        return n
    if isinstance(n, int) and not isinstance(n, bool):
        return Fraction(n)
    if isinstance(n, float):
        frac = Fraction(n).limit_denominator(64)
        if math.isclose(float(frac), n, rel_tol=1e-12, abs_tol=1e-15):
            return frac
    raise TypeError(f"Exponent must be an integer or a simple fraction, got {n!r}")


def _int_power(value: float, n: int) -> float:
    if value == 0.0 and n < 0:
        raise DivideByZeroError(f"Cannot raise a zero measurement to the negative power {n}")
    return value ** n


def _real_root(value: float, n: int) -> float:
    """Real ``n``-th root; odd roots of negatives are negative, even ones are out of domain."""
    if n == 0:
        raise InvalidRootError("Root degree must be non-zero")
    if n < 0:
        r = _real_root(value, -n)
        if r == 0.0:
            raise DivideByZeroError(f"Cannot take root {n} of a zero measurement")
        return 1.0 / r
    if value < 0.0:
        if n % 2 == 0:
            raise DomainError(f"Cannot take the even root {n} of a negative value ({value!r})")
        return -_real_root(-value, n)
    if n == 2:
        return math.sqrt(value)
    if n == 3:
        return math.cbrt(value)
    return value ** (1.0 / n)


def _make(value: float, dim: Dim) -> "Measurement":
    obj = Measurement.__new__(Measurement)
    obj._value = float(value)
    obj.dim = dim
    return obj


def _operand(other: object) -> "Measurement | None":
    if isinstance(other, Measurement):
        return other
    if _is_number(other):
        return _make(other, DIM_0)
    return None


def _is_uncertain(other: object) -> bool:
    return isinstance(other, Measurement) and type(other) is not Measurement


class Measurement:
    """
    Represents a physical measurement: a value expressed in the canonical unit
    of its dimension.

    Attributes
    ----------
    _value : float
        The value expressed with multiplier 1 (canonical form).
    dim : Dimension
        The physical dimension of the measurement (e.g., length, time, mass).
    """
    __slots__ = ["_value", "dim"]

    def __init__(self, value: "Number | Measurement" = 0.0, unit: UnitLike = None):
        if isinstance(value, Measurement):
            if unit is not None:
                raise TypeError("A unit cannot be applied to a Measurement")
            self._value = value._value
            self.dim = value.dim
            return
        unit = _resolve_unit(unit)
        self._value = float(value) * unit.multiplier
        self.dim = unit.dimension

    @property
    def value(self) -> float:
        """Canonical value (multiplier 1)."""
        return self._value

    def value_as(self, unit: "Unit | str") -> float:
        """Return the value expressed in ``unit``."""
        unit = _resolve_unit(unit)
        if unit.dimension != self.dim:
            raise DimensionMismatchError(
                f"Cannot express '{_label(self.dim)}' in '{unit.symbol}' "
                f"({_label(unit.dimension)}): dimensions differ",
                self.dim,
                unit.dimension,
            )
        return self._value / unit.multiplier

    def as_angle(self) -> "Measurement":
        """Tag a dimensionless measurement as an angle in radians."""
        self._require_dimensionless("as_angle")
        return _make(self._value, ANGLE)

    def __float__(self) -> float:
        self._require_dimensionless("float")
        return self._value

    # --- Preconditions ---
    def _require_dimensionless(self, fname: str) -> None:
        if not self.dim.is_dimensionless:
            raise DimensionMismatchError(
                f"{fname}() requires a dimensionless measurement, got '{_label(self.dim)}'",
                self.dim,
                DIM_0,
            )

    def _require_angle(self, fname: str) -> None:
        if not self.dim.is_angle:
            raise DimensionMismatchError(
                f"{fname}() requires an angle in radians, got '{_label(self.dim)}'",
                self.dim,
                ANGLE,
            )

    # --- Comparison ---
    def _ordered_value(self, other: object) -> float:
        """Value of ``other`` in this measurement's dimension, for ordering."""
        o = _operand(other)
        if o is None:
            raise TypeError(f"Cannot compare Measurement with type {type(other)}")
        if o.dim != self.dim and not (_is_number(other) and other == 0):
            raise DimensionMismatchError(
                f"Cannot compare measurements with different dimensions: "
                f"'{_label(self.dim)}' and '{_label(o.dim)}'",
                self.dim,
                o.dim,
            )
        return o._value

    def __eq__(self, other: object) -> bool:
        o = _operand(other)
        if o is None or (_is_uncertain(o) and not _is_uncertain(self)):
            return NotImplemented
        if o.dim != self.dim and not (_is_number(other) and other == 0):
            return False
        return tolerant_equal(self._value, o._value)

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __lt__(self, other: object) -> bool:
        v = self._ordered_value(other)
        # Strictly less than AND not tolerant-equal
        return self._value < v and not tolerant_equal(self._value, v)

    def __le__(self, other: object) -> bool:
        v = self._ordered_value(other)
        return self._value < v or tolerant_equal(self._value, v)

    def __gt__(self, other: object) -> bool:
        v = self._ordered_value(other)
        return self._value > v and not tolerant_equal(self._value, v)

    def __ge__(self, other: object) -> bool:
        v = self._ordered_value(other)
        return self._value > v or tolerant_equal(self._value, v)

    # Equality is tolerant, so no hash consistent with it exists.
    __hash__ = None  # type: ignore[assignment]

    def as_key(self, precision: int = 12) -> tuple:
        """
        Returns a hashable, discretized key for this measurement.

        The standard `__hash__` is not implemented because `__eq__` is
        rounding-tolerant, which would violate the Python hash contract.

        Parameters
        ----------
        precision : int, optional
            The number of decimal places to round the *canonical value*
            to, by default 12.

        Returns
        -------
        tuple
            A hashable tuple of (dimension, rounded_value).
        """
        rounded = round(self._value, precision)
        # -0.0 and 0.0 round identically but must share a key
        if rounded == 0.0:
            rounded = 0.0
        return (self.dim, rounded)

    # --- Arithmetic ---
    def __add__(self, other: "Measurement | Number") -> "Measurement":
        o = _operand(other)
        if o is None or _is_uncertain(o):
            return NotImplemented
        dim = _sum_dimension(self._value, self.dim, o._value, o.dim, "add")
        return _make(self._value + o._value, dim)

    def __radd__(self, other: Number) -> "Measurement":
        o = _operand(other)
        if o is None:
            return NotImplemented
        dim = _sum_dimension(o._value, o.dim, self._value, self.dim, "add")
        return _make(o._value + self._value, dim)

    def __sub__(self, other: "Measurement | Number") -> "Measurement":
        o = _operand(other)
        if o is None or _is_uncertain(o):
            return NotImplemented
        dim = _sum_dimension(self._value, self.dim, o._value, o.dim, "subtract")
        return _make(self._value - o._value, dim)

    def __rsub__(self, other: Number) -> "Measurement":
        o = _operand(other)
        if o is None:
            return NotImplemented
        dim = _sum_dimension(o._value, o.dim, self._value, self.dim, "subtract")
        return _make(o._value - self._value, dim)

    def __mul__(self, other: "Measurement | Unit | Number") -> "Measurement":
        if isinstance(other, Unit):
            return _make(self._value * other.multiplier, self.dim * other.dimension)
        o = _operand(other)
        if o is None or _is_uncertain(o):
            return NotImplemented
        return _make(self._value * o._value, self.dim * o.dim)

    def __rmul__(self, other: Number) -> "Measurement":
        o = _operand(other)
        if o is None:
            return NotImplemented
        return _make(o._value * self._value, o.dim * self.dim)

    def __truediv__(self, other: "Measurement | Unit | Number") -> "Measurement":
        if isinstance(other, Unit):
            return _make(self._value / other.multiplier, self.dim / other.dimension)
        o = _operand(other)
        if o is None or _is_uncertain(o):
            return NotImplemented
        if o._value == 0.0:
            raise DivideByZeroError(
                f"Cannot divide '{_label(self.dim)}' by a zero measurement ('{_label(o.dim)}')"
            )
        return _make(self._value / o._value, self.dim / o.dim)

    def __rtruediv__(self, other: Number) -> "Measurement":
        o = _operand(other)
        if o is None:
            return NotImplemented
        if self._value == 0.0:
            raise DivideByZeroError(f"Cannot divide by a zero measurement ('{_label(self.dim)}')")
        return _make(o._value / self._value, o.dim / self.dim)

    def __neg__(self) -> "Measurement":
        return _make(-self._value, self.dim)

    def __pos__(self) -> "Measurement":
        return _make(self._value, self.dim)

    def __abs__(self) -> "Measurement":
        return _make(abs(self._value), self.dim)

    def __pow__(self, n: "int | float | Fraction") -> "Measurement":
        exp = _rational_exponent(n)
        if exp.denominator == 1:
            return self.pow(exp.numerator)
        return self.root(exp.denominator).pow(exp.numerator)

    def pow(self, n: int) -> "Measurement":
        n = _as_int_exponent(n)
        return _make(_int_power(self._value, n), self.dim ** n)

    def root(self, n: int) -> "Measurement":
        n = _as_int_exponent(n)
        dim = self.dim.root(n)
        return _make(_real_root(self._value, n), dim)

    def sqrt(self) -> "Measurement":
        if self._value < 0.0:
            raise DomainError(f"Cannot take the square root of a negative measurement ({self!r})")
        return self.root(2)

    def cbrt(self) -> "Measurement":
        return self.root(3)

    def square(self) -> "Measurement":
        return self.pow(2)

    def cube(self) -> "Measurement":
        return self.pow(3)

    def inv(self) -> "Measurement":
        return 1.0 / self

    # --- Exponentials and logarithms (dimensionless → dimensionless) ---
    def exp(self) -> "Measurement":
        self._require_dimensionless("exp")
        return _make(math.exp(self._value), DIM_0)

    def exp10(self) -> "Measurement":
        self._require_dimensionless("exp10")
        return _make(10.0 ** self._value, DIM_0)

    def log(self) -> "Measurement":
        self._require_dimensionless("log")
        if self._value <= 0.0:
            raise DomainError(f"log() is undefined for non-positive values ({self._value!r})")
        return _make(math.log(self._value), DIM_0)

    def log10(self) -> "Measurement":
        self._require_dimensionless("log10")
        if self._value <= 0.0:
            raise DomainError(f"log10() is undefined for non-positive values ({self._value!r})")
        return _make(math.log10(self._value), DIM_0)

    # --- Trigonometric and hyperbolic (angle → dimensionless) ---
    def sin(self) -> "Measurement":
        self._require_angle("sin")
        return _make(math.sin(self._value), DIM_0)

    def cos(self) -> "Measurement":
        self._require_angle("cos")
        return _make(math.cos(self._value), DIM_0)

    def tan(self) -> "Measurement":
        self._require_angle("tan")
        return _make(math.tan(self._value), DIM_0)

    def sinh(self) -> "Measurement":
        self._require_angle("sinh")
        return _make(math.sinh(self._value), DIM_0)

    def cosh(self) -> "Measurement":
        self._require_angle("cosh")
        return _make(math.cosh(self._value), DIM_0)

    def tanh(self) -> "Measurement":
        self._require_angle("tanh")
        return _make(math.tanh(self._value), DIM_0)

    # --- Inverse functions (dimensionless → angle) ---
    def asin(self) -> "Measurement":
        self._require_dimensionless("asin")
        _check_unit_interval(self._value, "asin")
        return _make(math.asin(self._value), ANGLE)

    def acos(self) -> "Measurement":
        self._require_dimensionless("acos")
        _check_unit_interval(self._value, "acos")
        return _make(math.acos(self._value), ANGLE)

    def atan(self) -> "Measurement":
        self._require_dimensionless("atan")
        return _make(math.atan(self._value), ANGLE)

    def asinh(self) -> "Measurement":
        self._require_dimensionless("asinh")
        return _make(math.asinh(self._value), ANGLE)

    def acosh(self) -> "Measurement":
        self._require_dimensionless("acosh")
        if self._value < 1.0:
            raise DomainError(f"acosh() is undefined below 1 ({self._value!r})")
        return _make(math.acosh(self._value), ANGLE)

    def atanh(self) -> "Measurement":
        self._require_dimensionless("atanh")
        if abs(self._value) >= 1.0:
            raise DomainError(f"atanh() is undefined outside (-1, 1) ({self._value!r})")
        return _make(math.atanh(self._value), ANGLE)

    # --- Text ---
    def to_string(self, unit: "Unit | str | None" = None) -> str:
        """Render the measurement, optionally expressed in ``unit``."""
        from metrion.io.text import format_measurement
        return format_measurement(self, unit)

    def __repr__(self) -> str:
        from metrion.io.text import format_measurement
        return format_measurement(self)

    def __format__(self, spec: str) -> str:
        """
        Custom string formatting for Measurement objects.

        An empty format spec renders like ``str()``; any other is applied to
        the canonical value, followed by the dimension symbol.

        Examples
        --------
        >>> m = 1.5 * u.m
        >>> f"{m}"
        '1.5 m'
        >>> f"{m:.3f}"
        '1.500 m'
        """
        if not spec:
            return repr(self)
        text = format(self._value, spec)
        symbol = self.dim.symbol
        return f"{text} {symbol}" if symbol else text


def _check_unit_interval(value: float, fname: str) -> None:
    if not -1.0 <= value <= 1.0:
        raise DomainError(f"{fname}() is undefined outside [-1, 1] ({value!r})")


__all__ = ["Measurement", "Number"]
