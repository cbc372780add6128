"""
metrion.core.unit
=================

Defines the `Unit` class: a dimension plus a positive decimal scale factor
("multiplier") to the canonical, unscaled unit of that dimension, and a
display symbol.

Units compose like their dimensions: multiplying two units multiplies the
multipliers and adds the exponents, raising a unit to an integer power raises
the multiplier to the same power, and so on. Multiplying a number by a unit
builds a `Measurement`.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import isclose, isfinite
from typing import TYPE_CHECKING

from metrion.core.dimensions import DIM_0, Dim, Dimension
from metrion.errors import DimensionMismatchError, InvalidUnitError

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from metrion.core.measurement import Measurement

# Multipliers closer than this are treated as the same scale.
UNIT_REL_TOL = 1e-12


def _is_compound(symbol: str) -> bool:
    return any(ch in symbol for ch in ("·", "/", "^", "*"))


def _wrap(symbol: str) -> str:
    return f"({symbol})" if _is_compound(symbol) else symbol


def _mul_symbol(a: str, b: str) -> str:
    if not a:
        return b
    if not b:
        return a
    if a == b:
        return f"{_wrap(a)}^2"
    return f"{a}·{b}"


def _div_symbol(a: str, b: str) -> str:
    if not b:
        return a
    if a == b:
        return ""
    return f"{a or '1'}/{_wrap(b)}"


@dataclass(frozen=True, slots=True)
class Unit:
    """
    A physical unit.

    Attributes
    ----------
    symbol : str
        Symbol or name (e.g., "m", "s", "kg", "cm").
    multiplier : float
        Factor converting 1 of this unit to the canonical unit of its
        dimension. Examples: m=1.0, cm=0.01, µs=1e-6, km=1e3.
    dimension : Dimension
        Exponent vector (L,M,T,I,Θ,N,J). E.g., metre -> (1,0,0,0,0,0,0).
    """
    symbol: str
    multiplier: float
    dimension: Dim = DIM_0

    def __post_init__(self) -> None:
        if not isinstance(self.dimension, Dimension):
            object.__setattr__(self, "dimension", Dimension(self.dimension))
        if not (isinstance(self.multiplier, (int, float)) and isfinite(self.multiplier) and self.multiplier > 0):
            raise InvalidUnitError(
                f"Unit '{self.symbol}': multiplier must be a positive, finite number, "
                f"got {self.multiplier!r}"
            )
        object.__setattr__(self, "multiplier", float(self.multiplier))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Unit):
            return NotImplemented
        # dimension must match exactly; multiplier can have tiny FP noise
        return (
            self.dimension == other.dimension
            and isclose(self.multiplier, other.multiplier, rel_tol=UNIT_REL_TOL, abs_tol=0.0)
        )

    def __hash__(self) -> int:
        return hash(self.dimension)

    def __repr__(self) -> str:
        return f"Unit({self.symbol!r}, {self.multiplier!r}, {self.dimension!r})"

    def __str__(self) -> str:
        return self.symbol

    @property
    def is_prefixed(self) -> bool:
        return self.multiplier != 1.0

    # --- Composition ---
    def __mul__(self, other: "Unit") -> "Unit":
        if not isinstance(other, Unit):
            return NotImplemented
        return compose_mul(self, other)

    def __truediv__(self, other: "Unit") -> "Unit":
        if not isinstance(other, Unit):
            return NotImplemented
        return compose_div(self, other)

    def __rtruediv__(self, n: int | float) -> "Unit":
        if n != 1:
            raise TypeError(
                f"Invalid operation: cannot divide {n} by a Unit ({self.symbol}). "
                "Only 1/unit (reciprocal) is supported."
            )
        return self.inv()

    def __pow__(self, n: int) -> "Unit":
        new_dim = self.dimension ** n
        if n == 0:
            return Unit("", 1.0, new_dim)
        if n == 1:
            return self
        symbol = f"{_wrap(self.symbol)}^{n}" if self.symbol else ""
        return Unit(symbol, self.multiplier ** n, new_dim)

    def root(self, n: int) -> "Unit":
        new_dim = self.dimension.root(n)
        if n == 1:
            return self
        symbol = f"{_wrap(self.symbol)}^(1/{n})" if self.symbol else ""
        return Unit(symbol, self.multiplier ** (1.0 / n), new_dim)

    def sqrt(self) -> "Unit":
        return self.root(2)

    def cbrt(self) -> "Unit":
        return self.root(3)

    def inv(self) -> "Unit":
        symbol = _div_symbol("1", self.symbol) if self.symbol else ""
        return Unit(symbol, 1.0 / self.multiplier, self.dimension.invert())

    def prefixed(self, prefix_symbol: str, factor: float) -> "Unit":
        """Return this unit scaled by an SI prefix factor (e.g. 'k', 1e3)."""
        return Unit(f"{prefix_symbol}{self.symbol}", self.multiplier * factor, self.dimension)

    def conversion_factor(self, other: "Unit") -> float:
        return conversion_factor(self, other)

    # --- Building measurements ---
    def __rmul__(self, value: float) -> "Measurement":
        from metrion.core.measurement import Measurement

        if isinstance(value, Measurement):
            return value * Measurement(1.0, self)
        return Measurement(value, self)


def compose_mul(u1: Unit, u2: Unit) -> Unit:
    """Product unit: dimensions multiply, multipliers multiply."""
    return Unit(
        _mul_symbol(u1.symbol, u2.symbol),
        u1.multiplier * u2.multiplier,
        u1.dimension * u2.dimension,
    )


def compose_div(u1: Unit, u2: Unit) -> Unit:
    """Quotient unit: dimensions divide, multipliers divide."""
    return Unit(
        _div_symbol(u1.symbol, u2.symbol),
        u1.multiplier / u2.multiplier,
        u1.dimension / u2.dimension,
    )


def conversion_factor(u1: Unit, u2: Unit) -> float:
    """
    Factor converting a value expressed in ``u1`` into ``u2``.

    Raises
    ------
    DimensionMismatchError
        If the two units do not share a dimension.
    """
    if u1.dimension != u2.dimension:
        raise DimensionMismatchError(
            f"Cannot convert '{u1.symbol}' {u1.dimension!r} to "
            f"'{u2.symbol}' {u2.dimension!r}: dimensions differ",
            u1,
            u2,
        )
    return u1.multiplier / u2.multiplier


UNITLESS = Unit("", 1.0, DIM_0)

__all__ = ["Unit", "UNITLESS", "compose_mul", "compose_div", "conversion_factor", "UNIT_REL_TOL"]
