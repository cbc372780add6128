# metrion.core.dimensions

from __future__ import annotations
from typing import Iterable, Union, Tuple, TypeAlias, Any
from metrion.core.utils import format_dim
from metrion.errors import InvalidRootError

# --- Public typing -----------------------------------------------------------
Dim: TypeAlias = "Dimension"
DimTuple = Tuple[int, int, int, int, int, int, int]
DimLike = Union["Dimension", DimTuple, Iterable[int]]

_NAMES = ("L", "M", "T", "I", "Θ", "N", "J")


def _as_exponent(x: Any) -> int:
    if isinstance(x, bool):
        raise TypeError("Dimension exponents must be integers, got bool")
    if isinstance(x, int):
        return x
    if isinstance(x, float) and x.is_integer():
        return int(x)
    raise TypeError(f"Dimension exponents must be integers, got {x!r}")


# --- Core object -------------------------------------------------------------

class Dimension(tuple):
    """
    Immutable 7-length vector of integer exponents for SI base dimensions,
    ordered (L, M, T, I, Θ, N, J).

    Tuple subclass => hashable, comparable componentwise, usable as dict keys.

    A dimension also counts the radians it carries (``radians``). The count
    follows the algebra like an eighth exponent but takes no part in equality
    or hashing, so ``rad/s`` equals ``1/s`` while ``(rad/s)·s`` is still an
    angle.
    """

    # no __slots__: tuple subtypes cannot declare non-empty slots, and the
    # radian count lives in the instance dict

    def __new__(cls, data: DimLike = (0, 0, 0, 0, 0, 0, 0), radians: int | None = None) -> "Dimension":
        if isinstance(data, Dimension):
            obj = tuple.__new__(cls, data)
            obj._radians = data._radians if radians is None else _as_exponent(radians)
            return obj

        t = tuple(_as_exponent(x) for x in data)
        if len(t) != 7:
            raise ValueError("Dimension must have length 7 (L, M, T, I, Θ, N, J).")
        obj = tuple.__new__(cls, t)
        obj._radians = 0 if radians is None else _as_exponent(radians)
        return obj

    def __getnewargs__(self) -> tuple:
        return (tuple(self), self._radians)

    # --- Algebra (operator overloads) ---
    def __mul__(self, other: DimLike) -> "Dimension": # type: ignore[override]
        o = _coerce(other)
        return Dimension(
            (x + y for x, y in zip(self, o, strict=True)),
            self._radians + o._radians,
        )

    def __truediv__(self, other: DimLike) -> "Dimension":
        o = _coerce(other)
        return Dimension(
            (x - y for x, y in zip(self, o, strict=True)),
            self._radians - o._radians,
        )

    def __pow__(self, n: int, modulo: Any | None = None) -> "Dimension":
        if modulo is not None:
            raise TypeError("Modulo exponentiation is not supported for Dimension.")
        n = _as_exponent(n)
        if n == 1:
            return self
        return Dimension((e * n for e in self), self._radians * n)

    def __rtruediv__(self, other: DimLike) -> "Dimension":
        """Handles (tuple / Dimension) by calculating (other / self)."""
        return Dimension(other) / self

    def __rmul__(self, other: Any) -> "Dimension":
        """Prevent (int * Dimension) from falling back to tuple repetition."""
        raise TypeError(f"Cannot multiply {type(other).__name__} by a Dimension")

    def __add__(self, other: Any) -> "Dimension":
        """Block tuple concatenation (e.g., LENGTH + MASS)."""
        raise TypeError("Dimensions cannot be added; multiply them to combine exponents")

    def __radd__(self, other: Any) -> "Dimension":
        """Block tuple concatenation (e.g., (1,2) + MASS)."""
        raise TypeError("Dimensions cannot be added; multiply them to combine exponents")

    def invert(self) -> "Dimension":
        return Dimension((-e for e in self), -self._radians)

    def root(self, n: int) -> "Dimension":
        """Divide every exponent by ``n``; each must be evenly divisible."""
        n = _as_exponent(n)
        if n == 0:
            raise InvalidRootError("Cannot take the 0-th root of a dimension")
        if n == 1:
            return self
        if any(e % n for e in self):
            raise InvalidRootError(
                f"Cannot take root {n} of dimension {self!r}: "
                "exponents are not evenly divisible"
            )
        # a radian count that does not divide evenly is dropped
        radians = 0 if self._radians % n else self._radians // n
        return Dimension((e // n for e in self), radians)

    # --- Helpers ---
    @property
    def radians(self) -> int:
        """Power of the radian carried by this dimension."""
        return self._radians

    @property
    def is_dimensionless(self) -> bool:
        return all(x == 0 for x in self)

    @property
    def is_angle(self) -> bool:
        """Dimensionless and carrying exactly one radian."""
        return self._radians == 1 and self.is_dimensionless

    @property
    def symbol(self) -> str:
        """Canonical unit symbol, e.g. 'kg·m/s²'; 'rad' for angles, empty when dimensionless."""
        if self.is_angle:
            return "rad"
        if self.is_dimensionless:
            return ""
        return format_dim(self)

    def as_tuple(self) -> DimTuple:
        return tuple(self)

    def __repr__(self) -> str:
        parts = ""
        for n, v in zip(_NAMES, self, strict=True):
            if v != 0:
                parts += f"[{n}^{v}]"
        if self._radians == 1:
            parts += "[rad]"
        elif self._radians:
            parts += f"[rad^{self._radians}]"
        return parts or "[1]"


def _coerce(other: DimLike) -> Dimension:
    return other if isinstance(other, Dimension) else Dimension(other)


# --- Function forms ------------------------------------------------------------

def dim_mul(a: DimLike, b: DimLike) -> Dimension:
    return _coerce(a) * b

def dim_div(a: DimLike, b: DimLike) -> Dimension:
    return _coerce(a) / b

def dim_pow(a: DimLike, n: int) -> Dimension:
    return _coerce(a) ** n

def dim_inv(a: DimLike) -> Dimension:
    return _coerce(a).invert()

def dim_root(a: DimLike, n: int) -> Dimension:
    return _coerce(a).root(n)

# --- Public constants ---------------------------------------------------------

DIM_0: Dim       = Dimension((0, 0, 0, 0, 0, 0, 0))
LENGTH: Dim      = Dimension((1, 0, 0, 0, 0, 0, 0))
MASS: Dim        = Dimension((0, 1, 0, 0, 0, 0, 0))
TIME: Dim        = Dimension((0, 0, 1, 0, 0, 0, 0))
CURRENT: Dim     = Dimension((0, 0, 0, 1, 0, 0, 0))
TEMPERATURE: Dim = Dimension((0, 0, 0, 0, 1, 0, 0))
AMOUNT: Dim      = Dimension((0, 0, 0, 0, 0, 1, 0))
LUMINOUS: Dim    = Dimension((0, 0, 0, 0, 0, 0, 1))
ANGLE: Dim       = Dimension((0, 0, 0, 0, 0, 0, 0), radians=1)

# --- Composite dimensions ------------------------------------------------------

AREA         = LENGTH ** 2
VOLUME       = LENGTH ** 3
FREQUENCY    = TIME.invert()                                  # Hz
VELOCITY     = LENGTH / TIME                                  # m/s
ACCELERATION = VELOCITY / TIME                                # m/s²
MOMENTUM     = MASS * VELOCITY                                # kg·m/s
FORCE        = MASS * ACCELERATION                            # N
PRESSURE     = FORCE / AREA                                   # Pa
ENERGY       = FORCE * LENGTH                                 # J
POWER        = ENERGY / TIME                                  # W
CHARGE       = CURRENT * TIME                                 # C
VOLTAGE      = POWER / CURRENT                                # V
CAPACITANCE  = CHARGE / VOLTAGE                               # F
RESISTANCE   = VOLTAGE / CURRENT                              # Ω
CONDUCTANCE  = CURRENT / VOLTAGE                              # S
FLUX         = VOLTAGE * TIME                                 # Wb
FLUX_DENSITY = FLUX / AREA                                    # T
INDUCTANCE   = FLUX / CURRENT                                 # H
ILLUMINANCE  = LUMINOUS / AREA                                # lx
DOSE         = ENERGY / MASS                                  # Gy, Sv
CATALYTIC    = AMOUNT / TIME                                  # kat
ANGULAR_VELOCITY     = ANGLE / TIME                           # rad/s, equal to FREQUENCY
ANGULAR_ACCELERATION = ANGULAR_VELOCITY / TIME                # rad/s²
