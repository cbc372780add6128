"""
metrion.geometry.vector
=======================

Defines `Vector`, an immutable fixed-length sequence of measurements.

Arithmetic is elementwise and delegates to the component type, so a vector
of `UncertainMeasurement` propagates uncertainty and a vector of mixed
dimensions raises the same `DimensionMismatchError` its components would.
Reductions (`dot`, `norm2`, `norm`) always run left to right over the
component index, which keeps their floating-point results reproducible.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Sequence, Tuple, Union

from metrion.core.dimensions import ANGLE, Dim
from metrion.core.measurement import Measurement, _is_number, _label, _make, _resolve_unit
from metrion.core.unit import Unit
from metrion.errors import DimensionMismatchError, DivideByZeroError

Scalar = Union[Measurement, Unit, int, float]


def _as_measurement(x: object) -> Measurement:
    if isinstance(x, Measurement):
        return x
    if _is_number(x):
        return Measurement(x)
    raise TypeError(f"Vector components must be Measurements or numbers, got {type(x).__name__}")


def _is_scalar(x: object) -> bool:
    return isinstance(x, (Measurement, Unit)) or _is_number(x)


def _accumulate(terms: Sequence[Measurement]) -> Measurement:
    total = terms[0]
    for term in terms[1:]:
        total = total + term
    return total


class Vector:
    """
    A fixed-length vector of measurements.

    Built from components (``Vector(1 * u.m, 2 * u.m)``) or from any iterable
    of them (``Vector(components)``); plain numbers become dimensionless
    measurements. The length is fixed at construction and must be at least 1.
    """
    __slots__ = ("_components",)

    def __init__(self, *components: Union[Scalar, Iterable[Scalar]]):
        if len(components) == 1 and not _is_scalar(components[0]):
            components = tuple(components[0])  # type: ignore[arg-type]
        comps = tuple(_as_measurement(c) for c in components)
        if not comps:
            raise ValueError("A Vector needs at least one component")
        self._components: Tuple[Measurement, ...] = comps

    # --- Construction helpers ---
    @classmethod
    def from_values(cls, values: Iterable[float], unit: "Unit | str | None" = None) -> "Vector":
        unit = _resolve_unit(unit)
        return cls(Measurement(v, unit) for v in values)

    @classmethod
    def zeros(cls, n: int, unit: "Unit | str | None" = None) -> "Vector":
        return cls.from_values([0.0] * n, unit)

    @classmethod
    def basis(cls, n: int, i: int, unit: "Unit | str | None" = None) -> "Vector":
        """Unit vector along axis ``i`` of an ``n``-dimensional space."""
        if not 0 <= i < n:
            raise IndexError(f"Axis {i} out of range for a {n}-component vector")
        return cls.from_values([1.0 if k == i else 0.0 for k in range(n)], unit)

    # --- Sequence protocol ---
    def __len__(self) -> int:
        return len(self._components)

    def __iter__(self) -> Iterator[Measurement]:
        return iter(self._components)

    def __getitem__(self, index: int) -> Measurement:
        return self._components[index]

    @property
    def components(self) -> Tuple[Measurement, ...]:
        return self._components

    @property
    def dimension(self) -> Dim:
        """Dimension of the first component."""
        return self._components[0].dim

    @property
    def is_homogeneous(self) -> bool:
        first = self._components[0].dim
        return all(c.dim == first for c in self._components)

    def values_as(self, unit: "Unit | str | None" = None) -> List[float]:
        """Component values in ``unit`` (canonical values when ``unit`` is None)."""
        if unit is None:
            return [c.value for c in self._components]
        return [c.value_as(unit) for c in self._components]

    # --- Comparison ---
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        if len(self) != len(other):
            return False
        return all(a == b for a, b in zip(self._components, other._components))

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None  # type: ignore[assignment]

    # --- Elementwise arithmetic ---
    def _pairs(self, other: "Vector") -> Iterator[Tuple[Measurement, Measurement]]:
        if len(self) != len(other):
            raise ValueError(f"Vector size mismatch: {len(self)} and {len(other)}")
        return zip(self._components, other._components)

    def _elementwise(self, other: object, op) -> "Vector":
        if isinstance(other, Vector):
            return Vector(op(a, b) for a, b in self._pairs(other))
        if _is_scalar(other):
            return Vector(op(a, other) for a in self._components)
        return NotImplemented

    def _reflected(self, other: object, op) -> "Vector":
        if _is_scalar(other) and not isinstance(other, Unit):
            return Vector(op(other, a) for a in self._components)
        return NotImplemented

    def __add__(self, other: object) -> "Vector":
        return self._elementwise(other, lambda a, b: a + b)

    def __radd__(self, other: object) -> "Vector":
        return self._reflected(other, lambda a, b: a + b)

    def __sub__(self, other: object) -> "Vector":
        return self._elementwise(other, lambda a, b: a - b)

    def __rsub__(self, other: object) -> "Vector":
        return self._reflected(other, lambda a, b: a - b)

    def __mul__(self, other: object) -> "Vector":
        return self._elementwise(other, lambda a, b: a * b)

    def __rmul__(self, other: object) -> "Vector":
        return self._reflected(other, lambda a, b: a * b)

    def __truediv__(self, other: object) -> "Vector":
        return self._elementwise(other, lambda a, b: a / b)

    def __rtruediv__(self, other: object) -> "Vector":
        return self._reflected(other, lambda a, b: a / b)

    def __neg__(self) -> "Vector":
        return Vector(-c for c in self._components)

    def __pos__(self) -> "Vector":
        return self

    # --- Products and norms ---
    def dot(self, other: "Vector") -> Measurement:
        """Sum of the elementwise products, accumulated left to right."""
        return _accumulate([a * b for a, b in self._pairs(other)])

    def __matmul__(self, other: object) -> Measurement:
        if not isinstance(other, Vector):
            return NotImplemented
        return self.dot(other)

    def cross(self, other: "Vector") -> "Vector":
        """
        Cyclic cross product: ``r[i] = a[i+1]·b[i+2] − a[i+2]·b[i+1]`` (indices mod N).

        Defined for any length; it is the familiar cross product for N = 3.
        """
        if len(self) != len(other):
            raise ValueError(f"Vector size mismatch: {len(self)} and {len(other)}")
        n = len(self)
        a, b = self._components, other._components
        return Vector(
            a[(i + 1) % n] * b[(i + 2) % n] - a[(i + 2) % n] * b[(i + 1) % n]
            for i in range(n)
        )

    def _require_homogeneous(self, fname: str) -> None:
        if not self.is_homogeneous:
            dims = ", ".join(f"'{_label(c.dim)}'" for c in self._components)
            raise DimensionMismatchError(
                f"{fname}() requires components of one dimension, got {dims}"
            )

    def norm2(self) -> Measurement:
        """Squared Euclidean norm; each component is squared with the power rule."""
        self._require_homogeneous("norm2")
        return _accumulate([c.square() for c in self._components])

    def norm(self) -> Measurement:
        self._require_homogeneous("norm")
        return self.norm2().sqrt()

    def versor(self) -> "Vector":
        """Unit vector along ``self``."""
        n = self.norm()
        if n.value == 0.0:
            raise DivideByZeroError("Cannot normalise a zero-length vector")
        return self / n

    def projection(self, onto: "Vector") -> "Vector":
        """Component of ``self`` along ``onto``."""
        denom = onto.dot(onto)
        if denom.value == 0.0:
            raise DivideByZeroError("Cannot project onto a zero-length vector")
        return onto * (self.dot(onto) / denom)

    # --- Spherical angles ---
    def phi(self) -> Measurement:
        """Azimuth ``atan(y/x)``; needs at least two components."""
        if len(self) < 2:
            raise ValueError(f"phi() needs at least 2 components, got {len(self)}")
        x, y = self._components[0], self._components[1]
        return (y / x).atan()

    def theta(self) -> Measurement:
        """Polar angle ``acos(z/|v|)``, zero when z is zero; needs at least three components."""
        if len(self) < 3:
            raise ValueError(f"theta() needs at least 3 components, got {len(self)}")
        z = self._components[2]
        if z.value == 0.0:
            return _make(0.0, ANGLE)
        return (z / self.norm()).acos()

    # --- Persistence and text ---
    def save(self, path, unit: "Unit | str | None" = None) -> None:
        from metrion.io.files import save_vector
        save_vector(self, path, unit)

    def __repr__(self) -> str:
        return f"Vector({', '.join(repr(c) for c in self._components)})"

    def __str__(self) -> str:
        return f"({', '.join(repr(c) for c in self._components)})"


__all__ = ["Vector"]
