"""
metrion.geometry.quantities
===========================

Named vector quantities. Each factory builds a plain `Vector` after checking
that every component carries the quantity's dimension.

>>> position(1 * u.m, 2 * u.m, 0 * u.m)
Vector(1 m, 2 m, 0 m)
>>> position(1 * u.s)
Traceback (most recent call last):
    ...
metrion.errors.InvalidDimensionError: position component 0 has dimension 's', expected 'm'
"""

from __future__ import annotations

from typing import Iterable, Union

from metrion.core.dimensions import ACCELERATION, FORCE, LENGTH, VELOCITY, Dim
from metrion.core.measurement import Measurement, _label
from metrion.errors import InvalidDimensionError
from metrion.geometry.vector import Vector

Components = Union[Measurement, Vector, Iterable[Measurement]]


def validate_components(vector: Vector, expected: Dim, name: str = "vector") -> Vector:
    """Return ``vector`` unchanged if every component has dimension ``expected``."""
    for i, c in enumerate(vector):
        if c.dim != expected:
            raise InvalidDimensionError(
                f"{name} component {i} has dimension '{_label(c.dim)}', "
                f"expected '{_label(expected)}'"
            )
    return vector


def _build(components: tuple, expected: Dim, name: str) -> Vector:
    if len(components) == 1 and isinstance(components[0], Vector):
        vector = components[0]
    else:
        vector = Vector(*components)
    return validate_components(vector, expected, name)


def position(*components: Components) -> Vector:
    return _build(components, LENGTH, "position")


def linear_velocity(*components: Components) -> Vector:
    return _build(components, VELOCITY, "linear_velocity")


def linear_acceleration(*components: Components) -> Vector:
    return _build(components, ACCELERATION, "linear_acceleration")


def force(*components: Components) -> Vector:
    return _build(components, FORCE, "force")


__all__ = [
    "validate_components",
    "position",
    "linear_velocity",
    "linear_acceleration",
    "force",
]
