import pytest

from metrion import u
from metrion.core.dimensions import FORCE, LENGTH
from metrion.errors import InvalidDimensionError
from metrion.geometry.quantities import (
    force,
    linear_acceleration,
    linear_velocity,
    position,
    validate_components,
)
from metrion.geometry.vector import Vector


def test_position_accepts_lengths():
    p = position(1 * u.m, 2 * u.km, 3 * u.cm)
    assert isinstance(p, Vector)
    assert p.dimension == LENGTH
    assert p[1].value == pytest.approx(2000.0)


def test_factories_accept_an_existing_vector():
    v = Vector.from_values([1, 2, 3], "m/s")
    assert linear_velocity(v) is v


@pytest.mark.parametrize("factory,unit", [
    (position, "m"),
    (linear_velocity, "m/s"),
    (linear_acceleration, "m/s^2"),
    (force, "N"),
])
def test_factories_accept_matching_dimension(factory, unit):
    v = factory(Vector.from_values([1, 2, 3], unit))
    assert len(v) == 3


@pytest.mark.parametrize("factory,unit", [
    (position, "s"),
    (linear_velocity, "m"),
    (linear_acceleration, "m/s"),
    (force, "kg"),
])
def test_factories_reject_other_dimensions(factory, unit):
    with pytest.raises(InvalidDimensionError):
        factory(Vector.from_values([1, 2, 3], unit))


def test_mixed_components_rejected_with_index():
    with pytest.raises(InvalidDimensionError, match="component 1"):
        position(1 * u.m, 1 * u.s)


def test_validate_components_generic():
    v = Vector.from_values([1, 2], "N")
    assert validate_components(v, FORCE) is v
    with pytest.raises(ValueError):
        validate_components(v, LENGTH, "position")


def test_dimensionless_numbers_are_not_positions():
    with pytest.raises(InvalidDimensionError):
        position(1, 2, 3)
