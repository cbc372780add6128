import pytest

from metrion import u
from metrion.core.dimensions import LENGTH
from metrion.core.measurement import Measurement
from metrion.core.unit import Unit


def test_repr_uses_canonical_symbol():
    assert repr(1.5 * u.m) == "1.5 m"
    assert str(2 * u.kg * u.m / u.s ** 2) == "2 kg·m/s²"
    assert str(250 * u.cm) == "2.5 m"


def test_dimensionless_renders_bare_value():
    assert str(Measurement(0.25)) == "0.25"


def test_angle_renders_rad():
    assert str(0.5 * u.rad) == "0.5 rad"


def test_to_string_in_chosen_unit():
    q = 2.5 * u.m
    assert q.to_string("cm") == "250 cm"
    assert q.to_string(Unit("mm", 1e-3, LENGTH)) == "2500 mm"
    assert q.to_string() == "2.5 m"


def test_format_spec_applies_to_value():
    q = 1.5 * u.m
    assert f"{q}" == "1.5 m"
    assert f"{q:.3f}" == "1.500 m"
    assert format(Measurement(2.0), ".1f") == "2.0"


def test_large_and_small_values():
    assert str(1.5e20 * u.m) == "1.5e+20 m"
    assert str(1e-9 * u.s) == "1e-09 s"
