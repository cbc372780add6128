import math

import pytest

from metrion.core.dimensions import ANGLE, DIM_0, LENGTH, MASS, TIME, VELOCITY
from metrion.core.measurement import Measurement
from metrion.core.unit import UNITLESS, Unit, compose_div, compose_mul, conversion_factor
from metrion.errors import DimensionMismatchError, InvalidRootError, InvalidUnitError

m = Unit("m", 1.0, LENGTH)
cm = Unit("cm", 0.01, LENGTH)
km = Unit("km", 1000.0, LENGTH)
s = Unit("s", 1.0, TIME)
h = Unit("h", 3600.0, TIME)


@pytest.mark.parametrize("mult", [0, -1.0, math.inf, math.nan])
def test_invalid_multiplier(mult):
    with pytest.raises(InvalidUnitError):
        Unit("bad", mult, LENGTH)


def test_dimension_is_coerced_from_tuple():
    u = Unit("m", 1, (1, 0, 0, 0, 0, 0, 0))
    assert u.dimension == LENGTH
    assert isinstance(u.multiplier, float)


def test_equality_tolerates_float_noise():
    assert Unit("a", 0.1 * 3, LENGTH) == Unit("b", 0.3, LENGTH)
    assert Unit("m", 1.0, LENGTH) != Unit("s", 1.0, TIME)
    assert hash(Unit("a", 0.1 * 3, LENGTH)) == hash(Unit("b", 0.3, LENGTH))


def test_compose_mul_and_div():
    speed = km / h
    assert speed.dimension == VELOCITY
    assert speed.multiplier == pytest.approx(1000.0 / 3600.0)
    assert speed.symbol == "km/h"
    assert compose_div(km, h) == speed

    area = compose_mul(m, m)
    assert area.dimension == LENGTH ** 2
    assert area.symbol == "m^2"
    assert (m * s).symbol == "m·s"


def test_pow_root_and_inverse():
    cm3 = cm ** 3
    assert cm3.multiplier == pytest.approx(1e-6)
    assert cm3.dimension == LENGTH ** 3
    assert cm3.root(3) == cm
    assert (cm ** 2).sqrt() == cm
    assert (cm ** 0) == UNITLESS
    assert cm ** 1 is cm

    hz = 1 / s
    assert hz.dimension == TIME.invert()
    assert hz.symbol == "1/s"
    assert s.inv() == hz


def test_rtruediv_only_supports_one():
    with pytest.raises(TypeError):
        2 / s


def test_root_rejects_indivisible_dimension():
    with pytest.raises(InvalidRootError):
        m.sqrt()


def test_prefixed():
    mm = m.prefixed("m", 1e-3)
    assert mm.symbol == "mm"
    assert mm.multiplier == pytest.approx(1e-3)
    assert mm.is_prefixed and not m.is_prefixed


def test_conversion_factor():
    assert conversion_factor(km, m) == pytest.approx(1000.0)
    assert km.conversion_factor(cm) == pytest.approx(1e5)
    assert conversion_factor(km, cm) * conversion_factor(cm, km) == pytest.approx(1.0)


def test_conversion_factor_dimension_mismatch_raises():
    with pytest.raises(DimensionMismatchError) as exc:
        conversion_factor(m, s)
    assert "'m'" in str(exc.value) and "'s'" in str(exc.value)
    # also a TypeError for callers catching builtins
    with pytest.raises(TypeError):
        conversion_factor(Unit("kg", 1.0, MASS), s)


def test_value_times_unit_builds_measurement():
    q = 5 * km
    assert isinstance(q, Measurement)
    assert q.value == pytest.approx(5000.0)
    assert q.dim == LENGTH


def test_radian_unit_carries_angle_tag():
    rad = Unit("rad", 1.0, ANGLE)
    assert rad == Unit("", 1.0, DIM_0)
    assert (2 * rad).dim.is_angle
