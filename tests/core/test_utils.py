import math

import pytest

import metrion.core.utils as utils
from metrion.core.dimensions import DIM_0, FORCE, LENGTH, TIME, VELOCITY


# -------------------------------
# _sup
# -------------------------------

@pytest.mark.parametrize("n, expected", [
    (1, ""),
    (2, "²"),
    (3, "³"),
    (10, "¹⁰"),
    (-1, "⁻¹"),
])
def test_sup(n, expected):
    assert utils._sup(n) == expected


# -------------------------------
# tolerant_equal
# -------------------------------

def test_identical_values_are_equal():
    assert utils.tolerant_equal(1.5, 1.5)
    assert utils.tolerant_equal(0.0, -0.0)
    assert utils.tolerant_equal(math.inf, math.inf)


def test_last_bit_noise_is_absorbed():
    assert utils.tolerant_equal(0.1 + 0.2, 0.3)
    assert utils.tolerant_equal(1.0, math.nextafter(1.0, 2.0))
    assert utils.tolerant_equal(-1.0, math.nextafter(-1.0, -2.0))


def test_relative_band():
    assert utils.tolerant_equal(1e6, 1e6 * (1 + 1e-13))
    assert not utils.tolerant_equal(1e6, 1e6 * (1 + 1e-9))


def test_distinct_values_are_not_equal():
    assert not utils.tolerant_equal(1.0, 1.0001)
    assert not utils.tolerant_equal(1.0, -1.0)
    assert not utils.tolerant_equal(0.0, 1e-300)


def test_nan_is_never_equal():
    assert not utils.tolerant_equal(math.nan, math.nan)
    assert not utils.tolerant_equal(math.nan, 1.0)


# -------------------------------
# order_of_magnitude
# -------------------------------

@pytest.mark.parametrize("x, expected", [
    (1.0, 0),
    (9.99, 0),
    (12345.0, 4),
    (-250.0, 2),
    (0.05, -2),
    (0.0, 0),
])
def test_order_of_magnitude(x, expected):
    assert utils.order_of_magnitude(x) == expected


# -------------------------------
# format_dim
# -------------------------------

@pytest.mark.parametrize("dim, expected", [
    (DIM_0, "1"),
    (LENGTH, "m"),
    (VELOCITY, "m/s"),
    (FORCE, "kg·m/s²"),
    (TIME.invert(), "1/s"),
    (LENGTH ** 3, "m³"),
])
def test_format_dim(dim, expected):
    assert utils.format_dim(dim) == expected
