import pytest

from metrion.core.dimensions import DIM_0, FORCE, LENGTH, MASS, TIME, VELOCITY
from metrion.units.parser import _UnitExprParser, _compile_unit_expr, extract_unit_expr, is_unit_expr
from metrion.units.registry import DEFAULT_REGISTRY


# --------------------------
# Parsing-only unit tests
# --------------------------

def test_parse_simple_name():
    plan = _UnitExprParser("m").parse()
    assert plan[0] == "name" and plan[1] == "m"


def test_parse_parentheses_and_pow():
    plan = _UnitExprParser("(m/s)**2").parse()
    assert plan[0] == "pow" and plan[2] == 2


@pytest.mark.parametrize("text,exp", [
    ("m**+3", 3),
    ("s**-2", -2),
    ("s^-2", -2),
    ("s^(-2)", -2),
    ("s²", 2),
    ("s⁻¹", -1),
])
def test_parse_exponent_spellings(text, exp):
    plan = _UnitExprParser(text).parse()
    assert plan[0] == "pow" and plan[2] == exp


def test_parse_middle_dot_and_one():
    plan = _UnitExprParser("kg·m").parse()
    assert plan[0] == "mul"
    plan = _UnitExprParser("1/s").parse()
    assert plan[0] == "div" and plan[1][0] == "one"


def test_parse_ignores_whitespace():
    assert _UnitExprParser("  kg *  m  /  s ** 2 ").parse()


@pytest.mark.parametrize("bad", ["(m", "m**", "m/", "m s", "*m", "m**x"])
def test_parse_errors(bad):
    with pytest.raises(ValueError):
        _UnitExprParser(bad).parse()


def test_prefilter_rejects_disallowed_characters():
    with pytest.raises(ValueError):
        _compile_unit_expr("m,s")


def test_compiled_plans_are_cached():
    _compile_unit_expr.cache_clear()
    _compile_unit_expr("kg*m/s**2")
    _compile_unit_expr("kg*m/s**2")
    assert _compile_unit_expr.cache_info().hits >= 1


# --------------------------
# Evaluation against a registry
# --------------------------

@pytest.mark.parametrize("expr,dim,mult", [
    ("kg*m/s**2", FORCE, 1.0),
    ("kg·m/s²", FORCE, 1.0),
    ("km/h", VELOCITY, 1000 / 3600),
    ("g/cm^3", MASS / LENGTH ** 3, 1000.0),
    ("(m/s)**2", VELOCITY ** 2, 1.0),
    ("1/ms", TIME.invert(), 1000.0),
    ("m/m", DIM_0, 1.0),
])
def test_extract(expr, dim, mult):
    unit = extract_unit_expr(expr, DEFAULT_REGISTRY)
    assert unit.dimension == dim
    assert unit.multiplier == pytest.approx(mult)


def test_unknown_name_raises():
    with pytest.raises(ValueError, match="Unknown unit 'furlong'"):
        extract_unit_expr("furlong/s", DEFAULT_REGISTRY)


@pytest.mark.parametrize("expr,expected", [
    ("m", False), ("km", False), ("m/s", True), ("s²", True), ("1", True), ("kg·m", True),
])
def test_is_unit_expr(expr, expected):
    assert is_unit_expr(expr) is expected
