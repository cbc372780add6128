# pytest tests for metrion.units.registry
#
# These tests exercise normalization, aliases, SI-prefix synthesis,
# anti-stacking rules, freezing, thread-safety and the namespace helper.
# Most use an isolated registry instance from the `reg` fixture.

import math
import threading

import pytest

from metrion.core.dimensions import (
    AMOUNT,
    ANGLE,
    CURRENT,
    DIM_0,
    FORCE,
    LENGTH,
    LUMINOUS,
    MASS,
    PRESSURE,
    TEMPERATURE,
    TIME,
    VELOCITY,
)
from metrion.core.unit import Unit
from metrion.units.registry import DEFAULT_REGISTRY, UnitNamespace, UnitsRegistry, normalize_symbol


# ---------------------------------------------------------------------------
# Base/derived presence & correctness
# ---------------------------------------------------------------------------

def test_base_units_present(reg):
    for sym, dim in [("m", LENGTH), ("kg", MASS), ("s", TIME), ("A", CURRENT), ("K", TEMPERATURE), ("mol", AMOUNT), ("cd", LUMINOUS)]:
        u = reg.get(sym)
        assert isinstance(u, Unit)
        assert u.symbol == sym
        assert u.multiplier == pytest.approx(1.0)
        assert u.dimension == dim


def test_common_derived_units_present(reg):
    assert reg.get("rad").dimension.is_angle
    assert reg.get("sr").dimension == DIM_0 and not reg.get("sr").dimension.is_angle
    assert reg.get("deg").multiplier == pytest.approx(math.pi / 180)
    assert reg.get("N").dimension == FORCE
    assert reg.get("Pa").dimension == PRESSURE
    assert reg.get("g").multiplier == pytest.approx(1e-3)
    assert reg.get("h").multiplier == pytest.approx(3600.0)


def test_aliases(reg):
    assert reg.get("metre") == reg.get("m")
    assert reg.get("newton") == reg.get("N")
    assert reg.get("ohm").symbol == "Ω"
    assert reg.get("OHM").symbol == "Ω"
    assert reg.get("hours") == reg.get("h")


# ---------------------------------------------------------------------------
# Prefix synthesis
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("sym,mult,dim", [
    ("km", 1e3, LENGTH),
    ("mm", 1e-3, LENGTH),
    ("µs", 1e-6, TIME),
    ("us", 1e-6, TIME),
    ("ns", 1e-9, TIME),
    ("mg", 1e-6, MASS),
    ("kPa", 1e3, PRESSURE),
    ("dam", 10.0, LENGTH),
    ("mrad", 1e-3, ANGLE),
    ("kcd", 1e3, LUMINOUS),
])
def test_prefixed_units(reg, sym, mult, dim):
    u = reg.get(sym)
    assert u.multiplier == pytest.approx(mult)
    assert u.dimension == dim


def test_prefixed_angle_keeps_tag(reg):
    assert reg.get("mrad").dimension.is_angle


def test_synthesis_is_memoised(reg):
    assert reg.get("km") is reg.get("km")


@pytest.mark.parametrize("sym", ["kkm", "mkg", "kmin", "kh", "mdeg", "xyz", "k"])
def test_rejected_symbols(reg, sym):
    with pytest.raises(ValueError):
        reg.get(sym)
    assert sym not in reg


def test_normalize_symbol():
    assert normalize_symbol("  us ") == "µs"
    assert normalize_symbol("μs") == "µs"
    assert normalize_symbol("kOhm") == "kΩ"


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

def test_register_and_conflicts(reg):
    reg.register(Unit("furlong", 201.168, LENGTH))
    assert reg.get("furlong").multiplier == pytest.approx(201.168)
    with pytest.raises(ValueError):
        reg.register(Unit("furlong", 200.0, LENGTH))
    reg.register(Unit("furlong", 200.0, LENGTH), replace=True)
    assert reg.get("furlong").multiplier == pytest.approx(200.0)
    with pytest.raises(ValueError):
        reg.register(Unit("metre", 1.0, LENGTH))  # already an alias


def test_register_alias_validation(reg):
    reg.register_alias("sec", "s")
    assert reg.get("sec") == reg.get("s")
    with pytest.raises(ValueError):
        reg.register_alias("m", "s")
    with pytest.raises(ValueError):
        reg.register_alias("foo", "no-such-unit")


def test_reserved_namespace_names(reg):
    with pytest.raises(ValueError):
        reg.register(Unit("define", 1.0, LENGTH))


def test_default_registry_is_frozen():
    assert DEFAULT_REGISTRY.frozen
    with pytest.raises(RuntimeError):
        DEFAULT_REGISTRY.register(Unit("furlong", 201.168, LENGTH))
    with pytest.raises(RuntimeError):
        DEFAULT_REGISTRY.register_alias("sec", "s")
    # lookups, including prefix synthesis, still work
    assert DEFAULT_REGISTRY.get("Gm").multiplier == pytest.approx(1e9)


def test_copy_is_writable_and_independent():
    mine = DEFAULT_REGISTRY.copy()
    assert not mine.frozen
    mine.register(Unit("furlong", 201.168, LENGTH))
    assert "furlong" in mine
    assert "furlong" not in DEFAULT_REGISTRY


def test_compound_expressions(reg):
    assert reg.get("km/h").dimension == VELOCITY
    assert reg.get("km/h").multiplier == pytest.approx(1000 / 3600)
    assert reg.get("kg*m/s**2").dimension == FORCE
    assert reg.get("kg·m/s²").dimension == FORCE
    assert reg.get("1/s").dimension == TIME.invert()


def test_thread_safe_synthesis():
    reg = UnitsRegistry()
    reg.register(Unit("m", 1.0, LENGTH))
    results = []

    def worker():
        for _ in range(200):
            results.append(reg.get("km"))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len({id(u) for u in results}) == 1


# ---------------------------------------------------------------------------
# Namespace
# ---------------------------------------------------------------------------

def test_namespace_access(reg):
    ns = reg.as_namespace()
    assert isinstance(ns, UnitNamespace)
    assert ns.km.multiplier == pytest.approx(1e3)
    assert ns("m/s").dimension == VELOCITY
    assert "kN" in ns
    with pytest.raises(AttributeError):
        ns.not_a_unit


def test_namespace_define(reg):
    ns = reg.as_namespace()
    inch = ns.define("inch", 2.54, "cm")
    assert inch.multiplier == pytest.approx(0.0254)
    assert ns.inch == inch
    assert "inch" in dir(ns)


def test_module_level_named_units():
    from metrion.units import metre, newton, u

    assert metre == u.m
    assert newton.dimension == FORCE
