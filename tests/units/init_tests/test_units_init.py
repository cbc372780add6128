import pytest

import metrion.units.registry as regmod
from metrion.core.dimensions import FORCE
from metrion.units.registry import _bootstrap_default_registry


@pytest.fixture()
def fresh_registry():
    return _bootstrap_default_registry()


def test__get_default_registry_returns_DEFAULT(monkeypatch, fresh_registry):
    monkeypatch.setattr(regmod, "DEFAULT_REGISTRY", fresh_registry, raising=True)

    import metrion.units as units
    get_default = getattr(units, "_get_default_registry")

    assert get_default() is fresh_registry


def test_lazy_u_binds_to_default_registry(monkeypatch, fresh_registry):
    # accessing `metrion.units.u` resolves against whatever DEFAULT_REGISTRY is now
    monkeypatch.setattr(regmod, "DEFAULT_REGISTRY", fresh_registry, raising=True)

    from metrion.units import u
    assert u._reg is fresh_registry
    assert u.m is fresh_registry.get("m")


@pytest.mark.parametrize("name, symbol", [
    ("metre", "m"),
    ("meter", "m"),
    ("ohm", "Ω"),
    ("unitless", "1"),
    ("year", "yr"),
])
def test_named_units_resolve_through_registry(name, symbol):
    import metrion.units as units
    assert getattr(units, name) == regmod.DEFAULT_REGISTRY.get(symbol)


def test_newton_is_a_force():
    from metrion.units import newton
    assert newton.dimension == FORCE
    assert newton.multiplier == 1.0


def test_unknown_module_attribute_raises_attributeerror():
    import metrion.units as units
    with pytest.raises(AttributeError):
        getattr(units, "definitely_not_a_public_attr")


def test_dir_includes_u_and_named_units():
    import metrion.units as units
    names = dir(units)
    assert "u" in names
    assert "newton" in names
    assert names == sorted(names)
