# tests/conftest.py
import pytest
from metrion.units.registry import DEFAULT_REGISTRY as _ureg
import metrion.units.registry as regmod


@pytest.fixture(scope="session")
def ureg():
    return _ureg


@pytest.fixture()
def reg():
    """Fresh, unfrozen registry bootstrapped with the shipped units."""
    return regmod._bootstrap_default_registry()
