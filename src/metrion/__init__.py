"""
metrion: dimension-checked physical measurements with uncertainty propagation.

metrion provides measurements tagged with SI dimensions, units with decimal
multipliers, values carrying absolute uncertainties, and fixed-size vectors
and matrices built from them. This module exposes a minimal, stable public
API. Heavy subsystems (e.g. the units registry) are imported lazily to avoid
import-time side effects and circular imports.
"""

from importlib import metadata as _metadata
from typing import Any

__license__ = "MIT"

# Try to read the installed package version first; fall back to pyproject.toml for local dev.
try:
    __version__ = _metadata.version("metrion")
except _metadata.PackageNotFoundError:
    import tomllib
    with open("pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

_LAZY = {
    "u": ("metrion.units", "u"),
    "Dimension": ("metrion.core.dimensions", "Dimension"),
    "Unit": ("metrion.core.unit", "Unit"),
    "Measurement": ("metrion.core.measurement", "Measurement"),
    "UncertainMeasurement": ("metrion.core.umeasurement", "UncertainMeasurement"),
    "Vector": ("metrion.geometry.vector", "Vector"),
    "Matrix": ("metrion.geometry.matrix", "Matrix"),
}


def __getattr__(name: str) -> Any:
    if name in _LAZY:
        from importlib import import_module
        module, attr = _LAZY[name]
        return getattr(import_module(module), attr)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


# Public names exposed by the package. Keep this minimal and stable.
__all__ = ["__version__", "__license__", *_LAZY]
