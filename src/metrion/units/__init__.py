from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from metrion.core.unit import Unit
    from metrion.units.registry import UnitNamespace, UnitsRegistry

# Named unit constants, resolved from the default registry on first access.
_NAMED_UNITS = {
    "unitless": "1",
    "metre": "m",
    "meter": "m",
    "kilogram": "kg",
    "gram": "g",
    "second": "s",
    "ampere": "A",
    "kelvin": "K",
    "mole": "mol",
    "candela": "cd",
    "radian": "rad",
    "degree": "deg",
    "steradian": "sr",
    "hertz": "Hz",
    "newton": "N",
    "pascal": "Pa",
    "joule": "J",
    "watt": "W",
    "coulomb": "C",
    "volt": "V",
    "farad": "F",
    "ohm": "Ω",
    "siemens": "S",
    "weber": "Wb",
    "tesla": "T",
    "henry": "H",
    "litre": "L",
    "minute": "min",
    "hour": "h",
    "day": "d",
    "year": "yr",
}


# Lazy access helpers -------------------------------------------------------

def _get_default_registry() -> "UnitsRegistry":
    # Import here to avoid import-time side-effects / circular imports.
    from metrion.units.registry import DEFAULT_REGISTRY  # local import
    return DEFAULT_REGISTRY


def __getattr__(name: str) -> Any:
    """
    Lazy attribute access. Accessing 'u' will construct a namespace from the
    package's default registry on first use; named constants such as
    'metre' or 'newton' resolve to the registry's units.
    """
    if name == "u":
        return _get_default_registry().as_namespace()
    if name in _NAMED_UNITS:
        return _get_default_registry().get(_NAMED_UNITS[name])
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    # Improve discoverability in REPL / autocomplete.
    return sorted(list(globals().keys()) + ["u"] + list(_NAMED_UNITS))
