"""
metrion.units.registry
======================

A structured, extensible and testable units registry.

- Encapsulates unit lookup state in a `UnitsRegistry` class (thread-safe).
- Data-driven registration of SI base/derived units.
- Normalization that handles ASCII fallbacks and Unicode NFC.
- Lazy, safe synthesis of prefixed units with anti-stacking checks.
- Support for aliases (e.g., "ohm" → "Ω", "metre" → "m").
- Compound expressions ("kg*m/s**2", "kg·m/s²") resolved through the parser.

The shared `DEFAULT_REGISTRY` is populated once at import and then frozen:
lookups (including memoised prefix synthesis) stay available, registration
does not. Use `DEFAULT_REGISTRY.copy()` for a registry you can extend.
"""
from __future__ import annotations

import logging
import math
import re
import threading
from typing import ClassVar, Dict, Iterable, Mapping, Optional, Tuple
import unicodedata

from metrion.core.dimensions import (
    AMOUNT,
    ANGLE,
    CAPACITANCE,
    CATALYTIC,
    CHARGE,
    CONDUCTANCE,
    CURRENT,
    DIM_0,
    DOSE,
    ENERGY,
    FLUX,
    FLUX_DENSITY,
    FORCE,
    FREQUENCY,
    ILLUMINANCE,
    INDUCTANCE,
    LENGTH,
    LUMINOUS,
    MASS,
    POWER,
    PRESSURE,
    RESISTANCE,
    TEMPERATURE,
    TIME,
    VOLTAGE,
    VOLUME,
)
from metrion.core.unit import Unit
from metrion.units.parser import extract_unit_expr, is_unit_expr
from metrion.units.prefixes import PREFIXES

logger = logging.getLogger(__name__)

# Ordered list of prefix symbols by descending length for robust matching
_PREFIX_SYMBOLS_DESC = tuple(sorted((p.symbol for p in PREFIXES), key=len, reverse=True))
_PREFIX_FACTORS: Mapping[str, float] = {p.symbol: p.factor for p in PREFIXES}

# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------
_OHM_RE = re.compile(r"(?i)ohm")


def normalize_symbol(s: str) -> str:
    """Normalize user-provided unit symbols.

    Rules:
    - Unicode normalize to NFC (composed forms like "µ").
    - Greek mu (U+03BC) becomes the micro sign (U+00B5).
    - Replace ASCII leading 'u' micro with 'µ' **only** at start.
    - Map any spelling of 'ohm' to 'Ω'.
    - Strip surrounding whitespace.
    """
    if not s:
        return s

    s = s.strip()
    s = unicodedata.normalize("NFC", s)
    s = s.replace("μ", "µ")

    # Leading 'u' as ASCII micro → 'µ'
    if s.startswith("u"):
        s = "µ" + s[1:]

    s = _OHM_RE.sub("Ω", s)
    return s


# ---------------------------------------------------------------------------
# Units registry
# ---------------------------------------------------------------------------
class UnitsRegistry:
    """Thread-safe registry for `Unit` objects with SI prefix synthesis.

    Atomic symbols (possibly prefixed) are resolved here; compound
    expressions are handed to `metrion.units.parser`, which calls back into
    `get` for every name it finds.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._units: Dict[str, Unit] = {}
        self._aliases: Dict[str, str] = {}
        self._non_prefixable: set[str] = set()
        self._synthesized: set[str] = set()
        self._frozen = False

    def __contains__(self, symbol: str) -> bool:
        return self.has(symbol)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Reject further registrations; lookups keep working."""
        with self._lock:
            self._frozen = True
        logger.debug("Unit registry frozen with %d units", len(self._units))

    def copy(self) -> "UnitsRegistry":
        """An unfrozen registry holding the same units and aliases."""
        with self._lock:
            reg = UnitsRegistry()
            reg._units = {k: v for k, v in self._units.items() if k not in self._synthesized}
            reg._aliases = dict(self._aliases)
            reg._non_prefixable = set(self._non_prefixable)
            return reg

    def _check_writable(self, what: str) -> None:
        if self._frozen:
            raise RuntimeError(
                f"Cannot register {what}: the registry is frozen. "
                "Use copy() to obtain a registry you can extend."
            )

    def set_non_prefixable(self, symbols: Iterable[str]) -> None:
        """Mark unit symbols that must not accept SI prefixes (e.g., 'kg', 'min')."""
        with self._lock:
            self._check_writable("non-prefixable symbols")
            self._non_prefixable = {normalize_symbol(s) for s in symbols}

    def is_non_prefixable(self, symbol: str) -> bool:
        return normalize_symbol(symbol) in self._non_prefixable

    # -------------------------- public API ---------------------------------
    def register(self, unit: Unit, replace: bool = False) -> None:
        """Register (or overwrite if replace is True) a `Unit` under its symbol.

        Use `register_alias` to add additional spellings without duplication.
        """
        # the whole check-and-set runs under the lock
        with self._lock:
            self._check_writable(f"unit '{unit.symbol}'")
            if unit.symbol in UnitNamespace._reserved_names:
                raise ValueError(
                    f"Cannot register unit '{unit.symbol}': "
                    "name conflicts with UnitNamespace attribute/method."
                )
            if not replace:
                if unit.symbol in self._units:
                    raise ValueError(
                        f"Cannot register unit '{unit.symbol}': "
                        "a unit with this name already exists."
                    )
                if unit.symbol in self._aliases:
                    raise ValueError(
                        f"Cannot register unit '{unit.symbol}': "
                        "an alias with this name already exists."
                    )
            self._units[unit.symbol] = unit
            self._synthesized.discard(unit.symbol)

    def register_alias(self, alias: str, canonical: str, replace: bool = False) -> None:
        # normalized form (e.g. 'ohm' -> 'Ω') and the literal NFC spelling
        norm_key = normalize_symbol(alias)
        literal_key = unicodedata.normalize("NFC", alias.strip())

        with self._lock:
            self._check_writable(f"alias '{alias}'")
            reserved = UnitNamespace._reserved_names
            if literal_key in reserved or norm_key in reserved:
                raise ValueError(
                    f"Cannot register alias '{alias}': "
                    "name conflicts with UnitNamespace attribute/method."
                )
            if canonical not in self._units:
                raise ValueError(f"Cannot alias '{alias}' to unknown unit '{canonical}'")
            if not replace:
                for key in {literal_key, norm_key}:
                    # an alias may share the spelling of its own target (e.g. 'Ohm' -> 'Ω')
                    if key in self._units and key != canonical:
                        raise ValueError(
                            f"Cannot register alias '{alias}' (which maps to '{key}'): "
                            f"a unit with the name '{key}' already exists."
                        )
            self._aliases[norm_key] = canonical
            self._aliases[literal_key] = canonical

    def has(self, symbol: str) -> bool:
        try:
            self.get(symbol)
            return True
        except ValueError:
            return False

    def get(self, symbol: str) -> Unit:
        """Lookup a unit by symbol or expression.

        Unknown atomic symbols are synthesised from an SI prefix and a
        registered base unit when possible. Raises `ValueError` if unknown.
        """
        if is_unit_expr(symbol):
            return extract_unit_expr(symbol, self)

        sym = normalize_symbol(symbol)
        with self._lock:
            for key in (unicodedata.normalize("NFC", symbol.strip()), sym):
                target = self._aliases.get(key)
                if target is not None:
                    return self._units[target]

            u = self._units.get(sym)
            if u is not None:
                return u

            synthesized = self._try_synthesize_prefixed(sym)
            if synthesized is not None:
                return synthesized

        raise ValueError(f"Unknown unit symbol: {symbol}")

    def all(self) -> Mapping[str, Unit]:
        with self._lock:
            return dict(self._units)

    def aliases(self) -> Mapping[str, str]:
        with self._lock:
            return dict(self._aliases)

    def as_namespace(self) -> "UnitNamespace":
        return UnitNamespace(self)

    # ------------------------- internals -----------------------------------
    def _split_prefix(self, symbol: str) -> Tuple[Optional[str], str]:
        for p in _PREFIX_SYMBOLS_DESC:
            if symbol.startswith(p) and len(symbol) > len(p):
                return p, symbol[len(p):]
        return None, symbol

    def _try_synthesize_prefixed(self, sym: str) -> Optional[Unit]:
        prefix, base_sym = self._split_prefix(sym)
        if prefix is None:
            return None

        base = self._units.get(base_sym)
        if base is None:
            return None

        # no stacked prefixes: the base must be a registered unit, not a synthesised one
        if base_sym in self._synthesized or base_sym in self._non_prefixable:
            return None

        new_unit = base.prefixed(prefix, _PREFIX_FACTORS[prefix])
        self._units[sym] = new_unit
        self._synthesized.add(sym)
        logger.debug("Synthesised prefixed unit %s (multiplier %g)", sym, new_unit.multiplier)
        return new_unit


class UnitNamespace:
    """Attribute-style access to a registry: ``u.km``, ``u("kg*m/s**2")``."""

    _reserved_names: ClassVar[set[str]] = set()

    def __init__(self, reg: "UnitsRegistry") -> None:
        self._reg = reg

    def __contains__(self, spec: str) -> bool:
        return self._reg.has(spec)

    def define(self, expr: str, scale: "float | int", reference: "Unit | str", replace: bool = False) -> Unit:
        """Register ``expr`` as ``scale`` times ``reference`` and return the new unit."""
        if expr in UnitNamespace._reserved_names:
            raise ValueError(
                f"Cannot define unit '{expr}': "
                "name conflicts with UnitNamespace attribute/method."
            )
        if isinstance(reference, str):
            reference = self._reg.get(reference)
        unit = Unit(expr, float(scale) * reference.multiplier, reference.dimension)
        self._reg.register(unit, replace)
        return unit

    def __call__(self, spec: str) -> Unit:
        return self._reg.get(spec)

    def __getattr__(self, name: str) -> Unit:
        if name.startswith("__"):
            raise AttributeError(name)
        try:
            return self._reg.get(name)
        except ValueError as e:
            # Unknown symbol should look like a missing attribute
            raise AttributeError(name) from e

    def __dir__(self) -> list[str]:
        """List all available unit symbols for autocomplete."""
        base_dir = set(super().__dir__())
        return sorted(base_dir | set(self._reg.all()) | set(self._reg.aliases()))


UnitNamespace._reserved_names = set(dir(UnitNamespace))


# ---------------------------------------------------------------------------
# Bootstrap a default registry with SI units
# ---------------------------------------------------------------------------

_YEAR = 365.2425 * 24.0 * 3600.0


def _bootstrap_default_registry() -> UnitsRegistry:
    reg = UnitsRegistry()

    # Base SI units
    base_units = (
        Unit("m",   1.0, LENGTH),       # length
        Unit("kg",  1.0, MASS),         # mass
        Unit("s",   1.0, TIME),         # time
        Unit("A",   1.0, CURRENT),      # electric current
        Unit("K",   1.0, TEMPERATURE),  # temperature
        Unit("mol", 1.0, AMOUNT),       # amount of substance
        Unit("cd",  1.0, LUMINOUS),     # luminous intensity
    )

    # Angles carry the radian tag; the steradian stays a plain number
    angle_units = (
        Unit("rad", 1.0, ANGLE),
        Unit("deg", math.pi / 180.0, ANGLE),
        Unit("sr",  1.0, DIM_0),
    )

    # Derived (symbol, multiplier, dim)
    derived_units = (
        ("g",   1e-3, MASS),          # gram
        ("L",   1e-3, VOLUME),        # litre
        ("Hz",  1.0,  FREQUENCY),
        ("N",   1.0,  FORCE),
        ("Pa",  1.0,  PRESSURE),
        ("J",   1.0,  ENERGY),
        ("W",   1.0,  POWER),
        ("C",   1.0,  CHARGE),
        ("V",   1.0,  VOLTAGE),
        ("F",   1.0,  CAPACITANCE),
        ("Ω",   1.0,  RESISTANCE),
        ("S",   1.0,  CONDUCTANCE),
        ("Wb",  1.0,  FLUX),
        ("T",   1.0,  FLUX_DENSITY),
        ("H",   1.0,  INDUCTANCE),
        ("lm",  1.0,  LUMINOUS),      # lm = cd·sr, sr is dimensionless
        ("lx",  1.0,  ILLUMINANCE),
        ("Bq",  1.0,  FREQUENCY),
        ("Gy",  1.0,  DOSE),
        ("Sv",  1.0,  DOSE),
        ("kat", 1.0,  CATALYTIC),
    )

    time_units = (
        ("min",        60.0),                        # minute
        ("h",          3600.0),                      # hour
        ("d",          24.0 * 3600.0),               # day
        ("wk",         7.0 * 24.0 * 3600.0),         # week
        ("mo",         _YEAR / 12.0),                # Gregorian mean month
        ("yr",         _YEAR),                       # Gregorian mean year
        ("yr_julian",  365.25 * 24.0 * 3600.0),      # Julian year
    )

    for u in base_units + angle_units:
        reg.register(u)
    for sym, mult, dim in derived_units:
        reg.register(Unit(sym, mult, dim))
    for sym, mult in time_units:
        reg.register(Unit(sym, mult, TIME))

    aliases = {
        "metre": "m", "meter": "m", "metres": "m", "meters": "m",
        "kilogram": "kg", "second": "s", "seconds": "s",
        "ampere": "A", "kelvin": "K", "mole": "mol", "candela": "cd",
        "radian": "rad", "radians": "rad", "degree": "deg", "degrees": "deg",
        "litre": "L", "liter": "L",
        "newton": "N", "joule": "J", "watt": "W", "pascal": "Pa",
        "hertz": "Hz", "coulomb": "C", "volt": "V", "farad": "F",
        "ohm": "Ω", "Ohm": "Ω", "OHM": "Ω",
        "siemens": "S", "weber": "Wb", "tesla": "T", "henry": "H",
        "minute": "min", "minutes": "min",
        "hr": "h", "hour": "h", "hours": "h",
        "day": "d", "days": "d", "week": "wk", "weeks": "wk",
        "month": "mo", "months": "mo", "year": "yr", "years": "yr",
    }
    for alias, canonical in aliases.items():
        reg.register_alias(alias, canonical)

    reg.set_non_prefixable([
        "kg", "deg",
        "min", "h", "d", "wk", "mo", "yr", "yr_julian",
    ])

    logger.debug("Bootstrapped default unit registry with %d units", len(reg.all()))
    return reg


# Public, shared default registry
DEFAULT_REGISTRY: UnitsRegistry = _bootstrap_default_registry()
DEFAULT_REGISTRY.freeze()


__all__ = [
    "UnitsRegistry",
    "UnitNamespace",
    "DEFAULT_REGISTRY",
    "normalize_symbol",
]
