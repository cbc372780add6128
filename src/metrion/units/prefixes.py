"""
metrion.units.prefixes
======================

The SI decimal prefix table.

`PREFIXES` drives prefix synthesis in the unit registry ("km", "µs");
`PREFIX_CODES` maps the bracketed codes accepted by the text parser
(``[k]m``, ``[u]s``) to their factors. ASCII ``u`` is accepted for micro.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True, slots=True)
class Prefix:
    symbol: str
    name: str
    factor: float


PREFIXES: Tuple[Prefix, ...] = (
    Prefix("Y", "yotta", 1e24),
    Prefix("Z", "zetta", 1e21),
    Prefix("E", "exa", 1e18),
    Prefix("P", "peta", 1e15),
    Prefix("T", "tera", 1e12),
    Prefix("G", "giga", 1e9),
    Prefix("M", "mega", 1e6),
    Prefix("k", "kilo", 1e3),
    Prefix("h", "hecto", 1e2),
    Prefix("da", "deca", 1e1),
    Prefix("d", "deci", 1e-1),
    Prefix("c", "centi", 1e-2),
    Prefix("m", "milli", 1e-3),
    Prefix("µ", "micro", 1e-6),
    Prefix("n", "nano", 1e-9),
    Prefix("p", "pico", 1e-12),
    Prefix("f", "femto", 1e-15),
    Prefix("a", "atto", 1e-18),
    Prefix("z", "zepto", 1e-21),
    Prefix("y", "yocto", 1e-24),
)

PREFIX_CODES: Dict[str, float] = {p.symbol: p.factor for p in PREFIXES}
PREFIX_CODES["u"] = 1e-6
# Greek mu (U+03BC) next to the micro sign (U+00B5)
PREFIX_CODES["μ"] = 1e-6


def prefix_factor(code: str) -> float:
    """Factor for a prefix code; ``KeyError`` if the code is unknown."""
    return PREFIX_CODES[code]


__all__ = ["Prefix", "PREFIXES", "PREFIX_CODES", "prefix_factor"]
