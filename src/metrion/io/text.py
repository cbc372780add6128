"""
metrion.io.text
===============

Text rendering and parsing of measurements.

Rendering
---------
A `Measurement` renders as ``"<value> <symbol>"`` and an
`UncertainMeasurement` as ``"<value> ± <uncertainty> <symbol>"``; the symbol
is the canonical symbol of the dimension (``"kg·m/s²"``, ``"rad"``), or the
symbol of the unit passed to ``to_string``. Uncertain values switch to
scientific notation when the value or the uncertainty is large (≥ 1e4) or
small (≤ 1e-4); the value then carries as many mantissa decimals as there
are orders of magnitude between it and the uncertainty. In fixed notation the
value is rounded at the uncertainty's leading digit.

Parsing
-------
``"<value> [<uncertainty>] [<unit>]"``, whitespace separated. The unit token
may start with a bracketed SI prefix code (``[k]m``, ``[u]s``) whose factor
scales value and uncertainty; the remaining symbol must be the canonical
symbol of the expected dimension.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from metrion.core.dimensions import DIM_0, Dim
from metrion.core.measurement import Measurement, _resolve_unit
from metrion.core.umeasurement import UncertainMeasurement
from metrion.core.unit import Unit
from metrion.core.utils import order_of_magnitude
from metrion.errors import UnitMismatchError
from metrion.units.prefixes import prefix_factor

PLUS_MINUS = "±"

_PREFIXED_TOKEN = re.compile(r"^\[([^\]]*)\](.*)$")
_SEPARATORS = (PLUS_MINUS, "+/-", "+-")

# Thresholds for switching uncertain values to scientific notation
SCI_UPPER = 1e4
SCI_LOWER = 1e-4


# ---------- Rendering ----------
def _value_and_symbol(m: Measurement, unit: "Unit | str | None") -> Tuple[float, str]:
    if unit is None:
        return m.value, m.dim.symbol
    unit = _resolve_unit(unit)
    return m.value_as(unit), unit.symbol


def _join(text: str, symbol: str) -> str:
    return f"{text} {symbol}" if symbol else text


def format_number(value: float) -> str:
    return format(value, ".15g")


def format_measurement(m: Measurement, unit: "Unit | str | None" = None) -> str:
    """Render ``m`` as ``"<value> <symbol>"`` (bare value when dimensionless)."""
    value, symbol = _value_and_symbol(m, unit)
    return _join(format_number(value), symbol)


def _use_scientific(value: float, uncertainty: float) -> bool:
    v = abs(value)
    return (
        v >= SCI_UPPER
        or 0.0 < v <= SCI_LOWER
        or uncertainty >= SCI_UPPER
        or uncertainty <= SCI_LOWER
    )


def format_value_uncertainty(value: float, uncertainty: float) -> str:
    """``"<value> ± <uncertainty>"`` with the value rounded at the uncertainty's leading digit."""
    if _use_scientific(value, uncertainty):
        precision = max(0, order_of_magnitude(value) - order_of_magnitude(uncertainty))
        return f"{value:.{precision}e} {PLUS_MINUS} {uncertainty:.0e}"
    decimals = max(0, -order_of_magnitude(uncertainty))
    return f"{value:.{decimals}f} {PLUS_MINUS} {uncertainty:.{decimals}f}"


def format_uncertain_measurement(um: UncertainMeasurement, unit: "Unit | str | None" = None) -> str:
    """Render ``um``; the uncertainty segment is dropped when it is exactly zero."""
    value, symbol = _value_and_symbol(um, unit)
    if um.uncertainty == 0.0:
        return _join(format_number(value), symbol)
    uncertainty = um.uncertainty_as(unit) if unit is not None else um.uncertainty
    return _join(format_value_uncertainty(value, uncertainty), symbol)


# ---------- Parsing ----------
def _parse_float(token: str, what: str) -> float:
    try:
        return float(token)
    except ValueError:
        raise ValueError(f"Malformed {what} {token!r}") from None


def _is_float(token: str) -> bool:
    try:
        float(token)
    except ValueError:
        return False
    return True


def _split_unit_token(token: str) -> Tuple[float, str]:
    """(prefix factor, bare symbol) of a unit token such as ``[k]m``."""
    match = _PREFIXED_TOKEN.match(token)
    if match is None:
        return 1.0, token
    code, symbol = match.groups()
    try:
        return prefix_factor(code), symbol
    except KeyError:
        raise UnitMismatchError(f"Unknown prefix code [{code}] in unit {token!r}") from None


def _tokenize(text: str) -> Tuple[float, Optional[float], Optional[str]]:
    tokens: List[str] = [t for t in text.split() if t not in _SEPARATORS]
    if not tokens or len(tokens) > 3:
        raise ValueError(f"Expected '<value> [<uncertainty>] [<unit>]', got {text!r}")
    value = _parse_float(tokens[0], "value")
    uncertainty: Optional[float] = None
    unit_token: Optional[str] = None
    rest = tokens[1:]
    if rest and _is_float(rest[0]):
        uncertainty = float(rest.pop(0))
    if rest:
        unit_token = rest.pop(0)
    if rest:
        raise ValueError(f"Unexpected trailing input {' '.join(rest)!r} in {text!r}")
    return value, uncertainty, unit_token


def _resolve_parsed_unit(unit_token: Optional[str], dimension: Dim) -> Unit:
    expected = dimension.symbol
    if unit_token is None:
        if not dimension.is_dimensionless:
            raise UnitMismatchError(f"Unit mismatch: expected {expected}, got no unit")
        return Unit("", 1.0, dimension)
    factor, symbol = _split_unit_token(unit_token)
    if symbol != expected:
        raise UnitMismatchError(f"Unit mismatch: expected {expected or '1'}, got {symbol or '1'}")
    return Unit(unit_token, factor, dimension)


def parse_measurement(text: str, dimension: Dim = DIM_0) -> Measurement:
    """
    Parse ``"<value> [<unit>]"`` into a `Measurement` of ``dimension``.

    >>> parse_measurement("1.5 [k]m", LENGTH).value
    1500.0
    """
    value, uncertainty, unit_token = _tokenize(text)
    if uncertainty is not None:
        raise ValueError(
            f"Unexpected uncertainty in {text!r}; use parse_uncertain_measurement()"
        )
    return Measurement(value, _resolve_parsed_unit(unit_token, dimension))


def parse_uncertain_measurement(text: str, dimension: Dim = DIM_0) -> UncertainMeasurement:
    """Parse ``"<value> [<uncertainty>] [<unit>]"``; a missing uncertainty means 0."""
    value, uncertainty, unit_token = _tokenize(text)
    unit = _resolve_parsed_unit(unit_token, dimension)
    return UncertainMeasurement(value, uncertainty or 0.0, unit)


__all__ = [
    "PLUS_MINUS",
    "format_number",
    "format_measurement",
    "format_value_uncertainty",
    "format_uncertain_measurement",
    "parse_measurement",
    "parse_uncertain_measurement",
]
