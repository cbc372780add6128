"""
metrion.core.utils
==================

Numeric and formatting helpers shared by the measurement types.

This module provides:
- the rounding-tolerant float comparison used by every measurement
  equality operator, and
- helpers for rendering dimension exponents in a readable scientific
  format (e.g. 'kg·m/s²').
"""

from __future__ import annotations

import math
import struct
from typing import List, Sequence

# Number of low mantissa bits discarded before bitwise comparison.
ROUNDING_BITS = 12
# Relative band accepted when the rounded bit patterns differ.
RELATIVE_TOLERANCE = 5e-13

_ROUND_HALF = 1 << (ROUNDING_BITS - 1)
_ROUND_MASK = ~((1 << ROUNDING_BITS) - 1) & 0xFFFFFFFFFFFFFFFF

_SUPERSCRIPTS = str.maketrans("0123456789-", "⁰¹²³⁴⁵⁶⁷⁸⁹⁻")


def _sup(n: int) -> str:
    return "" if n == 1 else str(n).translate(_SUPERSCRIPTS)


# ---------- Tolerant float equality ----------
def _rounded_bits(x: float) -> int:
    """Bit pattern of ``x`` with the lowest ``ROUNDING_BITS`` mantissa bits rounded off."""
    bits = struct.unpack("<Q", struct.pack("<d", x))[0]
    sign = bits & 0x8000000000000000
    magnitude = bits & 0x7FFFFFFFFFFFFFFF
    # a carry out of the mantissa bumps the exponent, which is still the nearest value
    magnitude = (magnitude + _ROUND_HALF) & _ROUND_MASK
    return sign | magnitude


def tolerant_equal(a: float, b: float) -> bool:
    """
    Compare two canonical values, absorbing floating-point noise.

    The values are equal when their bit patterns agree after rounding off the
    lowest ``ROUNDING_BITS`` mantissa bits, or when ``b`` lies between
    ``a·(1 - RELATIVE_TOLERANCE)`` and ``a·(1 + RELATIVE_TOLERANCE)``.
    """
    if a == b:
        return True
    if not (math.isfinite(a) and math.isfinite(b)):
        return False
    if _rounded_bits(a) == _rounded_bits(b):
        return True
    lo = a * (1.0 - RELATIVE_TOLERANCE)
    hi = a * (1.0 + RELATIVE_TOLERANCE)
    if lo > hi:
        lo, hi = hi, lo
    return lo <= b <= hi


def order_of_magnitude(x: float) -> int:
    """Decimal exponent of the leading significant digit of ``x`` (``floor(log10|x|)``)."""
    if x == 0.0 or not math.isfinite(x):
        return 0
    return math.floor(math.log10(abs(x)))


# ---------- Dimension → pretty unit string ----------
def format_dim(dim: Sequence[int]) -> str:
    """
    Turn a dimension tuple (L,M,T,I,Θ,N,J) into 'kg·m/s²' style.
    Conventional order: M, L, T, I, Θ, N, J.
    """
    # indices: L=0 M=1 T=2 I=3 Θ=4 N=5 J=6
    labels: List[str] = ["m", "kg", "s", "A", "K", "mol", "cd"]
    order: List[int] = [1, 0, 2, 3, 4, 5, 6]

    num: List[str] = []
    den: List[str] = []
    for i in order:
        e = dim[i]
        if e > 0:
            num.append(labels[i] + _sup(e))
        elif e < 0:
            den.append(labels[i] + _sup(-e))

    numerator = "·".join(num) if num else "1"
    denominator = "·".join(den)
    return f"{numerator}/{denominator}" if denominator else numerator


__all__ = [
    "ROUNDING_BITS",
    "RELATIVE_TOLERANCE",
    "tolerant_equal",
    "order_of_magnitude",
    "format_dim",
]
