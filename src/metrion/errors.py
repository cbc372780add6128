"""
metrion.errors
==============

Exception types raised by the measurement engine.

Every error derives from `MetrionError` and from the builtin exception a
caller would naturally catch (`TypeError` for dimension mismatches,
`ValueError` for bad values, `ZeroDivisionError` for division by zero), so
code that already handles the builtin types keeps working.
"""

from __future__ import annotations


class MetrionError(Exception):
    """Base class for all metrion errors."""


class NegativeUncertaintyError(MetrionError, ValueError):
    """An uncertainty smaller than zero was supplied."""

    def __init__(self, uncertainty: float) -> None:
        self.uncertainty = uncertainty
        super().__init__(
            f"Uncertainty must be non-negative, got {uncertainty!r}"
        )


class DimensionMismatchError(MetrionError, TypeError):
    """Two operands (or an operand and a unit) have incompatible dimensions."""

    def __init__(self, message: str, left: object = None, right: object = None) -> None:
        self.left = left
        self.right = right
        super().__init__(message)


class InvalidUnitError(MetrionError, ValueError):
    """A unit was built with a non-positive or non-finite multiplier."""


class InvalidRootError(MetrionError, ValueError):
    """A dimension exponent is not evenly divisible by the root degree."""


class DivideByZeroError(MetrionError, ZeroDivisionError):
    """Division by a zero-valued measurement (or a zero uncertainty/norm/determinant)."""


class DomainError(MetrionError, ValueError):
    """A function was evaluated outside of its real domain."""


class InvalidDimensionError(MetrionError, ValueError):
    """A component does not carry the dimension a named quantity requires."""


class UnitMismatchError(MetrionError, ValueError):
    """A parsed unit symbol does not match the expected dimension."""


__all__ = [
    "MetrionError",
    "NegativeUncertaintyError",
    "DimensionMismatchError",
    "InvalidUnitError",
    "InvalidRootError",
    "DivideByZeroError",
    "DomainError",
    "InvalidDimensionError",
    "UnitMismatchError",
]
