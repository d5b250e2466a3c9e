"""
Classes and functions that provide general utility.
"""
import math

from numbers import Real
from typing import TypeVar

__all__ = [
    "clamp",
    "parse_finite",
    "parse_positive",
    "parse_int",
]

T = TypeVar("T", int, float, Real)


def clamp(value: T, low_bound: T | None = None, high_bound: T | None = None) -> T:
    """
    Clamp a value to a range.

    If a bound is set to `None`, then the value will not be clamped on that side.

    :param value: The value to clamp.
    :param low_bound: The lower value to clamp to. If `None`, the low side is unbounded.
    :param high_bound: The higher value to clamp to. If `None`, the high side is unbounded.
    :returns: The clamped value.
    """
    if low_bound is not None and high_bound is not None and low_bound > high_bound:
        raise ValueError("low bound cannot be larger than high bound")
    if low_bound is not None and value < low_bound:
        return low_bound
    if high_bound is not None and value > high_bound:
        return high_bound
    return value


def parse_finite(s: str) -> float:
    """
    Parse a string describing a finite real number.

    :raises ValueError: if the string is not a number, or is infinite or NaN.
    """
    try:
        value = float(s)
    except ValueError as e:
        raise ValueError(f"invalid number (got {s!r})") from e
    if not math.isfinite(value):
        raise ValueError(f"number must be finite (got {s!r})")
    return value


def parse_positive(s: str) -> float:
    """Parse a string describing a finite, strictly positive real number."""
    value = parse_finite(s)
    if value <= 0:
        raise ValueError(f"number must be positive (got {s!r})")
    return value


def parse_int(s: str) -> int:
    """Parse a string describing an integer. Surrounding whitespace is allowed."""
    try:
        return int(s.strip())
    except ValueError as e:
        raise ValueError(f"invalid integer (got {s!r})") from e
