"""Celsius conversions. Fahrenheit and Kelvin are always derived, never sourced."""

from __future__ import annotations

KELVIN_OFFSET = 273.15


def to_fahrenheit(temp_c: float) -> float:
    return temp_c * 1.8 + 32


def to_kelvin(temp_c: float) -> float:
    return temp_c + KELVIN_OFFSET


def convert(temp_c: float) -> tuple[float, float]:
    """Return ``(temp_f, temp_k)`` for a Celsius reading."""
    return to_fahrenheit(temp_c), to_kelvin(temp_c)
