"""Display formatting for wind and site values."""

from __future__ import annotations

import math
from typing import Optional

from sitewind.schema_resolver import round_half_up

MISSING = "–"


def _finite(value: Optional[float]) -> bool:
    return value is not None and isinstance(value, (int, float)) and math.isfinite(value)


def format_wind_speed(value: Optional[float]) -> str:
    if not _finite(value):
        return MISSING
    rounded = round_half_up(value, 1)
    if rounded.is_integer():
        return f"{rounded:.0f} m/s"
    return f"{rounded:.1f} m/s"


def format_pressure(value: Optional[float]) -> str:
    if not _finite(value):
        return MISSING
    return f"{value:.3f} kPa"


def format_roughness(value: Optional[float]) -> str:
    if not _finite(value):
        return MISSING
    return f"{value:.3f} m" if value < 0.01 else f"{value:.2f} m"


def format_factor(value: Optional[float]) -> str:
    if not _finite(value):
        return MISSING
    return f"{value:.2f}"


def format_altitude(value: Optional[float]) -> Optional[str]:
    """``"85.2 m AOD"``; ``None`` when there is no usable value."""
    if not _finite(value):
        return None
    rounded = round_half_up(value, 1)
    if rounded.is_integer():
        return f"{rounded:.0f} m AOD"
    return f"{rounded:.1f} m AOD"


__all__ = [
    "format_altitude",
    "format_factor",
    "format_pressure",
    "format_roughness",
    "format_wind_speed",
]
