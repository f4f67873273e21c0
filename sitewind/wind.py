"""UK National Annex wind factors for temporary works.

Implements the probability, seasonal, altitude and direction factors
used to turn a mapped basic wind speed into a site basic wind speed
and pressure for a given installation month and exposure duration::

    vb = vb,map * c_alt * c_dir * c_season * c_prob
    qb = 0.613 * vb^2 / 1000          (kPa)

References
----------
BS EN 1991-1-4:2005+A1:2010 and the UK National Annex
(NA to BS EN 1991-1-4), Table NA.1, Equations NA.2a/NA.2b and the
seasonal factor rows for temporary structures.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from sitewind.schemas import WindFactors


class ConfigurationError(ValueError):
    """Raised when the caller supplies unsupported or missing project metadata."""


# ── Probability factor by return period (years) ─────────────────────
C_PROB_BY_RETURN_PERIOD: dict[int, float] = {
    2: 0.82,
    5: 0.88,
    10: 0.93,
    50: 1.0,
}

_RETURN_PERIOD_BY_DURATION: dict[str, int] = {
    "UNDER_3_DAYS": 2,
    "UNDER_1_MONTH": 5,
    "UNDER_2_MONTHS": 5,
    "UNDER_4_MONTHS": 5,
    "UNDER_A_YEAR": 10,
    "OVER_A_YEAR": 50,
}

DURATION_LABELS: dict[str, str] = {
    "UNDER_3_DAYS": "Under 3 days",
    "UNDER_1_MONTH": "Under 1 month",
    "UNDER_2_MONTHS": "Under 2 months",
    "UNDER_4_MONTHS": "Under 4 months",
    "UNDER_A_YEAR": "Under a year",
    "OVER_A_YEAR": "Over a year",
}

MONTH_LABELS: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_SEASON_KEY_BY_DURATION: dict[str, str] = {
    "UNDER_1_MONTH": "m1",
    "UNDER_2_MONTHS": "m2",
    "UNDER_4_MONTHS": "m4",
}

# ── Seasonal factor by installation month ───────────────────────────
#   month: {m1: 1-month, m2: 2-month, m4: 4-month exposure}
C_SEASON: dict[int, dict[str, float]] = {
    1: {"m1": 0.98, "m2": 0.98, "m4": 0.98},
    2: {"m1": 0.83, "m2": 0.86, "m4": 0.87},
    3: {"m1": 0.82, "m2": 0.83, "m4": 0.83},
    4: {"m1": 0.75, "m2": 0.75, "m4": 0.76},
    5: {"m1": 0.69, "m2": 0.71, "m4": 0.73},
    6: {"m1": 0.66, "m2": 0.67, "m4": 0.83},
    7: {"m1": 0.62, "m2": 0.71, "m4": 0.86},
    8: {"m1": 0.71, "m2": 0.82, "m4": 0.90},
    9: {"m1": 0.82, "m2": 0.85, "m4": 0.96},
    10: {"m1": 0.82, "m2": 0.89, "m4": 1.0},
    11: {"m1": 0.88, "m2": 0.95, "m4": 1.0},
    12: {"m1": 0.94, "m2": 1.0, "m4": 1.0},
}

# Direction factor; c_dir = 1.0 when the wind direction is not considered
C_DIR = 1.0

# Air density term of qb = 0.5 * rho * vb^2 with rho = 1.226 kg/m^3
AIR_DENSITY_COEFFICIENT = 0.613

ALTITUDE_COEFFICIENT = 0.001
REFERENCE_HEIGHT_LIMIT_M = 10.0


@dataclass(frozen=True)
class SeasonalFactors:
    """Factors fixed by month and duration alone."""

    return_period_years: int
    c_prob: float
    c_season: float


def map_duration_to_return_period(duration_category: str) -> int:
    """Return period in years for an exposure duration category.

    Raises
    ------
    ConfigurationError
        If *duration_category* is not a supported category.
    """
    try:
        return _RETURN_PERIOD_BY_DURATION[duration_category]
    except (KeyError, TypeError):
        raise ConfigurationError(f"Unsupported duration category: {duration_category}") from None


def duration_to_season_key(duration_category: str) -> Optional[str]:
    """``m1``/``m2``/``m4`` for the sub-year seasonal durations, else ``None``."""
    return _SEASON_KEY_BY_DURATION.get(duration_category)


def derive_wind_factors(
    installation_month: Optional[int],
    duration_category: Optional[str],
) -> SeasonalFactors:
    """Return period, c_prob and c_season for the project metadata.

    Both arguments are required; the seasonal reduction only applies to
    the 1, 2 and 4 month durations, every other duration uses 1.0.
    """
    if not installation_month or not duration_category:
        raise ConfigurationError("Installation month and duration category are required")
    if installation_month not in C_SEASON:
        raise ConfigurationError(f"Installation month must be 1-12, got {installation_month}")

    return_period = map_duration_to_return_period(duration_category)
    season_key = duration_to_season_key(duration_category)
    c_season = C_SEASON[installation_month][season_key] if season_key else 1.0

    return SeasonalFactors(
        return_period_years=return_period,
        c_prob=C_PROB_BY_RETURN_PERIOD[return_period],
        c_season=c_season,
    )


def compute_altitude_factor(
    altitude_m: Optional[float],
    reference_height_m: Optional[float] = None,
) -> float:
    """Altitude factor c_alt.

    Per UK NA Eq. NA.2a / NA.2b::

        c_alt = 1 + 0.001 * A                    z <= 10 m
        c_alt = 1 + 0.001 * A * (10 / z) ^ 0.2   z >  10 m

    Parameters
    ----------
    altitude_m : float or None
        Site altitude A in m above mean sea level. ``None`` or negative
        values are taken as 0.
    reference_height_m : float or None
        Reference height z in metres. ``None`` or non-positive values
        are taken as 10 m.
    """
    altitude = altitude_m if altitude_m is not None and math.isfinite(altitude_m) else 0.0
    altitude = max(altitude, 0.0)
    z = reference_height_m
    if z is None or not math.isfinite(z) or z <= 0:
        z = REFERENCE_HEIGHT_LIMIT_M

    if z <= REFERENCE_HEIGHT_LIMIT_M:
        return 1.0 + ALTITUDE_COEFFICIENT * altitude
    return 1.0 + ALTITUDE_COEFFICIENT * altitude * (REFERENCE_HEIGHT_LIMIT_M / z) ** 0.2


def basic_wind_pressure(speed_ms: float) -> float:
    """qb in kPa for a wind speed in m/s."""
    return AIR_DENSITY_COEFFICIENT * speed_ms * speed_ms / 1000.0


def compute_basic_wind(
    vb_map_ms: Optional[float],
    c_alt: float,
    c_dir: float,
    c_season: float,
    c_prob: float,
) -> Optional[tuple[float, float]]:
    """Return ``(vb_ms, qb_kpa)``, or ``None`` without a usable map speed."""
    if vb_map_ms is None or not math.isfinite(vb_map_ms) or vb_map_ms <= 0:
        return None
    vb_ms = vb_map_ms * c_alt * c_dir * c_season * c_prob
    return vb_ms, basic_wind_pressure(vb_ms)


def compute_wind_factors(
    installation_month: Optional[int],
    duration_category: Optional[str],
    altitude_m: Optional[float] = None,
    reference_height_m: Optional[float] = None,
    vb_map_ms: Optional[float] = None,
) -> WindFactors:
    """All factors for a site, plus vb/qb when a map speed is supplied."""
    seasonal = derive_wind_factors(installation_month, duration_category)
    c_alt = compute_altitude_factor(altitude_m, reference_height_m)
    basic = compute_basic_wind(vb_map_ms, c_alt, C_DIR, seasonal.c_season, seasonal.c_prob)

    return WindFactors(
        return_period_years=seasonal.return_period_years,
        c_prob=seasonal.c_prob,
        c_season=seasonal.c_season,
        c_alt=c_alt,
        c_dir=C_DIR,
        vb_ms=basic[0] if basic else None,
        qb_kpa=basic[1] if basic else None,
    )


__all__ = [
    "AIR_DENSITY_COEFFICIENT",
    "C_DIR",
    "C_PROB_BY_RETURN_PERIOD",
    "C_SEASON",
    "DURATION_LABELS",
    "MONTH_LABELS",
    "ConfigurationError",
    "SeasonalFactors",
    "basic_wind_pressure",
    "compute_altitude_factor",
    "compute_basic_wind",
    "compute_wind_factors",
    "derive_wind_factors",
    "duration_to_season_key",
    "map_duration_to_return_period",
]
