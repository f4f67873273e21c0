"""Column identification for schema-unknown postcode datasets.

Header names in the published datasets are not stable ("Postcode",
"pcds", "Altitude (m AOD)", "Elevation m", "Vb,map m/s" ...). A column
is resolved for a :class:`SemanticField` in three token-matching tiers
against the normalised headers:

1. ``exact``   - header equals a token
2. ``prefix``  - header starts with a token
3. ``partial`` - header contains a token

The token list of each field is scanned in priority order; for each
token the headers are scanned left to right. The first tier with any
match wins.

Anything weaker than an exact match is validated against a sample of
the column's values. When validation fails every column is scored with
the same plausibility predicate and the one with the most plausible
values is taken.

Once a column is fixed, values are converted to SI-ish units
(m/s, kPa) from hints in the *header* text, not the individual cells.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Callable, Literal, Optional

from sitewind.postcode import normalise_postcode
from sitewind.table_parser import RawTable, cell

logger = logging.getLogger(__name__)

MatchStrength = Literal["exact", "prefix", "partial", "fallback", "scored"]

# ── Sampling ────────────────────────────────────────────────────────
SAMPLE_LIMIT = 200
MIN_HIT_RATIO = 0.1

# ── Wind speed / pressure relation (kPa, m/s) ──────────────────────
PRESSURE_COEFFICIENT = 0.0005

_NUMERIC_CHARS = re.compile(r"[^0-9.+\-]+")
_UNIT_STRIP = re.compile(r"[-+0-9.,\s]")
_HEADER_STRIP = re.compile(r"[^a-z0-9]+")


class SemanticField(str, Enum):
    """Fields the resolver knows how to find."""

    POSTCODE = "postcode"
    ALTITUDE = "altitude"
    WIND_SPEED = "wind_speed"
    WIND_PRESSURE = "wind_pressure"


def to_number(value: object) -> Optional[float]:
    """Parse a loosely formatted number, or return ``None``.

    Everything except digits, ``.``, ``+`` and ``-`` is dropped first,
    so ``"85.2 m AOD"`` gives ``85.2``.
    """
    if value is None:
        return None
    cleaned = _NUMERIC_CHARS.sub("", str(value).strip())
    if not cleaned:
        return None
    try:
        number = float(cleaned)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def unit_suffix(value: str) -> str:
    """Return what is left of a cell once digits, signs and separators go."""
    return _UNIT_STRIP.sub("", value).lower()


def normalise_header(header: str) -> str:
    return _HEADER_STRIP.sub("", header.lower())


def _numeric_in_units(
    low: float,
    high: float,
    units: tuple[str, ...],
    *,
    include_low: bool,
) -> Callable[[str], bool]:
    def predicate(value: str) -> bool:
        text = value.strip()
        number = to_number(text)
        if number is None:
            return False
        if number < low or number > high or (not include_low and number == low):
            return False
        suffix = unit_suffix(text)
        if not suffix:
            return True
        return any(unit in suffix for unit in units)

    return predicate


def looks_like_postcode(value: str) -> bool:
    key = normalise_postcode(value)
    return bool(key) and any(c.isalpha() for c in key) and any(c.isdigit() for c in key)


looks_like_altitude = _numeric_in_units(
    -200.0,
    2500.0,
    ("m", "maod", "aod", "maodm", "maodft", "maodmetres", "maodmeters"),
    include_low=True,
)
looks_like_wind_speed = _numeric_in_units(
    0.0,
    120.0,
    ("mps", "ms", "m/s", "m\u2212s", "mph", "kmh", "kph", "kn", "kts", "knots"),
    include_low=False,
)
looks_like_pressure = _numeric_in_units(
    0.0,
    10.0,
    ("kpa", "pa", "nmm2", "nm2", "psf", "psi"),
    include_low=False,
)


@dataclass(frozen=True)
class FieldSpec:
    """Token list, plausibility predicate and default column of a field."""

    field: SemanticField
    tokens: tuple[str, ...]
    validator: Callable[[str], bool]
    fallback_index: Optional[int] = None


FIELD_SPECS: dict[SemanticField, FieldSpec] = {
    SemanticField.POSTCODE: FieldSpec(
        field=SemanticField.POSTCODE,
        tokens=("postcode", "pcds", "pcd7", "pcd8", "pc", "postcodesector", "postcodearea"),
        validator=looks_like_postcode,
        fallback_index=0,
    ),
    SemanticField.ALTITUDE: FieldSpec(
        field=SemanticField.ALTITUDE,
        tokens=(
            "altitude",
            "altitudem",
            "altitudemaod",
            "altitudeaod",
            "altitude_m",
            "altitudemaodm",
            "altitudepaod",
            "altitudevalue",
            "altmaod",
            "altm",
            "maod",
            "aod",
            "elevation",
            "elevationm",
            "groundlevel",
            "height",
            "heightm",
        ),
        validator=looks_like_altitude,
    ),
    SemanticField.WIND_SPEED: FieldSpec(
        field=SemanticField.WIND_SPEED,
        tokens=(
            "windspeedms",
            "windspeed",
            "windspeedmps",
            "windspeedm_s",
            "basicwindspeed",
            "designwindspeed",
            "windvb",
            "vbmap",
            "vbms",
            "vbref",
            "vb",
            "vref",
            "speed",
        ),
        validator=looks_like_wind_speed,
    ),
    SemanticField.WIND_PRESSURE: FieldSpec(
        field=SemanticField.WIND_PRESSURE,
        tokens=("windpressure", "designpressure", "pressure", "pressurekpa", "q10", "q1", "q", "kpa"),
        validator=looks_like_pressure,
    ),
}

_TIERS: tuple[tuple[MatchStrength, Callable[[str, str], bool]], ...] = (
    ("exact", lambda header, token: header == token),
    ("prefix", lambda header, token: header.startswith(token)),
    ("partial", lambda header, token: token in header),
)


@dataclass(frozen=True)
class ColumnResolution:
    """Outcome of resolving one field against a table."""

    field: SemanticField
    index: Optional[int]
    strength: Optional[MatchStrength] = None
    token: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.index is not None


def find_column_index(
    normalised_headers: list[str] | tuple[str, ...],
    tokens: tuple[str, ...],
    fallback: Optional[int] = None,
) -> tuple[Optional[int], Optional[MatchStrength], Optional[str]]:
    """Token-match a column without looking at any values."""
    for strength, matches in _TIERS:
        for token in tokens:
            for index, header in enumerate(normalised_headers):
                if matches(header, token):
                    return index, strength, token
    if fallback is not None:
        return fallback, "fallback", None
    return None, None, None


def count_valid_samples(
    rows: tuple[tuple[str, ...], ...],
    index: int,
    validator: Callable[[str], bool],
    limit: int = SAMPLE_LIMIT,
) -> tuple[int, int]:
    """Return ``(hits, considered)`` over the first *limit* non-empty cells."""
    hits = considered = 0
    for row in rows:
        if considered >= limit:
            break
        value = cell(row, index).strip()
        if not value:
            continue
        considered += 1
        if validator(value):
            hits += 1
    return hits, considered


def _passes_validation(hits: int, considered: int, strength: MatchStrength) -> bool:
    if hits == 0:
        return False
    if strength == "fallback" or considered == 0:
        return True
    return hits >= max(1, math.ceil(considered * MIN_HIT_RATIO))


def resolve_column(table: RawTable, field_spec: FieldSpec) -> ColumnResolution:
    """Resolve the column for *field_spec* in *table*."""
    headers = [normalise_header(h) for h in table.headers]
    index, strength, token = find_column_index(headers, field_spec.tokens, field_spec.fallback_index)

    if index is not None and strength is not None:
        if strength == "exact":
            return ColumnResolution(field_spec.field, index, strength, token)
        hits, considered = count_valid_samples(table.rows, index, field_spec.validator)
        if _passes_validation(hits, considered, strength):
            return ColumnResolution(field_spec.field, index, strength, token)

    best_index, best_hits = None, 0
    for candidate in range(len(headers)):
        hits, _ = count_valid_samples(table.rows, candidate, field_spec.validator)
        if hits > best_hits:
            best_index, best_hits = candidate, hits
    if best_index is not None:
        return ColumnResolution(field_spec.field, best_index, "scored")

    if index is not None:
        return ColumnResolution(field_spec.field, index, strength, token)
    return ColumnResolution(field_spec.field, None)


def resolve_columns(
    table: RawTable,
    fields: tuple[SemanticField, ...],
) -> dict[SemanticField, ColumnResolution]:
    """Resolve several fields, logging each outcome."""
    resolved: dict[SemanticField, ColumnResolution] = {}
    for semantic_field in fields:
        resolution = resolve_column(table, FIELD_SPECS[semantic_field])
        resolved[semantic_field] = resolution
        if resolution.resolved:
            logger.debug(
                "Resolved %s to column %d (%r) via %s",
                semantic_field.value,
                resolution.index,
                table.headers[resolution.index] if resolution.index < len(table.headers) else "",
                resolution.strength,
            )
        else:
            logger.debug("No column resolved for %s", semantic_field.value)
    return resolved


# ── Unit conversion ─────────────────────────────────────────────────


def _header_hint(header_normalised: str, header_raw: str) -> str:
    return f"{header_normalised} {header_raw}".lower()


def convert_speed(value: str, header_normalised: str, header_raw: str) -> Optional[float]:
    """Convert a speed cell to m/s using unit hints in the header."""
    number = to_number(value)
    if number is None:
        return None
    header = _header_hint(header_normalised, header_raw)
    if "mph" in header:
        return number * 0.44704
    if "kmh" in header or "kph" in header:
        return number / 3.6
    if "knots" in header:
        return number * 0.514444
    if "ft/s" in header or "fts" in header:
        return number * 0.3048
    if "ftmin" in header or "ft/min" in header:
        return number * 0.00508
    return number


def convert_pressure(value: str, header_normalised: str, header_raw: str) -> Optional[float]:
    """Convert a pressure cell to kPa using unit hints in the header."""
    number = to_number(value)
    if number is None:
        return None
    header = _header_hint(header_normalised, header_raw)
    if "pa" in header and "kpa" not in header:
        return number / 1000
    if "n/m2" in header or "nm2" in header:
        return number / 1000
    if "psi" in header:
        return number * 6.89476
    if "psf" in header or "lb/ft2" in header:
        return number * 0.0478803
    return number


def round_half_up(value: float, digits: int = 0) -> float:
    """Round to *digits* places with halves going away from zero.

    Non-finite values, and values too large to carry *digits* places,
    are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-digits)
    try:
        return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return value


def pressure_from_speed(speed_ms: float) -> float:
    return round_half_up(PRESSURE_COEFFICIENT * speed_ms * speed_ms, 3)


def speed_from_pressure(pressure_kpa: float) -> float:
    return math.sqrt(pressure_kpa / PRESSURE_COEFFICIENT)


__all__ = [
    "FIELD_SPECS",
    "ColumnResolution",
    "FieldSpec",
    "SemanticField",
    "convert_pressure",
    "convert_speed",
    "count_valid_samples",
    "find_column_index",
    "looks_like_altitude",
    "looks_like_postcode",
    "looks_like_pressure",
    "looks_like_wind_speed",
    "normalise_header",
    "pressure_from_speed",
    "resolve_column",
    "resolve_columns",
    "round_half_up",
    "speed_from_pressure",
    "to_number",
]
