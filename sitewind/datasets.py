"""Postcode-keyed indices over the altitude and wind datasets.

Two indices are built from raw dataset text:

* altitude, keyed by the full postcode key (``"SW1A1AA"``)
* wind, keyed by the postcode sector key (``"SW1A"``)

Lookups narrow the key one trailing character at a time until a key
is found, so a unit match beats a sector match beats a district match.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Mapping, Optional, Union

from sitewind.postcode import normalise_postcode, postcode_sector
from sitewind.schema_resolver import (
    PRESSURE_COEFFICIENT,
    SemanticField,
    convert_pressure,
    convert_speed,
    normalise_header,
    pressure_from_speed,
    resolve_columns,
    round_half_up,
    speed_from_pressure,
    to_number,
)
from sitewind.schemas import WindResult
from sitewind.table_parser import cell, parse_table

logger = logging.getLogger(__name__)

FALLBACK_BASE_SPEED_MS = 22
FALLBACK_SPREAD = 11
FALLBACK_PRESSURE_CAP_KPA = 0.149


@dataclass(frozen=True)
class AltitudeRecord:
    altitude: float
    original: str
    key: str


@dataclass(frozen=True)
class WindRecord:
    speed_ms: float
    pressure_kpa: float
    vb_map: Optional[float]
    original: str
    key: str


IndexRecord = Union[AltitudeRecord, WindRecord]
DatasetIndex = Mapping[str, IndexRecord]


@dataclass(frozen=True)
class RecordMatch:
    """An index record together with the exact key that found it."""

    record: IndexRecord
    match: str


@dataclass(frozen=True)
class DatasetPair:
    altitude_index: dict[str, AltitudeRecord] = field(default_factory=dict)
    wind_index: dict[str, WindRecord] = field(default_factory=dict)


@dataclass(frozen=True)
class DatasetLookup:
    altitude: Optional[float] = None
    altitude_match: Optional[str] = None
    wind: Optional[WindResult] = None


def _insert(index: dict, record: IndexRecord) -> None:
    # Longer (or equally long) keys replace what is there
    existing = index.get(record.key)
    if existing is None or len(record.key) >= len(existing.key):
        index[record.key] = record


def build_altitude_index(text: str | None) -> dict[str, AltitudeRecord]:
    """Build the altitude index from raw dataset text.

    Returns an empty index when the text has no header or no altitude
    column can be identified.
    """
    table = parse_table(text)
    if table.is_empty:
        return {}

    columns = resolve_columns(table, (SemanticField.POSTCODE, SemanticField.ALTITUDE))
    postcode_col = columns[SemanticField.POSTCODE].index
    altitude_col = columns[SemanticField.ALTITUDE].index
    if altitude_col is None:
        logger.warning("Altitude dataset: no altitude column found in %s", list(table.headers))
        return {}

    index: dict[str, AltitudeRecord] = {}
    for row in table.rows:
        raw_postcode = cell(row, postcode_col)
        key = normalise_postcode(raw_postcode)
        altitude = to_number(cell(row, altitude_col))
        if not key or altitude is None:
            continue
        _insert(index, AltitudeRecord(altitude=altitude, original=raw_postcode.strip() or key, key=key))

    logger.info("Altitude index built: %d keys from %d rows", len(index), len(table.rows))
    return index


def build_wind_index(text: str | None) -> dict[str, WindRecord]:
    """Build the sector-keyed wind index from raw dataset text.

    Speed and pressure columns are resolved independently. A row with
    only one of the two gets the other derived from
    ``q = 0.0005 * v^2``; a row with neither is skipped.
    """
    table = parse_table(text)
    if table.is_empty:
        return {}

    columns = resolve_columns(
        table,
        (SemanticField.POSTCODE, SemanticField.WIND_SPEED, SemanticField.WIND_PRESSURE),
    )
    postcode_col = columns[SemanticField.POSTCODE].index
    speed_col = columns[SemanticField.WIND_SPEED].index
    pressure_col = columns[SemanticField.WIND_PRESSURE].index
    if speed_col is None and pressure_col is None:
        logger.warning("Wind dataset: no speed or pressure column found in %s", list(table.headers))
        return {}

    headers = table.headers
    index: dict[str, WindRecord] = {}
    for row in table.rows:
        raw_postcode = cell(row, postcode_col)
        key = postcode_sector(raw_postcode)
        if not key:
            continue

        speed_ms = None
        if speed_col is not None:
            header = cell(headers, speed_col)
            speed_ms = convert_speed(cell(row, speed_col), normalise_header(header), header)
        pressure_kpa = None
        if pressure_col is not None:
            header = cell(headers, pressure_col)
            pressure_kpa = convert_pressure(cell(row, pressure_col), normalise_header(header), header)

        if speed_ms is None and pressure_kpa is None:
            continue
        if speed_ms is None:
            if pressure_kpa < 0:
                continue
            speed_ms = speed_from_pressure(pressure_kpa)
        if pressure_kpa is None:
            if not math.isfinite(PRESSURE_COEFFICIENT * speed_ms * speed_ms):
                continue
            pressure_kpa = pressure_from_speed(speed_ms)
        if not (math.isfinite(speed_ms) and math.isfinite(pressure_kpa)):
            continue

        _insert(
            index,
            WindRecord(
                speed_ms=speed_ms,
                pressure_kpa=pressure_kpa,
                vb_map=speed_ms,
                original=raw_postcode.strip() or key,
                key=key,
            ),
        )

    logger.info("Wind index built: %d sectors from %d rows", len(index), len(table.rows))
    return index


def build_dataset_cache(altitude_text: str | None, wind_text: str | None) -> DatasetPair:
    """Build both indices from their raw texts."""
    return DatasetPair(
        altitude_index=build_altitude_index(altitude_text),
        wind_index=build_wind_index(wind_text),
    )


def find_best_record(index: Optional[DatasetIndex], key: str) -> Optional[RecordMatch]:
    """Find the most specific record for *key*.

    The key is shortened one trailing character at a time until it is
    found in *index*; ``None`` once nothing is left.
    """
    if not index:
        return None
    cursor = key or ""
    while cursor:
        record = index.get(cursor)
        if record is not None:
            return RecordMatch(record=record, match=cursor)
        cursor = cursor[:-1]
    return None


def lookup_datasets(datasets: DatasetPair, postcode: str) -> DatasetLookup:
    """Look up altitude (full key) and wind (sector key) for *postcode*."""
    key = normalise_postcode(postcode)
    altitude_hit = find_best_record(datasets.altitude_index, key)
    sector = postcode_sector(key)
    wind_hit = find_best_record(datasets.wind_index, sector) if sector else None

    wind = None
    if wind_hit is not None:
        record = wind_hit.record
        wind = WindResult(
            speed_ms=record.speed_ms,
            pressure_kpa=record.pressure_kpa,
            vb_map=record.vb_map,
            source="dataset",
            match=record.original or wind_hit.match,
            match_key=wind_hit.match,
        )

    return DatasetLookup(
        altitude=altitude_hit.record.altitude if altitude_hit else None,
        altitude_match=(altitude_hit.record.original or altitude_hit.match) if altitude_hit else None,
        wind=wind,
    )


def compute_fallback_wind(postcode: str) -> Optional[WindResult]:
    """Deterministic wind estimate for a postcode without a dataset match.

    The speed is spread over 22-32 m/s by the character codes of the
    normalised postcode. Pressure is capped at 0.149 kPa and the speed
    is then recomputed from the capped pressure, so the pair always
    satisfies ``q = 0.0005 * v^2`` to rounding.
    """
    key = normalise_postcode(postcode)
    if not key:
        return None
    code_sum = sum(ord(ch) for ch in key)
    speed = round_half_up(FALLBACK_BASE_SPEED_MS + (code_sum % FALLBACK_SPREAD))
    pressure_kpa = min(round_half_up(PRESSURE_COEFFICIENT * speed * speed, 3), FALLBACK_PRESSURE_CAP_KPA)
    speed_ms = round_half_up(math.sqrt(pressure_kpa / PRESSURE_COEFFICIENT))
    return WindResult(
        speed_ms=speed_ms,
        pressure_kpa=pressure_kpa,
        vb_map=speed_ms,
        source="fallback",
        match=key,
        match_key=key,
    )


__all__ = [
    "AltitudeRecord",
    "DatasetLookup",
    "DatasetPair",
    "RecordMatch",
    "WindRecord",
    "build_altitude_index",
    "build_dataset_cache",
    "build_wind_index",
    "compute_fallback_wind",
    "find_best_record",
    "lookup_datasets",
]
