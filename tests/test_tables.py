"""Tests for sitewind tables module."""

import pandas as pd

from sitewind.tables import (
    LOOKUP_COLUMNS,
    create_summary_table,
    export_to_csv,
    lookup_rows_to_dataframe,
)

ROWS = [
    {
        "postcode": "SW1A 1AA",
        "altitude_m": 20.0,
        "altitude_source": "dataset",
        "speed_ms": 25.0,
        "pressure_kpa": 0.313,
        "wind_source": "dataset",
        "wind_match": "SW1A",
    },
    {
        "wind_match": "ZZ99ZZ",
        "postcode": "ZZ9 9ZZ",
        "altitude_m": None,
        "altitude_source": "fallback",
        "speed_ms": 17.0,
        "pressure_kpa": 0.149,
        "wind_source": "fallback",
    },
]


def test_lookup_rows_to_dataframe_empty():
    """Empty input keeps the column layout."""
    df = lookup_rows_to_dataframe([])
    assert df.empty
    assert list(df.columns) == LOOKUP_COLUMNS


def test_lookup_rows_to_dataframe_orders_columns():
    df = lookup_rows_to_dataframe(ROWS)
    assert len(df) == 2
    assert list(df.columns) == LOOKUP_COLUMNS
    assert df["speed_ms"].iloc[0] == 25.0


def test_create_summary_table():
    summary = create_summary_table(lookup_rows_to_dataframe(ROWS))
    values = dict(zip(summary["metric"], summary["value"]))
    assert values["count"] == 2
    assert values["wind_from_dataset"] == 1
    assert values["altitude_from_dataset"] == 1
    assert values["mean_speed_ms"] == 21.0


def test_create_summary_table_empty():
    assert create_summary_table(pd.DataFrame()).empty


def test_export_to_csv(tmp_path):
    path = tmp_path / "lookups.csv"
    export_to_csv(lookup_rows_to_dataframe(ROWS), str(path))
    loaded = pd.read_csv(path)
    assert list(loaded.columns) == LOOKUP_COLUMNS
    assert loaded["postcode"].tolist() == ["SW1A 1AA", "ZZ9 9ZZ"]
