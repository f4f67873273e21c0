"""Pandas-based result tables for sitewind."""

from typing import Any

import pandas as pd

LOOKUP_COLUMNS = [
    "postcode",
    "altitude_m",
    "altitude_source",
    "speed_ms",
    "pressure_kpa",
    "wind_source",
    "wind_match",
]


def lookup_rows_to_dataframe(rows: list[dict[str, Any]]) -> pd.DataFrame:
    """
    Create a pandas DataFrame from per-postcode lookup rows.

    Args:
        rows: List of lookup row dictionaries

    Returns:
        DataFrame with one row per postcode, columns in display order
    """
    if not rows:
        return pd.DataFrame(columns=LOOKUP_COLUMNS)

    df = pd.DataFrame(rows)
    ordered = [col for col in LOOKUP_COLUMNS if col in df.columns]
    extra = [col for col in df.columns if col not in LOOKUP_COLUMNS]
    return df[ordered + extra]


def create_summary_table(df: pd.DataFrame) -> pd.DataFrame:
    """
    Summarise how many postcodes were served from the datasets.

    Args:
        df: DataFrame from :func:`lookup_rows_to_dataframe`

    Returns:
        Summary DataFrame with metric/value columns
    """
    if df.empty:
        return pd.DataFrame()

    summary = pd.DataFrame(
        {
            "metric": ["count", "wind_from_dataset", "altitude_from_dataset", "mean_speed_ms"],
            "value": [
                len(df),
                int((df["wind_source"] == "dataset").sum()) if "wind_source" in df.columns else 0,
                int((df["altitude_source"] == "dataset").sum()) if "altitude_source" in df.columns else 0,
                df["speed_ms"].mean() if "speed_ms" in df.columns else 0,
            ],
        }
    )
    return summary


def export_to_csv(df: pd.DataFrame, filepath: str) -> None:
    """
    Export DataFrame to CSV file.

    Args:
        df: DataFrame to export
        filepath: Path to save CSV file
    """
    df.to_csv(filepath, index=False)
