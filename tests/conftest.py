"""Shared dataset samples and cache fixtures."""

import pytest

from sitewind.cache import DatasetCache
from sitewind.datasets import build_dataset_cache

ALTITUDE_TEXT = (
    "Postcode,Elevation (m)\n"
    "SW1A 1AA,20\n"
    "DA11 9AU,35.5\n"
    "EH1 1YZ,85.2\n"
)

WIND_TEXT = (
    "Postcode,Speed\n"
    "SW1A,25\n"
    "DA11,21.5\n"
    "EH1,26\n"
)


@pytest.fixture
def altitude_text():
    return ALTITUDE_TEXT


@pytest.fixture
def wind_text():
    return WIND_TEXT


@pytest.fixture
def datasets():
    return build_dataset_cache(ALTITUDE_TEXT, WIND_TEXT)


@pytest.fixture
def ready_cache(datasets):
    cache = DatasetCache()
    cache.set_data(datasets)
    return cache


@pytest.fixture
def dataset_files(tmp_path):
    altitude_file = tmp_path / "Postcode_elevation.csv"
    wind_file = tmp_path / "vbpostcode.csv"
    altitude_file.write_text(ALTITUDE_TEXT, encoding="utf-8")
    wind_file.write_text(WIND_TEXT, encoding="utf-8")
    return altitude_file, wind_file
