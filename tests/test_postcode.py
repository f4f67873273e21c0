"""Tests for postcode normalisation."""

import pytest

from sitewind.postcode import (
    extract_outward,
    format_postcode,
    is_valid_postcode,
    normalise_postcode,
    postcode_sector,
)

SAMPLES = ["sw1a 1aa", "  DA11-9AU ", "ec1a1bb", "M1 1AE", "!!", "", "b33 8th", "W1"]


def test_normalise_strips_and_uppercases():
    assert normalise_postcode("sw1a 1aa") == "SW1A1AA"
    assert normalise_postcode(" DA11-9AU\t") == "DA119AU"


def test_normalise_total_on_garbage():
    assert normalise_postcode(None) == ""
    assert normalise_postcode("") == ""
    assert normalise_postcode("!!! ---") == ""


@pytest.mark.parametrize("value", SAMPLES)
def test_normalise_is_idempotent_and_alphanumeric(value):
    key = normalise_postcode(value)
    assert key == normalise_postcode(key)
    assert all(c.isupper() or c.isdigit() for c in key)


def test_sector_drops_inward_unit():
    assert postcode_sector("SW1A 1AA") == "SW1A"
    assert postcode_sector("DA11 9AU") == "DA11"
    assert postcode_sector("M1 1AE") == "M1"


def test_sector_keeps_short_or_irregular_keys():
    assert postcode_sector("SW1A") == "SW1A"
    assert postcode_sector("1AA") == "1AA"
    assert postcode_sector("AB12") == "AB12"
    assert postcode_sector("") == ""


@pytest.mark.parametrize("value", SAMPLES)
def test_sector_is_idempotent_prefix(value):
    key = normalise_postcode(value)
    sector = postcode_sector(key)
    assert key.startswith(sector)
    assert postcode_sector(sector) == sector


def test_format_inserts_single_space():
    assert format_postcode("SW1A1AA") == "SW1A 1AA"
    assert format_postcode("da11   9au") == "DA11 9AU"
    assert format_postcode("W1") == "W1"
    assert format_postcode(None) == ""


def test_extract_outward():
    assert extract_outward("DA11 9AU") == "DA11"
    assert extract_outward("sw1a1aa") == "SW1A"
    assert extract_outward("EH1") == "EH1"
    assert extract_outward("") == ""


def test_is_valid_postcode():
    assert is_valid_postcode("SW1A 1AA")
    assert is_valid_postcode("da119au")
    assert not is_valid_postcode("SW1A")
    assert not is_valid_postcode("12345")
    assert not is_valid_postcode(None)
