"""Tests for display formatting."""

import math

from sitewind.formatters import (
    MISSING,
    format_altitude,
    format_factor,
    format_pressure,
    format_roughness,
    format_wind_speed,
)


def test_wind_speed():
    assert format_wind_speed(24.5) == "24.5 m/s"
    assert format_wind_speed(25) == "25 m/s"
    assert format_wind_speed(24.96) == "25 m/s"
    assert format_wind_speed(None) == MISSING
    assert format_wind_speed(math.nan) == MISSING


def test_pressure():
    assert format_pressure(0.3214) == "0.321 kPa"
    assert format_pressure(None) == MISSING


def test_roughness():
    assert format_roughness(0.003) == "0.003 m"
    assert format_roughness(0.3) == "0.30 m"
    assert format_roughness(math.inf) == MISSING


def test_factor():
    assert format_factor(0.73) == "0.73"
    assert format_factor(1) == "1.00"


def test_altitude():
    assert format_altitude(85.2) == "85.2 m AOD"
    assert format_altitude(20) == "20 m AOD"
    assert format_altitude(None) is None

