"""Tests for the UK National Annex wind factors."""

import math

import pytest

from sitewind.wind import (
    C_DIR,
    C_SEASON,
    ConfigurationError,
    basic_wind_pressure,
    compute_altitude_factor,
    compute_basic_wind,
    compute_wind_factors,
    derive_wind_factors,
    duration_to_season_key,
    map_duration_to_return_period,
)


class TestReturnPeriod:
    @pytest.mark.parametrize(
        "category,years",
        [
            ("UNDER_3_DAYS", 2),
            ("UNDER_1_MONTH", 5),
            ("UNDER_2_MONTHS", 5),
            ("UNDER_4_MONTHS", 5),
            ("UNDER_A_YEAR", 10),
            ("OVER_A_YEAR", 50),
        ],
    )
    def test_mapping(self, category, years):
        assert map_duration_to_return_period(category) == years

    def test_unknown_category_raises(self):
        with pytest.raises(ConfigurationError, match="BOGUS"):
            map_duration_to_return_period("BOGUS")

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            map_duration_to_return_period(None)


def test_season_keys():
    assert duration_to_season_key("UNDER_1_MONTH") == "m1"
    assert duration_to_season_key("UNDER_2_MONTHS") == "m2"
    assert duration_to_season_key("UNDER_4_MONTHS") == "m4"
    assert duration_to_season_key("UNDER_A_YEAR") is None


class TestDeriveWindFactors:
    def test_may_four_months(self):
        factors = derive_wind_factors(5, "UNDER_4_MONTHS")
        assert factors.return_period_years == 5
        assert factors.c_prob == 0.88
        assert factors.c_season == C_SEASON[5]["m4"] == 0.73

    def test_long_durations_have_no_seasonal_reduction(self):
        factors = derive_wind_factors(7, "OVER_A_YEAR")
        assert factors.return_period_years == 50
        assert factors.c_prob == 1.0
        assert factors.c_season == 1.0

    def test_short_duration(self):
        factors = derive_wind_factors(1, "UNDER_3_DAYS")
        assert factors.c_prob == 0.82
        assert factors.c_season == 1.0

    def test_missing_inputs_raise(self):
        with pytest.raises(ConfigurationError):
            derive_wind_factors(None, "UNDER_1_MONTH")
        with pytest.raises(ConfigurationError):
            derive_wind_factors(3, None)

    def test_month_out_of_range(self):
        with pytest.raises(ConfigurationError):
            derive_wind_factors(13, "UNDER_1_MONTH")


def test_season_table_complete():
    assert sorted(C_SEASON) == list(range(1, 13))
    for row in C_SEASON.values():
        assert set(row) == {"m1", "m2", "m4"}
        assert all(0 < v <= 1.0 for v in row.values())


class TestAltitudeFactor:
    def test_low_reference_height(self):
        assert compute_altitude_factor(100, 2.0) == pytest.approx(1.1)

    def test_tall_reference_height(self):
        expected = 1 + 0.001 * 100 * (10 / 20) ** 0.2
        assert compute_altitude_factor(100, 20.0) == pytest.approx(expected)

    def test_missing_values(self):
        assert compute_altitude_factor(None) == 1.0
        assert compute_altitude_factor(-50, 2.0) == 1.0
        assert compute_altitude_factor(100, None) == pytest.approx(1.1)
        assert compute_altitude_factor(100, 0) == pytest.approx(1.1)


class TestBasicWind:
    def test_pressure(self):
        assert basic_wind_pressure(25) == pytest.approx(0.383125)

    def test_product_of_factors(self):
        vb, qb = compute_basic_wind(25, 1.02, C_DIR, 0.73, 0.88)
        assert vb == pytest.approx(25 * 1.02 * 0.73 * 0.88)
        assert qb == pytest.approx(0.613 * vb**2 / 1000)

    def test_no_map_speed(self):
        assert compute_basic_wind(None, 1.0, 1.0, 1.0, 1.0) is None
        assert compute_basic_wind(0, 1.0, 1.0, 1.0, 1.0) is None
        assert compute_basic_wind(math.nan, 1.0, 1.0, 1.0, 1.0) is None


class TestComputeWindFactors:
    def test_full(self):
        factors = compute_wind_factors(5, "UNDER_4_MONTHS", altitude_m=20, reference_height_m=2.0, vb_map_ms=25)
        assert factors.c_alt == pytest.approx(1.02)
        assert factors.c_dir == 1.0
        assert factors.vb_ms == pytest.approx(16.3812)
        assert factors.qb_kpa == pytest.approx(0.16449, abs=1e-5)

    def test_without_map_speed(self):
        factors = compute_wind_factors(12, "UNDER_2_MONTHS")
        assert factors.c_season == 1.0
        assert factors.c_alt == 1.0
        assert factors.vb_ms is None
        assert factors.qb_kpa is None

    def test_bogus_duration(self):
        with pytest.raises(ConfigurationError):
            compute_wind_factors(5, "BOGUS", vb_map_ms=25)
