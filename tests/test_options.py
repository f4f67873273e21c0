"""Tests for the fence option catalogue."""

from sitewind.options import FENCE_OPTIONS, applicable_options, option_applicable


def test_catalogue_keys():
    assert list(FENCE_OPTIONS) == ["A", "B", "C", "D", "E", "F"]
    for key, option in FENCE_OPTIONS.items():
        assert option.key == key
        assert option.capacity_kpa > 0


def test_option_applicable():
    option = FENCE_OPTIONS["C"]
    assert option_applicable(option, 0.3, 2.4)
    assert not option_applicable(option, 0.31, 2.4)
    assert not option_applicable(option, 0.2, 3.0)
    assert not option_applicable(option, None, 2.0)


def test_applicable_options_filters_by_height_and_pressure():
    keys = [o.key for o in applicable_options(0.25, 2.0)]
    assert keys == ["C", "D", "E", "F"]
    assert [o.key for o in applicable_options(0.45, 2.4)] == ["F"]
    assert applicable_options(0.1, 3.5) == []
