from __future__ import annotations

import math

import pytest

from gpxtag.utils.geo_utils import (
    EARTH_RADIUS_M,
    decimal_to_dms,
    interpolate_optional,
    lerp,
    path_length,
)


@pytest.mark.parametrize(
    "start,end,ratio,expected",
    [
        (0.0, 10.0, 0.5, 5.0),
        (10.0, 0.0, 0.25, 7.5),
        (-5.0, 5.0, 0.0, -5.0),
        (-5.0, 5.0, 1.0, 5.0),
    ],
)
def test_lerp(start, end, ratio, expected):
    assert lerp(start, end, ratio) == pytest.approx(expected)


def test_interpolate_optional():
    assert interpolate_optional(0.0, 100.0, 0.5) == pytest.approx(50.0)
    assert interpolate_optional(None, 50.0, 0.5) == 50.0
    assert interpolate_optional(70.0, None, 0.5) == 70.0
    assert interpolate_optional(None, None, 0.5) is None


def test_interpolate_optional_keeps_zero():
    assert interpolate_optional(0.0, None, 0.9) == 0.0


@pytest.mark.parametrize(
    "value,expected",
    [
        (47.5, (47, 30, 0.0)),
        (-122.25, (122, 15, 0.0)),
        (0.0, (0, 0, 0.0)),
        (10.5125, (10, 30, 45.0)),
    ],
)
def test_decimal_to_dms(value, expected):
    degrees, minutes, seconds = decimal_to_dms(value)
    assert (degrees, minutes) == expected[:2]
    assert seconds == pytest.approx(expected[2], abs=1e-6)


def test_path_length_one_degree_of_latitude():
    expected = EARTH_RADIUS_M * math.pi / 180
    assert path_length([0.0, 1.0], [0.0, 0.0]) == pytest.approx(expected, rel=1e-9)


def test_path_length_sums_segments():
    assert path_length([0.0, 1.0, 0.0], [0.0, 0.0, 0.0]) == pytest.approx(
        2 * EARTH_RADIUS_M * math.pi / 180, rel=1e-9
    )


@pytest.mark.parametrize("lats,lons", [([], []), ([1.0], [2.0])])
def test_path_length_degenerate(lats, lons):
    assert path_length(lats, lons) == 0.0
