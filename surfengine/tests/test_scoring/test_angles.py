"""Tests for angle helpers."""

import pytest

from surfengine.scoring.angles import (
    ang_diff,
    direction_to_text,
    distance_to_sector,
    in_sector,
    to180,
    to360,
)


class TestNormalize:
    def test_to360(self):
        assert to360(-10) == 350
        assert to360(370) == 10
        assert to360(0) == 0

    def test_to180(self):
        assert to180(190) == -170
        assert to180(-190) == 170
        assert to180(180) == -180

    def test_ang_diff_wraps(self):
        assert ang_diff(350, 10) == 20
        assert ang_diff(10, 350) == 20
        assert ang_diff(0, 180) == 180


class TestInSector:
    def test_plain_sector(self):
        assert in_sector(180, (160, 200))
        assert in_sector(160, (160, 200))
        assert not in_sector(201, (160, 200))

    def test_wraps_through_north(self):
        assert in_sector(350, (330, 30))
        assert in_sector(10, (330, 30))
        assert not in_sector(180, (330, 30))

    def test_unknown_is_never_inside(self):
        assert not in_sector(None, (0, 90))
        assert not in_sector(45, None)
        assert not in_sector(float("nan"), (0, 90))

    def test_distance_to_sector(self):
        assert distance_to_sector(180, (160, 200)) == 0
        assert distance_to_sector(210, (160, 200)) == 10
        assert distance_to_sector(320, (330, 30)) == 10


class TestDirectionToText:
    @pytest.mark.parametrize(
        "deg,text",
        [(0, "N"), (350, "N"), (22.5, "NNE"), (90, "E"), (180, "S"), (247.5, "WSW"), (-90, "W")],
    )
    def test_compass_points(self, deg, text):
        assert direction_to_text(deg) == text

    def test_unknown(self):
        assert direction_to_text(None) == "N/A"
