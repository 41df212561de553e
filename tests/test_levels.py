# tests/test_levels.py
import pytest

from facta.levels import level, level_title, xp_for_level, xp_for_next_level, xp_progress


@pytest.mark.parametrize("xp,expected", [(0, 1), (99, 1), (150, 1), (199, 1), (200, 2), (250, 2), (1234, 12)])
def test_level(xp, expected):
    assert level(xp) == expected


def test_progress_within_level():
    assert xp_progress(250) == 50
    assert xp_for_next_level(250) == 50
    assert xp_progress(40) == 0
    assert xp_for_next_level(40) == 160


def test_level_start_never_exceeds_xp():
    for xp in range(100, 5000, 37):
        assert xp_for_level(level(xp)) <= xp < xp_for_level(level(xp) + 1)


def test_progress_stays_inside_a_level():
    for xp in range(0, 5000, 13):
        assert 0 <= xp_progress(xp) < 100


def test_titles():
    assert level_title(1) == "Fact Explorer"
    assert level_title(6) == "Knowledge Hunter"
    assert level_title(15) == "Science Enthusiast"
    assert level_title(20) == "Fact Master"
    assert level_title(25) == "Knowledge Legend"
    assert level_title(26) == "Fact Legend"
