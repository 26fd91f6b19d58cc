import pytest

from crops import CROPS_BY_ID
from models import Crop, CropType, GridShapeError
from solver.companion import (
    check_companion_constraints,
    enemy_violations,
    get_neighbors,
    is_rejected,
    neighbor_indices,
    score_cell,
)


def _crop(cid, friends=(), enemies=(), type=None):
    return Crop(cid, 4, -4, 4, tuple(friends), tuple(enemies), type)


def test_neighbor_order_is_top_bottom_left_right():
    grid = [_crop(str(i)) for i in range(9)]
    assert neighbor_indices(grid, 4, 3) == [1, 7, 3, 5]
    assert get_neighbors(grid, 4, 3) == ["1", "7", "3", "5"]


def test_corner_and_ragged_last_row():
    grid = [None] * 9
    assert neighbor_indices(grid, 0, 3) == [3, 1]
    ragged = [None] * 5
    assert neighbor_indices(ragged, 2, 3) == [1]
    assert neighbor_indices(ragged, 4, 3) == [1, 3]


def test_empty_neighbors_are_skipped():
    grid = [None, _crop("a"), None, None]
    assert get_neighbors(grid, 0, 2) == ["a"]
    assert get_neighbors(grid, 3, 2) == ["a"]


def test_non_positive_width_raises():
    with pytest.raises(GridShapeError):
        neighbor_indices([None, None], 0, 0)


def test_check_companion_constraints():
    kale = _crop("kale", enemies=["tomato"])
    assert not check_companion_constraints(kale, ["lettuce", "tomato"])
    assert check_companion_constraints(kale, ["lettuce"])
    assert check_companion_constraints(kale, [])


def test_flower_vegetable_friendship_gets_mutualism_bonus():
    grid = [CROPS_BY_ID["tomato"], None]
    assert score_cell(1, "marigold", grid, CROPS_BY_ID, 2) == 2
    assert score_cell(1, "basil", grid, CROPS_BY_ID, 2) == 1


def test_enemy_neighbor_is_rejected():
    a = _crop("a", enemies=["b"])
    b = _crop("b", enemies=["a"])
    grid = [b, None]
    score = score_cell(1, "a", grid, [a, b], 2)
    assert score == -1000
    assert is_rejected(score)
    assert not is_rejected(-99)


def test_only_candidate_lists_count():
    likes = _crop("likes", friends=["plain"])
    plain = _crop("plain")
    grid = [likes, None]
    assert score_cell(1, "plain", grid, [likes, plain], 2) == 0
    assert score_cell(0, "likes", [None, plain], [likes, plain], 2) == 1


def test_unknown_candidate_scores_zero():
    grid = [CROPS_BY_ID["tomato"], None]
    assert score_cell(1, "no-such-crop", grid, CROPS_BY_ID, 2) == 0


def test_mutualism_needs_both_types():
    flower = _crop("f", friends=["h"], type=CropType.FLOWER)
    herb = _crop("h", type=CropType.HERB)
    assert score_cell(1, "f", [herb, None], [flower, herb], 2) == 1


def test_enemy_violations_reports_either_direction():
    a = _crop("a", enemies=["b"])
    b = _crop("b")
    assert enemy_violations([a, b], 2) == [(0, 1)]
    assert enemy_violations([b, a], 2) == [(0, 1)]
    assert enemy_violations([a, None, b], 3) == []
