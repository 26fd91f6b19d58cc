from datetime import date

import pytest

from crops import CORE_CROPS
from models import Crop, GridShapeError, Profile, crop_ids
from solver.companion import enemy_violations
from solver.constructive import auto_fill_bed

PROFILE = Profile(date(2024, 4, 15), date(2024, 10, 15))
SPRING = date(2024, 4, 15)


def test_same_seed_same_bed():
    a = auto_fill_bed([None] * 32, CORE_CROPS, PROFILE, target_date=SPRING, seed="bed-1")
    b = auto_fill_bed([None] * 32, CORE_CROPS, PROFILE, target_date=SPRING, seed="bed-1")
    assert crop_ids(a) == crop_ids(b)


def test_seed_changes_layout():
    layouts = {
        tuple(crop_ids(auto_fill_bed([None] * 32, CORE_CROPS, PROFILE, target_date=SPRING, seed=s)))
        for s in ("alpha", "beta", "gamma")
    }
    assert len(layouts) > 1


def test_no_enemies_end_up_adjacent():
    for seed in ("one", "two", "three", 42):
        out = auto_fill_bed([None] * 32, CORE_CROPS, PROFILE, target_date=SPRING, seed=seed)
        assert enemy_violations(out, 8) == []


def test_occupied_cells_are_kept_and_input_untouched():
    keep = Crop("keeper", 1, -20, 20)
    grid = [None] * 32
    grid[5] = keep
    before = list(grid)

    out = auto_fill_bed(grid, CORE_CROPS, PROFILE, target_date=SPRING, seed="x")

    assert grid == before
    assert out is not grid
    assert out[5] is keep
    assert all(cell is not None for cell in out)


def test_only_viable_crops_are_used():
    crops = [Crop("early", 4, -10, -6), Crop("now", 4, -1, 1)]
    out = auto_fill_bed([None] * 4, crops, PROFILE, width=2, height=2, target_date=SPRING)
    assert crop_ids(out) == ["now"] * 4


def test_nothing_viable_returns_unchanged_copy():
    crops = [Crop("early", 4, -10, -6)]
    grid = [None] * 4
    out = auto_fill_bed(grid, crops, PROFILE, width=2, height=2, target_date=SPRING)
    assert out == grid
    assert out is not grid


def test_cell_stays_empty_when_every_candidate_clashes():
    tomato = Crop("tomato", 1, -2, 2, enemies=("kale",))
    kale = Crop("kale", 4, -2, 2, enemies=("tomato",))
    grid = [tomato, None, kale]
    out = auto_fill_bed(grid, [tomato, kale], PROFILE, width=3, height=1, target_date=SPRING)
    assert out[1] is None


def test_empty_grid_is_a_no_op():
    assert auto_fill_bed([], CORE_CROPS, PROFILE, width=8, target_date=SPRING) == []


def test_bad_dimensions_raise():
    with pytest.raises(GridShapeError):
        auto_fill_bed([None] * 6, CORE_CROPS, PROFILE, width=4, height=2, target_date=SPRING)
    with pytest.raises(GridShapeError):
        auto_fill_bed([None] * 6, CORE_CROPS, PROFILE, width=0, target_date=SPRING)


def _self_enemies():
    return [Crop(cid, 4, -4, 4, enemies=(cid,)) for cid in ("a", "b", "c", "d")]


def test_known_bed_for_fixed_seed():
    out = auto_fill_bed([None] * 9, _self_enemies(), PROFILE, width=3, height=3, target_date=SPRING, seed="test-seed-123")
    assert crop_ids(out) == ["d", "c", "d", "c", "d", "c", "d", "c", "d"]


def test_default_bed_is_eight_by_four():
    out = auto_fill_bed([None] * 32, _self_enemies(), PROFILE, target_date=SPRING, seed="test-seed-123")
    expected = ["d" if (i // 8 + i % 8) % 2 == 0 else "c" for i in range(32)]
    assert crop_ids(out) == expected
