# solver/constructive.py
from datetime import date
from typing import List, Optional

from config import CFG
from models import Catalog, Grid, Profile, SeedLike, check_grid_shape, grid_rows, parse_date
from progress import log_attempt_detail
from solver.companion import check_companion_constraints, get_neighbors
from solver.rng import SeededRandom
from solver.viability import filter_viable


def auto_fill_bed(
    grid: Grid,
    crops: Catalog,
    profile: Profile,
    width: Optional[int] = None,
    height: Optional[int] = None,
    target_date=None,
    seed: Optional[SeedLike] = None,
) -> Grid:
    """
    Fill every empty cell of one bed with a viable, compatible crop.

    The viable crops are shuffled once with a seeded RNG; each empty cell (in
    index order) takes the first shuffled crop with no enemy among its
    current neighbors, or stays empty when none qualifies. Occupied cells are
    never touched and keep the caller's crop objects.

    Returns:
        A new grid; *grid* itself is not modified.
    """
    width = CFG.BED_WIDTH if width is None else int(width)
    if height is None:
        height = grid_rows(grid, width)
    check_grid_shape(grid, width, int(height) or None)

    new_grid: Grid = list(grid)
    when: date = parse_date(target_date) if target_date is not None else date.today()

    viable = filter_viable(crops, profile, when)
    if not viable:
        log_attempt_detail("Whole-bed fill skipped", reason="no viable crops", date=when.isoformat())
        return new_grid

    rng = SeededRandom(CFG.DEFAULT_SEED if seed is None else seed)
    shuffled = rng.shuffle(viable)

    filled = 0
    for index in range(len(new_grid)):
        if new_grid[index] is not None:
            continue
        neighbor_ids: List[str] = get_neighbors(new_grid, index, width)
        for crop in shuffled:
            if check_companion_constraints(crop, neighbor_ids):
                new_grid[index] = crop
                filled += 1
                break

    log_attempt_detail(
        "Whole-bed fill",
        grid=f"{width}x{height}",
        viable=len(viable),
        filled=filled,
        left_empty=sum(1 for c in new_grid if c is None),
    )
    return new_grid


__all__ = ["auto_fill_bed"]
