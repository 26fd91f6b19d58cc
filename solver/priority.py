# solver/priority.py — hardest-first placement of a stash into one bed
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from config import CFG
from models import (
    Catalog,
    Crop,
    CropPlacement,
    FailedPlacement,
    Grid,
    PlacementReport,
    SeedLike,
    Stash,
    as_catalog,
    empty_indices,
)
from progress import log_attempt_detail
from solver.companion import is_rejected, score_cell
from solver.rng import SeededRandom

# Difficulty weights: enemies dominate, then footprint, then lack of friends.
ENEMY_WEIGHT = 10
LARGE_FOOTPRINT_BONUS = 5   # sfg_density == 1 takes a whole square
NO_FRIENDS_BONUS = 3

# An incumbent best cell is replaced on a tie when the draw exceeds this.
TIE_BREAK_THRESHOLD = 0.5

NO_VALID_SPOT = "No valid spot found (space or constraints)"


@dataclass(frozen=True)
class PriorityCrop:
    crop_id: str
    quantity: int
    crop: Crop


def calculate_difficulty(crop: Crop) -> int:
    score = len(crop.enemies) * ENEMY_WEIGHT
    score += LARGE_FOOTPRINT_BONUS if crop.sfg_density == 1 else 0
    score += NO_FRIENDS_BONUS if not crop.friends else 0
    return score


def sort_by_priority(stash: Stash, crops: Catalog) -> List[PriorityCrop]:
    """Stash entries known to the catalog, hardest first (stable on ties)."""
    by_id = as_catalog(crops)
    items = [
        PriorityCrop(crop_id, int(qty), by_id[crop_id])
        for crop_id, qty in stash.items()
        if crop_id in by_id
    ]
    return sorted(items, key=lambda p: calculate_difficulty(p.crop), reverse=True)


def prefers_challenger(rng: SeededRandom) -> bool:
    """One draw per tie; keeps every seeded sequence reproducible."""
    return rng.next() > TIE_BREAK_THRESHOLD


def find_best_cell(
    grid: Sequence[Optional[Crop]],
    crop_id: str,
    crops: Catalog,
    width: int,
    rng: SeededRandom,
) -> Optional[int]:
    best_index: Optional[int] = None
    max_score = float("-inf")

    for idx in empty_indices(grid):
        score = score_cell(idx, crop_id, grid, crops, width)
        if is_rejected(score):
            continue
        if score > max_score:
            max_score = score
            best_index = idx
        elif score == max_score and prefers_challenger(rng):
            best_index = idx

    return best_index


def auto_fill_from_stash(
    grid: Grid,
    stash: Stash,
    crops: Catalog,
    width: int,
    seed: Optional[SeedLike] = None,
) -> PlacementReport:
    """
    Place every unit of *stash* into the best-scoring empty cell of one bed.

    Units go hardest-first; later units see earlier placements as neighbors.
    Returns the placement report only; the caller applies it (see
    ``solver.orchestrator.apply_placements``).
    """
    working: Grid = list(grid)
    by_id = as_catalog(crops)
    rng = SeededRandom(CFG.DEFAULT_SEED if seed is None else seed)

    placed: List[CropPlacement] = []
    failed: List[FailedPlacement] = []

    for item in sort_by_priority(stash, by_id):
        for _ in range(item.quantity):
            best = find_best_cell(working, item.crop_id, by_id, width, rng)
            if best is not None:
                working[best] = item.crop
                placed.append(CropPlacement(item.crop_id, best))
            else:
                failed.append(FailedPlacement(item.crop_id, NO_VALID_SPOT))

    for crop_id, qty in stash.items():
        if crop_id not in by_id:
            failed.extend(FailedPlacement(crop_id, f"Unknown crop: {crop_id}") for _ in range(int(qty)))

    log_attempt_detail(
        "Stash placement",
        cells=len(working),
        width=width,
        requested=sum(max(0, int(q)) for q in stash.values()),
        placed=len(placed),
        failed=len(failed),
    )
    return PlacementReport(tuple(placed), tuple(failed))


__all__ = [
    "NO_VALID_SPOT",
    "PriorityCrop",
    "calculate_difficulty",
    "sort_by_priority",
    "find_best_cell",
    "auto_fill_from_stash",
]
