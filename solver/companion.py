# solver/companion.py — adjacency, companion constraints and cell scoring
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from config import CFG
from models import Catalog, Crop, CropType, as_catalog, grid_rows


def neighbor_indices(grid: Sequence[Optional[Crop]], index: int, width: int) -> List[int]:
    """Flat indices of the up/down/left/right cells that exist in the grid."""
    rows = grid_rows(grid, width)
    row, col = divmod(index, width)
    out: List[int] = []
    if row > 0:
        out.append(index - width)
    if row < rows - 1 and index + width < len(grid):
        out.append(index + width)
    if col > 0:
        out.append(index - 1)
    if col < width - 1 and index + 1 < len(grid):
        out.append(index + 1)
    return out


def neighbor_crops(grid: Sequence[Optional[Crop]], index: int, width: int) -> List[Crop]:
    return [grid[i] for i in neighbor_indices(grid, index, width) if grid[i] is not None]


def get_neighbors(grid: Sequence[Optional[Crop]], index: int, width: int) -> List[str]:
    """Crop ids occupying the orthogonal neighbors of *index* (empty cells skipped)."""
    return [c.id for c in neighbor_crops(grid, index, width)]


def check_companion_constraints(candidate: Crop, neighbor_ids: Iterable[str]) -> bool:
    """False as soon as any neighbor is one of the candidate's enemies."""
    enemies = set(candidate.enemies)
    return not any(nid in enemies for nid in neighbor_ids)


def _is_mutualism(a: Crop, b: Crop) -> bool:
    return {a.type, b.type} == {CropType.FLOWER, CropType.VEGETABLE}


def score_cell(index: int, crop_id: str, grid: Sequence[Optional[Crop]], crops: Catalog, width: int) -> int:
    """
    Companion score for planting *crop_id* at *index*.

    Each enemy neighbor costs ``CFG.ENEMY_PENALTY``, so a single enemy pushes
    the score below ``CFG.REJECT_THRESHOLD``. Each friend adds
    ``CFG.FRIEND_BONUS`` and a flower/vegetable friendship adds
    ``CFG.MUTUALISM_BONUS`` on top. Unknown candidates score 0.
    """
    candidate = as_catalog(crops).get(crop_id)
    if candidate is None:
        return 0

    score = 0
    for neighbor in neighbor_crops(grid, index, width):
        if neighbor.id in candidate.enemies:
            score -= CFG.ENEMY_PENALTY
        elif neighbor.id in candidate.friends:
            score += CFG.FRIEND_BONUS
            if _is_mutualism(candidate, neighbor):
                score += CFG.MUTUALISM_BONUS
    return score


def is_rejected(score: float) -> bool:
    return score <= CFG.REJECT_THRESHOLD


def enemy_violations(grid: Sequence[Optional[Crop]], width: int) -> List[tuple]:
    """Adjacent ``(i, j)`` pairs where either crop lists the other as an enemy."""
    bad = []
    for i, crop in enumerate(grid):
        if crop is None:
            continue
        for j in neighbor_indices(grid, i, width):
            other = grid[j]
            if j <= i or other is None:
                continue
            if other.id in crop.enemies or crop.id in other.enemies:
                bad.append((i, j))
    return bad


__all__ = [
    "neighbor_indices",
    "neighbor_crops",
    "get_neighbors",
    "check_companion_constraints",
    "score_cell",
    "is_rejected",
    "enemy_violations",
]
