# solver/gaps.py — diversity-aware filling of the empty cells left in a bed
from __future__ import annotations

import math
from collections import Counter
from typing import Dict, List, Optional

from config import CFG
from models import Catalog, Crop, CropPlacement, CropType, Grid, Profile, SeedLike, catalog_list
from progress import log_attempt_detail
from solver.companion import is_rejected, score_cell
from solver.priority import prefers_challenger
from solver.rng import SeededRandom
from solver.viability import filter_viable


def flower_cap(cell_count: int) -> int:
    return max(1, math.floor(cell_count * CFG.FLOWER_CAP_RATIO))


def _gap_score(
    index: int,
    crop: Crop,
    grid: Grid,
    by_id: Dict[str, Crop],
    width: int,
    crop_counts: Counter,
    family_counts: Counter,
) -> Optional[float]:
    base = score_cell(index, crop.id, grid, by_id, width)
    if is_rejected(base):
        return None
    score = float(base)
    if crop.type == CropType.VEGETABLE:
        score += CFG.VEGETABLE_BONUS
    score -= CFG.DUPLICATE_CROP_PENALTY * crop_counts[crop.id]
    if crop.family:
        score -= CFG.DUPLICATE_FAMILY_PENALTY * family_counts[crop.family]
    return score


def auto_fill_gaps(
    grid: Grid,
    crops: Catalog,
    width: int,
    profile: Optional[Profile] = None,
    target_date=None,
    seed: Optional[SeedLike] = None,
    max_fills: Optional[int] = None,
) -> List[CropPlacement]:
    """
    Pick a crop for each empty cell, favouring vegetables and variety.

    Repeats of a crop or its family are penalised and flowers are capped at
    ``flower_cap(len(grid))`` including the ones already planted. Viability
    filtering applies only when both *profile* and *target_date* are given.
    *grid* is left untouched; the placements are returned in fill order.
    """
    pool = catalog_list(crops)
    if profile is not None and target_date is not None:
        pool = filter_viable(pool, profile, target_date)
    by_id = {c.id: c for c in catalog_list(crops)}

    working: Grid = list(grid)
    rng = SeededRandom(CFG.DEFAULT_SEED if seed is None else seed)
    limit = math.inf if max_fills is None else max(0, int(max_fills))

    crop_counts: Counter = Counter()
    family_counts: Counter = Counter()
    flowers = 0
    for cell in working:
        if cell is None:
            continue
        crop_counts[cell.id] += 1
        if cell.family:
            family_counts[cell.family] += 1
        if cell.type == CropType.FLOWER:
            flowers += 1
    cap = flower_cap(len(working))

    fills: List[CropPlacement] = []
    for index in range(len(working)):
        if len(fills) >= limit:
            break
        if working[index] is not None:
            continue

        best: Optional[Crop] = None
        best_score = -math.inf
        for crop in pool:
            if crop.type == CropType.FLOWER and flowers >= cap:
                continue
            score = _gap_score(index, crop, working, by_id, width, crop_counts, family_counts)
            if score is None:
                continue
            if score > best_score:
                best, best_score = crop, score
            elif score == best_score and prefers_challenger(rng):
                best = crop

        if best is None or best_score < CFG.ACCEPT_MIN_SCORE:
            continue
        working[index] = best
        fills.append(CropPlacement(best.id, index))
        crop_counts[best.id] += 1
        if best.family:
            family_counts[best.family] += 1
        if best.type == CropType.FLOWER:
            flowers += 1

    log_attempt_detail(
        "Gap fill",
        cells=len(working),
        candidates=len(pool),
        filled=len(fills),
        flowers=f"{flowers}/{cap}",
    )
    return fills


__all__ = ["flower_cap", "auto_fill_gaps"]
