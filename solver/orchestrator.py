# Orchestrator: stash allocation across boxes, then optional gap fill
from __future__ import annotations

import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from models import (
    Box,
    BoxPlacementResult,
    Catalog,
    CropPlacement,
    Grid,
    LayoutPlan,
    Profile,
    SeedLike,
    Stash,
    as_catalog,
    check_grid_shape,
)
from progress import (
    log_attempt_detail,
    set_box,
    set_failed_count,
    set_message,
    set_phase,
    set_placed_count,
    set_progress_pct,
    set_stash_count,
    set_status,
)
from solver.gaps import auto_fill_gaps
from solver.priority import auto_fill_from_stash
from stash import stash_from_failures, stash_total

BoxCallback = Callable[[int, int, BoxPlacementResult], None]


# ---------- helpers ----------

def _allocate_share(remaining: int, box_empty: int, total_empty: int) -> int:
    """Units of one crop sent to a non-last box, proportional to its free cells."""
    return min(remaining, max(1, math.floor(remaining * box_empty / total_empty)))


def _merge(a: Stash, b: Stash) -> Stash:
    out = dict(a)
    for cid, n in b.items():
        out[cid] = out.get(cid, 0) + n
    return out


def apply_placements(grid: Grid, placements: Sequence[CropPlacement], crops: Catalog) -> Grid:
    """Write each placement into a copy of *grid*; unknown ids are skipped."""
    by_id = as_catalog(crops)
    out: Grid = list(grid)
    for p in placements:
        crop = by_id.get(p.crop_id)
        if crop is None or not (0 <= p.cell_index < len(out)):
            continue
        out[p.cell_index] = crop
    return out


# ---------- allocator ----------

def auto_fill_all_boxes(
    boxes: Sequence[Box],
    stash: Stash,
    crops: Catalog,
    seed: Optional[SeedLike] = None,
    on_box: Optional[BoxCallback] = None,
) -> Tuple[List[BoxPlacementResult], Stash]:
    """
    Spread *stash* over *boxes* in order.

    Every box but the last gets a share of each crop proportional to its
    empty cells (at least one unit while any remain); the last box gets the
    rest. Units a box cannot place ride along to the next box, and whatever
    the last box cannot place comes back as the remaining stash, so
    ``placed + remaining`` always equals the requested total. Each box runs
    with its own RNG built from the same *seed*.

    *on_box* is called as ``on_box(position, total, result)`` after each box;
    the allocator itself keeps no shared state.
    """
    total_empty = sum(b.empty_count() for b in boxes)
    total_qty = stash_total(stash)
    if not boxes or total_empty == 0 or total_qty == 0:
        log_attempt_detail(
            "Allocation skipped",
            boxes=len(boxes),
            empty_cells=total_empty,
            requested=total_qty,
        )
        return [BoxPlacementResult(b.id) for b in boxes], dict(stash)

    by_id = as_catalog(crops)
    pool: Stash = {cid: int(n) for cid, n in stash.items()}
    carry: Stash = {}
    results: List[BoxPlacementResult] = []
    last = len(boxes) - 1

    log_attempt_detail(
        "Run setup",
        boxes=len(boxes),
        empty_cells=total_empty,
        requested=total_qty,
        seed=seed,
    )

    for i, box in enumerate(boxes):
        if i == last:
            allocation = {cid: n for cid, n in pool.items() if n > 0}
            pool = {}
        else:
            allocation = {}
            box_empty = box.empty_count()
            for cid, rem in pool.items():
                if rem <= 0:
                    continue
                allocation[cid] = _allocate_share(rem, box_empty, total_empty)
            for cid, n in allocation.items():
                pool[cid] -= n

        report = auto_fill_from_stash(box.cells, _merge(allocation, carry), by_id, box.width, seed)
        carry = stash_from_failures(report.failed)
        results.append(BoxPlacementResult(box.id, report.placed, report.failed))

        if on_box is not None:
            on_box(i + 1, len(boxes), results[-1])
        log_attempt_detail(
            "Box solved",
            box=box.id,
            allocated=stash_total(allocation),
            carried_in=len(results[-2].failed) if i > 0 else 0,
            placed=len(report.placed),
            failed=len(report.failed),
        )

    return results, {cid: n for cid, n in carry.items() if n > 0}


# ---------- full layout ----------

def plan_layout(
    boxes: Sequence[Box],
    stash: Stash,
    crops: Catalog,
    profile: Optional[Profile] = None,
    target_date=None,
    seed: Optional[SeedLike] = None,
    fill_gaps: bool = False,
    max_fills: Optional[int] = None,
) -> LayoutPlan:
    """Place the stash, write the results into box copies, and optionally gap-fill."""
    for box in boxes:
        check_grid_shape(box.cells, box.width, box.height)

    by_id = as_catalog(crops)
    set_status("Solving")
    set_stash_count(stash_total(stash))
    set_phase("allocate")
    set_progress_pct(0.0)

    placed_so_far = 0

    def _publish(position: int, total: int, result: BoxPlacementResult) -> None:
        nonlocal placed_so_far
        placed_so_far += len(result.placed)
        set_box(result.box_id, position, total)
        set_placed_count(placed_so_far)
        set_progress_pct(100.0 * position / total)

    results, remaining = auto_fill_all_boxes(boxes, stash, by_id, seed, on_box=_publish)
    set_failed_count(stash_total(remaining))

    planned: List[Box] = []
    for box, result in zip(boxes, results):
        out = box.copy()
        out.cells = apply_placements(out.cells, result.placed, by_id)
        planned.append(out)

    gap_fills: Dict[str, List[CropPlacement]] = {}
    if fill_gaps:
        set_phase("gaps")
        for i, box in enumerate(planned):
            set_box(box.id, i + 1, len(planned))
            fills = auto_fill_gaps(
                box.cells, by_id, box.width,
                profile=profile, target_date=target_date,
                seed=seed, max_fills=max_fills,
            )
            box.cells = apply_placements(box.cells, fills, by_id)
            gap_fills[box.id] = fills

    plan = LayoutPlan(planned, results, remaining, gap_fills)
    message = f"Placed {plan.placed_count} of {stash_total(stash)}"
    if remaining:
        message += f"; {stash_total(remaining)} left over"
    set_message(message)
    log_attempt_detail(
        "Layout planned",
        placed=plan.placed_count,
        remaining=stash_total(remaining),
        gap_fills=sum(len(v) for v in gap_fills.values()),
    )
    return plan


__all__ = ["apply_placements", "auto_fill_all_boxes", "plan_layout"]
