# app.py — JSON endpoints over the placement solver; progress no-cache
from __future__ import annotations
import os
import time
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, request, send_from_directory, jsonify, url_for

from config import CFG
from crops import CORE_CROPS, CROPS_BY_ID, crop_to_dict
from io_files import write_report, write_layout_view_html
from models import (
    Box, GridShapeError, Grid, Profile,
    check_grid_shape, crop_ids, grid_rows, parse_date,
)
from render import render_layout
from solver.constructive import auto_fill_bed
from solver.gaps import auto_fill_gaps
from solver.orchestrator import apply_placements, plan_layout
from solver.viability import viability_status
from stash import has_stash_fields, parse_stash, fmt_decoded_items, stash_total

from progress import (
    reset as progress_reset,
    start_timer as progress_start,
    as_json as progress_json,
    log_attempt_detail,
    set_done, set_result_url,
)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _resolve_output_paths(configured: str, fallback: str) -> Tuple[str, str, str]:
    name = (configured or "").strip() or fallback
    if os.path.isabs(name):
        full_path = name
    else:
        full_path = os.path.abspath(os.path.join(BASE_DIR, name))
    directory = os.path.dirname(full_path) or BASE_DIR
    filename = os.path.basename(full_path) or fallback
    return full_path, directory, filename


_REPORT_FULL_PATH, REPORT_DIR, REPORT_FILENAME = _resolve_output_paths(
    CFG.REPORT_OUT, "placement_report.txt"
)
_LAYOUT_FULL_PATH, LAYOUT_DIR, LAYOUT_FILENAME = _resolve_output_paths(
    CFG.LAYOUT_HTML, "layout_view.html"
)

LAST_RESULT: Dict[str, Any] = {
    "ok": False,
    "message": "No layout solved yet",
    "boxes": [],
    "results": [],
    "remaining": {},
    "gap_fills": {},
    "placed_count": 0,
    "stash_count": 0,
    "stash_items": [],
    "elapsed_str": "0s",
    "svg": "",
    "legend": "",
    "report_filename": REPORT_FILENAME,
    "layout_filename": LAYOUT_FILENAME,
}

app = Flask(__name__)


class BadRequest(ValueError):
    """Request payload that cannot be turned into solver input."""


@app.after_request
def _no_cache_progress(resp):
    try:
        if request.path == "/progress":
            resp.headers["Cache-Control"] = "no-store, max-age=0"
            resp.headers["Pragma"] = "no-cache"
            resp.headers["Expires"] = "0"
    except Exception:
        pass
    return resp


@app.errorhandler(BadRequest)
def _bad_request(exc):
    return jsonify({"ok": False, "reason": str(exc)}), 400


@app.errorhandler(GridShapeError)
def _bad_grid(exc):
    return jsonify({"ok": False, "reason": f"Bad grid: {exc}"}), 400


def _fmt_elapsed(seconds: float) -> str:
    if seconds < 1:
        return "0s"
    m, s = divmod(int(seconds), 60)
    if m == 0:
        return f"{s}s"
    h, m = divmod(m, 60)
    if h == 0:
        return f"{m}m {s}s"
    return f"{h}h {m}m {s}s"


def _merge_like_mapping() -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        merged.update(payload)

    try:
        form_dict = request.form.to_dict(flat=False)
    except Exception:
        form_dict = dict(request.form or {})
    for k, v in form_dict.items():
        merged.setdefault(k, v if isinstance(v, list) else [v])

    try:
        args_dict = request.args.to_dict(flat=False)
    except Exception:
        args_dict = dict(request.args or {})
    for k, v in args_dict.items():
        merged.setdefault(k, v if isinstance(v, list) else [v])

    return merged


def _scalar(like: Dict[str, Any], key: str, default: Any = None) -> Any:
    # form values arrive as single-item lists
    v = like.get(key, default)
    if isinstance(v, list):
        return v[0] if v else default
    return v


def _int_field(like: Dict[str, Any], key: str, default: Optional[int] = None) -> Optional[int]:
    raw = _scalar(like, key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise BadRequest(f"Bad {key}: {raw!r} is not an integer")


def _bool_field(like: Dict[str, Any], key: str) -> bool:
    raw = _scalar(like, key, False)
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    return bool(raw)


def _date_field(like: Dict[str, Any], key: str) -> Optional[date]:
    raw = _scalar(like, key)
    if raw is None or raw == "":
        return None
    try:
        return parse_date(raw)
    except (TypeError, ValueError):
        raise BadRequest(f"Bad {key}: {raw!r} is not a date")


def _profile_from(like: Dict[str, Any], required: bool) -> Optional[Profile]:
    raw = _scalar(like, "profile")
    if raw is None:
        last = _scalar(like, "last_frost")
        if last is None:
            if required:
                raise BadRequest("Bad profile: a last frost date is required")
            return None
        raw = {
            "last_frost_date": last,
            "first_frost_date": _scalar(like, "first_frost"),
            "season_extension_weeks": _scalar(like, "extension", 0),
        }
    if not isinstance(raw, dict):
        raise BadRequest("Bad profile: expected an object")
    try:
        return Profile.from_dict(raw)
    except (KeyError, TypeError, ValueError) as e:
        raise BadRequest(f"Bad profile: {type(e).__name__}: {e}")


def _seed_from(like: Dict[str, Any]) -> Optional[Any]:
    seed = _scalar(like, "seed")
    if seed is None or seed == "":
        return None
    if isinstance(seed, (int, str)) and not isinstance(seed, bool):
        return seed
    raise BadRequest(f"Bad seed: {seed!r}")


def _cells_from(raw: Any) -> Grid:
    if not isinstance(raw, list):
        raise BadRequest("Bad grid: cells must be a list")
    grid: Grid = []
    for cid in raw:
        if cid is None or cid == "":
            grid.append(None)
        elif not isinstance(cid, str):
            raise BadRequest(f"Bad grid: cell {cid!r} is not a crop id")
        elif cid in CROPS_BY_ID:
            grid.append(CROPS_BY_ID[cid])
        else:
            raise BadRequest(f"Bad grid: unknown crop {cid!r}")
    return grid


def _boxes_from(like: Dict[str, Any]) -> List[Box]:
    raw = like.get("boxes")
    if not isinstance(raw, list) or not raw:
        raise BadRequest("Bad boxes: expected a non-empty list")
    boxes: List[Box] = []
    for i, b in enumerate(raw):
        if not isinstance(b, dict):
            raise BadRequest(f"Bad boxes: entry {i} is not an object")
        try:
            width = int(b.get("width") or CFG.BED_WIDTH)
            height = int(b["height"]) if b.get("height") is not None else None
        except (TypeError, ValueError):
            raise BadRequest(f"Bad boxes: entry {i} has non-integer dimensions")
        cells = b.get("cells")
        if cells is None:
            if height is None:
                raise BadRequest(f"Bad boxes: entry {i} needs cells or a height")
            cells = [None] * max(0, width * height)
        boxes.append(Box(
            id=str(b.get("id") or f"box-{i + 1}"),
            width=width,
            cells=_cells_from(cells),
            height=height,
            name=str(b.get("name") or ""),
        ))
    return boxes


def _grid_from(like: Dict[str, Any]) -> Tuple[Grid, int, int]:
    width = _int_field(like, "width", CFG.BED_WIDTH)
    height = _int_field(like, "height")
    cells = like.get("cells")
    if cells is None:
        height = CFG.BED_HEIGHT if height is None else height
        cells = [None] * max(0, width * height)
    grid = _cells_from(cells)
    check_grid_shape(grid, width, height)
    if height is None:
        height = grid_rows(grid, width)
    return grid, width, height


# ---------- routes ----------

@app.route("/crops")
def crops_list():
    like = _merge_like_mapping()
    profile = _profile_from(like, required=False)
    when = _date_field(like, "date") or date.today()
    out = []
    for crop in CORE_CROPS:
        d = crop_to_dict(crop)
        if profile is not None:
            d["viability"] = viability_status(crop, profile, when)
        out.append(d)
    return jsonify({"ok": True, "crops": out})


@app.route("/fill", methods=["POST"])
def fill():
    like = _merge_like_mapping()
    grid, width, height = _grid_from(like)
    profile = _profile_from(like, required=True)
    new_grid = auto_fill_bed(
        grid, CORE_CROPS, profile,
        width=width, height=height,
        target_date=_date_field(like, "date"),
        seed=_seed_from(like),
    )
    return jsonify({"ok": True, "width": width, "height": height, "cells": crop_ids(new_grid)})


@app.route("/gaps", methods=["POST"])
def gaps():
    like = _merge_like_mapping()
    grid, width, height = _grid_from(like)
    fills = auto_fill_gaps(
        grid, CORE_CROPS, width,
        profile=_profile_from(like, required=False),
        target_date=_date_field(like, "date"),
        seed=_seed_from(like),
        max_fills=_int_field(like, "max_fills"),
    )
    new_grid = apply_placements(grid, fills, CROPS_BY_ID)
    return jsonify({
        "ok": True,
        "width": width,
        "height": height,
        "fills": [{"crop_id": p.crop_id, "cell_index": p.cell_index} for p in fills],
        "cells": crop_ids(new_grid),
    })


@app.route("/solve", methods=["POST"])
def solve():
    progress_reset()
    progress_start()
    t0 = time.time()

    like = _merge_like_mapping()
    stash, decoded, err = parse_stash(like)
    if err and not has_stash_fields(like):
        # no stash at all: a valid run that only gap-fills or reports the boxes
        stash, decoded, err = {}, [], None
    if err:
        seen_keys = ", ".join(list(like.keys())[:8]) or "—"
        reason = f"Bad stash: {err or 'nothing parsed from request'} (saw keys: {seen_keys})"
        set_done(False, reason=reason)
        return jsonify({"ok": False, "reason": reason}), 400

    try:
        boxes = _boxes_from(like)
        profile = _profile_from(like, required=False)
        target_date = _date_field(like, "date")
        seed = _seed_from(like)
        max_fills = _int_field(like, "max_fills")
        fill_gaps = _bool_field(like, "fill_gaps")
        plan = plan_layout(
            boxes, stash, CROPS_BY_ID,
            profile=profile, target_date=target_date, seed=seed,
            fill_gaps=fill_gaps, max_fills=max_fills,
        )
    except (BadRequest, GridShapeError) as e:
        set_done(False, reason=str(e))
        raise

    svg_markup, legend_html = render_layout(plan.boxes)
    report_name = REPORT_FILENAME
    layout_name = LAYOUT_FILENAME
    try:
        report_path = write_report(plan.box_results, plan.remaining_stash, BASE_DIR)
        report_name = os.path.basename(report_path) or REPORT_FILENAME
    except OSError as e:
        log_attempt_detail("Report write failed", error=f"{type(e).__name__}: {e}")
    try:
        layout_path = write_layout_view_html(svg_markup, legend_html, BASE_DIR)
        layout_name = os.path.basename(layout_path) or LAYOUT_FILENAME
    except OSError as e:
        log_attempt_detail("Layout view write failed", error=f"{type(e).__name__}: {e}")

    requested = stash_total(stash)
    ok_flag = not plan.remaining_stash
    message = f"Placed {plan.placed_count} of {requested}"
    if plan.remaining_stash:
        message += f"; {stash_total(plan.remaining_stash)} could not be placed"

    LAST_RESULT.update({
        "ok": ok_flag,
        "message": message,
        "boxes": [
            {"id": b.id, "name": b.name, "width": b.width, "cells": crop_ids(b.cells)}
            for b in plan.boxes
        ],
        "results": [r.as_dict() for r in plan.box_results],
        "remaining": dict(plan.remaining_stash),
        "gap_fills": {
            bid: [{"crop_id": p.crop_id, "cell_index": p.cell_index} for p in fills]
            for bid, fills in plan.gap_fills.items()
        },
        "placed_count": plan.placed_count,
        "stash_count": requested,
        "stash_items": fmt_decoded_items(decoded),
        "elapsed_str": _fmt_elapsed(time.time() - t0),
        "svg": svg_markup,
        "legend": legend_html,
        "report_filename": report_name,
        "layout_filename": layout_name,
    })
    set_done(ok_flag, message=message)
    set_result_url(url_for("result_latest"))
    return jsonify({k: v for k, v in LAST_RESULT.items() if k not in ("svg", "legend")})


@app.route("/result/latest")
def result_latest():
    return jsonify(LAST_RESULT)


@app.route("/download/report")
def download_report():
    return send_from_directory(REPORT_DIR, REPORT_FILENAME, as_attachment=True)


@app.route("/download/html")
def download_html():
    return send_from_directory(LAYOUT_DIR, LAYOUT_FILENAME, as_attachment=True)


@app.route("/progress")
def progress():
    return jsonify(progress_json())


if __name__ == "__main__":
    app.run(debug=False)
