"""Helpers for writing solver outputs to disk."""

from __future__ import annotations

import os
from typing import Mapping, Sequence

from config import CFG
from models import BoxPlacementResult


def _resolve_output_path(base_dir: str, configured_name: str, fallback: str) -> str:
    """Return the absolute path where an output artifact should be written."""

    name = (configured_name or "").strip() or fallback
    if os.path.isabs(name):
        return name
    return os.path.join(base_dir, name)


def write_report(
    results: Sequence[BoxPlacementResult],
    remaining: Mapping[str, int],
    base_dir: str,
) -> str:
    """Write a per-box placement report to the configured text file."""

    path = _resolve_output_path(base_dir, CFG.REPORT_OUT, "placement_report.txt")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        if not results:
            f.write("No boxes\n")
        for r in results:
            f.write(f"[{r.box_id}] placed {len(r.placed)}, failed {len(r.failed)}\n")
            for p in r.placed:
                f.write(f"  {p.crop_id} @ cell {p.cell_index}\n")
            for fp in r.failed:
                f.write(f"  ! {fp.crop_id}: {fp.reason}\n")
        left = {k: v for k, v in remaining.items() if v > 0}
        if left:
            f.write("Remaining: " + ", ".join(f"{k}×{v}" for k, v in sorted(left.items())) + "\n")
        else:
            f.write("Remaining: none\n")
    return path


def write_layout_view_html(svg: str, legend_html: str, base_dir: str) -> str:
    """Write the rendered SVG/legend preview to the configured HTML file."""

    path = _resolve_output_path(base_dir, CFG.LAYOUT_HTML, "layout_view.html")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as vf:
        vf.write(
            f"""<!doctype html>
<html><head><meta charset='utf-8'><title>Garden Layout</title></head>
<body class='container'>
<h1>Garden Layout</h1>
<section class='card'><div class='beds'>{svg}</div></section>
<section class='card'><h3>Legend</h3><ul>{legend_html}</ul></section>
</body></html>"""
        )
    return path


__all__ = ["write_report", "write_layout_view_html"]
