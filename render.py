import random
import zlib
from html import escape
from typing import Dict, List, Sequence, Tuple

from models import Box, CropType

CELL_PX = 60

_TYPE_STROKE = {
    CropType.VEGETABLE: "#2e7d32",
    CropType.HERB: "#6a1b9a",
    CropType.FLOWER: "#ef6c00",
}

def _color(name: str) -> str:
    rnd = random.Random(zlib.crc32(name.encode("utf-8")))
    r = rnd.randint(90, 230)
    g = rnd.randint(90, 230)
    b = rnd.randint(90, 230)
    return f"rgb({r},{g},{b})"

def render_box(box: Box, scale: int = CELL_PX) -> Tuple[str, Dict[str, str]]:
    """One square per cell, labelled with the crop's emoji or name; empties stay blank."""
    rows = box.rows()
    svg_w = box.width * scale + 2
    svg_h = rows * scale + 2

    palette: Dict[str, str] = {}
    cells: List[str] = []
    for idx, crop in enumerate(box.cells):
        row, col = divmod(idx, box.width)
        x = col * scale + 1
        y = row * scale + 1
        if crop is None:
            cells.append(
                f'<rect x="{x}" y="{y}" width="{scale}" height="{scale}" fill="#f4efe6" stroke="#bbb" stroke-width="1"/>'
            )
            continue
        fill = palette.setdefault(crop.label, _color(crop.id))
        stroke = _TYPE_STROKE.get(crop.type, "black")
        text = escape(crop.emoji or crop.label)
        cells.append(
            f'<rect x="{x}" y="{y}" width="{scale}" height="{scale}" fill="{fill}" stroke="{stroke}" stroke-width="2"/>'
            f'<text x="{x + 4}" y="{y + 16}" font-size="12" fill="black">{text}</text>'
            f'<title>{escape(crop.label)}</title>'
        )

    frame = f'<rect x="1" y="1" width="{svg_w - 2}" height="{svg_h - 2}" fill="none" stroke="black" stroke-width="2"/>'
    svg = (
        f'<svg class="layout-svg" data-box="{escape(box.id)}" xmlns="http://www.w3.org/2000/svg" '
        f'width="{svg_w}" height="{svg_h}" '
        f'viewBox="0 0 {svg_w} {svg_h}" preserveAspectRatio="xMinYMin meet">'
        f'{"".join(cells)}{frame}</svg>'
    )
    return svg, palette

def render_layout(boxes: Sequence[Box]) -> Tuple[str, str]:
    svgs: List[str] = []
    palette: Dict[str, str] = {}
    for box in boxes:
        svg, colors = render_box(box)
        title = escape(box.name or box.id)
        svgs.append(f"<figure class='box'><figcaption>{title}</figcaption>{svg}</figure>")
        for name, color in colors.items():
            palette.setdefault(name, color)

    legend = "".join(
        f"<li><span class='swatch' style='background:{c}'></span>{escape(n)}</li>"
        for n, c in sorted(palette.items())
    )
    return "".join(svgs), legend
