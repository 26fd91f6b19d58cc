from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from config import CFG


class GridShapeError(ValueError):
    """Raised for grids whose dimensions cannot describe a row-major bed."""


class CropType(str, Enum):
    VEGETABLE = "vegetable"
    HERB = "herb"
    FLOWER = "flower"


@dataclass(frozen=True)
class Crop:
    id: str
    sfg_density: int
    start_window_start: int
    start_window_end: int
    friends: Tuple[str, ...] = ()
    enemies: Tuple[str, ...] = ()
    type: Optional[CropType] = None
    family: Optional[str] = None
    name: Optional[str] = None
    emoji: Optional[str] = None

    @property
    def label(self) -> str:
        return self.name or self.id


Grid = List[Optional[Crop]]
Catalog = Union[Sequence[Crop], Mapping[str, Crop]]
Stash = Dict[str, int]
SeedLike = Union[str, int]


def parse_date(value: Any) -> date:
    """Coerce an ISO string, ``date`` or ``datetime`` to a calendar date.

    Datetimes are truncated to their local calendar day, which is the same
    thing as normalising them to midnight. Aware datetimes are converted to
    the local timezone first.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return datetime.fromisoformat(text).date()
    raise TypeError(f"cannot interpret {value!r} as a date")


@dataclass(frozen=True)
class Profile:
    last_frost_date: date
    first_frost_date: date
    season_extension_weeks: int = 0
    name: str = ""
    hardiness_zone: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Profile":
        last = parse_date(data["last_frost_date"])
        first_raw = data.get("first_frost_date")
        first = parse_date(first_raw) if first_raw else last
        weeks = int(data.get("season_extension_weeks") or 0)
        return cls(
            last_frost_date=last,
            first_frost_date=first,
            season_extension_weeks=max(0, weeks),
            name=str(data.get("name") or ""),
            hardiness_zone=str(data.get("hardiness_zone") or ""),
        )


@dataclass
class Box:
    id: str
    width: int
    cells: Grid
    height: Optional[int] = None
    name: str = ""

    def rows(self) -> int:
        return grid_rows(self.cells, self.width)

    def empty_count(self) -> int:
        return sum(1 for c in self.cells if c is None)

    def copy(self) -> "Box":
        return Box(self.id, self.width, list(self.cells), self.height, self.name)


@dataclass(frozen=True)
class CropPlacement:
    crop_id: str
    cell_index: int


@dataclass(frozen=True)
class FailedPlacement:
    crop_id: str
    reason: str


@dataclass(frozen=True)
class PlacementReport:
    placed: Tuple[CropPlacement, ...] = ()
    failed: Tuple[FailedPlacement, ...] = ()


@dataclass(frozen=True)
class BoxPlacementResult:
    box_id: str
    placed: Tuple[CropPlacement, ...] = ()
    failed: Tuple[FailedPlacement, ...] = ()

    def as_dict(self) -> Dict[str, Any]:
        return {
            "box_id": self.box_id,
            "placed": [{"crop_id": p.crop_id, "cell_index": p.cell_index} for p in self.placed],
            "failed": [{"crop_id": f.crop_id, "reason": f.reason} for f in self.failed],
        }


@dataclass
class LayoutPlan:
    boxes: List[Box] = field(default_factory=list)
    box_results: List[BoxPlacementResult] = field(default_factory=list)
    remaining_stash: Stash = field(default_factory=dict)
    gap_fills: Dict[str, List[CropPlacement]] = field(default_factory=dict)

    @property
    def placed_count(self) -> int:
        return sum(len(r.placed) for r in self.box_results)


# ---------- grid helpers ----------

def grid_rows(grid: Sequence[Any], width: int) -> int:
    if width <= 0:
        raise GridShapeError(f"grid width must be positive, got {width}")
    return math.ceil(len(grid) / width)


def check_grid_shape(grid: Sequence[Any], width: int, height: Optional[int] = None) -> None:
    """Reject dimensions that cannot be a row-major ``width × height`` bed."""
    if width <= 0:
        raise GridShapeError(f"grid width must be positive, got {width}")
    if height is not None:
        if height <= 0:
            raise GridShapeError(f"grid height must be positive, got {height}")
        if len(grid) != width * height:
            raise GridShapeError(
                f"grid has {len(grid)} cells, expected {width}×{height}={width * height}"
            )
    if len(grid) > CFG.MAX_GRID_CELLS:
        raise GridShapeError(
            f"grid has {len(grid)} cells; limit is {CFG.MAX_GRID_CELLS}"
        )


def empty_indices(grid: Sequence[Optional[Crop]]) -> List[int]:
    return [i for i, cell in enumerate(grid) if cell is None]


def crop_ids(grid: Iterable[Optional[Crop]]) -> List[Optional[str]]:
    return [cell.id if cell is not None else None for cell in grid]


def as_catalog(crops: Catalog) -> Dict[str, Crop]:
    """Index a crop list by id; mappings pass through untouched."""
    if isinstance(crops, Mapping):
        return crops  # type: ignore[return-value]
    return {c.id: c for c in crops}


def catalog_list(crops: Catalog) -> List[Crop]:
    if isinstance(crops, Mapping):
        return list(crops.values())
    return list(crops)
