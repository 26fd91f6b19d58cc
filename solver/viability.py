# solver/viability.py — planting windows relative to the last frost date
from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from config import CFG
from models import Catalog, Crop, Profile, catalog_list, parse_date

DateLike = Union[date, datetime, str]

VIABLE = "viable"
MARGINAL = "marginal"
NOT_VIABLE = "not-viable"


def calculate_planting_date(reference: DateLike, offset_weeks: int) -> date:
    """Shift *reference* by a signed number of weeks (negative = earlier)."""
    return parse_date(reference) + timedelta(days=offset_weeks * 7)


def planting_window(crop: Crop, profile: Profile):
    """Return ``(start, end)`` dates; season extension only moves the start."""
    start = calculate_planting_date(
        profile.last_frost_date,
        crop.start_window_start - profile.season_extension_weeks,
    )
    end = calculate_planting_date(profile.last_frost_date, crop.start_window_end)
    return start, end


def is_crop_viable(crop: Crop, profile: Profile, target_date: DateLike) -> bool:
    start, end = planting_window(crop, profile)
    target = parse_date(target_date)
    return start <= target <= end


def viability_status(crop: Crop, profile: Profile, target_date: DateLike) -> str:
    """
    Classify *crop* for *target_date*:
      - ``viable``      plantable with the profile's own extension
      - ``marginal``    plantable only with the maximum season extension
      - ``not-viable``  out of season either way
    """
    if is_crop_viable(crop, profile, target_date):
        return VIABLE
    extended = replace(profile, season_extension_weeks=int(CFG.MAX_EXTENSION_WEEKS))
    if is_crop_viable(crop, extended, target_date):
        return MARGINAL
    return NOT_VIABLE


def filter_viable(crops: Catalog, profile: Profile, target_date: Optional[DateLike] = None) -> List[Crop]:
    """Catalog order is preserved."""
    when = parse_date(target_date) if target_date is not None else date.today()
    return [c for c in catalog_list(crops) if is_crop_viable(c, profile, when)]


__all__ = [
    "VIABLE",
    "MARGINAL",
    "NOT_VIABLE",
    "calculate_planting_date",
    "planting_window",
    "is_crop_viable",
    "viability_status",
    "filter_viable",
]
