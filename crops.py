# crops.py — default crop catalog and catalog loading/validation
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from models import Crop, CropType

VEG = CropType.VEGETABLE
HERB = CropType.HERB
FLOWER = CropType.FLOWER

# Square Foot Gardening densities (plants per square foot).
SFG_DENSITIES = (1, 4, 9, 16)

# (id, name, emoji, density, window_start, window_end, friends, enemies, type, family)
_CATALOG_ROWS: Tuple[Tuple[Any, ...], ...] = (
    # ----- leafy greens -----
    ("lettuce", "Lettuce", "🥬", 4, -4, 2, ("carrot", "radish", "cucumber"), (), VEG, "Asteraceae"),
    ("spinach", "Spinach", "🥬", 9, -6, 0, ("peas", "radish"), (), VEG, "Amaranthaceae"),
    ("kale", "Kale", "🥬", 4, -4, 2, ("onion", "garlic", "dill"), ("tomato", "cherry-tomato"), VEG, "Brassicaceae"),
    ("arugula", "Arugula", "🥗", 4, -4, 2, ("cucumber", "lettuce", "spinach"), (), VEG, "Brassicaceae"),
    ("swiss-chard", "Swiss Chard", "🥬", 4, -2, 4, ("onion", "garlic", "radish"), (), VEG, "Amaranthaceae"),
    ("bok-choy", "Bok Choy", "🥬", 4, -4, 0, ("onion", "dill", "garlic"), ("tomato", "cherry-tomato"), VEG, "Brassicaceae"),
    ("collard-greens", "Collard Greens", "🥬", 4, -4, 2, ("onion", "garlic", "dill"), ("tomato", "cherry-tomato"), VEG, "Brassicaceae"),
    ("mustard-greens", "Mustard Greens", "🥬", 4, -4, 2, ("radish", "peas", "lettuce"), (), VEG, "Brassicaceae"),
    ("endive", "Endive", "🥗", 4, -4, 2, ("lettuce", "radish"), (), VEG, "Asteraceae"),
    ("radicchio", "Radicchio", "🥗", 4, -4, 2, ("lettuce", "endive"), (), VEG, "Asteraceae"),
    # ----- fruiting / nightshades -----
    ("tomato", "Tomato", "🍅", 1, 0, 4, ("carrot", "basil", "parsley", "onion"),
     ("potato", "kale", "bok-choy", "collard-greens", "peas"), VEG, "Solanaceae"),
    ("cherry-tomato", "Cherry Tomato", "🍅", 1, 0, 4, ("carrot", "basil", "parsley", "onion"),
     ("potato", "kale", "bok-choy", "collard-greens", "peas"), VEG, "Solanaceae"),
    ("pepper", "Pepper", "🫑", 1, 1, 6, ("basil", "onion", "carrot"), (), VEG, "Solanaceae"),
    ("eggplant", "Eggplant", "🍆", 1, 2, 6, ("basil", "thyme", "oregano"), (), VEG, "Solanaceae"),
    ("potato", "Potato", "🥔", 1, -2, 2, ("peas", "cabbage", "horseradish"),
     ("tomato", "cherry-tomato", "cucumber", "pumpkin", "tomatillo", "turnip", "zucchini",
      "yellow-squash", "butternut-squash", "sunflower"), VEG, "Solanaceae"),
    ("tomatillo", "Tomatillo", "🍅", 1, 0, 4, ("basil", "carrot", "onion"), ("potato",), VEG, "Solanaceae"),
    # ----- brassicas -----
    ("broccoli", "Broccoli", "🥦", 1, -4, 0, ("onion", "dill", "garlic"), (), VEG, "Brassicaceae"),
    ("cauliflower", "Cauliflower", "🥦", 1, -4, 0, ("onion", "dill", "garlic"), (), VEG, "Brassicaceae"),
    ("cabbage", "Cabbage", "🥬", 1, -4, 0, ("onion", "dill", "potato"), (), VEG, "Brassicaceae"),
    ("brussels-sprouts", "Brussels Sprouts", "🥬", 1, -6, -2, ("onion", "dill", "garlic"), (), VEG, "Brassicaceae"),
    ("kohlrabi", "Kohlrabi", "🥬", 4, -4, 2, ("onion", "garlic"), (), VEG, "Brassicaceae"),
    ("radish", "Radish", "🌱", 16, -4, 8, ("lettuce", "peas", "carrot", "spinach"), (), VEG, "Brassicaceae"),
    ("turnip", "Turnip", "🌱", 9, -4, 2, ("peas", "radish"), ("potato",), VEG, "Brassicaceae"),
    ("rutabaga", "Rutabaga", "🌱", 9, -6, 0, ("peas", "onion"), (), VEG, "Brassicaceae"),
    # ----- legumes -----
    ("peas", "Sugar Snap Peas", "🫛", 9, -8, -2, ("carrot", "radish", "turnip", "cucumber"),
     ("tomato", "cherry-tomato", "onion", "garlic", "shallot", "leek"), VEG, "Fabaceae"),
    ("green-beans", "Green Beans", "🫘", 9, 0, 6, ("carrot", "cucumber", "radish"),
     ("onion", "garlic", "shallot", "leek"), VEG, "Fabaceae"),
    ("bush-beans", "Bush Beans", "🫘", 9, 0, 6, ("carrot", "cucumber", "radish"),
     ("onion", "garlic", "shallot"), VEG, "Fabaceae"),
    ("pole-beans", "Pole Beans", "🫘", 9, 0, 6, ("carrot", "cucumber", "radish"),
     ("onion", "garlic", "shallot"), VEG, "Fabaceae"),
    ("fava-beans", "Fava Beans", "🫘", 4, -8, -2, ("potato", "carrot"), ("onion", "garlic"), VEG, "Fabaceae"),
    ("edamame", "Edamame", "🫛", 9, 0, 6, ("carrot", "cucumber"), ("onion", "garlic"), VEG, "Fabaceae"),
    # ----- roots and alliums -----
    ("carrot", "Carrot", "🥕", 16, -2, 4, ("lettuce", "tomato", "peas", "onion"), ("dill",), VEG, "Apiaceae"),
    ("beet", "Beet", "🌱", 9, -2, 4, ("onion", "lettuce", "cabbage"), (), VEG, "Amaranthaceae"),
    ("onion", "Onion", "🧅", 16, -4, 2, ("carrot", "beet", "tomato", "lettuce"),
     ("peas", "green-beans", "bush-beans", "pole-beans", "fava-beans", "edamame"), VEG, "Amaryllidaceae"),
    ("garlic", "Garlic", "🧄", 16, -8, -2, ("tomato", "lettuce", "cabbage"),
     ("peas", "green-beans", "bush-beans", "pole-beans", "fava-beans", "edamame"), VEG, "Amaryllidaceae"),
    ("parsnip", "Parsnip", "🥕", 16, -4, 0, ("peas", "radish"), (), VEG, "Apiaceae"),
    ("shallot", "Shallot", "🧅", 16, -4, 2, ("carrot", "beet", "tomato"),
     ("peas", "green-beans", "bush-beans", "pole-beans"), VEG, "Amaryllidaceae"),
    ("leek", "Leek", "🧅", 9, -4, 2, ("carrot",), ("peas", "green-beans"), VEG, "Amaryllidaceae"),
    ("horseradish", "Horseradish", "🌿", 1, -4, 2, ("potato",), (), HERB, "Brassicaceae"),
    # ----- cucurbits -----
    ("cucumber", "Cucumber", "🥒", 1, 1, 6, ("peas", "radish", "lettuce"), ("potato",), VEG, "Cucurbitaceae"),
    ("zucchini", "Zucchini", "🥒", 1, 1, 6, ("radish",), ("potato",), VEG, "Cucurbitaceae"),
    ("yellow-squash", "Yellow Squash", "🎃", 1, 1, 6, ("radish",), ("potato",), VEG, "Cucurbitaceae"),
    ("pumpkin", "Pumpkin", "🎃", 1, 1, 6, (), ("potato",), VEG, "Cucurbitaceae"),
    ("butternut-squash", "Butternut Squash", "🎃", 1, 1, 6, ("radish",), ("potato",), VEG, "Cucurbitaceae"),
    ("watermelon", "Watermelon", "🍉", 1, 2, 6, ("radish",), (), VEG, "Cucurbitaceae"),
    # ----- herbs -----
    ("basil", "Basil", "🌿", 4, 0, 6, ("tomato", "cherry-tomato", "pepper"), (), HERB, "Lamiaceae"),
    ("cilantro", "Cilantro", "🌿", 4, -2, 4, ("spinach", "lettuce"), (), HERB, "Apiaceae"),
    ("parsley", "Parsley", "🌿", 4, -2, 4, ("tomato", "cherry-tomato", "carrot"), (), HERB, "Apiaceae"),
    ("dill", "Dill", "🌿", 4, -2, 4, ("cabbage", "lettuce", "onion"), ("carrot",), HERB, "Apiaceae"),
    ("oregano", "Oregano", "🌿", 1, 0, 6, ("eggplant", "pepper"), (), HERB, "Lamiaceae"),
    ("thyme", "Thyme", "🌿", 4, -2, 4, ("eggplant", "cabbage"), (), HERB, "Lamiaceae"),
    # ----- companion flowers -----
    ("marigold", "Marigold", "🌼", 4, 0, 6, ("tomato", "pepper", "eggplant", "basil"), (), FLOWER, "Asteraceae"),
    ("nasturtium", "Nasturtium", "🌺", 1, 0, 4, ("cucumber", "zucchini", "tomato", "radish"), (), FLOWER, "Tropaeolaceae"),
    ("calendula", "Calendula", "🌼", 4, -2, 4, ("tomato", "carrot", "lettuce"), (), FLOWER, "Asteraceae"),
    ("borage", "Borage", "🌸", 1, -2, 4, ("tomato", "zucchini", "yellow-squash"), (), FLOWER, "Boraginaceae"),
    ("sunflower", "Sunflower", "🌻", 1, 0, 6, ("cucumber", "lettuce"), ("potato",), FLOWER, "Asteraceae"),
)


def _row_to_crop(row: Tuple[Any, ...]) -> Crop:
    cid, name, emoji, density, start, end, friends, enemies, ctype, family = row
    return Crop(
        id=cid,
        sfg_density=density,
        start_window_start=start,
        start_window_end=end,
        friends=tuple(friends),
        enemies=tuple(enemies),
        type=ctype,
        family=family,
        name=name,
        emoji=emoji,
    )


CORE_CROPS: List[Crop] = [_row_to_crop(r) for r in _CATALOG_ROWS]

CROPS_BY_ID: Dict[str, Crop] = {c.id: c for c in CORE_CROPS}


# ---------- loading from JSON-like records ----------

def _parse_type(raw: Any) -> Optional[CropType]:
    if raw is None or raw == "":
        return None
    if isinstance(raw, CropType):
        return raw
    try:
        return CropType(str(raw).strip().lower())
    except ValueError:
        return None


def crop_from_dict(d: Mapping[str, Any]) -> Crop:
    """
    Build a Crop from a record shaped like the stored catalog:
    ``{"id", "sfg_density", "planting_strategy": {...}, "companions": {...}}``.
    Flat ``start_window_start``/``friends`` keys are accepted too.
    """
    strategy = d.get("planting_strategy") or {}
    companions = d.get("companions") or {}
    start = strategy.get("start_window_start", d.get("start_window_start", 0))
    end = strategy.get("start_window_end", d.get("start_window_end", 0))
    friends = companions.get("friends", d.get("friends")) or ()
    enemies = companions.get("enemies", d.get("enemies")) or ()
    return Crop(
        id=str(d["id"]),
        sfg_density=int(d.get("sfg_density", 1)),
        start_window_start=int(start),
        start_window_end=int(end),
        friends=tuple(str(f) for f in friends),
        enemies=tuple(str(e) for e in enemies),
        type=_parse_type(d.get("type")),
        family=d.get("family") or d.get("botanical_family") or None,
        name=d.get("name"),
        emoji=d.get("emoji"),
    )


def crop_to_dict(crop: Crop) -> Dict[str, Any]:
    return {
        "id": crop.id,
        "name": crop.label,
        "emoji": crop.emoji,
        "sfg_density": crop.sfg_density,
        "planting_strategy": {
            "start_window_start": crop.start_window_start,
            "start_window_end": crop.start_window_end,
        },
        "companions": {"friends": list(crop.friends), "enemies": list(crop.enemies)},
        "type": crop.type.value if crop.type else None,
        "family": crop.family,
    }


def load_catalog(records: Iterable[Mapping[str, Any]]) -> List[Crop]:
    return [crop_from_dict(r) for r in records]


def validate_catalog(crops: Iterable[Crop]) -> List[str]:
    """Return a list of data-integrity problems (empty when the catalog is clean)."""
    problems: List[str] = []
    seen: Dict[str, Crop] = {}
    crop_list = list(crops)
    for crop in crop_list:
        if crop.id in seen:
            problems.append(f"duplicate crop id: {crop.id}")
        seen[crop.id] = crop

    for crop in crop_list:
        if crop.sfg_density not in SFG_DENSITIES:
            problems.append(f"{crop.id}: unsupported density {crop.sfg_density}")
        if crop.start_window_start > crop.start_window_end:
            problems.append(
                f"{crop.id}: window start {crop.start_window_start} after end {crop.start_window_end}"
            )
        for kind, refs in (("friends", crop.friends), ("enemies", crop.enemies)):
            for ref in refs:
                if ref == crop.id:
                    problems.append(f"{crop.id}: lists itself in {kind}")
                elif ref not in seen:
                    problems.append(f"{crop.id}: unknown crop {ref!r} in {kind}")
                elif kind == "enemies" and crop.id not in seen[ref].enemies:
                    # one-sided enemies let the filler place the pair from the other side
                    problems.append(f"{crop.id}: enemy {ref!r} does not list {crop.id!r} back")
    return problems


__all__ = [
    "CORE_CROPS",
    "CROPS_BY_ID",
    "SFG_DENSITIES",
    "crop_from_dict",
    "crop_to_dict",
    "load_catalog",
    "validate_catalog",
]
