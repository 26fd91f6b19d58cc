from crops import CORE_CROPS, CROPS_BY_ID, crop_from_dict, crop_to_dict, load_catalog, validate_catalog
from models import Crop, CropType


def test_default_catalog_is_clean():
    assert validate_catalog(CORE_CROPS) == []
    assert len(CORE_CROPS) == len(CROPS_BY_ID) >= 50


def test_catalog_has_every_crop_type():
    types = {c.type for c in CORE_CROPS}
    assert types == {CropType.VEGETABLE, CropType.HERB, CropType.FLOWER}
    assert all(c.family for c in CORE_CROPS)


def test_enemies_are_mutual():
    for crop in CORE_CROPS:
        for enemy in crop.enemies:
            assert crop.id in CROPS_BY_ID[enemy].enemies, (crop.id, enemy)


def test_crop_from_nested_record():
    crop = crop_from_dict({
        "id": "kale",
        "name": "Kale",
        "sfg_density": 4,
        "planting_strategy": {"start_window_start": -4, "start_window_end": 2},
        "companions": {"friends": ["onion"], "enemies": ["tomato"]},
        "type": "Vegetable",
        "botanical_family": "Brassicaceae",
    })
    assert crop == Crop("kale", 4, -4, 2, ("onion",), ("tomato",), CropType.VEGETABLE, "Brassicaceae", "Kale")


def test_crop_from_flat_record_and_back():
    crop = crop_from_dict({"id": "x", "sfg_density": 9, "start_window_start": -1, "start_window_end": 3, "type": "weird"})
    assert crop.type is None
    assert crop.friends == ()
    d = crop_to_dict(CROPS_BY_ID["tomato"])
    assert load_catalog([d]) == [CROPS_BY_ID["tomato"]]


def test_validator_reports_problems():
    bad = [
        Crop("a", 3, 2, 1, enemies=("b",)),
        Crop("b", 4, 0, 1),
        Crop("c", 4, 0, 1, friends=("c", "zzz")),
        Crop("b", 4, 0, 1),
    ]
    problems = validate_catalog(bad)
    assert "duplicate crop id: b" in problems
    assert "a: unsupported density 3" in problems
    assert "a: window start 2 after end 1" in problems
    assert "a: enemy 'b' does not list 'a' back" in problems
    assert "c: lists itself in friends" in problems
    assert "c: unknown crop 'zzz' in friends" in problems
