# stash.py — stash parsing and bookkeeping
from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from models import FailedPlacement, Stash

# Accept keys like qty_tomato, qty[tomato], qty-bush-beans
_QTY_KEY_RE = re.compile(r"^qty[_\-\[](?P<crop>[a-z0-9][a-z0-9\-]*)\]?$", re.IGNORECASE)


def _to_int(x: Any) -> Optional[int]:
    try:
        return int(float(x))
    except Exception:
        return None


def _as_listish(val: Any) -> List[Any]:
    if val is None:
        return []
    if isinstance(val, (list, tuple)):
        return list(val)
    return [val]


def _getlist(container: Any, key: str) -> List[Any]:
    if container is None:
        return []
    if isinstance(container, dict) and key in container:
        return _as_listish(container[key])
    # fallback for MultiDict-like
    if hasattr(container, "getlist"):
        try:
            return list(container.getlist(key))
        except Exception:
            return []
    return []


def _append(stash: Stash, decoded: List[Tuple[str, int]], crop_id: Any, n: Optional[int]) -> None:
    cid = str(crop_id or "").strip()
    if not cid or not n or n <= 0:
        return
    stash[cid] = stash.get(cid, 0) + int(n)
    decoded.append((cid, int(n)))


def parse_stash(form_like: Any) -> Tuple[Stash, List[Tuple[str, int]], Optional[str]]:
    """
    Return (stash, decoded_items, error_message_or_None).

    Accepted shapes, tried in order:
      - {"stash": {"tomato": 3, ...}}
      - {"items": [{"crop_id": "tomato", "qty": 3}, ...]}
      - parallel ``crop[]`` / ``qty[]`` lists (JSON or form)
      - per-crop keys such as ``qty_tomato=3``
    Non-positive or unparseable quantities are ignored.
    """
    stash: Stash = {}
    decoded: List[Tuple[str, int]] = []

    if not form_like:
        return {}, [], "nothing parsed from request"

    # --- Shape 1: explicit mapping ------------------------------------------
    if isinstance(form_like, Mapping) and isinstance(form_like.get("stash"), Mapping):
        for cid, n in form_like["stash"].items():
            _append(stash, decoded, cid, _to_int(n))
        if stash:
            return stash, decoded, None

    # --- Shape 2: item list ---------------------------------------------------
    if isinstance(form_like, Mapping) and isinstance(form_like.get("items"), list):
        for item in form_like["items"]:
            if not isinstance(item, Mapping):
                continue
            cid = item.get("crop_id") or item.get("cropId") or item.get("id")
            _append(stash, decoded, cid, _to_int(item.get("qty", item.get("quantity"))))
        if stash:
            return stash, decoded, None

    # --- Shape 3: parallel arrays ----------------------------------------------
    for cK, nK in (("crop[]", "qty[]"), ("crop", "qty"), ("crop_id[]", "quantity[]")):
        cL, nL = _getlist(form_like, cK), _getlist(form_like, nK)
        if not (cL and nL):
            continue
        for cid, n in zip(cL, nL):
            _append(stash, decoded, cid, _to_int(n))
        if stash:
            return stash, decoded, None

    # --- Shape 4: per-crop keys -------------------------------------------------
    if hasattr(form_like, "items"):
        for k, v in form_like.items():
            m = _QTY_KEY_RE.match(str(k))
            if not m:
                continue
            vv = v[0] if isinstance(v, (list, tuple)) and v else v
            _append(stash, decoded, m.group("crop").lower(), _to_int(vv))

    if stash:
        return stash, decoded, None

    return {}, [], "nothing parsed from request"


_STASH_KEYS = ("stash", "items", "crop[]", "qty[]", "crop", "qty", "crop_id[]", "quantity[]")


def has_stash_fields(form_like: Any) -> bool:
    """True when the request carries any stash-shaped field with a value."""
    if not form_like or not hasattr(form_like, "items"):
        return False
    for k, v in form_like.items():
        if (k in _STASH_KEYS and v not in (None, "", [], {})) or _QTY_KEY_RE.match(str(k)):
            return True
    return False


def stash_total(stash: Mapping[str, int]) -> int:
    return sum(max(0, int(n)) for n in stash.values())


def add_to_stash(stash: Mapping[str, int], crop_id: str, qty: int = 1) -> Stash:
    out = {k: int(v) for k, v in stash.items() if int(v) > 0}
    if qty > 0:
        out[crop_id] = out.get(crop_id, 0) + int(qty)
    return out


def remove_from_stash(stash: Mapping[str, int], crop_id: str, qty: int = 1) -> Stash:
    """Take up to *qty* units of *crop_id*; entries reaching zero are dropped."""
    out = {k: int(v) for k, v in stash.items() if int(v) > 0}
    if crop_id in out:
        left = out[crop_id] - max(0, int(qty))
        if left > 0:
            out[crop_id] = left
        else:
            del out[crop_id]
    return out


def can_add_to_stash(stash: Mapping[str, int], capacity: int, qty: int = 1) -> bool:
    return stash_total(stash) + max(0, int(qty)) <= max(0, int(capacity))


def stash_from_failures(failed: Iterable[FailedPlacement]) -> Stash:
    out: Stash = {}
    for f in failed:
        out[f.crop_id] = out.get(f.crop_id, 0) + 1
    return out


def fmt_decoded_items(decoded: List[Tuple[str, int]]) -> List[Tuple[str, int]]:
    return sorted(decoded, key=lambda t: t[0])
