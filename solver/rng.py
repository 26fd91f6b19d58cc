# solver/rng.py — seeded LCG so every fill is reproducible
from __future__ import annotations

import math
from typing import List, Optional, Sequence, TypeVar, Union

T = TypeVar("T")

# glibc LCG constants
_LCG_A = 1664525
_LCG_C = 1013904223
_LCG_M = 2 ** 32


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def hash_seed(text: str) -> int:
    """Polynomial rolling hash (``h * 31 + unit``) over UTF-16 code units."""
    data = text.encode("utf-16-le", "surrogatepass")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = _to_int32(h * 31 + unit)
    return abs(h)


class SeededRandom:
    """
    Deterministic random source.

    Two instances built from equal seeds produce identical sequences for
    identical call patterns. Build one per solve and never share it.
    """

    def __init__(self, seed: Union[str, int]):
        if isinstance(seed, str):
            self._state = hash_seed(seed)
        else:
            self._state = int(seed) % _LCG_M

    @property
    def state(self) -> int:
        return self._state

    def next(self) -> float:
        self._state = (_LCG_A * self._state + _LCG_C) % _LCG_M
        return self._state / _LCG_M

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """Fisher–Yates on a copy; *items* is left untouched."""
        arr = list(items)
        for i in range(len(arr) - 1, 0, -1):
            j = math.floor(self.next() * (i + 1))
            arr[i], arr[j] = arr[j], arr[i]
        return arr

    def choice(self, items: Sequence[T]) -> Optional[T]:
        if not items:
            return None
        return items[math.floor(self.next() * len(items))]

    def rand_int(self, lo: int, hi: int) -> int:
        """Integer in the half-open range ``[lo, hi)``."""
        return math.floor(self.next() * (hi - lo)) + lo


__all__ = ["SeededRandom", "hash_seed"]
