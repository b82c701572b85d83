"""Geometry — key centres, distances and radius queries on the 0.25u grid.

A key's centre is ``(x + width/2, y + height/2)`` with ``height``
defaulting to :data:`DEFAULT_KEY_HEIGHT`. Distance is Euclidean between
centres, and a key compared with itself is always exactly 0.

:class:`KeyIndex` owns a key list for one hardware layout. Radius queries
sweep the keys in centre-x order: the window start is found with a
binary search, the scan stops at the first key past the right edge, and
survivors are checked against the y-window and the true radius. The
result is the same set a full scan would return.
"""

from __future__ import annotations

import math
from typing import Iterable

import numpy as np

from .models import KeyDefinition

DEFAULT_KEY_HEIGHT: float = 4.0

Point = tuple[float, float]


def key_center(key: KeyDefinition) -> Point:
    """Centre of *key* on the layout grid.

    Args:
        key: Key definition; a missing height uses :data:`DEFAULT_KEY_HEIGHT`.

    Returns:
        ``(x, y)`` of the key centre.
    """
    height = key.height if key.height is not None else DEFAULT_KEY_HEIGHT
    return (key.x + key.width / 2, key.y + height / 2)


def euclidean(a: Point, b: Point) -> float:
    """Straight-line distance between two points."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def key_distance(key_a: KeyDefinition, key_b: KeyDefinition) -> float:
    """Centre-to-centre distance. Returns 0 for the same key code."""
    if key_a.code == key_b.code:
        return 0.0
    return euclidean(key_center(key_a), key_center(key_b))


def sort_keys_by_x(keys: Iterable[KeyDefinition]) -> list[KeyDefinition]:
    """Keys ordered by centre x, stable for equal centres.

    Args:
        keys: Any iterable of key definitions.

    Returns:
        A new list; the input is left untouched.
    """
    return sorted(keys, key=lambda k: key_center(k)[0])


class KeyIndex:
    """Lookup and spatial queries over one physical key set.

    Args:
        keys: Key definitions. Later duplicates of a code replace earlier ones.
    """

    def __init__(self, keys: Iterable[KeyDefinition]) -> None:
        self._keys: dict[str, KeyDefinition] = {key.code: key for key in keys}
        self._sorted: list[KeyDefinition] = sort_keys_by_x(self._keys.values())
        self._centers: list[Point] = [key_center(k) for k in self._sorted]
        self._xs: np.ndarray = np.array([c[0] for c in self._centers], dtype=float)

    def __contains__(self, code: object) -> bool:
        return code in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def get(self, code: str) -> KeyDefinition | None:
        """Definition for *code*, or ``None`` if the code is unknown."""
        return self._keys.get(code)

    @property
    def codes(self) -> list[str]:
        """Key codes in insertion order."""
        return list(self._keys)

    def distance(self, code_a: str, code_b: str) -> float | None:
        """Distance between two keys, or ``None`` if either code is unknown.

        ``None`` is never conflated with a real distance of 0; callers
        must filter it out before taking a minimum.
        """
        key_a = self._keys.get(code_a)
        key_b = self._keys.get(code_b)
        if key_a is None or key_b is None:
            return None
        return key_distance(key_a, key_b)

    def nearby_keys(self, code: str, max_distance: float = 7.0) -> list[tuple[str, float]]:
        """Keys within *max_distance* of *code*, excluding *code* itself.

        Returns an empty list for an unknown code.
        """
        key = self._keys.get(code)
        if key is None:
            return []
        return self.keys_within_radius(key_center(key), max_distance, exclude=code)

    def keys_within_radius(
        self,
        center: Point,
        radius: float,
        exclude: str | None = None,
    ) -> list[tuple[str, float]]:
        """``(code, distance)`` for every key whose centre is within *radius*.

        Results come back in centre-x order.
        """
        cx, cy = center
        start = int(np.searchsorted(self._xs, cx - radius, side="left"))

        results: list[tuple[str, float]] = []
        for i in range(start, len(self._sorted)):
            kx, ky = self._centers[i]
            if kx > cx + radius:
                break
            if abs(ky - cy) > radius:
                continue
            key = self._sorted[i]
            if key.code == exclude:
                continue
            dist = euclidean(center, (kx, ky))
            if dist > radius:
                continue
            results.append((key.code, dist))
        return results
