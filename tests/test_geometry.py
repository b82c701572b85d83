import math

import pytest

from src.binding_engine.geometry import KeyIndex, euclidean, key_center, key_distance
from src.binding_engine.keymaps import ALL_KEYS
from src.binding_engine.models import KeyDefinition


def test_adjacent_keys_are_exactly_one_unit_apart():
    a = KeyDefinition("A", 0, 0, 4)
    b = KeyDefinition("B", 4, 0, 4)
    assert key_distance(a, b) == 4.0


def test_center_uses_default_height():
    assert key_center(KeyDefinition("K", 10, 8, 4)) == (12.0, 10.0)
    assert key_center(KeyDefinition("K", 10, 8, 4, height=8)) == (12.0, 12.0)


def test_same_key_distance_is_zero():
    key = KeyDefinition("Odd", 0.1, 0.3, 4.7, height=3.3)
    assert key_distance(key, key) == 0.0


def test_keyboard_distances():
    index = KeyIndex(ALL_KEYS)
    assert index.distance("KeyF", "KeyF") == 0
    assert index.distance("KeyF", "KeyG") == 4
    assert index.distance("KeyF", "KeyR") == pytest.approx(4.123, abs=1e-3)
    assert index.distance("MouseLeft", "MouseRight") == 8


def test_unknown_key_distance_is_none_not_zero():
    index = KeyIndex(ALL_KEYS)
    assert index.distance("KeyF", "NoSuchKey") is None
    assert index.distance("NoSuchKey", "NoSuchKey") is None


def test_nearby_keys():
    index = KeyIndex(ALL_KEYS)
    nearby = dict(index.nearby_keys("KeyF", 5))

    for code in ("KeyG", "KeyD", "KeyR", "KeyV", "KeyC", "KeyT"):
        assert code in nearby
    assert "KeyP" not in nearby
    assert "KeyQ" not in nearby
    assert "KeyF" not in nearby
    assert nearby["KeyG"] == 4


def test_nearby_keys_unknown_code():
    assert KeyIndex(ALL_KEYS).nearby_keys("Nope") == []


@pytest.mark.parametrize("radius", [0.0, 3.9, 4.0, 6.0, 7.0, 12.5, 40.0])
def test_sweep_matches_full_scan(radius):
    index = KeyIndex(ALL_KEYS)
    for key in ALL_KEYS:
        center = key_center(key)
        expected = {
            other.code
            for other in ALL_KEYS
            if other.code != key.code and euclidean(center, key_center(other)) <= radius
        }
        found = {code for code, _ in index.keys_within_radius(center, radius, exclude=key.code)}
        assert found == expected, key.code


def test_radius_results_report_true_distance():
    index = KeyIndex(ALL_KEYS)
    for code, dist in index.nearby_keys("KeyJ", 9):
        assert dist == pytest.approx(index.distance("KeyJ", code))
        assert dist <= 9
        assert not math.isnan(dist)
