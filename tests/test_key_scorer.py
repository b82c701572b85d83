from src.binding_engine.geometry import KeyIndex
from src.binding_engine.key_scorer import KeyScorer, prioritized_keys
from src.binding_engine.keymaps import ALL_KEYS, all_key_codes
from src.binding_engine.models import Finger, FingerConfig, ScoredKey
from src.binding_engine.movement import movement_key_set
from src.binding_engine.presets import load_preset


def _scorer():
    return KeyScorer(KeyIndex(ALL_KEYS))


def test_scores_from_nearest_resting_key():
    configs = {
        Finger.LEFT_INDEX: FingerConfig("KeyF", 12),
        Finger.RIGHT_INDEX: FingerConfig("KeyJ", 12),
    }
    scored = {sk.code: sk for sk in _scorer().score_keys(configs, set(), ["KeyF", "KeyG", "KeyH", "KeyJ"])}

    assert scored["KeyF"].total_score == 0
    assert scored["KeyF"].is_resting_key
    assert scored["KeyF"].best_finger is Finger.LEFT_INDEX

    assert scored["KeyJ"].total_score == 0
    assert scored["KeyJ"].is_resting_key

    assert scored["KeyG"].total_score == 4
    assert scored["KeyG"].best_finger is Finger.LEFT_INDEX
    assert not scored["KeyG"].is_resting_key

    assert scored["KeyH"].total_score == 4
    assert scored["KeyH"].best_finger is Finger.RIGHT_INDEX
    assert scored["KeyH"].origin_key == "KeyJ"


def test_key_penalty_is_added():
    configs = {Finger.LEFT_INDEX: FingerConfig("KeyF", 12, key_penalties={"KeyG": 2})}
    (scored,) = _scorer().score_keys(configs, set(), ["KeyG"])
    assert scored.total_score == 6


def test_tie_goes_to_first_configured_finger():
    configs = {
        Finger.LEFT_INDEX: FingerConfig("KeyD", 12),
        Finger.RIGHT_INDEX: FingerConfig("KeyG", 12),
    }
    (scored,) = _scorer().score_keys(configs, set(), ["KeyF"])
    assert scored.best_finger is Finger.LEFT_INDEX


def test_exclusive_keys_short_circuit():
    configs = {
        Finger.LEFT_INDEX: FingerConfig("KeyD", 12),
        Finger.RIGHT_THUMB: FingerConfig(
            "Mouse4", 4, exclusive_keys=("Mouse4", "Mouse5"), key_penalties={"Mouse5": -4}
        ),
    }
    scored = {sk.code: sk for sk in _scorer().score_keys(configs, set(), ["Mouse4", "Mouse5", "KeyF"])}

    assert scored["Mouse4"].best_finger is Finger.RIGHT_THUMB
    assert scored["Mouse5"].best_finger is Finger.RIGHT_THUMB
    assert scored["Mouse5"].total_score == 0
    assert scored["Mouse5"].is_resting_key
    # A finger with exclusive keys never claims other keys
    assert scored["KeyF"].best_finger is Finger.LEFT_INDEX


def test_unreachable_keys_are_dropped():
    configs = {Finger.RIGHT_INDEX: FingerConfig("MouseLeft", 4, exclusive_keys=("MouseLeft",))}
    scored = _scorer().score_keys(configs, set(), ["MouseLeft", "KeyF", "NoSuchKey"])
    assert [sk.code for sk in scored] == ["MouseLeft"]


def test_empty_configuration_scores_nothing():
    assert _scorer().score_keys({}, set(), all_key_codes()) == []


def test_movement_flag():
    configs = {Finger.LEFT_MIDDLE: FingerConfig("KeyW", 10)}
    scored = {sk.code: sk for sk in _scorer().score_keys(configs, {"KeyW", "KeyS"}, ["KeyW", "KeyE"])}
    assert scored["KeyW"].is_movement
    assert not scored["KeyE"].is_movement


def test_resting_flag_matches_zero_score_for_presets():
    for name in ("wasd", "ytgh"):
        preset = load_preset(name)
        scored = _scorer().score_keys(
            preset.finger_configs, movement_key_set(preset.movement), all_key_codes()
        )
        assert scored
        for sk in scored:
            assert sk.is_resting_key == (sk.total_score == 0)


def test_prioritized_keys():
    scored = [
        ScoredKey("KeyA", 10, Finger.RIGHT_PINKY, "KeyA", False, False),
        ScoredKey("KeyB", 0, Finger.RIGHT_INDEX, "KeyB", True, False),
        ScoredKey("KeyC", 5, Finger.RIGHT_MIDDLE, "KeyD", False, False),
    ]
    ordered = prioritized_keys(scored)
    assert [sk.code for sk in ordered] == ["KeyB", "KeyC", "KeyA"]
