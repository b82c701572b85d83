import json

import pytest

from src.binding_engine.models import ActionType
from src.binding_engine.pipeline import optimize_bindings, report_to_json_bytes, score_preset_keys
from src.binding_engine.presets import load_actions, load_preset
from src.binding_engine.settings import AnnealingOptions, EngineConfig
from src.main import main


@pytest.fixture(scope="module")
def preset():
    return load_preset("wasd")


@pytest.fixture(scope="module")
def action_set():
    return load_actions("hero_shooter")


def _seeded_config(seed=3, max_iterations=300):
    return EngineConfig(annealing=AnnealingOptions(seed=seed, max_iterations=max_iterations))


def test_scored_keys_cover_every_finger_resting_key(preset):
    scored = {sk.code: sk for sk in score_preset_keys(preset)}
    for finger, config in preset.finger_configs.items():
        assert scored[config.resting_key].is_resting_key
        assert scored[config.resting_key].total_score == config.penalty_for(config.resting_key)


def test_greedy_report(preset, action_set):
    report = optimize_bindings(preset, action_set.actions, locks=action_set.locks)
    keys = {row["action"]: row["key"] for row in report["bindings"]}

    assert report["preset"] == "WASD"
    assert report["strategy"] == "greedy"
    assert report["annealing"] is None
    assert len(set(keys.values())) == len(keys)
    for action, key in action_set.locks.items():
        assert keys[action] == key

    assert {keys["MoveForward"], keys["MoveBackward"]} == {"KeyW", "KeyS"}
    assert {keys["StrafeLeft"], keys["StrafeRight"]} == {"KeyA", "KeyD"}

    names = {a.name for a in action_set.actions}
    assert set(keys) | set(report["unassigned"]) == names
    assert not set(keys) & set(report["unassigned"])


def test_greedy_keeps_other_actions_off_movement_keys(preset, action_set):
    report = optimize_bindings(preset, action_set.actions, locks=action_set.locks)
    types = {a.name: a.type for a in action_set.actions}
    for row in report["bindings"]:
        if row["key"] in ("KeyW", "KeyA", "KeyS", "KeyD"):
            assert types[row["action"]] is ActionType.DIRECTIONAL


def test_greedy_is_deterministic(preset, action_set):
    first = optimize_bindings(preset, action_set.actions, locks=action_set.locks)
    second = optimize_bindings(preset, action_set.actions, locks=action_set.locks)
    assert first == second


def test_annealing_report_is_reproducible(preset, action_set):
    config = _seeded_config()
    first = optimize_bindings(preset, action_set.actions, strategy="annealing", config=config)
    second = optimize_bindings(preset, action_set.actions, strategy="annealing", config=config)

    assert first["bindings"] == second["bindings"]
    assert first["friction"] == second["friction"]
    assert first["annealing"]["iterations"] == 300
    assert first["annealing"]["cancelled"] is False

    keys = [row["key"] for row in first["bindings"]]
    assert len(set(keys)) == len(keys)


def test_annealing_honours_cancellation(preset, action_set):
    report = optimize_bindings(
        preset,
        action_set.actions,
        strategy="annealing",
        config=_seeded_config(),
        should_stop=lambda: True,
    )
    assert report["annealing"] == {"iterations": 0, "accepted": 0, "cancelled": True}


def test_unknown_strategy(preset, action_set):
    with pytest.raises(ValueError, match="genetic"):
        optimize_bindings(preset, action_set.actions, strategy="genetic")


def test_report_serialises_to_json(preset, action_set):
    report = optimize_bindings(preset, action_set.actions, locks=action_set.locks)
    decoded = json.loads(report_to_json_bytes(report))

    assert decoded["bindings"] == report["bindings"]
    assert isinstance(decoded["scored_keys"][0]["best_finger"], str)


def test_main_json_output(capsys):
    exit_code = main(
        ["--strategy", "annealing", "--seed", "1", "--max-iterations", "50", "--json"]
    )
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["strategy"] == "annealing"
    assert payload["annealing"]["iterations"] == 50


def test_main_table_output(capsys):
    assert main(["--preset", "ytgh", "--top-keys", "5"]) == 0
    out = capsys.readouterr().out
    assert "Top 5 most accessible keys" in out
    assert "Friction:" in out


def test_main_reports_bad_preset(capsys):
    assert main(["--preset", "nowhere"]) == 2
    assert "error:" in capsys.readouterr().err
