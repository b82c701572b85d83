"""Evaluator — score a binding list the way a player would feel it.

Provides:
    - ``binding_fingers``   : action → finger that presses it
    - ``finger_load_table`` : summed use frequency per finger
    - ``load_statistics``   : mean / std / spread of the finger loads
    - ``concurrency_conflicts`` : concurrent pairs sharing a finger

Plus ``compare_strategies`` which runs the pipeline once per strategy
and returns the headline metrics side by side.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

import numpy as np

from src.binding_engine.models import Action, Binding, Finger, ScoredKey
from src.binding_engine.presets import LayoutPreset
from src.binding_engine.settings import EngineConfig


def binding_fingers(
    bindings: Iterable[Binding],
    scored_keys: Iterable[ScoredKey],
) -> dict[str, Finger]:
    """Map each bound action to the finger owning its key.

    Bindings on keys missing from *scored_keys* are left out.
    """
    by_code = {sk.code: sk.best_finger for sk in scored_keys}
    return {b.action: by_code[b.key] for b in bindings if b.key in by_code}


def finger_load_table(
    bindings: Iterable[Binding],
    scored_keys: Iterable[ScoredKey],
    actions: Iterable[Action],
) -> dict[Finger, float]:
    """Summed ``use_frequency`` per finger, over every finger that has load."""
    frequency = {a.name: a.use_frequency for a in actions}
    loads: dict[Finger, float] = {}
    for action_name, finger in binding_fingers(bindings, scored_keys).items():
        loads[finger] = loads.get(finger, 0.0) + frequency.get(action_name, 0.0)
    return loads


def load_statistics(loads: Mapping[Finger, float]) -> dict[str, float]:
    """Summary of a finger-load table.

    Returns:
        ``mean``, ``std``, ``max``, ``min`` and ``spread`` (max − min).
        All zero for an empty table.
    """
    if not loads:
        return {"mean": 0.0, "std": 0.0, "max": 0.0, "min": 0.0, "spread": 0.0}

    values = np.array(list(loads.values()), dtype=float)
    return {
        "mean": float(np.mean(values)),
        "std": float(np.std(values)),
        "max": float(np.max(values)),
        "min": float(np.min(values)),
        "spread": float(np.ptp(values)),
    }


def concurrency_conflicts(
    bindings: Iterable[Binding],
    scored_keys: Iterable[ScoredKey],
    actions: Iterable[Action],
) -> list[tuple[str, str]]:
    """Pairs of concurrent actions that ended up on the same finger.

    Each unordered pair is reported once, names sorted.
    """
    fingers = binding_fingers(bindings, scored_keys)
    conflicts: set[tuple[str, str]] = set()
    for action in actions:
        finger = fingers.get(action.name)
        if finger is None:
            continue
        for other in action.concurrent_with:
            if other != action.name and fingers.get(other) == finger:
                a, b = sorted((action.name, other))
                conflicts.add((a, b))
    return sorted(conflicts)


def compare_strategies(
    preset: LayoutPreset,
    actions: list[Action],
    locks: Mapping[str, str] | None = None,
    config: EngineConfig | None = None,
) -> dict[str, dict[str, Any]]:
    """Run every strategy on the same input and collect headline metrics.

    This function imports the pipeline lazily to keep analysis and the
    engine loosely coupled.

    Returns:
        ``{strategy: {"friction", "assigned", "unassigned", "load_spread",
        "conflicts"}}``.
    """
    from src.binding_engine.pipeline import STRATEGIES, optimize_bindings, score_preset_keys

    scored_keys = score_preset_keys(preset)
    summary: dict[str, dict[str, Any]] = {}
    for strategy in STRATEGIES:
        report = optimize_bindings(preset, actions, locks=locks, strategy=strategy, config=config)
        bindings = [Binding(row["action"], row["key"]) for row in report["bindings"]]
        loads = finger_load_table(bindings, scored_keys, actions)
        summary[strategy] = {
            "friction": report["friction"],
            "assigned": len(bindings),
            "unassigned": report["unassigned"],
            "load_spread": load_statistics(loads)["spread"],
            "conflicts": concurrency_conflicts(bindings, scored_keys, actions),
        }
    return summary
