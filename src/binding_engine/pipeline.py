"""Pipeline — score keys, run one allocation strategy, build a report.

Responsibilities:
    1. Score the physical keys for the preset's finger configuration.
    2. Run the chosen strategy (``"greedy"`` or ``"annealing"``); both
       produce a list of :class:`Binding`, so they are interchangeable.
    3. Return a plain-dict report: bindings (with finger and key score),
       unassigned actions, the friction of the result and the scored-key
       table for heat-map style consumers.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import Any, Callable, Iterable, Mapping

from .allocator import allocate, unassigned_actions
from .annealing import optimize_layout
from .cost_model import build_friction_context, friction
from .geometry import KeyIndex
from .key_scorer import KeyScorer
from .keymaps import ALL_KEYS
from .models import Action, Binding, ScoredKey
from .movement import movement_key_set
from .presets import LayoutPreset
from .settings import EngineConfig

logger = logging.getLogger(__name__)

STRATEGIES: tuple[str, ...] = ("greedy", "annealing")


def score_preset_keys(preset: LayoutPreset, key_index: KeyIndex | None = None) -> list[ScoredKey]:
    """Score every physical key for *preset*.

    Args:
        preset: Finger and movement configuration.
        key_index: Physical keys. Defaults to keyboard + mouse.

    Returns:
        Scored keys in key-index order; unreachable keys are dropped.
    """
    key_index = key_index or KeyIndex(ALL_KEYS)
    scorer = KeyScorer(key_index)
    return scorer.score_keys(
        preset.finger_configs,
        movement_key_set(preset.movement),
        key_index.codes,
    )


def optimize_bindings(
    preset: LayoutPreset,
    actions: Iterable[Action],
    locks: Mapping[str, str] | None = None,
    strategy: str = "greedy",
    config: EngineConfig | None = None,
    key_index: KeyIndex | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> dict[str, Any]:
    """Run the full allocation pipeline for one preset and action list.

    Args:
        preset: Finger, movement and available-finger configuration.
        actions: Actions to place.
        locks: Action name → pinned key (greedy strategy only).
        strategy: ``"greedy"`` or ``"annealing"``.
        config: Engine settings. Defaults to :class:`EngineConfig`.
        key_index: Physical keys. Defaults to keyboard + mouse.
        should_stop: Cancellation hook polled by the annealing loop.

    Returns:
        A dict with ``preset``, ``strategy``, ``bindings``, ``unassigned``,
        ``friction``, ``scored_keys`` and ``annealing`` (run metadata, or
        ``None`` for the greedy strategy).

    Raises:
        ValueError: If *strategy* is not one of :data:`STRATEGIES`.
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown strategy '{strategy}'; expected one of {STRATEGIES}")

    actions = list(actions)
    config = config or EngineConfig()
    scored_keys = score_preset_keys(preset, key_index)

    annealing_meta: dict[str, Any] | None = None
    if strategy == "greedy":
        bindings = allocate(
            actions,
            scored_keys,
            preset.finger_configs,
            preset.movement,
            preset.available_fingers,
            locked_binds=locks,
            settings=config.allocator,
        )
    else:
        if locks:
            logger.warning("Locks are ignored by the annealing strategy")
        result = optimize_layout(
            actions,
            scored_keys,
            preset.finger_configs,
            preset.movement,
            penalties=config.penalties,
            options=config.annealing,
            should_stop=should_stop,
        )
        bindings = result.bindings()
        annealing_meta = {
            "iterations": result.iterations,
            "accepted": result.accepted,
            "cancelled": result.cancelled,
        }

    context = build_friction_context(actions, scored_keys, preset.finger_configs, preset.movement)
    layout = {b.action: b.key for b in bindings}

    return {
        "preset": preset.name,
        "strategy": strategy,
        "bindings": _describe_bindings(bindings, scored_keys),
        "unassigned": [a.name for a in unassigned_actions(actions, bindings)],
        "friction": friction(layout, context, config.penalties),
        "scored_keys": [_describe_key(sk) for sk in scored_keys],
        "annealing": annealing_meta,
    }


def _describe_bindings(bindings: list[Binding], scored_keys: list[ScoredKey]) -> list[dict[str, Any]]:
    by_code = {sk.code: sk for sk in scored_keys}
    rows: list[dict[str, Any]] = []
    for binding in bindings:
        scored = by_code.get(binding.key)
        rows.append(
            {
                "action": binding.action,
                "key": binding.key,
                "finger": scored.best_finger.value if scored else None,
                "key_score": scored.total_score if scored else None,
            }
        )
    return rows


def _describe_key(scored: ScoredKey) -> dict[str, Any]:
    row = asdict(scored)
    row["best_finger"] = scored.best_finger.value
    return row


def report_to_json_bytes(report: dict[str, Any]) -> bytes:
    """Serialise a report to UTF-8 JSON bytes."""
    return json.dumps(report, indent=2, ensure_ascii=False).encode("utf-8")
