"""Cost Model — friction of a complete action → key layout.

Used by the annealing search only; the greedy allocator scores inline.
Lower is better. Weights come from :class:`PenaltyConfig`.

Per-action components:
    axis_penalty            – DIRECTIONAL action off its axis key
    movement_key_penalty    – non-DIRECTIONAL action on a movement key
    exclusive_key_penalty   – exclusive-key ownership broken (either way)
    distance_cost           – reach cost, scaled by use frequency
    movement_finger_penalty – non-DIRECTIONAL action on a reserved finger
    reach_penalty           – key farther than the finger's reach
    concurrency_penalty     – concurrent partner on the same finger
Whole-layout component:
    load_imbalance          – spread between most and least loaded fingers

Hard-constraint penalties (the first three and the reserved-finger one)
are orders of magnitude above the soft weights, so a layout breaking a
hard rule never beats one that keeps them all.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from .models import Action, ActionType, Finger, FingerConfigMap, Layout, MovementConfig, ScoredKey
from .movement import directional_targets, exclusive_movement_fingers, movement_key_set
from .settings import PenaltyConfig


@dataclass(frozen=True)
class FrictionContext:
    """Lookups precomputed once per optimisation run."""

    actions: Mapping[str, Action]
    finger_configs: FingerConfigMap
    key_to_finger: Mapping[str, Finger]
    key_to_distance: Mapping[str, float]
    movement_keys: frozenset[str]
    movement_fingers: frozenset[Finger]
    directional_keys: Mapping[str, str]
    exclusive_keys: Mapping[Finger, frozenset[str]]


def build_friction_context(
    actions: Iterable[Action],
    scored_keys: Iterable[ScoredKey],
    finger_configs: FingerConfigMap,
    movement: MovementConfig,
) -> FrictionContext:
    actions = list(actions)
    scored_keys = list(scored_keys)
    return FrictionContext(
        actions={a.name: a for a in actions},
        finger_configs=finger_configs,
        key_to_finger={sk.code: sk.best_finger for sk in scored_keys},
        key_to_distance={sk.code: sk.total_score for sk in scored_keys},
        movement_keys=frozenset(movement_key_set(movement)),
        movement_fingers=frozenset(exclusive_movement_fingers(movement)),
        directional_keys=directional_targets(actions, movement),
        exclusive_keys={
            finger: frozenset(config.exclusive_keys)
            for finger, config in finger_configs.items()
            if config.exclusive_keys
        },
    )


class FrictionModel:
    """Friction components for one context and penalty set.

    Args:
        context: Output of :func:`build_friction_context`.
        penalties: Weights; defaults to :class:`PenaltyConfig`.
    """

    def __init__(self, context: FrictionContext, penalties: PenaltyConfig | None = None) -> None:
        self.context = context
        self.penalties = penalties or PenaltyConfig()

    # ── Individual cost components ────────────────────────────

    def axis_penalty(self, action: Action, key: str) -> float:
        if action.type is not ActionType.DIRECTIONAL:
            return 0.0
        correct = self.context.directional_keys.get(action.name)
        if correct is not None and key != correct:
            return self.penalties.wrong_axis_penalty
        return 0.0

    def movement_key_penalty(self, action: Action, key: str) -> float:
        if action.type is not ActionType.DIRECTIONAL and key in self.context.movement_keys:
            return self.penalties.movement_key_penalty
        return 0.0

    def exclusive_key_penalty(self, key: str, finger: Finger | None) -> float:
        """Both directions of an exclusive-ownership break add separately."""
        if finger is None:
            return 0.0
        cost = 0.0
        own = self.context.exclusive_keys.get(finger)
        if own is not None and key not in own:
            cost += self.penalties.exclusive_key_penalty
        for other, keys in self.context.exclusive_keys.items():
            if other != finger and key in keys:
                cost += self.penalties.exclusive_key_penalty
        return cost

    def distance_cost(self, action: Action, distance: float) -> float:
        return (
            distance * action.use_frequency * self.penalties.frequency_weight
            + distance * self.penalties.distance_weight
        )

    def movement_finger_penalty(self, action: Action, finger: Finger | None) -> float:
        if (
            finger is not None
            and finger in self.context.movement_fingers
            and action.type is not ActionType.DIRECTIONAL
        ):
            return self.penalties.exclusive_violation
        return 0.0

    def reach_penalty(self, distance: float, finger: Finger | None) -> float:
        if finger is None:
            return 0.0
        config = self.context.finger_configs.get(finger)
        if config is not None and distance > config.reach:
            return self.penalties.unreachable_penalty
        return 0.0

    def concurrency_penalty(self, action: Action, finger: Finger | None, layout: Layout) -> float:
        """One penalty per listed partner that resolves to the same finger."""
        if finger is None:
            return 0.0
        cost = 0.0
        for other in action.concurrent_with:
            other_key = layout.get(other)
            if other_key is None:
                continue
            if self.context.key_to_finger.get(other_key) == finger:
                cost += self.penalties.concurrency_penalty
        return cost

    def load_imbalance(self, layout: Layout) -> float:
        loads = finger_loads(layout, self.context)
        if len(loads) < 2:
            return 0.0
        return (max(loads.values()) - min(loads.values())) * self.penalties.load_imbalance_weight

    # ── Aggregate ─────────────────────────────────────────────

    def action_cost(self, action: Action, key: str, layout: Layout) -> float:
        finger = self.context.key_to_finger.get(key)
        distance = self.context.key_to_distance.get(key, self.penalties.missing_key_distance)

        cost = 0.0
        cost += self.axis_penalty(action, key)
        cost += self.movement_key_penalty(action, key)
        cost += self.exclusive_key_penalty(key, finger)
        cost += self.distance_cost(action, distance)
        cost += self.movement_finger_penalty(action, finger)
        cost += self.reach_penalty(distance, finger)
        cost += self.concurrency_penalty(action, finger, layout)
        return cost

    def friction(self, layout: Layout) -> float:
        score = 0.0
        for action_name, key in layout.items():
            action = self.context.actions.get(action_name)
            if action is None:
                continue
            score += self.action_cost(action, key, layout)
        return score + self.load_imbalance(layout)


def friction(layout: Layout, context: FrictionContext, penalties: PenaltyConfig | None = None) -> float:
    """Total friction of *layout*. Lower is better."""
    return FrictionModel(context, penalties).friction(layout)


def finger_loads(layout: Layout, context: FrictionContext) -> dict[Finger, float]:
    """Summed ``use_frequency`` per finger, in layout order of first use."""
    loads: dict[Finger, float] = {}
    for action_name, key in layout.items():
        action = context.actions.get(action_name)
        finger = context.key_to_finger.get(key)
        if action is None or finger is None:
            continue
        loads[finger] = loads.get(finger, 0.0) + action.use_frequency
    return loads
