"""Allocator — greedy single-pass key assignment with displacement repair.

Phase 1 (one pass, highest ``use_frequency`` first, stable on ties):
    - locked action     → its pinned key, unconditionally
    - DIRECTIONAL       → the first free key of its axis (scored-key order)
    - everything else   → the cheapest free, reachable, non-movement key
                          on an available finger not blocked by concurrency

    Non-locked score:  distance − frequency·bonus + finger_load·penalty

Phase 2 (at most once):
    Each unassigned action with a ``concurrent_with`` list takes the key of
    the lowest-frequency binding it can displace. A DIRECTIONAL action only
    displaces a binding on its own axis; other actions never displace a
    DIRECTIONAL binding or take a movement key. The displaced keys are
    added to the lock map and Phase 1 runs again from scratch. Whatever is
    still unassigned afterwards stays unassigned.

Design choices:
    - No randomness; identical inputs give identical bindings.
    - Failure is signalled by omission: an action without a feasible key
      is simply absent from the returned list.
    - Concurrency blocking is symmetric: A blocks B's fingers if either
      names the other.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from .models import Action, ActionType, Binding, Finger, FingerConfigMap, MovementConfig, ScoredKey
from .movement import axis_for_action, concurrency_graph, exclusive_movement_fingers, movement_key_set
from .settings import AllocatorSettings

logger = logging.getLogger(__name__)

LockedBinds = Mapping[str, str]


@dataclass
class PassResult:
    """Bindings of one Phase 1 pass plus the finger(s) each action landed on."""

    bindings: list[Binding] = field(default_factory=list)
    action_fingers: dict[str, tuple[Finger, ...]] = field(default_factory=dict)
    finger_load: dict[Finger, float] = field(default_factory=dict)


@dataclass(frozen=True)
class _Context:
    scored_keys: list[ScoredKey]
    score_by_code: dict[str, ScoredKey]
    finger_configs: FingerConfigMap
    movement: MovementConfig
    movement_keys: set[str]
    movement_fingers: set[Finger]
    available_fingers: frozenset[Finger]
    concurrency: dict[str, set[str]]
    settings: AllocatorSettings


def sort_actions_by_frequency(actions: Iterable[Action]) -> list[Action]:
    """Highest ``use_frequency`` first; ties keep input order."""
    return sorted(actions, key=lambda a: -a.use_frequency)


def priority_cap(priority: int, reach: float, floor: float = 4.0) -> float:
    """Maximum key score an action of *priority* may accept.

    Priority 0 removes the cap; priority 100 caps at *floor* regardless
    of the finger's reach.
    """
    if priority == 0:
        return math.inf
    return floor + (reach - floor) * ((100 - priority) / 99)


def allocate(
    actions: list[Action],
    scored_keys: list[ScoredKey],
    finger_configs: FingerConfigMap,
    movement: MovementConfig,
    available_fingers: Iterable[Finger],
    locked_binds: LockedBinds | None = None,
    settings: AllocatorSettings | None = None,
) -> list[Binding]:
    """Assign every action a key where the constraints allow it.

    Args:
        actions: Actions to place. Names are assumed unique.
        scored_keys: Output of :meth:`KeyScorer.score_keys`.
        finger_configs: Finger → config (may be partial).
        movement: Movement axes.
        available_fingers: Fingers allowed to take non-movement actions.
        locked_binds: Action name → pinned key. Always honoured.
        settings: Scoring constants. Defaults to :class:`AllocatorSettings`.

    Returns:
        Bindings in allocation order. Actions missing from it are unassigned.
    """
    locks: dict[str, str] = dict(locked_binds or {})
    ctx = _Context(
        scored_keys=list(scored_keys),
        score_by_code={sk.code: sk for sk in scored_keys},
        finger_configs=finger_configs,
        movement=movement,
        movement_keys=movement_key_set(movement),
        movement_fingers=exclusive_movement_fingers(movement),
        available_fingers=frozenset(available_fingers),
        concurrency=concurrency_graph(actions),
        settings=settings or AllocatorSettings(),
    )
    for code in sorted(ctx.movement_keys - set(ctx.score_by_code)):
        logger.warning("Movement key %s is not among the scored keys", code)

    first = allocate_pass(actions, ctx, locks)

    assigned = {b.action for b in first.bindings}
    pending = [a for a in actions if a.name not in assigned and a.concurrent_with]
    if not pending:
        logger.info("Allocated %d/%d actions in one pass", len(first.bindings), len(actions))
        return first.bindings

    repaired_locks = dict(locks)
    for action in pending:
        victim = find_displacement_victim(action, first, actions, ctx, repaired_locks)
        if victim is None:
            logger.debug("No displacement victim for %s", action.name)
            continue
        logger.debug("Displacing %s from %s for %s", victim.action, victim.key, action.name)
        repaired_locks[action.name] = victim.key

    if repaired_locks == locks:
        logger.info("Allocated %d/%d actions; repair found no victims", len(first.bindings), len(actions))
        return first.bindings

    second = allocate_pass(actions, ctx, repaired_locks)
    logger.info(
        "Allocated %d/%d actions after displacement repair",
        len(second.bindings),
        len(actions),
    )
    return second.bindings


def allocate_pass(actions: list[Action], ctx: _Context, locks: Mapping[str, str]) -> PassResult:
    """Run Phase 1 once with the given lock map."""
    result = PassResult()
    bound_keys: set[str] = set()
    locked_keys = set(locks.values())

    for action in sort_actions_by_frequency(actions):
        placed = _place_action(action, ctx, locks, locked_keys, bound_keys, result)
        if placed is None:
            logger.debug("Left %s unassigned", action.name)
            continue

        key, fingers = placed
        result.bindings.append(Binding(action=action.name, key=key))
        result.action_fingers[action.name] = fingers
        bound_keys.add(key)

    return result


def _place_action(
    action: Action,
    ctx: _Context,
    locks: Mapping[str, str],
    locked_keys: set[str],
    bound_keys: set[str],
    state: PassResult,
) -> tuple[str, tuple[Finger, ...]] | None:
    locked_key = locks.get(action.name)
    if locked_key:
        if locked_key in bound_keys:
            logger.warning(
                "Key %s is locked by more than one action; %s left unassigned",
                locked_key,
                action.name,
            )
            return None
        scored = ctx.score_by_code.get(locked_key)
        if scored is None:
            logger.warning(
                "Locked key %s has no score; crediting %s to %s",
                locked_key,
                action.name,
                ctx.settings.default_finger.value,
            )
            return locked_key, (ctx.settings.default_finger,)
        return locked_key, (scored.best_finger,)

    if action.type is ActionType.DIRECTIONAL:
        return _place_directional(action, ctx, locked_keys, bound_keys, state)

    return _place_by_score(action, ctx, locked_keys, bound_keys, state)


def _place_directional(
    action: Action,
    ctx: _Context,
    locked_keys: set[str],
    bound_keys: set[str],
    state: PassResult,
) -> tuple[str, tuple[Finger, ...]] | None:
    axis = axis_for_action(action, ctx.movement)
    if axis is None:
        return None

    targets = axis.keys
    for scored in ctx.scored_keys:
        if scored.code not in targets:
            continue
        # Keys pinned to another action are taken
        if scored.code not in bound_keys and scored.code not in locked_keys:
            if axis.fingers:
                _add_load(state.finger_load, axis.fingers[0], action.use_frequency)
            return scored.code, tuple(axis.fingers)
    return None


def _place_by_score(
    action: Action,
    ctx: _Context,
    locked_keys: set[str],
    bound_keys: set[str],
    state: PassResult,
) -> tuple[str, tuple[Finger, ...]] | None:
    blocked = blocked_fingers(action.name, ctx.concurrency, state.action_fingers)
    settings = ctx.settings

    best: ScoredKey | None = None
    best_score = math.inf
    for scored in ctx.scored_keys:
        finger = scored.best_finger
        if scored.code in bound_keys or scored.code in locked_keys:
            continue
        if scored.code in ctx.movement_keys or finger in ctx.movement_fingers:
            continue
        if finger not in ctx.available_fingers or finger in blocked:
            continue

        config = ctx.finger_configs.get(finger)
        if config is None:
            continue
        cap = priority_cap(action.priority, config.reach, settings.priority_cap_floor)
        if scored.total_score > cap:
            continue

        load = state.finger_load.get(finger, 0.0)
        score = (
            scored.total_score
            - action.use_frequency * settings.frequency_bonus
            + load * settings.load_penalty
        )
        if score < best_score:
            best_score = score
            best = scored

    if best is None:
        return None

    _add_load(state.finger_load, best.best_finger, action.use_frequency)
    return best.code, (best.best_finger,)


def blocked_fingers(
    action_name: str,
    concurrency: Mapping[str, set[str]],
    action_fingers: Mapping[str, tuple[Finger, ...]],
) -> set[Finger]:
    """Fingers already used by any action concurrent with *action_name*."""
    blocked: set[Finger] = set()
    for other in concurrency.get(action_name, ()):
        blocked.update(action_fingers.get(other, ()))
    return blocked


def find_displacement_victim(
    action: Action,
    first_pass: PassResult,
    actions: list[Action],
    ctx: _Context,
    locks: Mapping[str, str],
) -> Binding | None:
    """Pick the binding *action* should take over, or ``None``.

    Eligible victims sit on at least one finger not blocked for *action*,
    are not themselves concurrent with it, and do not hold a locked key.
    A DIRECTIONAL action may only take a key of its own axis; any other
    action may never take a movement key or a DIRECTIONAL binding.
    The lowest-frequency victim wins; ties go to the earliest binding.
    """
    if action.type is ActionType.DIRECTIONAL:
        axis = axis_for_action(action, ctx.movement)
        if axis is None:
            return None
        allowed_keys: set[str] | None = set(axis.keys)
    else:
        allowed_keys = None

    blocked = blocked_fingers(action.name, ctx.concurrency, first_pass.action_fingers)
    partners = ctx.concurrency.get(action.name, set())
    by_name = {a.name: a for a in actions}
    claimed = set(locks.values())

    victim: Binding | None = None
    victim_freq = math.inf
    for binding in first_pass.bindings:
        fingers = first_pass.action_fingers.get(binding.action, ())
        if not any(f not in blocked for f in fingers):
            continue
        if binding.action in partners:
            continue
        if binding.action in locks or binding.key in claimed:
            continue

        bound = by_name.get(binding.action)
        if allowed_keys is not None:
            if binding.key not in allowed_keys:
                continue
        elif binding.key in ctx.movement_keys or (
            bound is not None and bound.type is ActionType.DIRECTIONAL
        ):
            continue

        freq = bound.use_frequency if bound is not None else 0.0
        if freq < victim_freq:
            victim_freq = freq
            victim = binding
    return victim


def unassigned_actions(actions: Iterable[Action], bindings: Iterable[Binding]) -> list[Action]:
    """Actions present in the input but absent from *bindings*."""
    assigned = {b.action for b in bindings}
    return [a for a in actions if a.name not in assigned]


def _add_load(load: dict[Finger, float], finger: Finger, frequency: float) -> None:
    load[finger] = load.get(finger, 0.0) + frequency
