"""Annealing — simulated-annealing search over complete layouts.

State:      a layout (action name → key code, no key used twice)
Warm start: DIRECTIONAL actions on their axis keys, then exclusive-key
            fingers filled with the most frequent remaining actions, then
            everything else first-fit onto the cheapest free keys.
Moves:      70% random swap, 20% load-balancing swap between the most and
            least loaded fingers, 10% concurrency-conflict repair.
Acceptance: Metropolis; a non-worsening move is always taken.
Cooling:    ``temperature *= cooling_rate`` until it drops below
            ``min_temp`` (or an iteration / wall-clock budget runs out, or
            ``should_stop`` returns True between iterations).

Every random decision comes from one :class:`SeededRandom`, so the same
seed, actions and configuration reproduce the same result exactly.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Iterable

from .cost_model import FrictionContext, FrictionModel, build_friction_context, finger_loads
from .key_scorer import prioritized_keys
from .models import Action, Binding, Finger, FingerConfigMap, Layout, MovementConfig, ScoredKey
from .movement import directional_targets
from .seeded_random import SeededRandom
from .settings import AnnealingOptions, PenaltyConfig

logger = logging.getLogger(__name__)

RANDOM_SWAP_SHARE: float = 0.7
LOAD_BALANCE_SHARE: float = 0.2


@dataclass(frozen=True)
class AnnealingResult:
    layout: Layout
    friction: float
    iterations: int
    accepted: int
    cancelled: bool

    def bindings(self) -> list[Binding]:
        return layout_to_bindings(self.layout)


def initial_layout(
    actions: list[Action],
    scored_keys: list[ScoredKey],
    movement: MovementConfig,
    finger_configs: FingerConfigMap,
) -> Layout:
    """Feasible warm start for the search."""
    layout: Layout = {}
    used_keys: set[str] = set()

    # 1. DIRECTIONAL actions on their axis keys
    for name, key in directional_targets(actions, movement).items():
        if key in used_keys:
            continue
        layout[name] = key
        used_keys.add(key)

    # 2. Exclusive-key fingers get the most frequent remaining actions
    remaining = sorted(
        (a for a in actions if a.name not in layout),
        key=lambda a: -a.use_frequency,
    )
    queue = iter(remaining)
    for config in finger_configs.values():
        for key in config.exclusive_keys:
            if key in used_keys:
                continue
            action = next(queue, None)
            if action is None:
                break
            layout[action.name] = key
            used_keys.add(key)

    # 3. Everything else first-fit onto the cheapest free keys
    free_keys = (sk.code for sk in prioritized_keys(scored_keys) if sk.code not in used_keys)
    for action in remaining:
        if action.name in layout:
            continue
        key = next(free_keys, None)
        if key is None:
            logger.warning("Ran out of keys; %s left out of the warm start", action.name)
            continue
        layout[action.name] = key
        used_keys.add(key)

    return layout


def swap(layout: Layout, action_a: str, action_b: str) -> Layout:
    """Return a copy of *layout* with the keys of two actions exchanged."""
    swapped = dict(layout)
    if action_a in layout and action_b in layout:
        swapped[action_a] = layout[action_b]
        swapped[action_b] = layout[action_a]
    return swapped


def _random_swap(layout: Layout, rng: SeededRandom) -> Layout:
    names = list(layout)
    if len(names) < 2:
        return layout
    a, b = rng.pick_two(names)
    return swap(layout, a, b)


def _load_balance_swap(layout: Layout, context: FrictionContext, rng: SeededRandom) -> Layout:
    loads = finger_loads(layout, context)
    if len(loads) < 2:
        return layout

    ranked = sorted(loads.items(), key=lambda item: -item[1])
    high: Finger = ranked[0][0]
    low: Finger = ranked[-1][0]

    high_actions = [n for n, k in layout.items() if context.key_to_finger.get(k) == high]
    low_actions = [n for n, k in layout.items() if context.key_to_finger.get(k) == low]
    # A finger in ``loads`` always holds an action; an empty side is a no-op
    if not high_actions or not low_actions:
        return layout
    return swap(layout, rng.pick(high_actions), rng.pick(low_actions))


def _conflict_swap(layout: Layout, context: FrictionContext, rng: SeededRandom) -> Layout:
    for name, key in layout.items():
        action = context.actions.get(name)
        if action is None or not action.concurrent_with:
            continue
        finger = context.key_to_finger.get(key)
        if finger is None:
            continue
        for other in action.concurrent_with:
            other_key = layout.get(other)
            if other_key is None or context.key_to_finger.get(other_key) != finger:
                continue
            unrelated = [n for n in layout if n != name and n != other]
            if not unrelated:
                return layout
            return swap(layout, other, rng.pick(unrelated))
    return layout


def mutate(layout: Layout, context: FrictionContext, rng: SeededRandom) -> Layout:
    """Draw one move and return the neighbouring layout (never mutates *layout*)."""
    roll = rng.next()
    if roll < RANDOM_SWAP_SHARE:
        return _random_swap(layout, rng)
    if roll < RANDOM_SWAP_SHARE + LOAD_BALANCE_SHARE:
        return _load_balance_swap(layout, context, rng)
    return _conflict_swap(layout, context, rng)


def optimize_layout(
    actions: Iterable[Action],
    scored_keys: Iterable[ScoredKey],
    finger_configs: FingerConfigMap,
    movement: MovementConfig,
    penalties: PenaltyConfig | None = None,
    options: AnnealingOptions | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> AnnealingResult:
    """Search for a low-friction layout.

    Args:
        actions: Actions to place.
        scored_keys: Output of :meth:`KeyScorer.score_keys`.
        finger_configs: Finger → config (may be partial).
        movement: Movement axes.
        penalties: Friction weights.
        options: Temperature schedule, seed and budget.
        should_stop: Polled between iterations; returning True ends the
            run early with the best layout seen so far.

    Returns:
        An :class:`AnnealingResult` holding the best layout found.
    """
    actions = list(actions)
    scored_keys = list(scored_keys)
    options = options or AnnealingOptions()
    context = build_friction_context(actions, scored_keys, finger_configs, movement)
    model = FrictionModel(context, penalties)
    rng = SeededRandom(options.seed)

    current = initial_layout(actions, scored_keys, movement, finger_configs)
    current_score = model.friction(current)
    best, best_score = current, current_score

    temperature = options.initial_temp
    deadline = None if options.time_limit is None else time.monotonic() + options.time_limit
    iterations = 0
    accepted = 0
    cancelled = False

    while temperature >= options.min_temp:
        if options.max_iterations is not None and iterations >= options.max_iterations:
            break
        if deadline is not None and time.monotonic() >= deadline:
            break
        if should_stop is not None and should_stop():
            cancelled = True
            break

        neighbor = mutate(current, context, rng)
        neighbor_score = model.friction(neighbor)
        delta = neighbor_score - current_score

        if delta <= 0 or rng.next() < math.exp(-delta / temperature):
            current, current_score = neighbor, neighbor_score
            accepted += 1
            if current_score < best_score:
                best, best_score = current, current_score

        temperature *= options.cooling_rate
        iterations += 1

    logger.info(
        "Annealing finished: %d iterations, %d accepted, best friction %.2f (seed %d)",
        iterations,
        accepted,
        best_score,
        rng.seed,
    )
    return AnnealingResult(
        layout=dict(best),
        friction=best_score,
        iterations=iterations,
        accepted=accepted,
        cancelled=cancelled,
    )


def layout_to_bindings(layout: Layout) -> list[Binding]:
    """Convert a layout to the allocator's output shape, in layout order."""
    return [Binding(action=name, key=key) for name, key in layout.items()]
