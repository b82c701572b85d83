"""Key Scorer — how cheaply each physical key can be reached.

For every key the scorer finds the configured finger whose resting key is
closest and records the cost of that reach:

    cost = key_penalty(finger, key) + (0 if key is the resting key
                                       else distance(resting key, key))

Rules:
    - A key listed in some finger's ``exclusive_keys`` belongs to that
      finger alone; the first such finger (in configuration order) short-
      circuits the search.
    - Fingers with an exclusive list never compete for other keys.
    - Among the remaining fingers the strict minimum wins; the first
      finger found keeps a tie.
    - A key no configured finger can reach is dropped.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .geometry import KeyIndex
from .models import Finger, FingerConfig, FingerConfigMap, ScoredKey

logger = logging.getLogger(__name__)


def _reach_cost(index: KeyIndex, key_code: str, config: FingerConfig) -> float | None:
    penalty = config.penalty_for(key_code)
    if key_code == config.resting_key:
        return penalty
    dist = index.distance(config.resting_key, key_code)
    if dist is None:
        return None
    return dist + penalty


class KeyScorer:
    """Score keys against a (possibly partial) finger configuration.

    Args:
        key_index: The physical key set distances are measured on.
    """

    def __init__(self, key_index: KeyIndex) -> None:
        self.key_index = key_index

    def score_keys(
        self,
        finger_configs: FingerConfigMap,
        movement_keys: Iterable[str],
        key_codes: Iterable[str],
    ) -> list[ScoredKey]:
        """Score every code in *key_codes*, dropping unreachable ones.

        Args:
            finger_configs: Finger → config. Absent fingers own no keys.
            movement_keys: Codes belonging to a movement axis.
            key_codes: Codes to score, in output order.

        Returns:
            One :class:`ScoredKey` per reachable code, input order kept.
        """
        movement = set(movement_keys)
        scored: list[ScoredKey] = []
        dropped = 0
        for code in key_codes:
            result = self.score_key(code, finger_configs, movement)
            if result is None:
                dropped += 1
                continue
            scored.append(result)

        if dropped:
            logger.debug("Dropped %d key(s) no configured finger can reach", dropped)
        return scored

    def score_key(
        self,
        key_code: str,
        finger_configs: FingerConfigMap,
        movement_keys: set[str],
    ) -> ScoredKey | None:
        found = self.closest_finger(key_code, finger_configs)
        if found is None:
            return None

        finger, origin, cost = found
        return ScoredKey(
            code=key_code,
            total_score=cost,
            best_finger=finger,
            origin_key=origin,
            is_resting_key=cost == 0,
            is_movement=key_code in movement_keys,
        )

    def closest_finger(
        self,
        key_code: str,
        finger_configs: FingerConfigMap,
    ) -> tuple[Finger, str, float] | None:
        """Return ``(finger, resting key, cost)`` for the cheapest reach."""
        # Exclusive ownership short-circuits the normal search
        for finger, config in finger_configs.items():
            if key_code not in config.exclusive_keys:
                continue
            cost = _reach_cost(self.key_index, key_code, config)
            if cost is None:
                continue
            return finger, config.resting_key, cost

        best: tuple[Finger, str, float] | None = None
        for finger, config in finger_configs.items():
            if config.exclusive_keys:
                continue
            cost = _reach_cost(self.key_index, key_code, config)
            if cost is None:
                continue
            if best is None or cost < best[2]:
                best = (finger, config.resting_key, cost)
        return best


def prioritized_keys(scored_keys: Iterable[ScoredKey]) -> list[ScoredKey]:
    """Scored keys from most to least accessible (stable on ties)."""
    return sorted(scored_keys, key=lambda k: k.total_score)
