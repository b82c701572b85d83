"""Settings — explicit configuration structs for the binding engine.

Every tunable constant the engine uses lives in one of these frozen
dataclasses and is passed in by the caller. Nothing here is global
state, so two configurations can run side by side without interfering.

    PenaltyConfig     – friction weights and hard-constraint penalties
    AllocatorSettings – greedy scoring constants
    AnnealingOptions  – temperature schedule, seed and run budget
    EngineConfig      – bundle of the three, as loaded from YAML
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .models import Finger


@dataclass(frozen=True)
class PenaltyConfig:
    """Weights for :func:`cost_model.friction`.

    The first three and ``exclusive_violation`` are hard-constraint
    penalties and must stay orders of magnitude above the soft weights.
    """

    wrong_axis_penalty: float = 1_000_000.0
    movement_key_penalty: float = 500_000.0
    exclusive_key_penalty: float = 200_000.0
    distance_weight: float = 1.0
    frequency_weight: float = 0.1
    concurrency_penalty: float = 10_000.0
    exclusive_violation: float = 100_000.0
    unreachable_penalty: float = 50_000.0
    load_imbalance_weight: float = 0.5
    missing_key_distance: float = 100.0


@dataclass(frozen=True)
class AllocatorSettings:
    """Constants used by the greedy allocator's inline scoring."""

    frequency_bonus: float = 0.1
    load_penalty: float = 0.05
    priority_cap_floor: float = 4.0
    default_finger: Finger = Finger.RIGHT_INDEX


@dataclass(frozen=True)
class AnnealingOptions:
    """Simulated-annealing schedule and budget.

    ``seed=None`` seeds from the wall clock and is not reproducible.
    ``max_iterations`` and ``time_limit`` cap the run on top of the
    temperature schedule; ``None`` leaves that cap off.
    """

    initial_temp: float = 1000.0
    cooling_rate: float = 0.995
    min_temp: float = 0.1
    seed: int | None = None
    max_iterations: int | None = None
    time_limit: float | None = None

    def __post_init__(self) -> None:
        if not 0 < self.cooling_rate < 1:
            raise ValueError(f"cooling_rate must be in (0, 1), got {self.cooling_rate}")
        if self.min_temp <= 0:
            raise ValueError(f"min_temp must be positive, got {self.min_temp}")


@dataclass(frozen=True)
class EngineConfig:
    penalties: PenaltyConfig = field(default_factory=PenaltyConfig)
    allocator: AllocatorSettings = field(default_factory=AllocatorSettings)
    annealing: AnnealingOptions = field(default_factory=AnnealingOptions)
