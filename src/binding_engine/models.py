"""Models — the data types shared by every stage of the binding engine.

    Finger          – closed enumeration of the ten digits
    ActionType      – category of a game action
    Direction       – optional explicit sign/axis tag for DIRECTIONAL actions
    KeyDefinition   – physical key on the 0.25u coordinate grid
    FingerConfig    – resting key, reach and ergonomic limits of one finger
    AxisConfig      – one movement axis (two keys + owning fingers)
    MovementConfig  – the vertical and horizontal axes
    Action          – a weighted action to place on a key
    ScoredKey       – accessibility of one key under a finger configuration
    Binding         – one action → key pair (output of both strategies)

All types are immutable. A ``Layout`` is a plain ``dict`` of action name
to key code; functions that change a layout always return a new dict.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class Finger(str, Enum):
    LEFT_PINKY = "LeftPinky"
    LEFT_RING = "LeftRing"
    LEFT_MIDDLE = "LeftMiddle"
    LEFT_INDEX = "LeftIndex"
    LEFT_THUMB = "LeftThumb"
    RIGHT_THUMB = "RightThumb"
    RIGHT_INDEX = "RightIndex"
    RIGHT_MIDDLE = "RightMiddle"
    RIGHT_RING = "RightRing"
    RIGHT_PINKY = "RightPinky"


FINGERS: list[Finger] = list(Finger)


class ActionType(str, Enum):
    DIRECTIONAL = "DIRECTIONAL"  # forward/back/left/right, pinned to axis keys
    MOVEMENT = "MOVEMENT"        # jump, dash, crouch; allocated normally
    COMBAT = "COMBAT"
    UTILITY = "UTILITY"
    MENU = "MENU"


class Direction(str, Enum):
    FORWARD = "FORWARD"
    BACKWARD = "BACKWARD"
    LEFT = "LEFT"
    RIGHT = "RIGHT"


@dataclass(frozen=True)
class KeyDefinition:
    """A physical key on the 0.25u grid; ``height`` ``None`` means the default."""

    code: str
    x: float
    y: float
    width: float
    height: float | None = None


@dataclass(frozen=True)
class FingerConfig:
    """Configuration for a single finger.

    A finger with a non-empty ``exclusive_keys`` may press only those
    keys, and no other finger may press them. ``key_penalties`` adds a
    per-key cost on top of the geometric distance (may be negative).
    """

    resting_key: str
    reach: float
    exclusive_keys: tuple[str, ...] = ()
    key_penalties: Mapping[str, float] = field(default_factory=dict)

    def penalty_for(self, key_code: str) -> float:
        return float(self.key_penalties.get(key_code, 0.0))


# Not every finger needs to be configured. An absent finger owns no keys:
# it is never a scoring candidate and never receives a non-locked binding.
FingerConfigMap = Mapping[Finger, FingerConfig]


@dataclass(frozen=True)
class AxisConfig:
    """One movement axis: a positive and a negative key, pressed by ``fingers``."""

    positive_key: str
    negative_key: str
    fingers: tuple[Finger, ...] = ()
    # When set, these fingers are reserved for movement only.
    is_exclusive: bool = False

    @property
    def keys(self) -> tuple[str, str]:
        return (self.positive_key, self.negative_key)


@dataclass(frozen=True)
class MovementConfig:
    vertical_axis: AxisConfig
    horizontal_axis: AxisConfig

    @property
    def axes(self) -> tuple[AxisConfig, AxisConfig]:
        return (self.vertical_axis, self.horizontal_axis)


@dataclass(frozen=True)
class Action:
    """A game action to place on a key.

    ``priority`` 0 leaves reach uncapped; 1–100 caps it, tighter as it
    grows. ``use_frequency`` (0–100) is the action's weight.
    ``concurrent_with`` names actions that must stay pressable at the
    same time, so they may not share this action's finger.
    """

    name: str
    priority: int
    type: ActionType
    use_frequency: float
    concurrent_with: tuple[str, ...] = ()
    direction: Direction | None = None


@dataclass(frozen=True)
class ScoredKey:
    """Reach cost of one key for its cheapest finger.

    ``origin_key`` is the resting key the cost was measured from;
    ``is_resting_key`` holds exactly when ``total_score`` is 0.
    """

    code: str
    total_score: float
    best_finger: Finger
    origin_key: str
    is_resting_key: bool
    is_movement: bool


@dataclass(frozen=True)
class Binding:
    """One action placed on one key; the output unit of both strategies."""

    action: str
    key: str

    def to_dict(self) -> dict[str, str]:
        return {"action": self.action, "key": self.key}


Layout = dict[str, str]
