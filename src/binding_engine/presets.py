"""Presets — load hand layouts and action lists from YAML.

Layout presets live in ``configs/presets/<name>.yaml``; action lists in
``configs/actions/<name>.yaml``. Both are validated on load: a missing
key, an unknown finger or an unknown action type raises ``ValueError``
naming the offending entry, and a missing file raises
``FileNotFoundError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .models import Action, ActionType, AxisConfig, Direction, Finger, FingerConfig, MovementConfig

CONFIG_DIR: Path = Path(__file__).resolve().parents[2] / "configs"
PRESET_DIR: Path = CONFIG_DIR / "presets"
ACTIONS_DIR: Path = CONFIG_DIR / "actions"


@dataclass(frozen=True)
class LayoutPreset:
    name: str
    finger_configs: dict[Finger, FingerConfig]
    movement: MovementConfig
    available_fingers: tuple[Finger, ...]


@dataclass(frozen=True)
class ActionSet:
    actions: list[Action]
    locks: dict[str, str]


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top of {path}")
    return data


def _require(section: dict[str, Any], keys: list[str], where: str) -> None:
    for key in keys:
        if key not in section:
            raise ValueError(f"Missing required key '{key}' in {where}")


def _resolve(name_or_path: str | Path, directory: Path) -> Path:
    path = Path(name_or_path)
    if path.suffix in (".yaml", ".yml"):
        return path
    return directory / f"{name_or_path}.yaml"


def parse_finger(value: str) -> Finger:
    """Finger for its config name (``"LeftIndex"``); ``ValueError`` if unknown."""
    try:
        return Finger(value)
    except ValueError:
        raise ValueError(
            f"Unknown finger '{value}'; expected one of {[f.value for f in Finger]}"
        ) from None


def _parse_finger_config(raw: dict[str, Any], where: str) -> FingerConfig:
    _require(raw, ["resting_key", "reach"], where)
    return FingerConfig(
        resting_key=str(raw["resting_key"]),
        reach=float(raw["reach"]),
        exclusive_keys=tuple(str(k) for k in raw.get("exclusive_keys") or ()),
        key_penalties={str(k): float(v) for k, v in (raw.get("key_penalties") or {}).items()},
    )


def _parse_axis(raw: dict[str, Any], where: str) -> AxisConfig:
    _require(raw, ["positive_key", "negative_key", "fingers"], where)
    return AxisConfig(
        positive_key=str(raw["positive_key"]),
        negative_key=str(raw["negative_key"]),
        fingers=tuple(parse_finger(f) for f in raw["fingers"]),
        is_exclusive=bool(raw.get("exclusive", False)),
    )


def parse_preset(data: dict[str, Any], source: str = "preset") -> LayoutPreset:
    """Build a :class:`LayoutPreset` from an already-parsed mapping."""
    _require(data, ["fingers", "movement", "available_fingers"], source)

    finger_configs: dict[Finger, FingerConfig] = {}
    for finger_name, raw in data["fingers"].items():
        finger = parse_finger(finger_name)
        finger_configs[finger] = _parse_finger_config(raw, f"{source}: fingers.{finger_name}")

    movement_raw = data["movement"]
    _require(movement_raw, ["vertical", "horizontal"], f"{source}: movement")
    movement = MovementConfig(
        vertical_axis=_parse_axis(movement_raw["vertical"], f"{source}: movement.vertical"),
        horizontal_axis=_parse_axis(movement_raw["horizontal"], f"{source}: movement.horizontal"),
    )

    return LayoutPreset(
        name=str(data.get("name", source)),
        finger_configs=finger_configs,
        movement=movement,
        available_fingers=tuple(parse_finger(f) for f in data["available_fingers"]),
    )


def load_preset(name_or_path: str | Path) -> LayoutPreset:
    """Load a layout preset by name (``"wasd"``) or by YAML path."""
    path = _resolve(name_or_path, PRESET_DIR)
    return parse_preset(_read_yaml(path), source=str(path))


def parse_action(raw: dict[str, Any], where: str) -> Action:
    """Build an :class:`Action` from one YAML entry.

    Args:
        raw: The mapping for one action.
        where: Location used in error messages.

    Raises:
        ValueError: On a missing field, an unknown type or direction, or a
            frequency or priority outside 0-100.
    """
    _require(raw, ["name", "type", "use_frequency"], where)
    try:
        action_type = ActionType(raw["type"])
    except ValueError:
        raise ValueError(f"Unknown action type '{raw['type']}' in {where}") from None

    direction = raw.get("direction")
    if direction is not None:
        try:
            direction = Direction(direction)
        except ValueError:
            raise ValueError(f"Unknown direction '{direction}' in {where}") from None

    frequency = float(raw["use_frequency"])
    if not 0 <= frequency <= 100:
        raise ValueError(f"use_frequency must be within 0-100 in {where}, got {frequency}")

    priority = int(raw.get("priority", 0))
    if not 0 <= priority <= 100:
        raise ValueError(f"priority must be within 0-100 in {where}, got {priority}")

    return Action(
        name=str(raw["name"]),
        priority=priority,
        type=action_type,
        use_frequency=frequency,
        concurrent_with=tuple(str(n) for n in raw.get("concurrent_with") or ()),
        direction=direction,
    )


def load_actions(name_or_path: str | Path) -> ActionSet:
    """Load an action list (and optional lock map) by name or YAML path."""
    path = _resolve(name_or_path, ACTIONS_DIR)
    data = _read_yaml(path)
    _require(data, ["actions"], str(path))

    actions = [
        parse_action(raw, f"{path}: actions[{i}]")
        for i, raw in enumerate(data["actions"])
    ]
    names = [a.name for a in actions]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValueError(f"Duplicate action names in {path}: {duplicates}")

    locks = {str(k): str(v) for k, v in (data.get("locks") or {}).items()}
    return ActionSet(actions=actions, locks=locks)


def available_presets() -> list[str]:
    """Names of the bundled layout presets."""
    return sorted(p.stem for p in PRESET_DIR.glob("*.yaml"))
