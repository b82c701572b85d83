"""Engine configuration for Keybind Architect.

Loads ``configs/engine_defaults.yaml`` (or a user-supplied file) into the
frozen settings structs the engine takes as arguments. Every section and
every key is required: a missing one raises ``ValueError`` naming it, so
a typo never silently falls back to a default.
"""

from __future__ import annotations

from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from src.binding_engine.presets import parse_finger
from src.binding_engine.settings import AllocatorSettings, AnnealingOptions, EngineConfig, PenaltyConfig

DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parents[1] / "configs" / "engine_defaults.yaml"

_OPTIONAL_NUMBERS = {"seed": int, "max_iterations": int, "time_limit": float}


def _section(cfg: dict[str, Any], name: str, cls: type, config_path: Path) -> dict[str, Any]:
    if name not in cfg or not isinstance(cfg[name], dict):
        raise ValueError(f"Missing required section '{name}' in engine config: {config_path}")
    raw = cfg[name]
    for f in fields(cls):
        if f.name not in raw:
            raise ValueError(
                f"Missing required key '{name}.{f.name}' in engine config: {config_path}"
            )
    return raw


def load_engine_config(config_path: str | Path | None = None) -> EngineConfig:
    """Read an engine config YAML.

    Args:
        config_path: Path to the YAML file. Defaults to
            ``configs/engine_defaults.yaml`` relative to the project root.

    Returns:
        A populated :class:`EngineConfig`.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a section or key is missing or a value is invalid.
    """
    config_path = DEFAULT_CONFIG_PATH if config_path is None else Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Engine config not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as fh:
        cfg: dict[str, Any] = yaml.safe_load(fh) or {}

    penalties_raw = _section(cfg, "penalties", PenaltyConfig, config_path)
    penalties = PenaltyConfig(**{f.name: float(penalties_raw[f.name]) for f in fields(PenaltyConfig)})

    allocator_raw = _section(cfg, "allocator", AllocatorSettings, config_path)
    allocator = AllocatorSettings(
        frequency_bonus=float(allocator_raw["frequency_bonus"]),
        load_penalty=float(allocator_raw["load_penalty"]),
        priority_cap_floor=float(allocator_raw["priority_cap_floor"]),
        default_finger=parse_finger(allocator_raw["default_finger"]),
    )

    annealing_raw = _section(cfg, "annealing", AnnealingOptions, config_path)
    annealing_values: dict[str, Any] = {
        "initial_temp": float(annealing_raw["initial_temp"]),
        "cooling_rate": float(annealing_raw["cooling_rate"]),
        "min_temp": float(annealing_raw["min_temp"]),
    }
    for key, cast in _OPTIONAL_NUMBERS.items():
        value = annealing_raw[key]
        annealing_values[key] = None if value is None else cast(value)
    annealing = AnnealingOptions(**annealing_values)

    return EngineConfig(penalties=penalties, allocator=allocator, annealing=annealing)
