"""Keybind Architect — command-line entry point.

Loads a layout preset and an action list, runs one allocation strategy
and prints the most accessible keys, the resulting bindings, unassigned
actions and the finger-load summary.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from src.analysis.evaluator import finger_load_table, load_statistics
from src.analysis.tables import bindings_frame, finger_load_frame, scored_keys_frame
from src.binding_engine.models import Binding
from src.binding_engine.pipeline import STRATEGIES, optimize_bindings, report_to_json_bytes, score_preset_keys
from src.binding_engine.presets import load_actions, load_preset
from src.config import load_engine_config


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Keybind Architect - place game actions on keys with minimal strain",
    )
    parser.add_argument("--preset", default="wasd", help="Preset name or YAML path (default: wasd)")
    parser.add_argument(
        "--actions",
        default="hero_shooter",
        help="Action list name or YAML path (default: hero_shooter)",
    )
    parser.add_argument("--strategy", choices=STRATEGIES, default="greedy")
    parser.add_argument("--config", type=Path, default=None, help="Engine config YAML")
    parser.add_argument("--seed", type=int, default=None, help="Annealing seed")
    parser.add_argument("--max-iterations", type=int, default=None)
    parser.add_argument("--time-limit", type=float, default=None, help="Annealing budget in seconds")
    parser.add_argument("--top-keys", type=int, default=10, help="How many accessible keys to list")
    parser.add_argument("--json", action="store_true", help="Print the full report as JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_engine_config(args.config)
        preset = load_preset(args.preset)
        action_set = load_actions(args.actions)
    except (FileNotFoundError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    overrides = {
        key: value
        for key, value in (
            ("seed", args.seed),
            ("max_iterations", args.max_iterations),
            ("time_limit", args.time_limit),
        )
        if value is not None
    }
    if overrides:
        config = replace(config, annealing=replace(config.annealing, **overrides))

    report = optimize_bindings(
        preset,
        action_set.actions,
        locks=action_set.locks,
        strategy=args.strategy,
        config=config,
    )

    if args.json:
        sys.stdout.write(report_to_json_bytes(report).decode("utf-8") + "\n")
        return 0

    print(f"=== Keybind Architect ({preset.name}) [{args.strategy}] ===\n")

    scored_keys = score_preset_keys(preset)
    print(f"Top {args.top_keys} most accessible keys:")
    print(scored_keys_frame(scored_keys, top=args.top_keys).to_string(index=False))

    frequencies = {a.name: a.use_frequency for a in action_set.actions}
    print("\n--- Bindings ---")
    print(bindings_frame(report, frequencies).to_string(index=False))

    print("\n--- Unassigned actions ---")
    if report["unassigned"]:
        for name in report["unassigned"]:
            print(f"  {name} (freq: {frequencies[name]})")
    else:
        print("  (none)")

    bindings = [Binding(row["action"], row["key"]) for row in report["bindings"]]
    loads = finger_load_table(bindings, scored_keys, action_set.actions)
    stats = load_statistics(loads)
    print("\n--- Finger load ---")
    print(finger_load_frame(loads).to_string(index=False))
    print(
        f"  mean {stats['mean']:.1f} | std {stats['std']:.1f} | spread {stats['spread']:.1f}"
    )
    print(f"\nFriction: {report['friction']:.2f}")
    if report["annealing"] is not None:
        meta = report["annealing"]
        print(f"Annealing: {meta['iterations']} iterations, {meta['accepted']} accepted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
