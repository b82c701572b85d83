"""Movement — mapping DIRECTIONAL actions onto the two movement axes.

An action's direction comes from its explicit ``direction`` tag when one
is set. Otherwise it is inferred from the action name, checked in this
order: "forward", "backward", "left", "right" (case-insensitive
substring). Forward/backward use the vertical axis, left/right the
horizontal one; forward and right are the positive keys.
"""

from __future__ import annotations

from typing import Iterable

from .models import Action, ActionType, AxisConfig, Direction, Finger, MovementConfig

_NAME_HINTS: list[tuple[str, Direction]] = [
    ("forward", Direction.FORWARD),
    ("backward", Direction.BACKWARD),
    ("left", Direction.LEFT),
    ("right", Direction.RIGHT),
]


def movement_key_set(movement: MovementConfig) -> set[str]:
    """Every key code on either movement axis.

    Args:
        movement: The preset's two axes.

    Returns:
        The positive and negative keys of both axes.
    """
    return {code for axis in movement.axes for code in axis.keys}


def exclusive_movement_fingers(movement: MovementConfig) -> set[Finger]:
    """Fingers reserved for movement by an exclusive axis."""
    fingers: set[Finger] = set()
    for axis in movement.axes:
        if axis.is_exclusive:
            fingers.update(axis.fingers)
    return fingers


def action_direction(action: Action) -> Direction | None:
    """Direction of a movement action.

    Args:
        action: Any action; the explicit ``direction`` tag wins when set.

    Returns:
        The tagged or name-inferred :class:`Direction`, or ``None`` when
        the name carries no hint.
    """
    if action.direction is not None:
        return action.direction
    name = action.name.lower()
    for hint, direction in _NAME_HINTS:
        if hint in name:
            return direction
    return None


def axis_for_action(action: Action, movement: MovementConfig) -> AxisConfig | None:
    """Axis the action moves along: vertical for forward/backward,
    horizontal for left/right, ``None`` without a direction.
    """
    direction = action_direction(action)
    if direction in (Direction.FORWARD, Direction.BACKWARD):
        return movement.vertical_axis
    if direction in (Direction.LEFT, Direction.RIGHT):
        return movement.horizontal_axis
    return None


def target_key(action: Action, movement: MovementConfig) -> str | None:
    """The one axis key a DIRECTIONAL action belongs on, if any."""
    direction = action_direction(action)
    if direction is Direction.FORWARD:
        return movement.vertical_axis.positive_key
    if direction is Direction.BACKWARD:
        return movement.vertical_axis.negative_key
    if direction is Direction.LEFT:
        return movement.horizontal_axis.negative_key
    if direction is Direction.RIGHT:
        return movement.horizontal_axis.positive_key
    return None


def directional_targets(actions: Iterable[Action], movement: MovementConfig) -> dict[str, str]:
    """Action name → correct axis key for every DIRECTIONAL action."""
    targets: dict[str, str] = {}
    for action in actions:
        if action.type is not ActionType.DIRECTIONAL:
            continue
        key = target_key(action, movement)
        if key is not None:
            targets[action.name] = key
    return targets


def concurrency_graph(actions: Iterable[Action]) -> dict[str, set[str]]:
    """Undirected adjacency of the ``concurrent_with`` relation.

    If A names B, both A→B and B→A are present. Self references are
    dropped. Names that are not actions still appear as neighbours.
    """
    graph: dict[str, set[str]] = {}
    for action in actions:
        graph.setdefault(action.name, set())
        for other in action.concurrent_with:
            if other == action.name:
                continue
            graph[action.name].add(other)
            graph.setdefault(other, set()).add(action.name)
    return graph
