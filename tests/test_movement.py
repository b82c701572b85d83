import pytest

from src.binding_engine.allocator import allocate
from src.binding_engine.annealing import initial_layout
from src.binding_engine.cost_model import FrictionModel, build_friction_context
from src.binding_engine.models import (
    Action,
    ActionType,
    AxisConfig,
    Direction,
    Finger,
    FingerConfig,
    MovementConfig,
    ScoredKey,
)
from src.binding_engine.movement import (
    action_direction,
    axis_for_action,
    concurrency_graph,
    directional_targets,
    exclusive_movement_fingers,
    movement_key_set,
    target_key,
)
from src.binding_engine.settings import PenaltyConfig

MOVEMENT = MovementConfig(
    vertical_axis=AxisConfig("KeyW", "KeyS", (Finger.LEFT_MIDDLE,), is_exclusive=True),
    horizontal_axis=AxisConfig("KeyD", "KeyA", (Finger.LEFT_INDEX, Finger.LEFT_RING), is_exclusive=False),
)

FINGERS = {
    Finger.LEFT_MIDDLE: FingerConfig("KeyW", 10),
    Finger.LEFT_INDEX: FingerConfig("KeyD", 12),
}

SCORED = [
    ScoredKey("KeyW", 0, Finger.LEFT_MIDDLE, "KeyW", True, True),
    ScoredKey("KeyS", 4, Finger.LEFT_MIDDLE, "KeyW", False, True),
    ScoredKey("KeyD", 0, Finger.LEFT_INDEX, "KeyD", True, True),
    ScoredKey("KeyA", 8, Finger.LEFT_INDEX, "KeyD", False, True),
]


def directional(name, direction=None, frequency=50):
    return Action(name, 0, ActionType.DIRECTIONAL, frequency, direction=direction)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("MoveForward", Direction.FORWARD),
        ("moveBACKWARD", Direction.BACKWARD),
        ("StrafeLeft", Direction.LEFT),
        ("StrafeRight", Direction.RIGHT),
        # Hints are checked forward, backward, left, right
        ("ForwardLeftLean", Direction.FORWARD),
        ("RightBackwardRoll", Direction.BACKWARD),
        ("LeftRight", Direction.LEFT),
        ("Jump", None),
    ],
)
def test_direction_from_name(name, expected):
    assert action_direction(directional(name)) is expected


def test_explicit_direction_beats_name():
    assert action_direction(directional("MoveForward", Direction.LEFT)) is Direction.LEFT


@pytest.mark.parametrize(
    "direction, key",
    [
        (Direction.FORWARD, "KeyW"),
        (Direction.BACKWARD, "KeyS"),
        (Direction.LEFT, "KeyA"),
        (Direction.RIGHT, "KeyD"),
    ],
)
def test_tagged_action_target_key(direction, key):
    assert target_key(directional("Strafe", direction), MOVEMENT) == key


def test_tagged_strafe_uses_horizontal_negative_key():
    strafe = directional("Strafe", Direction.LEFT)
    assert axis_for_action(strafe, MOVEMENT) is MOVEMENT.horizontal_axis
    assert target_key(strafe, MOVEMENT) == MOVEMENT.horizontal_axis.negative_key


def test_untagged_action_without_hint_has_no_axis():
    strafe = directional("Strafe")
    assert axis_for_action(strafe, MOVEMENT) is None
    assert target_key(strafe, MOVEMENT) is None


def test_directional_targets_only_cover_resolvable_directionals():
    actions = [
        directional("Strafe", Direction.LEFT),
        directional("Glide"),
        Action("LeftClick", 0, ActionType.COMBAT, 90),
    ]
    assert directional_targets(actions, MOVEMENT) == {"Strafe": "KeyA"}


def test_movement_key_set_and_exclusive_fingers():
    assert movement_key_set(MOVEMENT) == {"KeyW", "KeyS", "KeyD", "KeyA"}
    assert exclusive_movement_fingers(MOVEMENT) == {Finger.LEFT_MIDDLE}


def test_concurrency_graph_is_undirected_without_self_loops():
    actions = [
        Action("Fire", 0, ActionType.COMBAT, 90, concurrent_with=("Fire", "Jump")),
        Action("Jump", 0, ActionType.MOVEMENT, 60),
        Action("Voice", 0, ActionType.UTILITY, 20, concurrent_with=("Emote",)),
    ]
    graph = concurrency_graph(actions)

    assert graph["Fire"] == {"Jump"}
    assert graph["Jump"] == {"Fire"}
    assert graph["Voice"] == {"Emote"}
    assert graph["Emote"] == {"Voice"}


def test_greedy_places_tagged_action_on_its_axis():
    tagged = allocate([directional("Strafe", Direction.LEFT)], SCORED, FINGERS, MOVEMENT, set())
    untagged = allocate([directional("Strafe")], SCORED, FINGERS, MOVEMENT, set())

    assert len(tagged) == 1
    assert tagged[0].key in MOVEMENT.horizontal_axis.keys
    assert untagged == []


def test_friction_axis_term_follows_tag():
    strafe = directional("Strafe", Direction.LEFT)
    context = build_friction_context([strafe], SCORED, FINGERS, MOVEMENT)
    model = FrictionModel(context)

    assert model.axis_penalty(strafe, "KeyA") == 0
    assert model.axis_penalty(strafe, "KeyD") == PenaltyConfig().wrong_axis_penalty


def test_warm_start_uses_tags():
    actions = [
        directional("Strafe", Direction.LEFT),
        directional("MoveForward", Direction.BACKWARD),
    ]
    layout = initial_layout(actions, SCORED, MOVEMENT, FINGERS)
    assert layout == {"Strafe": "KeyA", "MoveForward": "KeyS"}
