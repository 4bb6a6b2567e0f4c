import pytest

from core.gesture_recognizer import (
    FingerStateClassifier,
    GestureMode,
    GestureStateMachine,
    fingers_up,
)
from core.landmarks import INDEX_PIP, INDEX_TIP, THUMB_TIP
from modules.brush_manager import ColorPalette

CANVAS = (1280, 720)


@pytest.fixture
def machine(paint_config):
    return GestureStateMachine(ColorPalette(paint_config.palette))


def test_index_only_vector(hand_points):
    points = hand_points([0, 1, 0, 0, 0])
    assert fingers_up(points) == (False, True, False, False, False)


@pytest.mark.parametrize("fingers", [
    [1, 1, 1, 1, 1],
    [1, 0, 0, 0, 0],
    [0, 0, 0, 0, 0],
    [0, 1, 1, 0, 0],
    [1, 0, 1, 0, 1],
])
def test_vector_roundtrips_synthetic_hand(hand_points, fingers):
    assert fingers_up(hand_points(fingers)) == tuple(bool(f) for f in fingers)


def test_long_fingers_need_more_than_margin(hand_points):
    points = hand_points([0, 0, 0, 0, 0])
    joint_y = points[INDEX_PIP][1]

    points[INDEX_TIP] = (points[INDEX_TIP][0], joint_y - 20)
    assert fingers_up(points, margin=20)[1] is False

    points[INDEX_TIP] = (points[INDEX_TIP][0], joint_y - 21)
    assert fingers_up(points, margin=20)[1] is True


def test_thumb_uses_horizontal_comparison(hand_points):
    points = hand_points([0, 0, 0, 0, 0])
    joint_x = points[THUMB_TIP - 1][0]
    points[THUMB_TIP] = (joint_x - 1, 0.0)
    assert fingers_up(points)[0] is True
    points[THUMB_TIP] = (joint_x, 0.0)
    assert fingers_up(points)[0] is False


def test_debounce_disabled_is_memoryless(hand_points):
    classifier = FingerStateClassifier(confirm_frames=1)
    assert classifier.classify(hand_points([0, 1, 0, 0, 0])) == (False, True, False, False, False)
    assert classifier.classify(hand_points([1, 0, 0, 0, 0])) == (True, False, False, False, False)


def test_debounce_holds_state_until_confirmed(hand_points):
    classifier = FingerStateClassifier(confirm_frames=3)
    index = hand_points([0, 1, 0, 0, 0])
    fist = hand_points([0, 0, 0, 0, 0])

    assert classifier.classify(index)[1] is True
    assert classifier.classify(fist)[1] is True
    assert classifier.classify(fist)[1] is True
    assert classifier.classify(fist)[1] is False

    classifier.reset()
    assert classifier.classify(index)[1] is True


@pytest.mark.parametrize("previous", list(GestureMode))
def test_all_fingers_always_clear(machine, hand_points, previous):
    machine.mode = previous
    decision = machine.update((True,) * 5, hand_points([1, 1, 1, 1, 1]), CANVAS)
    assert decision.mode is GestureMode.CLEAR
    assert decision.target is None


@pytest.mark.parametrize("previous", list(GestureMode))
def test_thumb_only_always_erases(machine, hand_points, previous):
    machine.mode = previous
    points = hand_points([1, 0, 0, 0, 0], thumb_tip=(900.0, 500.0))
    decision = machine.update((True, False, False, False, False), points, CANVAS)
    assert decision.mode is GestureMode.ERASING
    assert decision.target == (900.0, 500.0)


def test_index_only_draws_outside_palette(machine, hand_points):
    points = hand_points([0, 1, 0, 0, 0], index_tip=(700.0, 400.0))
    decision = machine.update((False, True, False, False, False), points, CANVAS)
    assert decision.mode is GestureMode.DRAWING
    assert decision.target == (700.0, 400.0)
    assert decision.palette_entry is None


def test_index_tap_on_palette_selects_color(machine, hand_points):
    points = hand_points([0, 1, 0, 0, 0], index_tip=(250.0, 100.0))
    decision = machine.update((False, True, False, False, False), points, CANVAS)
    assert decision.mode is GestureMode.COLOR_SELECT
    assert decision.palette_entry.name == "Green"
    assert decision.target is None


def test_color_select_is_sticky_until_overridden(machine, hand_points):
    tap = hand_points([0, 1, 0, 0, 0], index_tip=(100.0, 100.0))
    machine.update((False, True, False, False, False), tap, CANVAS)

    fist = hand_points([0, 0, 0, 0, 0])
    decision = machine.update((False,) * 5, fist, CANVAS)
    assert decision.mode is GestureMode.COLOR_SELECT
    assert decision.palette_entry is None

    draw = hand_points([0, 1, 0, 0, 0])
    assert machine.update((False, True, False, False, False), draw, CANVAS).mode is GestureMode.DRAWING
    assert machine.update((False,) * 5, fist, CANVAS).mode is GestureMode.IDLE


def test_other_combinations_are_idle(machine, hand_points):
    points = hand_points([0, 1, 1, 0, 0])
    decision = machine.update((False, True, True, False, False), points, CANVAS)
    assert decision.mode is GestureMode.IDLE
    assert decision.target is None


def test_no_hand_forces_idle(machine, hand_points):
    tap = hand_points([0, 1, 0, 0, 0], index_tip=(100.0, 100.0))
    machine.update((False, True, False, False, False), tap, CANVAS)
    assert machine.no_hand().mode is GestureMode.IDLE
    assert machine.mode is GestureMode.IDLE


def test_mode_values_match_reported_names():
    assert GestureMode.ERASING.value == "eraser"
    assert GestureMode.COLOR_SELECT == "color-select"
