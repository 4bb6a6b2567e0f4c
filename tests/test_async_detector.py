import logging

import pytest

from core.async_detector import AsyncShapeDetector
from modules.canvas import Canvas
from modules.shape_recognizer import SQUARE, ShapeDetector


def draw_square(canvas: Canvas) -> None:
    canvas.get_canvas()[20:120, 20:120] = (255, 0, 0, 255)
    canvas.draw_line((0, 0), (0, 0), (0, 0, 0), 1)  # bump the version


@pytest.fixture
def canvas():
    return Canvas(200, 150)


def test_sync_mode_runs_inline(canvas):
    runner = AsyncShapeDetector(ShapeDetector(), interval_ms=100, async_mode=False)
    draw_square(canvas)

    assert runner.maybe_submit(canvas, now=0.0) is True
    assert runner.cycles == 1
    assert [s.name for s in runner.get_result()] == [SQUARE]
    assert not canvas.dirty


def test_cadence_is_respected(canvas):
    runner = AsyncShapeDetector(ShapeDetector(), interval_ms=100, async_mode=False)
    assert runner.maybe_submit(canvas, now=0.0) is True
    draw_square(canvas)
    assert runner.maybe_submit(canvas, now=0.05) is False
    assert runner.maybe_submit(canvas, now=0.1) is True
    assert runner.cycles == 2


def test_unchanged_canvas_is_not_rescanned(canvas):
    runner = AsyncShapeDetector(ShapeDetector(), interval_ms=100, async_mode=False)
    draw_square(canvas)
    runner.maybe_submit(canvas, now=0.0)
    first = runner.get_result()
    assert runner.maybe_submit(canvas, now=5.0) is False
    assert runner.get_result() == first


def test_failed_cycle_keeps_previous_result(canvas, monkeypatch, caplog):
    detector = ShapeDetector()
    runner = AsyncShapeDetector(detector, interval_ms=100, async_mode=False)
    draw_square(canvas)
    runner.maybe_submit(canvas, now=0.0)
    previous = runner.get_result()

    def boom(pixels):
        raise RuntimeError("detector exploded")

    monkeypatch.setattr(detector, "detect", boom)
    canvas.clear()
    with caplog.at_level(logging.ERROR, logger="core.async_detector"):
        assert runner.maybe_submit(canvas, now=1.0) is True

    assert runner.get_result() == previous
    assert runner.cycles == 2
    assert "keeping previous result" in caplog.text


def test_worker_thread_produces_results(canvas):
    runner = AsyncShapeDetector(ShapeDetector(), interval_ms=10, async_mode=True)
    runner.start()
    try:
        assert runner.running
        draw_square(canvas)
        assert runner.maybe_submit(canvas, now=0.0) is True
        assert runner.wait_for_cycles(1, timeout=5.0)
        assert [s.name for s in runner.get_result()] == [SQUARE]
    finally:
        runner.stop()
    assert not runner.running


def test_results_are_copies(canvas):
    runner = AsyncShapeDetector(ShapeDetector(), async_mode=False)
    draw_square(canvas)
    runner.maybe_submit(canvas, now=0.0)
    runner.get_result().clear()
    assert len(runner.get_result()) == 1
