import pytest

from core.coordinate_mapper import CoordinateMapper, to_canvas_point
from core.landmarks import HandObservation


def test_mapping_mirrors_horizontally():
    assert to_canvas_point((0, 0), (640, 480), (1280, 720)) == (1280, 0)
    assert to_canvas_point((640, 480), (640, 480), (1280, 720)) == (0, 720)
    assert to_canvas_point((320, 240), (640, 480), (1280, 720)) == (640, 360)


def test_mapping_scales_to_canvas():
    x, y = to_canvas_point((160, 120), (640, 480), (800, 600))
    assert x == pytest.approx(600)
    assert y == pytest.approx(150)


def test_invalid_video_size():
    with pytest.raises(ValueError):
        to_canvas_point((1, 1), (0, 480), (1280, 720))


def test_mapper_uses_canvas_size_of_each_call():
    obs = HandObservation(landmarks=tuple((64.0 * (i % 10), 48.0) for i in range(21)), confidence=0.8)
    mapper = CoordinateMapper((640, 480))

    small = mapper.map(obs, (640, 480))
    large = mapper.map(obs, (1280, 960))

    assert len(small) == 21
    assert small[1] == pytest.approx((576, 48))
    assert large[1] == pytest.approx((1152, 96))


def test_mapper_follows_video_size_change():
    obs = HandObservation(landmarks=((100.0, 100.0),) * 21, confidence=0.5)
    mapper = CoordinateMapper((200, 200))
    assert mapper.map(obs, (200, 200))[0] == pytest.approx((100, 100))
    mapper.video_size = (400, 400)
    assert mapper.map(obs, (200, 200))[0] == pytest.approx((150, 50))


def test_observation_validation():
    with pytest.raises(ValueError):
        HandObservation(landmarks=((0.0, 0.0),) * 20, confidence=0.5)
    with pytest.raises(ValueError):
        HandObservation(landmarks=((0.0, 0.0),) * 21, confidence=1.5)
