import pytest

from starfield.core.model import ViewportState
from starfield.core.projection import (
    clamp,
    is_offscreen,
    line_width_for_depth,
    linear_map,
    project,
    project_x,
    project_y,
)


@pytest.fixture
def viewport():
    return ViewportState.from_size(800, 600, trail_length=10.0)


def test_linear_map_and_clamp():
    assert linear_map(5, 0, 10, 0, 100) == 50
    assert linear_map(0.25, 0, 1, 3, 0) == pytest.approx(2.25)
    assert clamp(5, 0, 3) == 3
    assert clamp(-1, 0.1, 3) == 0.1


@pytest.mark.parametrize("size", [(800, 600), (333, 1024), (1, 1)])
def test_origin_projects_to_center(size):
    vp = ViewportState.from_size(*size)
    assert project_x(0, vp.max_depth, vp) == vp.center_x
    assert project_y(0, vp.max_depth, vp) == vp.center_y


def test_perspective_magnifies_closer_points(viewport):
    far = project_x(100, 400, viewport)
    near = project_x(100, 100, viewport)
    assert far == pytest.approx(500)
    assert near == pytest.approx(800)
    assert project(-400, -300, 400, viewport) == pytest.approx((0, 75))


def test_offscreen_bounds_are_inclusive(viewport):
    assert not is_offscreen(0, 0, viewport)
    assert not is_offscreen(800, 600, viewport)
    assert is_offscreen(-0.1, 10, viewport)
    assert is_offscreen(10, 600.5, viewport)


def test_line_width_grows_as_depth_shrinks(viewport):
    assert line_width_for_depth(0, viewport) == 3
    assert line_width_for_depth(400, viewport) == pytest.approx(1.5)
    assert line_width_for_depth(800, viewport) == 0.1
