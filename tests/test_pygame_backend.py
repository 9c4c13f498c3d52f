import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import numpy as np  # noqa: E402
import pygame  # noqa: E402
import pytest  # noqa: E402

from starfield.core.engine import Starfield  # noqa: E402
from starfield.core.errors import StarfieldConfigError  # noqa: E402
from starfield.render.pygame_backend import (  # noqa: E402
    PygameFrameScheduler,
    PygameStage,
    PygameSurface,
)


@pytest.fixture(scope="module", autouse=True)
def display():
    pygame.display.init()
    pygame.display.set_mode((1, 1))
    yield
    pygame.display.quit()


@pytest.fixture
def window():
    return pygame.Surface((320, 200), 0, 32)


@pytest.fixture
def stage(window):
    return PygameStage(window, regions={"panel": (20, 10, 100, 50)}, device_pixel_ratio=2.0)


class SolidLayer:
    def __init__(self, size, color):
        self.image = pygame.Surface(size, 0, 32)
        self.image.fill(color)

    def present(self):
        return self.image


def test_surface_backing_store_follows_pixel_scale():
    surface = PygameSurface()
    surface.set_pixel_scale(100, 50, 2.0)
    assert surface.backing.get_size() == (200, 100)
    surface.fill_rect(0, 0, 100, 50, (10, 20, 30))
    assert surface.backing.get_at((199, 99))[:3] == (10, 20, 30)
    assert surface.present().get_size() == (100, 50)


def test_surface_strokes_lines_in_scaled_space():
    surface = PygameSurface()
    surface.set_pixel_scale(100, 50, 2.0)
    surface.fill_rect(0, 0, 100, 50, (0, 0, 0))
    surface.stroke_line((10, 25), (90, 25), (255, 255, 255), 3.0)
    assert surface.backing.get_at((100, 50))[:3] == (255, 255, 255)
    surface.stroke_line((10, 5), (90, 5), (255, 0, 0), 0.1)
    assert surface.backing.get_at((100, 10))[0] > 0


def test_unscaled_surface_presents_backing_directly():
    surface = PygameSurface()
    surface.set_pixel_scale(40, 30, 1.0)
    assert surface.present() is surface.backing


def test_scheduler_runs_pending_callbacks_once():
    scheduler = PygameFrameScheduler()
    seen = []
    scheduler.request_frame(lambda t: seen.append(("a", t)))
    handle = scheduler.request_frame(lambda t: seen.append(("b", t)))
    scheduler.cancel_frame(handle)
    assert scheduler.run_frame(5.0) == 1
    assert seen == [("a", 5.0)]
    assert scheduler.run_frame(6.0) == 0
    assert scheduler.pending_count == 0


def test_scheduler_defers_callbacks_requested_during_a_frame():
    scheduler = PygameFrameScheduler()
    seen = []

    def again(t):
        seen.append(t)
        scheduler.request_frame(again)

    scheduler.request_frame(again)
    scheduler.run_frame(1.0)
    scheduler.run_frame(2.0)
    assert seen == [1.0, 2.0]
    assert scheduler.pending_count == 1


def test_resolve_target(stage):
    assert stage.resolve_target(None) is None
    assert stage.resolve_target("panel") == "panel"
    assert stage.resolve_target((1, 2, 3, 4)) == pygame.Rect(1, 2, 3, 4)
    assert stage.resolve_target(pygame.Rect(0, 0, 5, 5)) == pygame.Rect(0, 0, 5, 5)
    with pytest.raises(StarfieldConfigError):
        stage.resolve_target("sidebar")
    with pytest.raises(StarfieldConfigError):
        stage.resolve_target(42)
    assert stage.is_root(None)
    assert not stage.is_root("panel")


def test_measure_full_page_and_region(stage):
    full = stage.measure(None, True)
    assert (full.width, full.height) == (320, 200)
    region = stage.measure("panel", False)
    assert (region.width, region.height) == (100, 50)
    assert (region.screen_width, region.screen_height) == (320, 200)
    assert region.device_pixel_ratio == 2.0


def test_attach_confines_region_and_detach_restores(stage):
    surface = PygameSurface()
    stage.attach(surface, "panel", full_page=False, z_index=-1)
    assert stage.regions["panel"].clip
    assert stage.layer_count == 1
    stage.detach(surface)
    assert not stage.regions["panel"].clip
    assert stage.layer_count == 0


def test_region_changes_notify_only_its_observers(stage):
    calls = []
    window_cb = lambda: calls.append("window")  # noqa: E731
    panel_cb = lambda: calls.append("panel")  # noqa: E731
    stage.subscribe(window_cb)
    stage.subscribe(panel_cb, "panel")
    stage.set_region("panel", (0, 0, 60, 60))
    assert calls == ["panel"]
    stage.notify_resize()
    assert calls == ["panel", "window", "panel"]
    stage.unsubscribe(panel_cb)
    assert stage.subscriber_count == 1


def test_compose_orders_layers_around_content(stage, window):
    below = SolidLayer((320, 200), (255, 0, 0))
    above = SolidLayer((100, 50), (0, 0, 255))
    stage.attach(below, None, full_page=True, z_index=-1)
    stage.attach(above, "panel", full_page=False, z_index=5)

    def content(surface):
        surface.fill((0, 255, 0), pygame.Rect(0, 0, 10, 10))

    stage.compose(content)
    assert window.get_at((5, 5))[:3] == (0, 255, 0)
    assert window.get_at((200, 150))[:3] == (255, 0, 0)
    assert window.get_at((30, 20))[:3] == (0, 0, 255)


def test_engine_runs_on_pygame_collaborators(stage):
    scheduler = PygameFrameScheduler()
    surface = PygameSurface()
    field = Starfield(
        {"star_count": 50, "target": "panel"},
        host=stage,
        surface=surface,
        scheduler=scheduler,
        rng=np.random.default_rng(2),
    )
    assert not field.full_page
    assert surface.backing.get_size() == (200, 100)
    for t in (0.0, 16.0, 33.0):
        scheduler.run_frame(t)
    stage.compose()

    stage.set_region("panel", (0, 0, 80, 40))
    assert field.viewport.max_depth == 80

    field.destroy()
    assert scheduler.pending_count == 0
    assert stage.subscriber_count == 0
    assert stage.layer_count == 0
    assert not stage.regions["panel"].clip


def test_scheduler_clock_is_monotonic():
    scheduler = PygameFrameScheduler()
    first = scheduler.now_ms()
    assert scheduler.now_ms() >= first
    seen = []
    scheduler.request_frame(seen.append)
    scheduler.run_frame()
    assert seen and seen[0] >= first


def test_window_resize_events_notify_once(stage):
    calls = []
    stage.subscribe(lambda: calls.append("window"))
    display_size = pygame.display.get_surface().get_size()
    w, h = display_size

    assert not stage.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_a))
    assert stage.handle_event(pygame.event.Event(pygame.VIDEORESIZE, size=display_size, w=w, h=h))
    assert not stage.handle_event(pygame.event.Event(pygame.WINDOWRESIZED, x=w, y=h))
    assert calls == ["window"]
    assert stage.window.get_size() == display_size
