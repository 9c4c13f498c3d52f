"""pygame implementations of the engine's collaborators."""
from __future__ import annotations

import itertools
import math
import numbers
from dataclasses import dataclass
from typing import Any, Callable

import pygame

from starfield.core.config import RGB
from starfield.core.errors import StarfieldConfigError
from starfield.core.interfaces import FrameCallback
from starfield.core.model import ViewportMetrics
from starfield.core.timekeeping import monotonic_ms


class PygameSurface:
    """Backing store with a uniform pixel scale transform."""

    def __init__(self) -> None:
        self._size = (1, 1)
        self._scale = 1.0
        self._backing = pygame.Surface(self._size, 0, 32)

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def backing(self) -> pygame.Surface:
        return self._backing

    def set_pixel_scale(self, width: int, height: int, scale: float) -> None:
        self._size = (width, height)
        self._scale = scale
        backing_size = (max(1, math.floor(width * scale)), max(1, math.floor(height * scale)))
        self._backing = pygame.Surface(backing_size, 0, 32)

    def _to_device(self, point: tuple[float, float]) -> tuple[float, float]:
        return point[0] * self._scale, point[1] * self._scale

    def fill_rect(self, x: float, y: float, width: float, height: float, color: RGB) -> None:
        s = self._scale
        rect = pygame.Rect(
            math.floor(x * s),
            math.floor(y * s),
            math.ceil(width * s),
            math.ceil(height * s),
        )
        self._backing.fill(color, rect)

    def stroke_line(
        self,
        start: tuple[float, float],
        end: tuple[float, float],
        color: RGB,
        width: float,
    ) -> None:
        pixels = width * self._scale
        a = self._to_device(start)
        b = self._to_device(end)
        if pixels < 1.5:
            pygame.draw.aaline(self._backing, color, a, b)
        else:
            pygame.draw.line(self._backing, color, a, b, int(round(pixels)))

    def present(self) -> pygame.Surface:
        """Return the frame at logical size."""

        if self._backing.get_size() == self._size:
            return self._backing
        return pygame.transform.smoothscale(self._backing, self._size)


class PygameFrameScheduler:
    """One-shot frame callbacks fired from the application's main loop."""

    def __init__(self) -> None:
        self._pending: dict[int, FrameCallback] = {}
        self._handles = itertools.count(1)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @staticmethod
    def now_ms() -> float:
        return monotonic_ms()

    def run_frame(self, timestamp_ms: float | None = None) -> int:
        """Fire the callbacks queued before this call. Returns how many ran."""

        if timestamp_ms is None:
            timestamp_ms = self.now_ms()
        callbacks, self._pending = self._pending, {}
        for callback in callbacks.values():
            callback(timestamp_ms)
        return len(callbacks)


@dataclass
class Region:
    """Named rectangle of the window that can host a starfield."""

    rect: pygame.Rect
    clip: bool = False


@dataclass
class _Layer:
    surface: Any
    target: Any
    full_page: bool
    z_index: int


class PygameStage:
    """Window host: target resolution, sizing, resize fan-out and layer composition."""

    def __init__(
        self,
        window: pygame.Surface,
        *,
        device_pixel_ratio: float = 1.0,
        coarse_pointer: bool = False,
        regions: dict[str, pygame.Rect | tuple[int, int, int, int]] | None = None,
    ) -> None:
        self.window = window
        self._notified_size = window.get_size()
        self.device_pixel_ratio = device_pixel_ratio
        self.coarse_pointer = coarse_pointer
        self.regions: dict[str, Region] = {
            name: Region(pygame.Rect(rect)) for name, rect in (regions or {}).items()
        }
        self._layers: list[_Layer] = []
        self._subscribers: list[tuple[Callable[[], None], Any]] = []
        self._forced_clip: dict[int, Region] = {}

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @property
    def layer_count(self) -> int:
        return len(self._layers)

    # Host
    def resolve_target(self, target: Any) -> Any:
        if target is None:
            return None
        if isinstance(target, str):
            if target not in self.regions:
                raise StarfieldConfigError(f'target region "{target}" was not found')
            return target
        if isinstance(target, pygame.Rect):
            return target.copy()
        if (
            isinstance(target, tuple)
            and len(target) == 4
            and all(isinstance(v, numbers.Real) for v in target)
        ):
            return pygame.Rect(target)
        raise StarfieldConfigError("target must be None, a region name or a rectangle")

    def is_root(self, target: Any) -> bool:
        return target is None

    def region_rect(self, target: Any) -> pygame.Rect:
        if target is None:
            return self.window.get_rect()
        if isinstance(target, str):
            return self.regions[target].rect
        return target

    def attach(self, surface: Any, target: Any, *, full_page: bool, z_index: int) -> None:
        # A container layer has to be confined to its region.
        if not full_page and isinstance(target, str):
            region = self.regions[target]
            if not region.clip:
                region.clip = True
                self._forced_clip[id(surface)] = region
        self._layers.append(_Layer(surface, target, full_page, z_index))

    def detach(self, surface: Any) -> None:
        self._layers = [layer for layer in self._layers if layer.surface is not surface]
        region = self._forced_clip.pop(id(surface), None)
        if region is not None:
            region.clip = False

    # ViewportQuery
    def measure(self, target: Any, full_page: bool) -> ViewportMetrics:
        screen_width, screen_height = self.window.get_size()
        if full_page:
            width, height = screen_width, screen_height
        else:
            rect = self.region_rect(target)
            width, height = rect.width, rect.height
        return ViewportMetrics(
            width=width,
            height=height,
            screen_width=screen_width,
            screen_height=screen_height,
            coarse_pointer=self.coarse_pointer,
            device_pixel_ratio=self.device_pixel_ratio,
        )

    # ResizeSource
    def subscribe(self, callback: Callable[[], None], target: Any = None) -> None:
        self._subscribers.append((callback, target))

    def unsubscribe(self, callback: Callable[[], None]) -> None:
        self._subscribers = [(cb, t) for cb, t in self._subscribers if cb != callback]

    def notify_resize(self, target: Any = None) -> None:
        """Window resizes reach everyone; region changes reach that region's observers."""

        for callback, observed in list(self._subscribers):
            if target is None or observed == target:
                callback()

    def set_region(self, name: str, rect: pygame.Rect | tuple[int, int, int, int]) -> None:
        region = self.regions.get(name)
        if region is None:
            self.regions[name] = Region(pygame.Rect(rect))
            return
        region.rect = pygame.Rect(rect)
        self.notify_resize(name)

    def handle_event(self, event: pygame.event.Event) -> bool:
        """React to window resizes. Returns ``True`` when subscribers were notified."""

        if event.type not in (pygame.VIDEORESIZE, pygame.WINDOWRESIZED):
            return False
        self.window = pygame.display.get_surface() or self.window
        # pygame 2 posts both events for one resize.
        size = self.window.get_size()
        if size == self._notified_size:
            return False
        self._notified_size = size
        self.notify_resize()
        return True

    def compose(self, content: Callable[[pygame.Surface], None] | None = None) -> None:
        """Blit layers below z 0, then *content*, then the rest."""

        layers = sorted(self._layers, key=lambda layer: layer.z_index)
        below = [layer for layer in layers if layer.z_index < 0]
        above = [layer for layer in layers if layer.z_index >= 0]
        for layer in below:
            self._blit_layer(layer)
        if content is not None:
            content(self.window)
        for layer in above:
            self._blit_layer(layer)

    def _blit_layer(self, layer: _Layer) -> None:
        image = layer.surface.present()
        if layer.full_page:
            self.window.blit(image, (0, 0))
            return
        rect = self.region_rect(layer.target)
        region = self.regions.get(layer.target) if isinstance(layer.target, str) else None
        if region is not None and region.clip:
            previous = self.window.get_clip()
            self.window.set_clip(rect)
            self.window.blit(image, rect.topleft)
            self.window.set_clip(previous)
        else:
            self.window.blit(image, rect.topleft)


__all__ = ["PygameFrameScheduler", "PygameStage", "PygameSurface", "Region"]
