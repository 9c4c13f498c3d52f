"""Collaborator protocols consumed by the engine.

The engine never talks to a window system directly; a backend (see
:mod:`starfield.render.pygame_backend`) or a test harness supplies these.
"""
from __future__ import annotations

from typing import Any, Callable, Hashable, Protocol, runtime_checkable

from .config import RGB
from .model import ViewportMetrics

FrameCallback = Callable[[float], None]


@runtime_checkable
class DrawingSurface(Protocol):
    def set_pixel_scale(self, width: int, height: int, scale: float) -> None:
        """Resize the backing store to ``floor(size * scale)`` and apply the scale transform."""

    def fill_rect(self, x: float, y: float, width: float, height: float, color: RGB) -> None:
        ...

    def stroke_line(
        self,
        start: tuple[float, float],
        end: tuple[float, float],
        color: RGB,
        width: float,
    ) -> None:
        ...


@runtime_checkable
class FrameScheduler(Protocol):
    def request_frame(self, callback: FrameCallback) -> Hashable:
        """Schedule *callback* once, with a monotonic timestamp in milliseconds."""

    def cancel_frame(self, handle: Hashable) -> None:
        ...


@runtime_checkable
class ViewportQuery(Protocol):
    def measure(self, target: Any, full_page: bool) -> ViewportMetrics:
        ...


@runtime_checkable
class ResizeSource(Protocol):
    def subscribe(self, callback: Callable[[], None], target: Any = None) -> None:
        ...

    def unsubscribe(self, callback: Callable[[], None]) -> None:
        ...


@runtime_checkable
class Host(Protocol):
    """Mount point for the drawing surface."""

    def resolve_target(self, target: Any) -> Any:
        """Return the concrete target, raising ``StarfieldConfigError`` if it cannot be found."""

    def is_root(self, target: Any) -> bool:
        ...

    def attach(self, surface: DrawingSurface, target: Any, *, full_page: bool, z_index: int) -> None:
        ...

    def detach(self, surface: DrawingSurface) -> None:
        """Remove the surface and undo any change ``attach`` made to the target."""


__all__ = [
    "DrawingSurface",
    "FrameCallback",
    "FrameScheduler",
    "Host",
    "ResizeSource",
    "ViewportQuery",
]
