"""Data models for the starfield simulation state."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class ReseedMode(Enum):
    """How a reseeded star picks its new depth."""

    RANDOMIZE_DEPTH = auto()
    RECYCLE_FAR = auto()


@dataclass
class Star:
    """Mutable state for one simulated star.

    ``x``/``y`` are spread coordinates centred on the viewport and stay fixed
    between reseeds. ``z`` is the current depth and ``pz`` the depth at the
    previous draw, which anchors the trailing end of the streak.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    pz: float = 0.0


@dataclass(frozen=True)
class ViewportMetrics:
    """Raw sizes reported by the viewport collaborator."""

    width: float
    height: float
    screen_width: float
    screen_height: float
    coarse_pointer: bool = False
    device_pixel_ratio: float = 1.0


@dataclass(frozen=True)
class ViewportState:
    width: int
    height: int
    center_x: float
    center_y: float
    max_depth: float
    device_pixel_scale: float
    speed_multiplier: float
    trail_length: float
    mobile: bool = False

    @classmethod
    def from_size(
        cls,
        width: int,
        height: int,
        *,
        device_pixel_scale: float = 1.0,
        speed_multiplier: float = 1.0,
        trail_length: float = 0.0,
        mobile: bool = False,
    ) -> "ViewportState":
        return cls(
            width=width,
            height=height,
            center_x=width / 2,
            center_y=height / 2,
            max_depth=max(width, height),
            device_pixel_scale=device_pixel_scale,
            speed_multiplier=speed_multiplier,
            trail_length=trail_length,
            mobile=mobile,
        )


__all__ = ["ReseedMode", "Star", "ViewportMetrics", "ViewportState"]
