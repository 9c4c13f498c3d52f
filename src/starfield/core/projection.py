"""Perspective projection helpers for the starfield."""
from __future__ import annotations

from .model import ViewportState

MAX_LINE_WIDTH = 3.0
MIN_LINE_WIDTH = 0.1


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* between *lo* and *hi*."""

    return max(lo, min(hi, value))


def linear_map(value: float, in_lo: float, in_hi: float, out_lo: float, out_hi: float) -> float:
    """Map *value* from ``[in_lo, in_hi]`` onto ``[out_lo, out_hi]``.

    Undefined when ``in_hi == in_lo``.
    """

    return out_lo + (out_hi - out_lo) * ((value - in_lo) / (in_hi - in_lo))


def project_x(x: float, z: float, viewport: ViewportState) -> float:
    return linear_map(x / z, 0.0, 1.0, 0.0, viewport.width / 2) + viewport.center_x


def project_y(y: float, z: float, viewport: ViewportState) -> float:
    return linear_map(y / z, 0.0, 1.0, 0.0, viewport.height / 2) + viewport.center_y


def project(x: float, y: float, z: float, viewport: ViewportState) -> tuple[float, float]:
    """Project a point at depth ``z`` to surface coordinates. ``z`` must be non-zero."""

    return project_x(x, z, viewport), project_y(y, z, viewport)


def is_offscreen(sx: float, sy: float, viewport: ViewportState) -> bool:
    return sx < 0 or sx > viewport.width or sy < 0 or sy > viewport.height


def line_width_for_depth(z: float, viewport: ViewportState) -> float:
    """Nearer stars draw thicker."""

    width = linear_map(z, 0.0, viewport.max_depth, MAX_LINE_WIDTH, 0.0)
    return clamp(width, MIN_LINE_WIDTH, MAX_LINE_WIDTH)


__all__ = [
    "MAX_LINE_WIDTH",
    "MIN_LINE_WIDTH",
    "clamp",
    "is_offscreen",
    "line_width_for_depth",
    "linear_map",
    "project",
    "project_x",
    "project_y",
]
