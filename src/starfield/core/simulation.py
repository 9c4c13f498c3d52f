"""Per-star update and draw step."""
from __future__ import annotations

from dataclasses import dataclass

from .config import StarfieldCfg
from .interfaces import DrawingSurface
from .model import Star, ViewportState
from .pool import StarPool
from .projection import is_offscreen, line_width_for_depth, project


@dataclass
class SimContext:
    """Everything a tick reads or mutates, owned by one engine."""

    cfg: StarfieldCfg
    viewport: ViewportState
    pool: StarPool

    def set_viewport(self, viewport: ViewportState) -> None:
        self.viewport = viewport
        self.pool.viewport = viewport


def step_star(star: Star, frame_scale: float, ctx: SimContext) -> bool:
    """Advance *star* by one normalised frame.

    Returns ``True`` if the star should be drawn this frame and ``False`` if it
    was recycled. A recycled star is skipped for one frame so no streak is drawn
    between its old and new positions.
    """

    vp = ctx.viewport
    ctx.pool.advance(star, ctx.cfg.speed * vp.speed_multiplier * frame_scale)
    if star.z < 1:
        ctx.pool.recycle(star)
        return False

    sx, sy = project(star.x, star.y, star.z, vp)
    if is_offscreen(sx, sy, vp):
        ctx.pool.recycle(star)
        return False
    return True


def trail_depth(star: Star, viewport: ViewportState) -> float:
    return min(viewport.max_depth, star.pz + viewport.trail_length)


def draw_star(surface: DrawingSurface, star: Star, ctx: SimContext) -> None:
    """Stroke the streak from the trail anchor to the current position."""

    vp = ctx.viewport
    head = project(star.x, star.y, star.z, vp)
    tail = project(star.x, star.y, trail_depth(star, vp), vp)
    surface.stroke_line(tail, head, ctx.cfg.star_color, line_width_for_depth(star.z, vp))
    ctx.pool.mark_drawn(star)


__all__ = ["SimContext", "draw_star", "step_star", "trail_depth"]
