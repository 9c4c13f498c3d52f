"""Frame-time normalisation and the animation loop."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Hashable

from .interfaces import DrawingSurface, FrameScheduler
from .simulation import SimContext, draw_star, step_star

MAX_FRAME_DELTA_MS = 64.0
REFERENCE_FRAME_MS = 1000.0 / 60.0


def monotonic_ms() -> float:
    """Milliseconds from :func:`time.perf_counter`."""

    return time.perf_counter() * 1000.0


def frame_scale_for(delta_ms: float) -> float:
    """Express *delta_ms* in 60 Hz frames."""

    return delta_ms / REFERENCE_FRAME_MS


@dataclass
class FrameClock:
    """Turns platform timestamps into capped frame deltas."""

    max_delta_ms: float = MAX_FRAME_DELTA_MS
    last_timestamp: float | None = None

    def reset(self) -> None:
        self.last_timestamp = None

    def advance(self, timestamp: float) -> float:
        if self.last_timestamp is None:
            self.last_timestamp = timestamp
        delta = min(self.max_delta_ms, max(0.0, timestamp - self.last_timestamp))
        self.last_timestamp = timestamp
        return delta


@dataclass(frozen=True)
class FrameStats:
    t: float
    delta_ms: float
    frame_scale: float
    drawn: int
    recycled: int


FrameListener = Callable[[FrameStats], None]


class AnimationLoop:
    """Runs one update/draw pass per scheduled platform frame."""

    def __init__(
        self,
        ctx: SimContext,
        surface: DrawingSurface,
        scheduler: FrameScheduler,
        *,
        on_frame: FrameListener | None = None,
    ) -> None:
        self.ctx = ctx
        self.clock = FrameClock()
        self.running = False
        self.on_frame = on_frame
        self._surface = surface
        self._scheduler = scheduler
        self._handle: Hashable | None = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def start(self) -> bool:
        if self.running:
            return False
        self.running = True
        self.clock.reset()
        self._generation += 1
        self._schedule()
        return True

    def stop(self) -> bool:
        if not self.running:
            return False
        self.running = False
        self._generation += 1
        if self._handle is not None:
            self._scheduler.cancel_frame(self._handle)
            self._handle = None
        return True

    def _schedule(self) -> None:
        generation = self._generation

        def callback(timestamp: float) -> None:
            self._on_frame(generation, timestamp)

        self._handle = self._scheduler.request_frame(callback)

    def _on_frame(self, generation: int, timestamp: float) -> None:
        # A callback queued before stop() (or before a stop/start pair) is stale.
        if not self.running or generation != self._generation:
            return
        self._handle = None
        try:
            self.tick(timestamp)
        except Exception:
            # Leave the loop stopped so start() can resume it.
            self.running = False
            self._generation += 1
            raise
        # The frame listener may have stopped the loop during the tick.
        if self.running and generation == self._generation:
            self._schedule()

    def tick(self, timestamp: float) -> FrameStats:
        """Advance and draw every star once."""

        delta_ms = self.clock.advance(timestamp)
        frame_scale = frame_scale_for(delta_ms)
        ctx = self.ctx
        vp = ctx.viewport

        self._surface.fill_rect(0, 0, vp.width, vp.height, ctx.cfg.background_color)

        drawn = recycled = 0
        for star in ctx.pool:
            if step_star(star, frame_scale, ctx):
                draw_star(self._surface, star, ctx)
                drawn += 1
            else:
                recycled += 1

        stats = FrameStats(timestamp, delta_ms, frame_scale, drawn, recycled)
        if self.on_frame is not None:
            self.on_frame(stats)
        return stats


__all__ = [
    "AnimationLoop",
    "FrameClock",
    "FrameListener",
    "FrameStats",
    "MAX_FRAME_DELTA_MS",
    "REFERENCE_FRAME_MS",
    "frame_scale_for",
    "monotonic_ms",
]
