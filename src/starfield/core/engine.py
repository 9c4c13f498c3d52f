"""Lifecycle controller tying the simulation to its collaborators."""
from __future__ import annotations

import logging
import math
from typing import Any, Mapping

import numpy as np

from .config import StarfieldCfg, resolve_config
from .errors import StarfieldConfigError, StarfieldError
from .interfaces import DrawingSurface, FrameScheduler, Host, ResizeSource, ViewportQuery
from .model import ViewportMetrics, ViewportState
from .pool import StarPool
from .simulation import SimContext
from .timekeeping import AnimationLoop, FrameListener

logger = logging.getLogger(__name__)


def _require(obj: Any, protocol: type, role: str) -> None:
    if not isinstance(obj, protocol):
        raise StarfieldConfigError(f"unsupported {role}: {type(obj).__name__}")


class Starfield:
    """Animated warp starfield.

    Options are resolved once at construction (see :class:`StarfieldCfg`).
    ``viewport`` and ``resize_source`` default to ``host`` when it provides
    those capabilities.
    """

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        *,
        host: Host,
        surface: DrawingSurface,
        scheduler: FrameScheduler,
        viewport: ViewportQuery | None = None,
        resize_source: ResizeSource | None = None,
        rng: np.random.Generator | None = None,
        on_frame: FrameListener | None = None,
    ) -> None:
        cfg, explicit_full_page = resolve_config(options)
        viewport = viewport if viewport is not None else host
        resize_source = resize_source if resize_source is not None else host
        _require(host, Host, "host")
        _require(surface, DrawingSurface, "drawing surface")
        _require(scheduler, FrameScheduler, "frame scheduler")
        _require(viewport, ViewportQuery, "viewport query")
        _require(resize_source, ResizeSource, "resize source")

        self.target = host.resolve_target(cfg.target)
        if explicit_full_page:
            self.full_page = cfg.full_page
        else:
            self.full_page = host.is_root(self.target)

        self.cfg: StarfieldCfg = cfg
        self._host = host
        self._surface = surface
        self._viewport_query = viewport
        self._resize_source = resize_source
        self._destroyed = False

        initial = ViewportState.from_size(
            1,
            1,
            speed_multiplier=cfg.desktop_speed_multiplier,
            trail_length=cfg.effective_trail_length(False),
        )
        self.ctx = SimContext(cfg=cfg, viewport=initial, pool=StarPool(initial, rng=rng))
        self.loop = AnimationLoop(self.ctx, surface, scheduler, on_frame=on_frame)

        host.attach(surface, self.target, full_page=self.full_page, z_index=cfg.z_index)
        self.ctx.pool.initialize(cfg.star_count)
        self.resize()
        resize_source.subscribe(self.resize, self.target if not self.full_page else None)
        logger.debug(
            "Starfield created: %d stars, full_page=%s, target=%r",
            cfg.star_count,
            self.full_page,
            self.target,
        )

        if cfg.autostart:
            self.start()

    @property
    def viewport(self) -> ViewportState:
        return self.ctx.viewport

    @property
    def pool(self) -> StarPool:
        return self.ctx.pool

    @property
    def running(self) -> bool:
        return self.loop.running

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def _ensure_alive(self, operation: str) -> None:
        if self._destroyed:
            raise StarfieldError(f"cannot {operation}() a destroyed Starfield")

    def start(self) -> None:
        self._ensure_alive("start")
        if self.loop.start():
            logger.debug("Starfield started")

    def stop(self) -> None:
        if self.loop.stop():
            logger.debug("Starfield stopped")

    def is_mobile(self, metrics: ViewportMetrics) -> bool:
        return bool(
            metrics.coarse_pointer
            or min(metrics.screen_width, metrics.screen_height) < self.cfg.mobile_breakpoint
        )

    def compute_viewport(self, metrics: ViewportMetrics) -> ViewportState:
        width = max(1, math.floor(metrics.width))
        height = max(1, math.floor(metrics.height))
        mobile = self.is_mobile(metrics)
        return ViewportState.from_size(
            width,
            height,
            device_pixel_scale=self.cfg.device_pixel_scale(metrics.device_pixel_ratio),
            speed_multiplier=self.cfg.speed_multiplier(mobile),
            trail_length=self.cfg.effective_trail_length(mobile),
            mobile=mobile,
        )

    def resize(self) -> None:
        """Re-measure the viewport and reseed every star at a random depth."""

        self._ensure_alive("resize")
        metrics = self._viewport_query.measure(self.target, self.full_page)
        viewport = self.compute_viewport(metrics)
        previous = self.ctx.viewport

        self._surface.set_pixel_scale(viewport.width, viewport.height, viewport.device_pixel_scale)
        self.ctx.set_viewport(viewport)
        self.ctx.pool.reseed_all()

        if viewport.mobile != previous.mobile:
            logger.info("Viewport classified as %s", "mobile" if viewport.mobile else "desktop")
        logger.debug(
            "Resized to %dx%d (max_depth=%g, scale=%g)",
            viewport.width,
            viewport.height,
            viewport.max_depth,
            viewport.device_pixel_scale,
        )

    def destroy(self) -> None:
        """Stop, release collaborators and leave the instance inert."""

        if self._destroyed:
            return
        self.stop()
        self._resize_source.unsubscribe(self.resize)
        self._host.detach(self._surface)
        self._destroyed = True
        logger.debug("Starfield destroyed")


__all__ = ["Starfield"]
