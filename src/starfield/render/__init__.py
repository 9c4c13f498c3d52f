"""Rendering backends for the starfield."""

from .pygame_backend import PygameFrameScheduler, PygameStage, PygameSurface, Region

__all__ = [
    "PygameFrameScheduler",
    "PygameStage",
    "PygameSurface",
    "Region",
]
