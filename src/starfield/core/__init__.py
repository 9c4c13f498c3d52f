"""Simulation core: configuration, state, projection and lifecycle."""

from .config import DEFAULT_CFG, StarfieldCfg, resolve_config
from .engine import Starfield
from .errors import StarfieldConfigError, StarfieldError
from .model import ReseedMode, Star, ViewportMetrics, ViewportState
from .pool import StarPool
from .timekeeping import AnimationLoop, FrameClock, FrameStats

__all__ = [
    "AnimationLoop",
    "DEFAULT_CFG",
    "FrameClock",
    "FrameStats",
    "ReseedMode",
    "Star",
    "StarPool",
    "Starfield",
    "StarfieldCfg",
    "StarfieldConfigError",
    "StarfieldError",
    "ViewportMetrics",
    "ViewportState",
    "resolve_config",
]
