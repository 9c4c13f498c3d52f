"""Animated warp starfield rendered through pluggable drawing collaborators."""

from starfield.core.config import DEFAULT_CFG, StarfieldCfg
from starfield.core.engine import Starfield
from starfield.core.errors import StarfieldConfigError, StarfieldError

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_CFG",
    "Starfield",
    "StarfieldCfg",
    "StarfieldConfigError",
    "StarfieldError",
    "__version__",
]
