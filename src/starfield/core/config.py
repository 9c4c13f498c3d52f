"""Configuration dataclasses for the starfield engine."""
from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

import pygame

from .errors import StarfieldConfigError

RGB = tuple[int, int, int]


@dataclass(frozen=True)
class StarfieldCfg:
    target: Any = None
    full_page: bool = True
    autostart: bool = True
    z_index: int = -1
    background_color: RGB = (0, 0, 0)
    star_color: RGB = (255, 255, 255)
    star_count: int = 800
    speed: float = 10.0
    trail_length: float = 10.0
    mobile_speed_multiplier: float = 0.5
    desktop_speed_multiplier: float = 1.1
    mobile_trail_multiplier: float = 0.65
    desktop_trail_multiplier: float = 1.0
    mobile_breakpoint: float = 900.0
    dpr_cap: Any = 2

    def speed_multiplier(self, mobile: bool) -> float:
        return self.mobile_speed_multiplier if mobile else self.desktop_speed_multiplier

    def effective_trail_length(self, mobile: bool) -> float:
        multiplier = self.mobile_trail_multiplier if mobile else self.desktop_trail_multiplier
        return self.trail_length * multiplier

    def device_pixel_scale(self, native_ratio: float | None) -> float:
        """Return the backing-store scale, honouring ``dpr_cap`` when it is usable."""

        ratio = native_ratio or 1.0
        cap = self.dpr_cap
        if isinstance(cap, numbers.Real) and not isinstance(cap, bool) and cap > 0:
            return min(ratio, float(cap))
        return ratio


logger = logging.getLogger(__name__)

DEFAULT_CFG = StarfieldCfg()
_OPTION_NAMES = frozenset(f.name for f in fields(StarfieldCfg))
_NUMERIC_OPTIONS = (
    "speed",
    "trail_length",
    "mobile_speed_multiplier",
    "desktop_speed_multiplier",
    "mobile_trail_multiplier",
    "desktop_trail_multiplier",
    "mobile_breakpoint",
)


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


def parse_color(value: Any, option: str) -> RGB:
    """Normalise a hex string, color name or RGB(A) tuple into an RGB tuple."""

    if isinstance(value, str) and len(value) == 4 and value.startswith("#"):
        # "#RGB" shorthand
        value = "#" + "".join(ch * 2 for ch in value[1:])
    try:
        color = pygame.Color(value) if isinstance(value, str) else pygame.Color(*value)
    except (TypeError, ValueError) as exc:
        raise StarfieldConfigError(f"{option}: invalid color {value!r}") from exc
    return (color.r, color.g, color.b)


def resolve_config(options: Mapping[str, Any] | None = None) -> tuple[StarfieldCfg, bool]:
    """Merge caller options over the defaults.

    Returns the resolved config and whether ``full_page`` was given explicitly,
    which the engine needs to auto-detect full-page mode from the target.
    """

    options = dict(options or {})
    unknown = sorted(set(options) - _OPTION_NAMES)
    if unknown:
        raise StarfieldConfigError(f"unknown starfield option(s): {', '.join(unknown)}")

    for key in ("background_color", "star_color"):
        if key in options:
            options[key] = parse_color(options[key], key)

    count = options.get("star_count", DEFAULT_CFG.star_count)
    if isinstance(count, bool) or not isinstance(count, numbers.Integral) or count < 0:
        raise StarfieldConfigError(f"star_count must be a non-negative integer, got {count!r}")
    options["star_count"] = int(count)

    for key in _NUMERIC_OPTIONS:
        if key in options and not _is_number(options[key]):
            fallback = getattr(DEFAULT_CFG, key)
            logger.warning("Ignoring malformed %s=%r, using %r", key, options[key], fallback)
            options[key] = fallback

    explicit_full_page = "full_page" in options
    if explicit_full_page:
        options["full_page"] = bool(options["full_page"])

    return replace(DEFAULT_CFG, **options), explicit_full_page


__all__ = ["DEFAULT_CFG", "RGB", "StarfieldCfg", "parse_color", "resolve_config"]
