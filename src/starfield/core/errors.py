"""Exception types raised by the starfield engine."""
from __future__ import annotations


class StarfieldError(RuntimeError):
    """Base class for errors raised by the engine."""


class StarfieldConfigError(StarfieldError, ValueError):
    """Raised at construction when the options or collaborators are unusable."""


__all__ = ["StarfieldConfigError", "StarfieldError"]
