"""Fixed-size pool of simulated stars."""
from __future__ import annotations

from typing import Iterator

import numpy as np

from .model import ReseedMode, Star, ViewportState


class StarPool:
    """Owns every :class:`Star` and is the only writer of their fields."""

    def __init__(
        self,
        viewport: ViewportState,
        *,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._viewport = viewport
        self._rng = rng if rng is not None else np.random.default_rng()
        self._stars: list[Star] = []

    def __len__(self) -> int:
        return len(self._stars)

    def __iter__(self) -> Iterator[Star]:
        return iter(self._stars)

    def __getitem__(self, index: int) -> Star:
        return self._stars[index]

    @property
    def viewport(self) -> ViewportState:
        return self._viewport

    @viewport.setter
    def viewport(self, viewport: ViewportState) -> None:
        self._viewport = viewport

    def initialize(self, count: int) -> None:
        self._stars.clear()
        for _ in range(count):
            star = Star()
            self.reseed_one(star, ReseedMode.RANDOMIZE_DEPTH)
            self._stars.append(star)

    def reseed_all(self) -> None:
        for star in self._stars:
            self.reseed_one(star, ReseedMode.RANDOMIZE_DEPTH)

    def reseed_one(self, star: Star, mode: ReseedMode) -> None:
        """Give *star* a fresh spread position and depth.

        The spread covers twice the viewport extent so stars drifting in from
        outside the initial view already exist. Recycled stars restart at
        ``max_depth``.
        """

        vp = self._viewport
        rng = self._rng
        if mode is ReseedMode.RANDOMIZE_DEPTH:
            z = float(rng.random()) * vp.max_depth
        else:
            z = vp.max_depth
        star.x = (float(rng.random()) * vp.width - vp.width / 2) * 2
        star.y = (float(rng.random()) * vp.height - vp.height / 2) * 2
        star.z = z
        star.pz = z

    def recycle(self, star: Star) -> None:
        self.reseed_one(star, ReseedMode.RECYCLE_FAR)

    def advance(self, star: Star, distance: float) -> None:
        star.z -= distance

    def mark_drawn(self, star: Star) -> None:
        star.pz = star.z

    def depths(self) -> np.ndarray:
        """Snapshot of ``(z, pz)`` per star as an ``(n, 2)`` array."""

        if not self._stars:
            return np.zeros((0, 2), dtype=float)
        return np.array([(star.z, star.pz) for star in self._stars], dtype=float)


__all__ = ["StarPool"]
