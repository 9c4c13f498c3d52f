from __future__ import annotations

import os
from dataclasses import dataclass

import numpy as np
import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from starfield.core.engine import Starfield  # noqa: E402

from fakes import FakeHost, FakeViewport, ManualScheduler, RecordingSurface, ResizeHub  # noqa: E402


@dataclass
class Rig:
    host: FakeHost
    surface: RecordingSurface
    scheduler: ManualScheduler
    viewport: FakeViewport
    hub: ResizeHub

    def build(self, options=None, **kwargs) -> Starfield:
        kwargs.setdefault("rng", np.random.default_rng(7))
        return Starfield(
            options,
            host=self.host,
            surface=self.surface,
            scheduler=self.scheduler,
            viewport=self.viewport,
            resize_source=self.hub,
            **kwargs,
        )


@pytest.fixture
def rig() -> Rig:
    return Rig(FakeHost(), RecordingSurface(), ManualScheduler(), FakeViewport(), ResizeHub())
