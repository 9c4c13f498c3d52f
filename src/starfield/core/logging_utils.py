"""Logging helpers scoped to the starfield package."""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from .timekeeping import FrameStats


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the ``starfield`` namespace logger.

    Args:
        level: Logging level (e.g. ``logging.DEBUG``).
        log_file: Optional path that receives a copy of the log.
    """

    logger = logging.getLogger("starfield")
    logger.setLevel(level)

    # Avoid duplicate output when called again.
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger


class FrameStatsLogger:
    """Buffered recorder that stores per-frame statistics to CSV."""

    HEADER = ["t", "delta_ms", "frame_scale", "drawn", "recycled"]

    def __init__(
        self,
        root_dir: str | Path = "data/frames",
        run_id: Optional[str] = None,
        *,
        flush_threshold: int = 120,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        base = run_id or f"{timestamp}_run"
        candidate_id = base
        suffix = 1
        while (self.root_dir / candidate_id).exists():
            candidate_id = f"{base}_{suffix:02d}"
            suffix += 1

        self.run_id = candidate_id
        self.run_dir = self.root_dir / self.run_id
        self.run_dir.mkdir(parents=True, exist_ok=False)

        self.frames_path = self.run_dir / "frames.csv"
        self.meta_path = self.run_dir / "meta.json"

        self._file = self.frames_path.open("w", newline="")
        self._file.write(",".join(self.HEADER) + "\n")
        self._buffer: list[str] = []
        self._threshold = max(1, flush_threshold)
        self.frames_logged = 0

        (self.root_dir / "last_run.txt").write_text(self.run_id, encoding="utf-8")

    def write_meta(self, meta: dict) -> None:
        with self.meta_path.open("w", encoding="utf-8") as fh:
            json.dump(meta, fh, indent=2, sort_keys=True, default=str)

    def __call__(self, stats: FrameStats) -> None:
        self.log_frame(stats)

    def log_frame(self, stats: FrameStats) -> None:
        values = (stats.t, stats.delta_ms, stats.frame_scale, stats.drawn, stats.recycled)
        self._buffer.append(",".join(f"{v:.10g}" for v in values))
        self.frames_logged += 1
        if len(self._buffer) >= self._threshold:
            self._flush()

    def close(self) -> None:
        if self._file.closed:
            return
        self._flush()
        self._file.close()

    def _flush(self) -> None:
        if self._buffer:
            self._file.write("\n".join(self._buffer) + "\n")
            self._file.flush()
            self._buffer.clear()

    def __enter__(self) -> "FrameStatsLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None


__all__ = ["FrameStatsLogger", "setup_logging"]
