from __future__ import annotations

import logging
import random
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class ReproducibilityConfig:
    seed: int | None = 42


def setup_logging(level: int | str = "INFO") -> None:
    """Configure stdlib logging with a consistent, project-wide format."""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        # Avoid duplicate handlers if called multiple times (e.g., tests + CLI).
        root_logger.setLevel(level)
        return

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Return a numpy Generator; `None` draws fresh OS entropy."""
    return np.random.default_rng(seed)


def set_global_seed(cfg: ReproducibilityConfig) -> None:
    """Seed the stdlib and numpy global RNGs.

    Library code takes an explicit `np.random.Generator`; this only matters for
    callers that still reach for the global state.
    """
    if cfg.seed is None:
        return
    random.seed(cfg.seed)
    np.random.seed(cfg.seed)
