from __future__ import annotations

import os
import random

import numpy as np

from src.utils import ReproducibilityConfig, make_rng, set_global_seed


def test_set_global_seed_makes_global_rngs_repeatable(monkeypatch) -> None:
    monkeypatch.delenv("PYTHONHASHSEED", raising=False)
    set_global_seed(ReproducibilityConfig(seed=5))
    first = (random.random(), np.random.random())
    set_global_seed(ReproducibilityConfig(seed=5))
    assert (random.random(), np.random.random()) == first
    assert "PYTHONHASHSEED" not in os.environ


def test_make_rng_is_repeatable_for_a_seed() -> None:
    assert make_rng(9).random() == make_rng(9).random()
