from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

# Ensure `import src...` works when pytest uses importlib import mode.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def two_cluster_network() -> list[list[float]]:
    return [
        [0.0, 0.1, 0.5, 0.0, 0.0, 0.0],
        [0.1, 0.0, 0.9, 0.0, 0.0, 0.0],
        [0.5, 0.9, 0.0, 0.0, 0.0, 0.0],
        [0.0, 0.0, 0.0, 0.0, 0.1, 0.5],
        [0.0, 0.0, 0.0, 0.1, 0.0, 0.9],
        [0.0, 0.0, 0.0, 0.5, 0.9, 0.0],
    ]
