"""Turning mean rating vectors into similarity networks."""

from __future__ import annotations

import functools
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Sequence

import numpy as np

from .errors import ConfigurationError
from .rated_network import RatingScale

if TYPE_CHECKING:
    from .user import User


SimilarityFunction = Callable[[float, float], float]

# Stand-in for an unrated entry in the learners' numeric view of the ratings.
UNRATED_PLACEHOLDER = 0.0


@dataclass(frozen=True)
class SimilarityConfig:
    steepness: float = 0.1


def gaussian_similarity(r1: float, r2: float, s: float = 0.1) -> float:
    """exp(-s * (r1 - r2)^2): 1 for equal ratings, decaying as they diverge."""
    return math.exp(-s * (r1 - r2) ** 2)


def make_similarity_function(
    fn: Callable[..., float],
    scale: RatingScale = RatingScale(),
    **params: Any,
) -> SimilarityFunction:
    """Bind `params` to `fn` and check it maps every rating pair into [0, 1].

    Raises ConfigurationError on the first pair that falls outside the range.
    """
    bound: SimilarityFunction = functools.partial(fn, **params) if params else fn
    for r1 in scale.values():
        for r2 in scale.values():
            try:
                value = float(bound(r1, r2))
            except (TypeError, ValueError, ArithmeticError) as exc:
                raise ConfigurationError(f"similarity function failed for r1={r1} and r2={r2}: {exc}") from exc
            if not (0.0 <= value <= 1.0):
                raise ConfigurationError(
                    f"For rating r1={r1} and r2={r2}, the similarity should be 0 <= s <= 1, but is {value} instead."
                )
    return bound


def default_similarity_function(cfg: SimilarityConfig = SimilarityConfig()) -> SimilarityFunction:
    return make_similarity_function(gaussian_similarity, s=cfg.steepness)


def mean_vector_to_similarity_matrix(
    mean_vector: Sequence[float] | np.ndarray,
    similarity_fn: SimilarityFunction,
) -> np.ndarray:
    """N x N symmetric similarity matrix from a length-N mean rating vector.

    Only pairs i != j are scored; the diagonal stays 0.
    """
    mean = np.asarray(mean_vector, dtype=np.float64)
    n_nodes = mean.shape[0]
    similarity = np.zeros((n_nodes, n_nodes), dtype=np.float64)
    for i in range(n_nodes - 1):
        for j in range(i + 1, n_nodes):
            value = float(similarity_fn(float(mean[i]), float(mean[j])))
            similarity[i, j] = value
            similarity[j, i] = value
    return similarity


def clean_ratings(users: Sequence["User"]) -> np.ndarray:
    """(n_users, n_nodes) float matrix with unrated entries replaced by 0.

    Works on copies; the users' stored ratings are left untouched.
    """
    return np.array(
        [
            [UNRATED_PLACEHOLDER if r is None else float(r) for r in user.rated_network.ratings]
            for user in users
        ],
        dtype=np.float64,
    )
