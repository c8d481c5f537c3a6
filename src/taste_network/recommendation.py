"""Choosing the next node to present to a user.

Both strategies share `recommendation_vector`: the similarity matrix is
shifted so above-midpoint similarities are positive, ratings are shifted so
ratings above the rescale factor are positive, and the product ranks every
node by how similar it is to well-rated nodes and how dissimilar it is to
poorly rated ones. Unrated nodes count as `unrated_star_rating`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import numpy as np

from .errors import ConfigurationError, InternalInvariantError, PreconditionError
from .matrix import matrix_vector_product
from .rated_network import RatedNetwork


logger = logging.getLogger(__name__)


class RecommendationStrategy(str, Enum):
    GREEDY = "greedy"
    PROBABILISTIC = "probabilistic"


@dataclass(frozen=True)
class RecommenderConfig:
    rating_rescale_factor: float = 2.5
    unrated_star_rating: float = 2.5


class RecommendationAlgorithm(Protocol):
    def recommend(self, rated_network: RatedNetwork) -> int: ...


def recommendation_vector(rated_network: RatedNetwork, config: RecommenderConfig = RecommenderConfig()) -> np.ndarray:
    """Per-node score; works on copies and never mutates `rated_network`."""
    network_rescale_factor = (rated_network.upper - rated_network.lower) / 2
    rescaled_network = rated_network.network - network_rescale_factor
    ratings = np.array(
        [config.unrated_star_rating if r is None else float(r) for r in rated_network.ratings],
        dtype=np.float64,
    )
    rescaled_ratings = ratings - config.rating_rescale_factor
    return matrix_vector_product(rescaled_network, rescaled_ratings)


def _require_unrated(rated_network: RatedNetwork) -> None:
    if not rated_network.has_unrated():
        raise PreconditionError("every node is already rated; there is nothing left to recommend")


class GreedyRecommendationAlgorithm:
    """Deterministic: the unrated node with the highest score."""

    def __init__(self, config: RecommenderConfig = RecommenderConfig()) -> None:
        self.config = config

    def recommend(self, rated_network: RatedNetwork) -> int:
        _require_unrated(rated_network)
        scores = recommendation_vector(rated_network, self.config)
        # Push rated nodes below every other score so they are never picked again.
        scores[rated_network.rated_mask()] = scores.min() - 1
        node = int(np.argmax(scores))
        logger.debug("greedy recommendation node=%d score=%.4f", node, scores[node])
        return node


class ProbabilisticRecommendationAlgorithm:
    """Samples an unrated node with probability proportional to its score.

    Negative scores are clipped to 0. When every unrated node has the same
    score, or no unrated node has a positive score, the draw is uniform over
    the unrated nodes.
    """

    def __init__(
        self,
        config: RecommenderConfig = RecommenderConfig(),
        *,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng()

    def distribution(self, rated_network: RatedNetwork) -> np.ndarray:
        """Probability of recommending each node; rated nodes get 0."""
        _require_unrated(rated_network)
        scores = recommendation_vector(rated_network, self.config)
        rated = rated_network.rated_mask()
        scores[rated] = 0.0

        unrated_scores = scores[~rated]
        weights = np.zeros_like(scores)
        if np.all(unrated_scores == unrated_scores[0]):
            weights[~rated] = 1.0
        else:
            weights[~rated] = np.clip(unrated_scores, 0.0, None)
            if weights.sum() <= 0.0:
                weights[~rated] = 1.0
        return weights / weights.sum()

    def recommend(self, rated_network: RatedNetwork) -> int:
        probabilities = self.distribution(rated_network)

        # Cumulative distribution over nodes sorted by ascending probability.
        order = np.argsort(probabilities, kind="stable")
        cumulative = np.cumsum(probabilities[order])

        u = self.rng.random()
        for node, cp in zip(order, cumulative):
            if u < cp:
                logger.debug("probabilistic recommendation node=%d u=%.4f", node, u)
                return int(node)
        raise InternalInvariantError(
            f"cumulative distribution ended at {cumulative[-1]!r} without exceeding u={u!r}"
        )


def build_recommender(
    strategy: RecommendationStrategy | str,
    config: RecommenderConfig = RecommenderConfig(),
    *,
    rng: np.random.Generator | None = None,
) -> RecommendationAlgorithm:
    try:
        strategy = RecommendationStrategy(strategy)
    except ValueError as exc:
        raise ConfigurationError(f"unknown recommendation strategy: {strategy!r}") from exc
    if strategy is RecommendationStrategy.GREEDY:
        return GreedyRecommendationAlgorithm(config)
    return ProbabilisticRecommendationAlgorithm(config, rng=rng)
