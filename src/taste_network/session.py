from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import numpy as np

from .errors import PreconditionError
from .rated_network import RatedNetwork, Rating, RatingScale
from .recommendation import RecommendationAlgorithm


logger = logging.getLogger(__name__)

RateFn = Callable[[int], Rating]


@dataclass(frozen=True)
class SessionStep:
    step: int
    node: int
    rating: Rating


def random_rater(rng: np.random.Generator, scale: RatingScale = RatingScale()) -> RateFn:
    """A simulated user who rates whatever they are shown uniformly at random."""

    def rate(node: int) -> Rating:
        return int(rng.integers(scale.min_rating, scale.max_rating + 1))

    return rate


def run_session(
    rated_network: RatedNetwork,
    algorithm: RecommendationAlgorithm,
    rate: RateFn,
    *,
    max_steps: int | None = None,
) -> list[SessionStep]:
    """Recommend, rate and record until every node is rated.

    `rate(node)` plays the user. A `None` answer would leave the node unrated
    and the loop could recommend it forever, so it is rejected.
    """
    history: list[SessionStep] = []
    while rated_network.has_unrated():
        if max_steps is not None and len(history) >= max_steps:
            break
        node = algorithm.recommend(rated_network)
        rating = rate(node)
        if rating is None:
            raise PreconditionError(f"the rater returned no rating for node {node}")
        rated_network.add_rating(node, rating)
        history.append(SessionStep(step=len(history), node=node, rating=rating))
        logger.info("%d: recommended node %d, rated it with %s", len(history) - 1, node, rating)
    return history
