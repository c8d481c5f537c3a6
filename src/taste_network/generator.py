"""Random networks, ratings and user populations for fixtures and simulations."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .errors import PreconditionError
from .rated_network import RatedNetwork, Rating, RatingScale
from .user import User


def random_network(
    n_nodes: int,
    lower: float = 0.0,
    upper: float = 1.0,
    *,
    rng: np.random.Generator,
) -> np.ndarray:
    """Symmetric N x N matrix with zero diagonal and off-diagonal values in [lower, upper)."""
    if n_nodes < 1:
        raise PreconditionError(f"n_nodes must be >= 1, got {n_nodes}")
    if not lower < upper:
        raise PreconditionError(f"lower must be smaller than upper but they are {lower} and {upper}")
    network = np.zeros((n_nodes, n_nodes), dtype=np.float64)
    upper_tri = np.triu_indices(n_nodes, k=1)
    network[upper_tri] = rng.random(len(upper_tri[0])) * (upper - lower) + lower
    return network + network.T


def random_ratings(
    n_nodes: int,
    rated_probability: float = 0.0,
    *,
    scale: RatingScale = RatingScale(),
    rng: np.random.Generator,
) -> list[Rating]:
    if not 0.0 <= rated_probability <= 1.0:
        raise PreconditionError(
            f"0 <= rated_probability <= 1 must hold, but it is {rated_probability} instead"
        )
    ratings: list[Rating] = []
    for _ in range(n_nodes):
        if rng.random() < rated_probability:
            ratings.append(int(rng.integers(scale.min_rating, scale.max_rating + 1)))
        else:
            ratings.append(None)
    return ratings


def random_rated_network(
    n_nodes: int,
    lower: float = 0.0,
    upper: float = 1.0,
    rated_probability: float = 0.0,
    *,
    scale: RatingScale = RatingScale(),
    rng: np.random.Generator,
) -> RatedNetwork:
    network = random_network(n_nodes, lower, upper, rng=rng)
    ratings = random_ratings(n_nodes, rated_probability, scale=scale, rng=rng)
    return RatedNetwork(network, ratings, lower, upper, scale=scale)


def noisy_population(
    ground_truth: Sequence[Sequence[int]],
    n_users: int,
    noise_level: float = 0.5,
    *,
    scale: RatingScale = RatingScale(),
    rng: np.random.Generator,
) -> list[User]:
    """Users cycling through the ground-truth archetypes with per-entry noise.

    User i copies archetype `i % len(ground_truth)`; each entry is moved by +1
    or -1 with probability `noise_level` and clipped to the rating scale.
    """
    if not 0.0 <= noise_level <= 1.0:
        raise PreconditionError(f"noise_level must be in [0, 1], got {noise_level}")
    archetypes = np.asarray(ground_truth, dtype=np.int64)
    if archetypes.ndim != 2 or len(archetypes) == 0:
        raise PreconditionError("ground_truth must be a non-empty list of equal-length rating vectors")

    n_nodes = archetypes.shape[1]
    users: list[User] = []
    for i in range(n_users):
        offset = rng.choice([-1, 1], size=n_nodes)
        mutate = rng.random(n_nodes) < noise_level
        ratings = np.where(mutate, archetypes[i % len(archetypes)] + offset, archetypes[i % len(archetypes)])
        ratings = np.clip(ratings, scale.min_rating, scale.max_rating)
        users.append(User(ratings=[int(r) for r in ratings], scale=scale))
    return users
