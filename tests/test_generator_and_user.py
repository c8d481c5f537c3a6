from __future__ import annotations

import numpy as np
import pytest

from src.taste_network.errors import PreconditionError
from src.taste_network.generator import noisy_population, random_network, random_ratings, random_rated_network
from src.taste_network.rated_network import RatingScale
from src.taste_network.user import User, UserProfile


def test_random_network_is_symmetric_with_zero_diagonal(rng: np.random.Generator) -> None:
    m = random_network(5, 0.2, 0.8, rng=rng)
    np.testing.assert_array_equal(m, m.T)
    np.testing.assert_array_equal(np.diag(m), np.zeros(5))
    off_diagonal = m[~np.eye(5, dtype=bool)]
    assert ((off_diagonal >= 0.2) & (off_diagonal < 0.8)).all()
    # rows must not alias each other
    assert len({tuple(row) for row in m}) == 5


def test_random_ratings_respect_probability_bounds(rng: np.random.Generator) -> None:
    assert random_ratings(4, 0.0, rng=rng) == [None] * 4
    full = random_ratings(50, 1.0, rng=rng)
    assert all(1 <= r <= 5 for r in full)
    with pytest.raises(PreconditionError):
        random_ratings(3, 1.5, rng=rng)


def test_random_rated_network_uses_requested_bounds(rng: np.random.Generator) -> None:
    rnet = random_rated_network(4, -1.0, 1.0, rated_probability=0.5, rng=rng)
    assert (rnet.lower, rnet.upper) == (-1.0, 1.0)
    assert rnet.n_nodes == 4


def test_noisy_population_stays_near_its_archetypes(rng: np.random.Generator) -> None:
    ground_truth = [[5, 5, 1], [1, 1, 5]]
    users = noisy_population(ground_truth, 6, 0.5, rng=rng)
    assert len(users) == 6
    for i, user in enumerate(users):
        ratings = np.array(user.rated_network.ratings)
        assert (np.abs(ratings - np.array(ground_truth[i % 2])) <= 1).all()
        assert ((ratings >= 1) & (ratings <= 5)).all()


def test_noiseless_population_copies_archetypes(rng: np.random.Generator) -> None:
    users = noisy_population([[2, 3, 4]], 2, 0.0, scale=RatingScale(1, 5), rng=rng)
    assert [u.rated_network.ratings for u in users] == [[2, 3, 4], [2, 3, 4]]


def test_user_from_ratings_gets_zero_network() -> None:
    user = User(ratings=[5, None, 2])
    assert user.n_nodes == 3
    np.testing.assert_array_equal(user.rated_network.network, np.zeros((3, 3)))
    assert (user.rated_network.lower, user.rated_network.upper) == (0.0, 1.0)


def test_user_from_profile_starts_unrated() -> None:
    profile = UserProfile([[0.0, 0.3], [0.3, 0.0]])
    user = User(profile)
    assert user.rated_network.ratings == [None, None]
    assert not user.rated_network.has_any_rated()


def test_user_needs_profile_or_ratings() -> None:
    with pytest.raises(PreconditionError):
        User()


def test_profile_must_be_square() -> None:
    with pytest.raises(PreconditionError):
        UserProfile([[0.0, 1.0, 0.5], [1.0, 0.0, 0.5]])
    with pytest.raises(PreconditionError):
        UserProfile([[0.0, 1.0], [1.0]])
