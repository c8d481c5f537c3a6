from __future__ import annotations

import numpy as np
import pytest

from src.taste_network.errors import PreconditionError
from src.taste_network.rated_network import RatedNetwork
from src.taste_network.recommendation import GreedyRecommendationAlgorithm, ProbabilisticRecommendationAlgorithm
from src.taste_network.session import random_rater, run_session


def test_session_rates_every_node_once(two_cluster_network, rng: np.random.Generator) -> None:
    rnet = RatedNetwork(two_cluster_network, [None] * 6)
    history = run_session(rnet, ProbabilisticRecommendationAlgorithm(rng=rng), random_rater(rng))

    assert sorted(step.node for step in history) == list(range(6))
    assert [step.step for step in history] == list(range(6))
    assert not rnet.has_unrated()
    assert rnet.ratings == [
        next(s.rating for s in history if s.node == i) for i in range(6)
    ]


def test_greedy_session_explores_the_liked_cluster_first(two_cluster_network) -> None:
    rnet = RatedNetwork(two_cluster_network, [None] * 6)
    # Everything in the first cluster is loved, everything in the second is disliked.
    history = run_session(rnet, GreedyRecommendationAlgorithm(), lambda node: 5 if node < 3 else 1)
    assert [step.node for step in history][:3] == [0, 2, 1]


def test_session_stops_at_max_steps(two_cluster_network) -> None:
    rnet = RatedNetwork(two_cluster_network, [None] * 6)
    history = run_session(rnet, GreedyRecommendationAlgorithm(), lambda node: 3, max_steps=2)
    assert len(history) == 2
    assert rnet.has_unrated()


def test_session_rejects_missing_rating(two_cluster_network) -> None:
    rnet = RatedNetwork(two_cluster_network, [None] * 6)
    with pytest.raises(PreconditionError):
        run_session(rnet, GreedyRecommendationAlgorithm(), lambda node: None)
