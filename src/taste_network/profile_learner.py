"""Learning user taste profiles from populations of rated networks.

Two strategies:
- `AverageLearner`: a single profile from the population's mean ratings. A
  baseline that shows why clustering is needed.
- `KMeansLearner`: k profiles from the cluster means of a K-Means run.

K-Means works as follows:
1) pick k distinct users at random; their rating vectors are the initial means
2) assign every user to the nearest mean (ties go to the lowest cluster index)
3) recompute every mean from the users assigned to it
4) repeat 2 and 3 until the means stop changing (exact equality)

A single random initialization is used; there are no restarts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Protocol, Sequence

import numpy as np

from .errors import ConfigurationError, EmptyClusterError, InternalInvariantError, PreconditionError
from .matrix import MatrixLike, is_rectangular, matrix_equals, vector_distance, vector_mean
from .similarity import SimilarityFunction, clean_ratings, default_similarity_function, mean_vector_to_similarity_matrix
from .user import User, UserProfile


logger = logging.getLogger(__name__)


class LearnerStrategy(str, Enum):
    AVERAGE = "average"
    KMEANS = "kmeans"


@dataclass(frozen=True)
class KMeansConfig:
    k: int
    max_iterations: int | None = None

    def __post_init__(self) -> None:
        if isinstance(self.k, bool) or not isinstance(self.k, (int, np.integer)):
            raise ConfigurationError(f"k must be an integer, got {self.k!r}")

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "KMeansConfig":
        raw = raw or {}
        if not isinstance(raw, Mapping):
            raise ConfigurationError(f"kmeans configuration must be a mapping, got {raw!r}")
        if raw.get("k") is None:
            raise ConfigurationError(
                "Learning of k not yet implemented. k (number of clusters) must be passed explicitly."
            )
        k = raw["k"]
        if isinstance(k, bool) or not isinstance(k, int):
            raise ConfigurationError(f"k must be an integer, got {k!r}")
        max_iterations = raw.get("max_iterations")
        if max_iterations is not None and (isinstance(max_iterations, bool) or not isinstance(max_iterations, int)):
            raise ConfigurationError(f"max_iterations must be an integer, got {max_iterations!r}")
        return cls(k=k, max_iterations=max_iterations)


class ProfileLearner(Protocol):
    def learn_profile(self, users: Sequence[User]) -> list[UserProfile]: ...


def _common_dimension(users: Sequence[User]) -> int:
    if not users:
        raise PreconditionError("at least one user is required to learn a profile")
    n_nodes = users[0].rated_network.n_nodes
    if not all(u.rated_network.n_nodes == n_nodes for u in users):
        raise PreconditionError("Users should all have the same number of nodes, but this is not the case")
    return n_nodes


class AverageLearner:
    """One profile from the element-wise mean of all users' ratings."""

    def __init__(self, *, similarity_fn: SimilarityFunction | None = None) -> None:
        self.similarity_fn = similarity_fn or default_similarity_function()

    def learn_profile(self, users: Sequence[User]) -> list[UserProfile]:
        n_nodes = _common_dimension(users)
        ratings = clean_ratings(users)
        average_rating = vector_mean(ratings)
        similarity = mean_vector_to_similarity_matrix(average_rating, self.similarity_fn)
        logger.info("AverageLearner: users=%d nodes=%d", len(users), n_nodes)
        return [UserProfile(similarity)]


def init_kmeans(ratings: np.ndarray, k: int, rng: np.random.Generator) -> np.ndarray:
    """Pick k distinct users uniformly at random as the initial cluster means."""
    if k < 1:
        raise PreconditionError(f"k must be >= 1 but is {k}")
    if not is_rectangular(ratings):
        raise PreconditionError("ratings must be rectangular, but is not")
    n_users = len(ratings)
    if n_users < k:
        raise PreconditionError(f"n_users must be >= k, but they are {n_users} and {k} respectively")
    start_idx = rng.choice(n_users, size=k, replace=False)
    logger.debug("K-Means initial users: %s", start_idx.tolist())
    return np.array(ratings, dtype=np.float64)[start_idx]


def assign_clusters(ratings: np.ndarray, means: np.ndarray) -> np.ndarray:
    """Index of the nearest mean for every rating vector; first minimum wins."""
    assignments = np.empty(len(ratings), dtype=np.int64)
    for i, point in enumerate(ratings):
        distances = [vector_distance(point, mean) for mean in means]
        assignments[i] = int(np.argmin(distances))
    return assignments


def kmeans_iteration(ratings: np.ndarray, current_means: np.ndarray, *, iteration: int = 0) -> np.ndarray:
    """One assign + update round; returns the recomputed means."""
    if not is_rectangular(ratings):
        raise PreconditionError("ratings must be rectangular!")
    if not is_rectangular(current_means):
        raise PreconditionError("current_means must be rectangular!")

    assignments = assign_clusters(ratings, current_means)
    new_means = np.empty_like(np.asarray(current_means, dtype=np.float64))
    for cluster in range(len(current_means)):
        members = ratings[assignments == cluster]
        if len(members) == 0:
            raise EmptyClusterError(cluster, iteration)
        new_means[cluster] = vector_mean(members)
    return new_means


def run_kmeans(
    ratings: MatrixLike,
    initial_means: MatrixLike,
    *,
    max_iterations: int | None = None,
) -> np.ndarray:
    """Iterate from `initial_means` until the means no longer change.

    Deterministic for fixed `initial_means`.
    """
    if not is_rectangular(ratings):
        raise PreconditionError("ratings must be rectangular, but is not")
    if not is_rectangular(initial_means):
        raise PreconditionError("initial_means must be rectangular, but is not")
    points = np.asarray(ratings, dtype=np.float64)
    current = np.asarray(initial_means, dtype=np.float64)
    if len(current) < 1:
        raise PreconditionError("at least one initial mean is required")
    if current.shape[1] != points.shape[1]:
        raise PreconditionError(
            f"means have {current.shape[1]} nodes but ratings have {points.shape[1]}"
        )

    iteration = 0
    while True:
        iteration += 1
        if max_iterations is not None and iteration > max_iterations:
            raise InternalInvariantError(f"K-Means did not converge within {max_iterations} iterations")
        updated = kmeans_iteration(points, current, iteration=iteration)
        if matrix_equals(updated, current):
            logger.debug("K-Means converged after %d iteration(s)", iteration)
            return updated
        current = updated


class KMeansLearner:
    """k profiles, one per K-Means cluster of users' rating vectors."""

    def __init__(
        self,
        config: KMeansConfig,
        *,
        similarity_fn: SimilarityFunction | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        if not isinstance(config, KMeansConfig):
            raise ConfigurationError(f"KMeansLearner needs a KMeansConfig, got {config!r}")
        self.config = config
        self.similarity_fn = similarity_fn or default_similarity_function()
        self.rng = rng if rng is not None else np.random.default_rng()

    def learn_cluster_means(self, users: Sequence[User]) -> np.ndarray:
        k = self.config.k
        if k < 1:
            raise PreconditionError(f"k must be >= 1 but is {k}")
        if len(users) < k:
            raise PreconditionError(f"n_users must be >= k, but they are {len(users)} and {k} respectively")
        _common_dimension(users)

        ratings = clean_ratings(users)
        init_means = init_kmeans(ratings, k, self.rng)
        return run_kmeans(ratings, init_means, max_iterations=self.config.max_iterations)

    def learn_profile(self, users: Sequence[User]) -> list[UserProfile]:
        final_means = self.learn_cluster_means(users)
        profiles = [UserProfile(mean_vector_to_similarity_matrix(m, self.similarity_fn)) for m in final_means]
        logger.info("KMeansLearner: users=%d nodes=%d k=%d", len(users), final_means.shape[1], len(profiles))
        return profiles


def build_learner(
    strategy: LearnerStrategy | str,
    *,
    kmeans: KMeansConfig | None = None,
    similarity_fn: SimilarityFunction | None = None,
    rng: np.random.Generator | None = None,
) -> ProfileLearner:
    try:
        strategy = LearnerStrategy(strategy)
    except ValueError as exc:
        raise ConfigurationError(f"unknown learner strategy: {strategy!r}") from exc
    if strategy is LearnerStrategy.AVERAGE:
        return AverageLearner(similarity_fn=similarity_fn)
    if kmeans is None:
        raise ConfigurationError("the kmeans strategy needs a KMeansConfig with k set")
    return KMeansLearner(kmeans, similarity_fn=similarity_fn, rng=rng)
