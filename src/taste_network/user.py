from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from .errors import PreconditionError
from .matrix import MatrixLike, is_rectangular
from .rated_network import RatedNetwork, Rating, RatingScale


@dataclass(frozen=True, eq=False)
class UserProfile:
    """A learned N x N similarity network representing one taste archetype."""

    similarity_network: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        if not is_rectangular(self.similarity_network):
            raise PreconditionError("profile similarity network must be rectangular")
        arr = np.array(self.similarity_network, dtype=np.float64)
        if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
            raise PreconditionError(f"profile similarity network must be square, got shape {arr.shape}")
        arr.setflags(write=False)
        object.__setattr__(self, "similarity_network", arr)

    @property
    def n_nodes(self) -> int:
        return int(self.similarity_network.shape[0])


class User:
    """A user: their similarity network plus their ratings.

    Pass a profile, ratings, or both. Without a profile the user gets an
    all-zero network with bounds [0, 1]; without ratings every node is unrated.
    """

    def __init__(
        self,
        profile: UserProfile | MatrixLike | None = None,
        ratings: Sequence[Rating] | None = None,
        *,
        scale: RatingScale = RatingScale(),
    ) -> None:
        if profile is None and ratings is None:
            raise PreconditionError("If profile is not passed, ratings must be passed")

        lower: float | None = None
        upper: float | None = None
        if profile is None:
            n_nodes = len(ratings)  # type: ignore[arg-type]
            profile = UserProfile(np.zeros((n_nodes, n_nodes)))
            lower, upper = 0.0, 1.0
        elif not isinstance(profile, UserProfile):
            profile = UserProfile(profile)  # type: ignore[arg-type]

        if ratings is None:
            ratings = [None] * profile.n_nodes

        self.profile = profile
        self.rated_network = RatedNetwork(profile.similarity_network, list(ratings), lower, upper, scale=scale)

    @property
    def n_nodes(self) -> int:
        return self.rated_network.n_nodes

    def __repr__(self) -> str:
        return f"User({self.rated_network!r})"
