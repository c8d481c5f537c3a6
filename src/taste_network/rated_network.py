from __future__ import annotations

import logging
import math
import numbers
import operator
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from .errors import PreconditionError
from .matrix import MatrixLike, extremum_of, is_rectangular


logger = logging.getLogger(__name__)

# A stored rating: an integer star value, or None for "not rated yet".
Rating = Optional[int]

UNRATED_LABEL = "-"
CORNER_LABEL = "."


@dataclass(frozen=True)
class RatingScale:
    min_rating: int = 1
    max_rating: int = 5

    def __post_init__(self) -> None:
        if self.min_rating >= self.max_rating:
            raise PreconditionError(
                f"min_rating must be smaller than max_rating, got {self.min_rating} and {self.max_rating}"
            )
        if self.min_rating <= 0:
            # 0 is the placeholder for unrated entries inside the learners.
            raise PreconditionError(f"min_rating must be positive, got {self.min_rating}")

    def values(self) -> range:
        return range(self.min_rating, self.max_rating + 1)

    def contains(self, rating: object) -> bool:
        if isinstance(rating, bool) or not isinstance(rating, numbers.Real):
            return False
        if not float(rating).is_integer():
            return False
        return self.min_rating <= rating <= self.max_rating


class RatedNetwork:
    """One user's similarity network paired with their (partial) ratings.

    The similarity matrix is copied into a read-only float array; the rating
    vector is a plain list that `add_rating` mutates in place.
    """

    def __init__(
        self,
        network: MatrixLike,
        ratings: Sequence[Rating],
        lower: float | None = None,
        upper: float | None = None,
        *,
        scale: RatingScale = RatingScale(),
    ) -> None:
        if not is_rectangular(network):
            raise PreconditionError(f"Ragged rows: lengths are {[len(row) for row in network]}")
        n_rows = len(network)
        if n_rows == 0:
            raise PreconditionError("network must have at least one node")
        n_cols = len(network[0])
        if n_cols != n_rows:
            raise PreconditionError(f"Adjacency matrix has invalid shape {n_rows}x{n_cols}")
        if len(ratings) != n_rows:
            raise PreconditionError(
                f"rating and network must have compatible size, but rating is of length {len(ratings)}, "
                f"network has shape {n_rows}x{n_cols}"
            )

        self.scale = scale
        for i, r in enumerate(ratings):
            self._check_rating(i, r)

        if lower is None:
            lower = math.floor(extremum_of(network, operator.lt))
        if upper is None:
            upper = math.ceil(extremum_of(network, operator.gt))
        if not lower < upper:
            raise PreconditionError(f"lower must be smaller than upper but they are {lower} and {upper}")

        arr = np.array(network, dtype=np.float64)
        arr.setflags(write=False)
        self.network = arr
        self.ratings: list[Rating] = [None if r is None else int(r) for r in ratings]
        self.lower = float(lower)
        self.upper = float(upper)

    @property
    def n_nodes(self) -> int:
        return len(self.ratings)

    def _check_rating(self, index: int, rating: Rating) -> None:
        if rating is not None and not self.scale.contains(rating):
            raise PreconditionError(
                f"rating at node {index} must be None or an integer in "
                f"[{self.scale.min_rating}, {self.scale.max_rating}], got {rating!r}"
            )

    def has_any_rated(self) -> bool:
        return any(r is not None for r in self.ratings)

    def has_unrated(self) -> bool:
        return any(r is None for r in self.ratings)

    def rated_mask(self) -> np.ndarray:
        return np.array([r is not None for r in self.ratings], dtype=bool)

    def unrated_indices(self) -> list[int]:
        return [i for i, r in enumerate(self.ratings) if r is None]

    def add_rating(self, index: int, rating: Rating) -> None:
        """Add or overwrite the rating of node `index`."""
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
            raise PreconditionError(f"index must be an integer, got {index!r}")
        if not 0 <= index < self.n_nodes:
            raise PreconditionError(f"index must be between 0 and {self.n_nodes}, but is {index}")
        self._check_rating(index, rating)
        self.ratings[index] = None if rating is None else int(rating)
        logger.debug("rated node=%d rating=%s", index, rating)

    def render(self) -> list[list[str]]:
        """(N+1)x(N+1) grid: ratings as row/column headers, raw similarities in the body."""
        headers = [CORNER_LABEL] + [UNRATED_LABEL if r is None else f"{r} stars" for r in self.ratings]
        grid = [[""] * (self.n_nodes + 1) for _ in range(self.n_nodes + 1)]
        for i, label in enumerate(headers):
            grid[i][0] = label
            grid[0][i] = label
        for i in range(self.n_nodes):
            for j in range(self.n_nodes):
                grid[i + 1][j + 1] = str(float(self.network[i, j]))
        return grid

    def to_frame(self) -> pd.DataFrame:
        grid = self.render()
        return pd.DataFrame([row[1:] for row in grid[1:]], index=grid[0][1:], columns=grid[0][1:])

    def __str__(self) -> str:
        return self.to_frame().to_string()

    def __repr__(self) -> str:
        rated = self.n_nodes - len(self.unrated_indices())
        return f"RatedNetwork(n_nodes={self.n_nodes}, rated={rated}, lower={self.lower}, upper={self.upper})"
