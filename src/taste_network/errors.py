"""Error kinds raised by the taste-network package.

- `ConfigurationError`: a missing or invalid parameter, raised before any work starts.
- `PreconditionError`: the caller passed malformed input (shapes, indices, ranges).
- `InternalInvariantError`: the computation reached a state it should never reach.
"""

from __future__ import annotations


class TasteNetworkError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(TasteNetworkError, ValueError):
    pass


class PreconditionError(TasteNetworkError, ValueError):
    pass


class InternalInvariantError(TasteNetworkError, RuntimeError):
    pass


class EmptyClusterError(InternalInvariantError):
    """A K-Means cluster received no points during an assignment round."""

    def __init__(self, cluster: int, iteration: int) -> None:
        super().__init__(f"cluster {cluster} received no points in iteration {iteration}")
        self.cluster = cluster
        self.iteration = iteration
