"""Simulate one user rating every node of a similarity network.

Each round the configured algorithm recommends a node, a random rater gives
it a star rating, and the rating is recorded, until nothing is unrated.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import pandas as pd

from ..config import load_config
from ..taste_network.generator import random_network
from ..taste_network.rated_network import RatedNetwork
from ..taste_network.recommendation import RecommendationStrategy, build_recommender
from ..taste_network.session import random_rater, run_session
from ..utils import make_rng, set_global_seed, setup_logging


logger = logging.getLogger(__name__)

# Two groups of three mutually similar nodes with no similarity across groups.
TWO_CLUSTER_NETWORK = [
    [0.0, 0.1, 0.5, 0.0, 0.0, 0.0],
    [0.1, 0.0, 0.9, 0.0, 0.0, 0.0],
    [0.5, 0.9, 0.0, 0.0, 0.0, 0.0],
    [0.0, 0.0, 0.0, 0.0, 0.1, 0.5],
    [0.0, 0.0, 0.0, 0.1, 0.0, 0.9],
    [0.0, 0.0, 0.0, 0.5, 0.9, 0.0],
]


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Simulate a recommend/rate session over a similarity network.")
    p.add_argument("--config", type=Path, default=None, help="Path to config YAML.")
    p.add_argument(
        "--strategy",
        choices=[s.value for s in RecommendationStrategy],
        default=None,
        help="Override recommendation strategy",
    )
    p.add_argument("--random-nodes", type=int, default=None, help="Use a random network with this many nodes")
    p.add_argument("--seed", type=int, default=None, help="Override RNG seed")
    return p


def main(argv: list[str] | None = None) -> None:
    args = build_arg_parser().parse_args(argv)
    cfg = load_config(args.config)
    setup_logging(cfg.log_level)

    seed = args.seed if args.seed is not None else cfg.reproducibility.seed
    set_global_seed(cfg.reproducibility)
    rng = make_rng(seed)

    if args.random_nodes is not None:
        network = random_network(int(args.random_nodes), rng=rng)
    else:
        network = TWO_CLUSTER_NETWORK
    rated_network = RatedNetwork(network, [None] * len(network), scale=cfg.rating_scale)

    strategy = RecommendationStrategy(args.strategy) if args.strategy else cfg.recommender
    algorithm = build_recommender(strategy, cfg.scoring, rng=rng)

    logger.info("Simulating session strategy=%s nodes=%d seed=%s", strategy.value, rated_network.n_nodes, seed)
    history = run_session(rated_network, algorithm, random_rater(rng, cfg.rating_scale))

    print("\n=== Session ===")
    print(pd.DataFrame([s.__dict__ for s in history]).to_string(index=False))

    print("\nFinal network:")
    print(rated_network.to_frame().to_string())


if __name__ == "__main__":
    main()
