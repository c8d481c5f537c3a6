"""Loading `config.yaml` into typed configuration objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from .paths import resolve_config_path
from .taste_network.errors import ConfigurationError
from .taste_network.profile_learner import KMeansConfig, LearnerStrategy
from .taste_network.rated_network import RatingScale
from .taste_network.recommendation import RecommendationStrategy, RecommenderConfig
from .taste_network.similarity import SimilarityConfig
from .utils import ReproducibilityConfig


@dataclass(frozen=True)
class AppConfig:
    rating_scale: RatingScale = field(default_factory=RatingScale)
    similarity: SimilarityConfig = field(default_factory=SimilarityConfig)
    learner: LearnerStrategy = LearnerStrategy.KMEANS
    kmeans: KMeansConfig | None = None
    recommender: RecommendationStrategy = RecommendationStrategy.PROBABILISTIC
    scoring: RecommenderConfig = field(default_factory=RecommenderConfig)
    reproducibility: ReproducibilityConfig = field(default_factory=ReproducibilityConfig)
    log_level: str = "INFO"


def _section(cfg: Mapping[str, Any], name: str) -> dict[str, Any]:
    raw = cfg.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"config section `{name}` must be a mapping")
    return raw


def _number(raw: Mapping[str, Any], key: str, default: float) -> float:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"`{key}` must be a number, got {value!r}")
    return float(value)


def _integer(raw: Mapping[str, Any], key: str, default: int) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"`{key}` must be an integer, got {value!r}")
    return value


def parse_config(cfg: Mapping[str, Any]) -> AppConfig:
    """Build an AppConfig from an already-parsed YAML mapping."""
    if not isinstance(cfg, dict):
        raise ConfigurationError("config.yaml must be a mapping")

    scale_raw = _section(cfg, "rating_scale")
    similarity_raw = _section(cfg, "similarity")
    learner_raw = _section(cfg, "learner")
    recommender_raw = _section(cfg, "recommender")
    repro_raw = _section(cfg, "reproducibility")
    logging_raw = _section(cfg, "logging")

    try:
        scale = RatingScale(
            min_rating=_integer(scale_raw, "min_rating", 1),
            max_rating=_integer(scale_raw, "max_rating", 5),
        )
    except ValueError as exc:
        raise ConfigurationError(f"invalid rating_scale: {exc}") from exc

    try:
        learner = LearnerStrategy(learner_raw.get("strategy", LearnerStrategy.KMEANS.value))
        recommender = RecommendationStrategy(
            recommender_raw.get("strategy", RecommendationStrategy.PROBABILISTIC.value)
        )
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc

    kmeans_raw = learner_raw.get("kmeans")
    if kmeans_raw is not None and not isinstance(kmeans_raw, dict):
        raise ConfigurationError("config section `learner.kmeans` must be a mapping")
    kmeans = KMeansConfig.from_mapping(kmeans_raw) if kmeans_raw is not None else None

    seed = repro_raw.get("seed", 42)
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise ConfigurationError(f"`seed` must be an integer or null, got {seed!r}")

    return AppConfig(
        rating_scale=scale,
        similarity=SimilarityConfig(steepness=_number(similarity_raw, "steepness", 0.1)),
        learner=learner,
        kmeans=kmeans,
        recommender=recommender,
        scoring=RecommenderConfig(
            rating_rescale_factor=_number(recommender_raw, "rating_rescale_factor", 2.5),
            unrated_star_rating=_number(recommender_raw, "unrated_star_rating", 2.5),
        ),
        reproducibility=ReproducibilityConfig(seed=seed),
        log_level=str(logging_raw.get("level", "INFO")),
    )


def load_config(config_path: Path | str | None = None) -> AppConfig:
    path = resolve_config_path(config_path)
    if not path.is_file():
        raise ConfigurationError(f"config file not found: {path}")
    return parse_config(yaml.safe_load(path.read_text()) or {})
