from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from src.config import AppConfig, load_config, parse_config
from src.pipelines import learn_profiles, simulate_session
from src.taste_network.errors import ConfigurationError
from src.taste_network.profile_learner import KMeansConfig, LearnerStrategy
from src.taste_network.recommendation import RecommendationStrategy


REPO_ROOT = Path(__file__).resolve().parents[1]


def _write_config(tmp_path: Path, cfg: dict) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(cfg))
    return path


def test_repo_config_loads() -> None:
    cfg = load_config(REPO_ROOT / "config.yaml")
    assert cfg.learner is LearnerStrategy.KMEANS
    assert cfg.kmeans == KMeansConfig(k=3)
    assert cfg.recommender is RecommendationStrategy.PROBABILISTIC
    assert cfg.scoring.rating_rescale_factor == 2.5
    assert cfg.scoring.unrated_star_rating == 2.5
    assert cfg.similarity.steepness == 0.1
    assert cfg.reproducibility.seed == 42


def test_empty_config_uses_defaults() -> None:
    cfg = parse_config({})
    assert cfg == AppConfig()
    assert cfg.kmeans is None


@pytest.mark.parametrize(
    "raw",
    [
        {"learner": {"kmeans": {"max_iterations": 10}}},
        {"learner": {"strategy": "spectral"}},
        {"recommender": {"strategy": "greedy", "unrated_star_rating": "high"}},
        {"rating_scale": {"min_rating": 5, "max_rating": 1}},
        {"reproducibility": {"seed": "abc"}},
        {"similarity": []},
        {"learner": {"kmeans": 3}},
        {"rating_scale": {"min_rating": None}},
        {"rating_scale": {"min_rating": 1.9, "max_rating": 5.7}},
        {"rating_scale": {"max_rating": True}},
    ],
)
def test_invalid_config_is_a_configuration_error(raw: dict) -> None:
    with pytest.raises(ConfigurationError):
        parse_config(raw)


def test_missing_config_file_is_a_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "nope.yaml")


def test_simulate_session_prints_a_complete_session(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write_config(tmp_path, {"recommender": {"strategy": "greedy"}, "reproducibility": {"seed": 3}})
    simulate_session.main(["--config", str(path)])
    out = capsys.readouterr().out
    assert "=== Session ===" in out
    assert "Final network:" in out
    header = out.split("Final network:")[1].strip().splitlines()[0]
    assert "-" not in header.split()


def test_simulate_session_on_random_network(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write_config(tmp_path, {"reproducibility": {"seed": 11}})
    simulate_session.main(["--config", str(path), "--random-nodes", "4", "--strategy", "probabilistic"])
    out = capsys.readouterr().out
    assert "=== Session ===" in out


def test_learn_profiles_prints_one_profile_per_cluster(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write_config(tmp_path, {"learner": {"strategy": "kmeans", "kmeans": {"k": 1}}})
    learn_profiles.main(["--config", str(path), "--n-users", "6"])
    out = capsys.readouterr().out
    assert "=== Profile 0 ===" in out
    assert "=== Profile 1 ===" not in out


def test_learn_profiles_average_strategy(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write_config(tmp_path, {})
    learn_profiles.main(["--config", str(path), "--strategy", "average"])
    out = capsys.readouterr().out
    assert "=== Population ratings ===" in out
    assert "=== Profile 0 ===" in out


def test_learn_profiles_kmeans_without_k_fails(tmp_path: Path) -> None:
    path = _write_config(tmp_path, {"learner": {"strategy": "kmeans"}})
    with pytest.raises(ConfigurationError):
        learn_profiles.main(["--config", str(path)])
