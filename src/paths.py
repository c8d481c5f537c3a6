from __future__ import annotations

from pathlib import Path


CONFIG_FILENAME = "config.yaml"


def get_repo_root() -> Path:
    """Return repo root by searching upwards for `config.yaml` or `.git`."""
    start = Path.cwd().resolve()
    if start.is_file():
        start = start.parent

    for candidate in (start, *start.parents):
        if (candidate / CONFIG_FILENAME).is_file() or (candidate / ".git").exists():
            return candidate

    # Fallback: search upwards from this file (useful if called from elsewhere).
    start = Path(__file__).resolve().parent
    for candidate in (start, *start.parents):
        if (candidate / CONFIG_FILENAME).is_file() or (candidate / ".git").exists():
            return candidate

    raise FileNotFoundError(f"Could not locate repo root (expected `{CONFIG_FILENAME}` or `.git`).")


def resolve_config_path(config_path: Path | str | None = None) -> Path:
    """Resolve a (possibly relative) config path against the repo root."""
    if config_path is None:
        return (get_repo_root() / CONFIG_FILENAME).resolve()
    p = Path(config_path)
    if not p.is_absolute():
        p = get_repo_root() / p
    return p.resolve()
