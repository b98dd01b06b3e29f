"""Helpers for resolving story file locations."""
from __future__ import annotations

from pathlib import Path


def get_repo_root() -> Path:
    """Return the repository root."""
    return Path(__file__).resolve().parents[3]


def get_stories_path(base_path: Path | str | None = None) -> Path:
    """Return the directory containing bundled story documents."""
    if base_path is not None:
        return Path(base_path)
    return get_repo_root() / "data" / "stories"


def resolve_story_path(name_or_path: str, base_path: Path | str | None = None) -> Path:
    """Map a bare story name ("cave") to its bundled file, or pass a real path through."""
    candidate = Path(name_or_path)
    if candidate.suffix in (".yaml", ".yml", ".json") or candidate.exists():
        return candidate
    return get_stories_path(base_path) / f"{name_or_path}.yaml"
