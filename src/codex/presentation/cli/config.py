"""CLI configuration helpers for options persistence."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict

_DEFAULT_STORY = "cave"
_DEFAULT_SLOT_COUNT = 3
_MAX_SLOT_COUNT = 9


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "Codex"
        return Path.home() / "Codex"
    return Path.home() / ".config" / "codex"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def get_save_dir() -> Path:
    """Return the per-user save directory."""
    return get_user_data_dir() / "saves"


def default_config() -> Dict[str, Any]:
    return {"default_story": _DEFAULT_STORY, "slot_count": _DEFAULT_SLOT_COUNT}


def _normalize(raw: Dict[str, Any]) -> Dict[str, Any]:
    config = default_config()
    story = raw.get("default_story")
    if isinstance(story, str) and story.strip():
        config["default_story"] = story.strip()
    slots = raw.get("slot_count")
    if isinstance(slots, int) and not isinstance(slots, bool) and 1 <= slots <= _MAX_SLOT_COUNT:
        config["slot_count"] = slots
    return config


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return default_config()
    if not isinstance(raw, dict):
        return default_config()
    return _normalize(raw)
