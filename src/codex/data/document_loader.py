"""Low-level helpers for reading story documents."""
from __future__ import annotations

from pathlib import Path

import yaml

from .errors import DataLoadError


def load_document(path: Path | str) -> object:
    """Load a YAML (or JSON) document from disk and raise DataLoadError on failure."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError(f"Story file not found: {path}") from exc
    except OSError as exc:
        raise DataLoadError(f"Unable to read story file: {path}") from exc
    return parse_document(text, source=str(path))


def parse_document(text: str, *, source: str = "<string>") -> object:
    """Parse YAML text. JSON documents are valid YAML and load the same way."""
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise DataLoadError(f"Invalid YAML in {source}: {exc}") from exc
