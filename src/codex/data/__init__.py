"""Data layer utilities for loading story documents."""

from .document_loader import load_document, parse_document
from .errors import DataError, DataLoadError, DataValidationError
from .paths import get_repo_root, get_stories_path, resolve_story_path

__all__ = [
    "DataError",
    "DataLoadError",
    "DataValidationError",
    "get_repo_root",
    "get_stories_path",
    "load_document",
    "parse_document",
    "resolve_story_path",
]
