"""Codex: a scripted interactive-fiction engine."""

from .services import (
    NavigationError,
    Option,
    OptionResult,
    ParseError,
    Section,
    Story,
    StorySession,
)

__all__ = [
    "NavigationError",
    "Option",
    "OptionResult",
    "ParseError",
    "Section",
    "Story",
    "StorySession",
]
