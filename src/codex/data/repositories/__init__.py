"""Repository exports."""

from .story_repo import StoryRepository, parse_option, parse_section, parse_story

__all__ = [
    "StoryRepository",
    "parse_option",
    "parse_section",
    "parse_story",
]
