"""Service layer exports."""

from .errors import NavigationError, ParseError, SaveLoadError
from .option import Option, OptionResult
from .section import Section
from .story import Story
from .session import ChoiceResult, SectionView, StorySession
from .save_service import SaveService

__all__ = [
    "NavigationError",
    "ParseError",
    "SaveLoadError",
    "Option",
    "OptionResult",
    "Section",
    "Story",
    "ChoiceResult",
    "SectionView",
    "StorySession",
    "SaveService",
]
