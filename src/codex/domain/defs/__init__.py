"""Domain definition exports."""

from .story_def import (
    RESTART_TARGET,
    SELF_TARGET,
    EventDef,
    HookDef,
    OptionDef,
    SectionDef,
    StoryDef,
)

__all__ = [
    "RESTART_TARGET",
    "SELF_TARGET",
    "EventDef",
    "HookDef",
    "OptionDef",
    "SectionDef",
    "StoryDef",
]
