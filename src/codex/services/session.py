"""Play session: tracks the current section and moves the player around."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Tuple

from codex.core.rng import RNG
from codex.data.errors import DataError
from codex.data.repositories import StoryRepository
from codex.domain.defs import RESTART_TARGET, StoryDef
from codex.script import ScriptEngine
from codex.services.errors import NavigationError, ParseError
from codex.services.section import Section
from codex.services.story import Story

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SectionView:
    """Data returned to the presentation layer for rendering."""

    section_id: str
    title: str
    text: str
    options: List[Tuple[str, str]] = field(default_factory=list)


@dataclass(slots=True)
class ChoiceResult:
    """Result returned after taking an option."""

    option_id: str
    target_id: str
    view: SectionView
    notify_message: str | None = None
    restarted: bool = False


class StorySession:
    """Drives one player through a story definition."""

    def __init__(
        self,
        definition: StoryDef,
        *,
        seed: int | None = None,
        engine_factory: Callable[[], ScriptEngine] | None = None,
    ) -> None:
        self._definition = definition
        self._seed = seed
        self._engine_factory = engine_factory
        self._story: Story | None = None
        self._current: Section | None = None

    @classmethod
    def from_file(cls, path: Path | str, *, seed: int | None = None) -> "StorySession":
        try:
            definition = StoryRepository(path).load()
        except DataError as exc:
            raise ParseError(f"Unable to load story from {path}: {exc}") from exc
        return cls(definition, seed=seed)

    @property
    def story(self) -> Story:
        if self._story is None:
            raise RuntimeError("Session has not been started.")
        return self._story

    @property
    def definition(self) -> StoryDef:
        return self._definition

    @property
    def current_section(self) -> Section | None:
        return self._current

    @property
    def seed(self) -> int | None:
        return self._seed

    def start(self, section_id: str | None = None) -> SectionView:
        """Load a fresh story (all visits and globals reset) and enter a section.

        If loading fails or the section does not exist, the session keeps its
        current story and section.
        """
        engine = self._engine_factory() if self._engine_factory is not None else None
        story = Story.parse(self._definition, engine=engine, rng=RNG(self._seed))
        section = _require_section(story, section_id or story.start_section_id)
        self._story = story
        self._enter(section)
        return self.view()

    def goto(self, section_id: str) -> SectionView:
        """Visit ``section_id``. An unknown id leaves the current section as it was."""
        self._enter(_require_section(self.story, section_id))
        return self.view()

    def choose(self, option_id: str) -> ChoiceResult:
        """Execute an available option of the current section and follow it."""
        section = self._require_current()
        option = section.options.get(option_id)
        if option is None:
            raise ValueError(f"Option '{option_id}' is not available in section '{section.id}'.")

        result = option.execute()
        restarted = result.target_id == RESTART_TARGET
        if restarted:
            view = self.start()
        else:
            view = self.goto(result.target_id)
        return ChoiceResult(
            option_id=option_id,
            target_id=result.target_id,
            view=view,
            notify_message=result.notify_message,
            restarted=restarted,
        )

    def trigger(self, event_id: str, *args: object) -> str:
        return self.story.trigger(event_id, *args)

    def view(self) -> SectionView:
        """Render the current section with the options available right now."""
        section = self._require_current()
        return SectionView(
            section_id=section.id,
            title=section.title,
            text=section.text,
            options=[(option_id, option.text) for option_id, option in section.options.items()],
        )

    def _enter(self, section: Section) -> None:
        section.visit()
        self._current = section
        logger.info("Navigated to section: %s", section.id)

    def _require_current(self) -> Section:
        if self._current is None:
            raise RuntimeError("Session has no current section; call start() first.")
        return self._current


def _require_section(story: Story, section_id: str) -> Section:
    section = story.get_section(section_id)
    if section is None:
        logger.error("Section not found: %s", section_id)
        raise NavigationError(section_id)
    return section
