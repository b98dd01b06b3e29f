"""The Story aggregate: section table, global roster, events and hooks."""
from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Tuple

from codex.core.rng import RNG
from codex.data.errors import DataError
from codex.data.repositories import StoryRepository, parse_story
from codex.domain.defs import StoryDef
from codex.script import (
    ScriptContext,
    ScriptEngine,
    ScriptEngineUnavailableError,
    ScriptEvaluationError,
    ScriptValue,
)
from codex.services.errors import ParseError
from codex.services.section import Section
from codex.services.text import replace_vars

logger = logging.getLogger(__name__)

START_SECTION_ID = "start"


class Story:
    """A loaded story bound to its own interpreter.

    A Story is built once per document load and never reshaped; loading again
    means parsing a new Story. Use :meth:`parse` or :meth:`load` rather than
    the constructor.
    """

    def __init__(self, definition: StoryDef, context: ScriptContext) -> None:
        self._def = definition
        self._context = context
        self._sections: Dict[str, Section] = {}

    @classmethod
    def parse(
        cls,
        document: Mapping[str, object] | StoryDef,
        *,
        engine: ScriptEngine | None = None,
        rng: RNG | None = None,
    ) -> "Story":
        """Build the section graph and prime the interpreter with the story's globals."""
        if isinstance(document, StoryDef):
            definition = document
        else:
            try:
                definition = parse_story(document)
            except DataError as exc:
                raise ParseError(f"Invalid story document: {exc}") from exc

        context = ScriptContext(engine, rng)
        if not context.is_ready:
            raise ParseError("Lua VM not initialized")

        story = cls(definition, context)
        try:
            story._register()
        except ScriptEngineUnavailableError as exc:
            raise ParseError(f"Lua VM became unavailable while loading: {exc}") from exc
        logger.info("Loaded story '%s' with %d sections", story.title, len(story._sections))
        return story

    @classmethod
    def load(
        cls,
        path: Path | str,
        *,
        engine: ScriptEngine | None = None,
        rng: RNG | None = None,
    ) -> "Story":
        """Read a YAML/JSON story file and parse it."""
        try:
            definition = StoryRepository(path).load()
        except DataError as exc:
            raise ParseError(f"Unable to load story from {path}: {exc}") from exc
        return cls.parse(definition, engine=engine, rng=rng)

    def _register(self) -> None:
        context = self._context
        for name, value in self._def.vars.items():
            context.engine.set_global(name, value)

        _require_ok(context.install_helpers(), "helper functions")
        context.reset_scratch()
        context.clear_override()

        if self._def.init:
            _require_ok(context.run(self._def.init), "init code")

        for event in self._def.events.values():
            _require_ok(context.define_event(event), f"event '{event.id}'")

        for hook in self._def.hooks.values():
            _require_ok(context.define_hook(hook), f"hook '{hook.id}'")

        for section_id, section_def in self._def.sections.items():
            self._sections[section_id] = Section.parse(section_id, section_def, context)

    @property
    def title(self) -> str:
        return self._def.title

    @property
    def author(self) -> str | None:
        return self._def.author

    @property
    def version(self) -> str | None:
        return self._def.version

    @property
    def definition(self) -> StoryDef:
        return self._def

    @property
    def context(self) -> ScriptContext:
        return self._context

    @property
    def vars(self) -> Tuple[str, ...]:
        """Declared global names, in document order. Only these are saved."""
        return tuple(self._def.var_names)

    @property
    def events(self) -> FrozenSet[str]:
        return frozenset(self._def.events.keys())

    @property
    def hooks(self) -> FrozenSet[str]:
        return frozenset(self._def.hooks.keys())

    @property
    def sections(self) -> Mapping[str, Section]:
        return MappingProxyType(self._sections)

    @property
    def start_section_id(self) -> str:
        return START_SECTION_ID

    def get_section(self, section_id: str) -> Section | None:
        return self._sections.get(section_id)

    def get_state(self) -> Dict[str, object]:
        """Snapshot the declared globals as plain Python values."""
        engine = self._context.engine
        return {name: engine.get_global(name).to_python() for name in self.vars}

    def set_state(self, state: Mapping[str, object]) -> None:
        """Restore declared globals from a snapshot; other keys are ignored."""
        engine = self._context.engine
        for name in self.vars:
            if name in state:
                engine.set_global(name, state[name])

    def get_global(self, name: str) -> object:
        return self._context.engine.get_global(name).to_python()

    def set_global(self, name: str, value: object) -> None:
        self._context.engine.set_global(name, value)

    def get_globals(self) -> Dict[str, object]:
        """All story-visible data globals, e.g. for a character sheet."""
        return {
            name: value.to_python()
            for name, value in self._context.engine.get_all_globals().items()
            if not self._context.is_reserved(name)
        }

    def trigger(self, event_id: str, *args: object) -> str:
        """Call the handler for ``event_id`` and return its result as text."""
        if event_id not in self._def.events:
            logger.warning("Event trigger failed: no handler for %s found in story", event_id)
            return f"Unable to trigger event: {event_id}"

        result = self._context.call_event(event_id, *args)
        if result.is_error:
            logger.error("Error in handler for event %s: %s", event_id, result.message)
            return f"Event {event_id} failed: {result.message}"
        return result.as_text()

    def replace_vars(self, text: str) -> str:
        return replace_vars(self._context, text)


def _require_ok(result: ScriptValue, what: str) -> None:
    try:
        result.unwrap()
    except ScriptEvaluationError as exc:
        raise ParseError(f"Failed to register {what}: {exc}") from exc
