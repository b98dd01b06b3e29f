"""Sections are the building blocks of a story: text, options and run code."""
from __future__ import annotations

import logging
from typing import Dict

from codex.data.errors import DataValidationError
from codex.data.repositories import parse_section
from codex.domain.defs import SectionDef
from codex.domain.state import SectionState
from codex.script import ScriptContext
from codex.services.errors import ParseError
from codex.services.option import Option
from codex.services.text import replace_vars

logger = logging.getLogger(__name__)


class Section:
    """A narrative state.

    ``options`` and ``text`` are recomputed on every access.
    """

    def __init__(self, definition: SectionDef, context: ScriptContext) -> None:
        self._def = definition
        self._context = context
        self._state = SectionState()
        self._options: Dict[str, Option] = {
            option_id: Option(option_def, context) for option_id, option_def in definition.options.items()
        }

    @classmethod
    def parse(cls, section_id: str, raw: object, context: ScriptContext) -> "Section":
        """Build a section and create its persistent namespace in the interpreter."""
        if isinstance(raw, SectionDef):
            definition = raw
        else:
            try:
                definition = parse_section(section_id, raw)
            except DataValidationError as exc:
                raise ParseError(str(exc)) from exc
        context.create_section_namespace(definition.id, definition.vars)
        return cls(definition, context)

    @property
    def id(self) -> str:
        return self._def.id

    @property
    def definition(self) -> SectionDef:
        return self._def

    @property
    def title(self) -> str:
        return self._def.title or self._def.id

    @property
    def visits(self) -> int:
        return self._state.visits

    @property
    def text(self) -> str:
        return replace_vars(self._context, self._def.text)

    @property
    def options(self) -> Dict[str, Option]:
        """Options available right now, in document order."""
        return {option_id: option for option_id, option in self._options.items() if option.is_available(self)}

    @property
    def all_options(self) -> Dict[str, Option]:
        return dict(self._options)

    def visit(self) -> None:
        """Enter the section: count the visit, then run the section's code.

        The counter moves first so run code sees the current visit in
        ``s.visits``.
        """
        visits = self._state.record_visit()
        self._context.enter_section(self.id, visits)
        if self._def.run:
            result = self._context.run(self._def.run)
            if result.is_error:
                logger.error("Error running code of section '%s': %s", self.id, result.message)
        logger.debug("Visited section %s (visit %d)", self.id, visits)

    def __repr__(self) -> str:
        return f"Section(id={self.id!r}, visits={self.visits})"
