"""Options are the choices a player makes; they drive story flow and state."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, FrozenSet

from codex.data.errors import DataValidationError
from codex.data.repositories import parse_option
from codex.domain.defs import RESTART_TARGET, OptionDef
from codex.domain.state import OptionState
from codex.script import ScriptContext
from codex.script.context import POST_OPTION_HOOK
from codex.services.errors import ParseError
from codex.services.text import replace_vars

if TYPE_CHECKING:
    from codex.services.section import Section

logger = logging.getLogger(__name__)

FLAG_FIRST = "first"
FLAG_NOT_FIRST = "not_first"
FLAG_ONCE = "once"
KNOWN_FLAGS = frozenset({FLAG_FIRST, FLAG_NOT_FIRST, FLAG_ONCE})


@dataclass(frozen=True, slots=True)
class OptionResult:
    """Outcome of executing an option."""

    target_id: str
    notify_message: str | None = None
    # Reserved for a confirmation prompt; never set yet.
    confirm_message: str | None = None


class Option:
    """Runtime wrapper around an OptionDef plus its hidden flag."""

    def __init__(self, definition: OptionDef, context: ScriptContext | None = None) -> None:
        self._def = definition
        self._context = context
        self._state = OptionState(hidden=definition.hidden)

    @classmethod
    def parse(
        cls,
        option_id: str,
        raw: object,
        owner_section_id: str,
        context: ScriptContext | None = None,
    ) -> "Option":
        """Build an option from ``[text, goto]`` or the expanded record form."""
        try:
            definition = parse_option(option_id, raw, owner_section_id)
        except DataValidationError as exc:
            raise ParseError(str(exc)) from exc
        return cls(definition, context)

    @property
    def id(self) -> str:
        return self._def.id

    @property
    def definition(self) -> OptionDef:
        return self._def

    @property
    def target(self) -> str:
        """Target fixed at parse time; ``execute`` may still redirect."""
        return self._def.target

    @property
    def flags(self) -> FrozenSet[str]:
        return self._def.flags

    @property
    def hidden(self) -> bool:
        return self._state.hidden

    @property
    def text(self) -> str:
        """Display text with placeholders expanded.

        An option parsed without a context has no interpreter to ask, so its
        text is the raw template.
        """
        if self._context is None:
            return self._def.text
        return replace_vars(self._context, self._def.text)

    def is_available(self, section: "Section") -> bool:
        """Return True if the option should be offered in ``section`` right now."""
        if self._state.hidden:
            return False

        if FLAG_FIRST in self._def.flags and section.visits != 1:
            return False

        if FLAG_NOT_FIRST in self._def.flags and section.visits == 1:
            return False

        if not self._def.condition:
            return True

        result = self._require_context().evaluate(self._def.condition)
        if result.is_error:
            logger.error(
                "Error evaluating condition of option '%s' in section '%s': %s",
                self.id,
                section.id,
                result.message,
            )
            return False
        return result.as_bool()

    def execute(self) -> OptionResult:
        """Run the option's code and resolve where the player goes next.

        Story code may set ``goto_section`` to redirect the player; the value is
        consumed here and ignored when the configured target is ``restart``.
        """
        context = self._require_context()

        if self._def.run:
            outcome = context.run(self._def.run)
            if outcome.is_error:
                logger.error("Error executing run code of option '%s': %s", self.id, outcome.message)

        hook_outcome = context.run_hook(POST_OPTION_HOOK)
        if hook_outcome is not None and hook_outcome.is_error:
            logger.error("Error in post option hook after '%s': %s", self.id, hook_outcome.message)

        if FLAG_ONCE in self._def.flags:
            self._state.hidden = True

        target = self._def.target
        override = context.take_override()
        if override is not None and target != RESTART_TARGET:
            logger.debug("Option '%s' redirected from %s to %s", self.id, target, override)
            target = override

        notify = replace_vars(context, self._def.notify) if self._def.notify else None
        return OptionResult(target_id=target, notify_message=notify)

    def _require_context(self) -> ScriptContext:
        if self._context is None:
            raise RuntimeError(f"Option '{self.id}' is not bound to a story.")
        return self._context

    def __repr__(self) -> str:
        return f"Option(id={self.id!r}, target={self.target!r}, hidden={self.hidden!r})"
