"""Execution context shared by a story and its sections and options."""
from __future__ import annotations

import logging
from typing import Mapping

from codex.core.rng import RNG
from codex.domain.defs import EventDef, HookDef

from .engine import ScriptEngine
from .helpers import CONTAINER_HELPERS, dice_helpers
from .values import ScriptValue

logger = logging.getLogger(__name__)

SCRATCH_NAME = "temp"
SECTION_ALIAS = "s"
SECTION_PREFIX = "__s_"
OVERRIDE_NAME = "goto_section"
EVENT_PREFIX = "event_"
HOOK_PREFIX = "hook_"
POST_OPTION_HOOK = "post_option"

_RESERVED_NAMES = frozenset({SCRATCH_NAME, SECTION_ALIAS, OVERRIDE_NAME})


def section_namespace(section_id: str) -> str:
    return f"{SECTION_PREFIX}{section_id}"


class ScriptContext:
    """Handle on the interpreter through which all story code runs.

    Story code sees a handful of names with fixed meaning:

    ``temp``
        scratch table, emptied every time a section is entered
    ``s``
        the current section's own table (``__s_<id>``), kept across visits;
        ``s.visits`` holds the visit count
    ``goto_section``
        set by option code to send the player somewhere other than the
        option's configured target
    ``event_<id>`` / ``hook_<id>``
        functions compiled from the document's events and hooks

    Host code goes through this class instead of spelling those names out.
    """

    def __init__(self, engine: ScriptEngine | None = None, rng: RNG | None = None) -> None:
        self.engine = engine if engine is not None else ScriptEngine()
        self.rng = rng if rng is not None else RNG()

    @property
    def is_ready(self) -> bool:
        return self.engine.is_ready

    def is_reserved(self, name: str) -> bool:
        """True for names the engine manages itself."""
        return name in _RESERVED_NAMES or name.startswith(SECTION_PREFIX)

    def evaluate(self, expression: str) -> ScriptValue:
        """Evaluate ``expression`` as a return-expression."""
        return self.engine.execute(f"return {expression}")

    def run(self, code: str) -> ScriptValue:
        return self.engine.execute(code)

    def install_helpers(self) -> ScriptValue:
        for name, function in dice_helpers(self.rng).items():
            self.engine.register_callable(name, function)
        return self.engine.execute(CONTAINER_HELPERS)

    def reset_scratch(self) -> None:
        self.engine.new_table(SCRATCH_NAME)

    def clear_override(self) -> None:
        self.engine.set_global(OVERRIDE_NAME, None)

    def take_override(self) -> str | None:
        """Return the pending navigation override, if any, and clear it."""
        value = self.engine.get_global(OVERRIDE_NAME)
        self.clear_override()
        if not value.as_bool():
            return None
        return value.as_text() or None

    def create_section_namespace(self, section_id: str, initial: Mapping[str, object]) -> None:
        self.engine.set_global(section_namespace(section_id), dict(initial))

    def enter_section(self, section_id: str, visits: int) -> None:
        """Prepare the namespace for a section's run code."""
        namespace = section_namespace(section_id)
        self.reset_scratch()
        self.engine.ensure_table(namespace)
        self.engine.alias_global(SECTION_ALIAS, namespace)
        self.engine.set_field(namespace, "visits", visits)

    def define_event(self, event: EventDef) -> ScriptValue:
        return self.engine.define_function(f"{EVENT_PREFIX}{event.id}", event.params, event.run)

    def define_hook(self, hook: HookDef) -> ScriptValue:
        return self.engine.define_function(f"{HOOK_PREFIX}{hook.id}", (), hook.run)

    def call_event(self, event_id: str, *args: object) -> ScriptValue:
        return self.engine.call_function(f"{EVENT_PREFIX}{event_id}", *args)

    def run_hook(self, hook_id: str) -> ScriptValue | None:
        """Call ``hook_<id>`` if story code defined it; None when there is no such hook."""
        name = f"{HOOK_PREFIX}{hook_id}"
        if not self.engine.is_function(name):
            return None
        return self.engine.call_function(name)
