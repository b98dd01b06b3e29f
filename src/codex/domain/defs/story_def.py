"""Story definition structures parsed from a story document."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Tuple

RESTART_TARGET = "restart"
SELF_TARGET = "self"

# Scalars, or (possibly nested) sequences and mappings of scalars.
VarValue = object


@dataclass(frozen=True, slots=True)
class OptionDef:
    """A transition from its owning section to a target section."""

    id: str
    text: str
    target: str
    condition: str | None = None
    run: str | None = None
    notify: str | None = None
    flags: FrozenSet[str] = frozenset()
    hidden: bool = False


@dataclass(frozen=True, slots=True)
class SectionDef:
    """A narrative state with its options in document order."""

    id: str
    title: str
    text: str
    run: str | None = None
    vars: Dict[str, VarValue] = field(default_factory=dict)
    options: Dict[str, OptionDef] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class EventDef:
    """Host-triggerable handler with named parameters."""

    id: str
    params: Tuple[str, ...] = ()
    run: str = ""


@dataclass(frozen=True, slots=True)
class HookDef:
    """Zero-argument handler called at a lifecycle point."""

    id: str
    run: str = ""


@dataclass(frozen=True, slots=True)
class StoryDef:
    """Fully parsed story document."""

    title: str
    sections: Dict[str, SectionDef]
    author: str | None = None
    version: str | None = None
    vars: Dict[str, VarValue] = field(default_factory=dict)
    init: str | None = None
    events: Dict[str, EventDef] = field(default_factory=dict)
    hooks: Dict[str, HookDef] = field(default_factory=dict)

    @property
    def var_names(self) -> List[str]:
        return list(self.vars.keys())
