"""Play-time state cells kept apart from the parsed structure."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SectionState:
    """Visit counter for one section. Only ever incremented."""

    visits: int = 0

    def record_visit(self) -> int:
        self.visits += 1
        return self.visits


@dataclass
class OptionState:
    """Mutable visibility of one option."""

    hidden: bool = False
