"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
import textwrap
from typing import Mapping, Sequence

from codex.services.session import SectionView

DEFAULT_WIDTH = 78


def debug_enabled() -> bool:
    """Return True only when CODEX_DEBUG is explicitly set to '1'."""
    return os.getenv("CODEX_DEBUG") == "1"


def niceify(identifier: str) -> str:
    """Turn an id such as ``cave_entry`` into ``Cave Entry``."""
    return " ".join(word[:1].upper() + word[1:].lower() for word in identifier.split("_") if word)


def wrap_paragraphs(text: str, width: int = DEFAULT_WIDTH) -> list[str]:
    """
    Wrap story text to ``width`` columns.

    Blank lines separate paragraphs and are preserved; single newlines inside a
    paragraph are kept as line breaks, matching how stories lay out verse and
    lists.
    """
    lines: list[str] = []
    for raw_line in text.rstrip().split("\n"):
        if not raw_line.strip():
            lines.append("")
            continue
        lines.extend(
            textwrap.wrap(raw_line, width=width, break_long_words=False, break_on_hyphens=False)
        )
    return lines


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_section(view: SectionView) -> None:
    """Render a section's title, text and numbered options."""
    title = view.title if view.title != view.section_id else niceify(view.section_id)
    render_heading(title)
    if debug_enabled():
        print(f"[{view.section_id}]")
    for line in wrap_paragraphs(view.text):
        print(line)
    render_choices([text for _, text in view.options])


def render_choices(choices: Sequence[str]) -> None:
    """Display numbered story choices."""
    if not choices:
        return
    print()
    for idx, label in enumerate(choices, start=1):
        print(f"{idx}. {label}")


def render_notice(message: str) -> None:
    """Print a boxed notification (option notify text, event results)."""
    lines = wrap_paragraphs(message, DEFAULT_WIDTH - 4)
    if not lines:
        return
    inner = max(len(line) for line in lines)
    print("+" + "-" * (inner + 2) + "+")
    for line in lines:
        print(f"| {line.ljust(inner)} |")
    print("+" + "-" * (inner + 2) + "+")


def render_globals(values: Mapping[str, object]) -> None:
    """Debug sheet of story globals."""
    render_heading("Globals")
    for name in sorted(values):
        print(f"- {name}: {values[name]!r}")
