"""Numbered save slots on disk, one JSON payload per slot."""
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping

from codex.presentation.cli import config
from codex.services import SaveLoadError


@dataclass(frozen=True, slots=True)
class SlotSummary:
    """What the load menu shows for one slot, read from the payload metadata."""

    slot: int
    exists: bool = False
    is_corrupt: bool = False
    story_title: str | None = None
    section_title: str | None = None
    saved_at: datetime | None = None

    @property
    def label(self) -> str:
        if not self.exists:
            return "(empty)"
        if self.is_corrupt:
            return "(unreadable)"
        stamp = self.saved_at.strftime("%Y-%m-%d %H:%M") if self.saved_at else "unknown time"
        return f"{self.story_title or 'Untitled'}: {self.section_title or '?'} ({stamp})"


class SaveSlotStore:
    """Reads and writes save payloads in ``slot_<n>.json`` files."""

    def __init__(self, base_dir: Path | str | None = None, slot_count: int = 3) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else config.get_save_dir()
        self._slot_count = slot_count

    @property
    def slot_count(self) -> int:
        return self._slot_count

    def list_slots(self) -> List[SlotSummary]:
        summaries: List[SlotSummary] = []
        for slot in range(1, self._slot_count + 1):
            if not self._slot_path(slot).exists():
                summaries.append(SlotSummary(slot=slot))
                continue
            try:
                payload = self.read_slot(slot)
            except SaveLoadError:
                summaries.append(SlotSummary(slot=slot, exists=True, is_corrupt=True))
                continue
            summaries.append(_summarize(slot, payload))
        return summaries

    def slot_exists(self, slot: int) -> bool:
        self._validate_slot(slot)
        return self._slot_path(slot).exists()

    def read_slot(self, slot: int) -> Dict[str, Any]:
        """Return the payload stored in ``slot``; unreadable files raise SaveLoadError."""
        self._validate_slot(slot)
        path = self._slot_path(slot)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise SaveLoadError(f"Slot {slot} could not be read: {exc}") from exc
        if not isinstance(payload, dict):
            raise SaveLoadError(f"Slot {slot} does not hold a save payload.")
        return payload

    def write_slot(self, slot: int, payload: Mapping[str, Any]) -> None:
        self._validate_slot(slot)
        try:
            text = json.dumps(payload, indent=2, sort_keys=True)
            self._base_dir.mkdir(parents=True, exist_ok=True)
            self._slot_path(slot).write_text(text, encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            raise SaveLoadError(f"Slot {slot} could not be written: {exc}") from exc

    def _slot_path(self, slot: int) -> Path:
        return self._base_dir / f"slot_{slot}.json"

    def _validate_slot(self, slot: int) -> None:
        if not 1 <= slot <= self._slot_count:
            raise ValueError(f"Slot index must be between 1 and {self._slot_count}.")


def _summarize(slot: int, payload: Mapping[str, Any]) -> SlotSummary:
    metadata = payload.get("metadata")
    if not isinstance(metadata, dict):
        return SlotSummary(slot=slot, exists=True, is_corrupt=True)
    return SlotSummary(
        slot=slot,
        exists=True,
        story_title=_text_or_none(metadata.get("title")),
        section_title=_text_or_none(metadata.get("section_title")),
        saved_at=_parse_timestamp(metadata.get("saved_at")),
    )


def _text_or_none(value: object) -> str | None:
    return value if isinstance(value, str) else None


def _parse_timestamp(value: object) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None
