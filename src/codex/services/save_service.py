"""Serialization helpers for manual save/load."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Mapping

from codex.services.errors import NavigationError, ParseError, SaveLoadError
from codex.services.session import SectionView, StorySession

SavePayload = Dict[str, Any]

# JSON object keys are strings; tables with other keys are stored as
# {TABLE_TAG: [[key, value], ...]}.
TABLE_TAG = "__table__"


class SaveService:
    """Converts a running session to/from a validated, versioned payload.

    Only the story's declared globals and the current section are stored;
    visit counts and hidden options start fresh after a load.
    """

    SAVE_VERSION = 1

    def serialize(self, session: StorySession) -> SavePayload:
        """Return a JSON-serializable payload for disk persistence."""
        section = session.current_section
        if section is None:
            raise SaveLoadError("Nothing to save: the session has not entered a section.")
        story = session.story
        return {
            "save_version": self.SAVE_VERSION,
            "metadata": {
                "title": story.title,
                "section_id": section.id,
                "section_title": section.title,
                "saved_at": datetime.now(timezone.utc).isoformat(),
            },
            "state": {
                "section_id": section.id,
                "vars": {name: encode_value(value) for name, value in story.get_state().items()},
            },
        }

    def deserialize(self, session: StorySession, payload: Mapping[str, Any]) -> SectionView:
        """Reload the story, enter the saved section, then restore the saved globals.

        Globals are restored after the section's run code so the saved values win.
        """
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Save data must be a JSON object.")
        if payload.get("save_version") != self.SAVE_VERSION:
            raise SaveLoadError("Save format is not supported by this version.")
        state_payload = payload.get("state")
        if not isinstance(state_payload, Mapping):
            raise SaveLoadError("Save data is missing required sections.")
        section_id = state_payload.get("section_id")
        if not isinstance(section_id, str):
            raise SaveLoadError("state.section_id must be a string.")
        saved_vars = state_payload.get("vars")
        if not isinstance(saved_vars, Mapping):
            raise SaveLoadError("state.vars must be an object.")
        try:
            restored_vars = {name: decode_value(value) for name, value in saved_vars.items()}
        except ValueError as exc:
            raise SaveLoadError(f"Invalid saved variable: {exc}") from exc

        try:
            session.start(section_id)
        except NavigationError as exc:
            raise SaveLoadError(f"Saved section no longer exists: {section_id}") from exc
        except ParseError as exc:
            raise SaveLoadError(f"Unable to reload story: {exc}") from exc
        try:
            session.story.set_state(restored_vars)
        except TypeError as exc:
            raise SaveLoadError(f"Invalid saved variable: {exc}") from exc
        return session.view()


def encode_value(value: Any) -> Any:
    """Make a story value JSON-safe without losing the type of table keys."""
    if isinstance(value, list):
        return [encode_value(item) for item in value]
    if isinstance(value, dict):
        if all(isinstance(key, str) for key in value) and TABLE_TAG not in value:
            return {key: encode_value(item) for key, item in value.items()}
        return {TABLE_TAG: [[key, encode_value(item)] for key, item in value.items()]}
    return value


def decode_value(value: Any) -> Any:
    """Inverse of :func:`encode_value`."""
    if isinstance(value, list):
        return [decode_value(item) for item in value]
    if isinstance(value, dict):
        if set(value) == {TABLE_TAG}:
            pairs = value[TABLE_TAG]
            if not isinstance(pairs, list) or not all(isinstance(pair, list) and len(pair) == 2 for pair in pairs):
                raise ValueError(f"{TABLE_TAG} must hold [key, value] pairs.")
            return {_decode_key(key): decode_value(item) for key, item in pairs}
        return {key: decode_value(item) for key, item in value.items()}
    return value


def _decode_key(key: Any) -> Any:
    if isinstance(key, (list, dict)) or key is None:
        raise ValueError(f"Invalid table key in save data: {key!r}")
    return key
