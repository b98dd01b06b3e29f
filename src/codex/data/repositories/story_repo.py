"""Repository for story documents."""
from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, FrozenSet, Mapping, Tuple

from codex.data.document_loader import load_document
from codex.data.errors import DataValidationError
from codex.domain.defs import (
    SELF_TARGET,
    EventDef,
    HookDef,
    OptionDef,
    SectionDef,
    StoryDef,
)

DEFAULT_TITLE = "Untitled Story"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_SCALAR_TYPES = (str, int, float, bool)


class StoryRepository:
    """Loads a story document and validates its structure."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._story: StoryDef | None = None

    def load(self) -> StoryDef:
        """Return the parsed story, reading the file on first use."""
        if self._story is None:
            self._story = parse_story(load_document(self._path))
        return self._story


def parse_story(raw: object) -> StoryDef:
    """Convert a raw document mapping into a StoryDef."""
    data = _require_mapping(raw, "story document")
    title = _optional_str(data.get("title"), "story title") or DEFAULT_TITLE
    author = _optional_text(data.get("author"), "story author")
    version = _optional_text(data.get("version"), "story version")
    story_vars = _parse_vars(data.get("vars"), "story vars")
    init = _optional_str(data.get("init"), "story init")
    events = _parse_events(data.get("events"))
    hooks = _parse_hooks(data.get("hooks"))

    raw_sections = _require_mapping(data.get("sections"), "story sections")
    sections: Dict[str, SectionDef] = {}
    for raw_id, section_payload in raw_sections.items():
        section_id = _require_id(raw_id, "section id")
        if section_id in sections:
            raise DataValidationError(f"Duplicate section id '{section_id}'.")
        sections[section_id] = parse_section(section_id, section_payload)

    return StoryDef(
        title=title,
        sections=sections,
        author=author,
        version=version,
        vars=story_vars,
        init=init,
        events=events,
        hooks=hooks,
    )


def parse_section(section_id: str, raw: object) -> SectionDef:
    context = f"section '{section_id}'"
    data = _require_mapping(raw, context)
    title = _optional_str(data.get("title"), f"{context} title") or ""
    text = _require_str(data.get("text"), f"{context} text")
    run = _optional_str(data.get("run"), f"{context} run")
    section_vars = _parse_vars(data.get("vars"), f"{context} vars")

    options: Dict[str, OptionDef] = {}
    raw_options = data.get("options")
    if raw_options is not None:
        for raw_option_id, option_payload in _require_mapping(raw_options, f"{context} options").items():
            option_id = _require_id(raw_option_id, f"{context} option id")
            options[option_id] = parse_option(option_id, option_payload, section_id)

    return SectionDef(
        id=section_id,
        title=title,
        text=text,
        run=run,
        vars=section_vars,
        options=options,
    )


def parse_option(option_id: str, raw: object, section_id: str) -> OptionDef:
    """Parse either the ``[text, goto]`` pair or the expanded record form."""
    context = f"option '{option_id}' in section '{section_id}'"
    if isinstance(raw, (list, tuple)):
        if len(raw) != 2:
            raise DataValidationError(f"{context} must be a [text, goto] pair.")
        text = _require_str(raw[0], f"{context} text")
        target = _resolve_target(raw[1], section_id, context)
        return OptionDef(id=option_id, text=text, target=target)

    data = _require_mapping(raw, context)
    text = _require_str(data.get("text"), f"{context} text")
    target = _resolve_target(data.get("goto"), section_id, context)
    hidden = data.get("hidden", False)
    if hidden is None:
        hidden = False
    if not isinstance(hidden, bool):
        raise DataValidationError(f"{context} hidden must be a boolean.")
    return OptionDef(
        id=option_id,
        text=text,
        target=target,
        condition=_optional_str(data.get("if"), f"{context} if"),
        run=_optional_str(data.get("run"), f"{context} run"),
        notify=_optional_str(data.get("notify"), f"{context} notify"),
        flags=_parse_flags(data.get("flags"), context),
        hidden=hidden,
    )


def _resolve_target(raw_target: object, section_id: str, context: str) -> str:
    if raw_target is None or raw_target == "":
        return section_id
    target = _require_id(raw_target, f"{context} goto")
    if target == SELF_TARGET:
        return section_id
    return target


def _parse_flags(raw_flags: object, context: str) -> FrozenSet[str]:
    if raw_flags is None:
        return frozenset()
    if not isinstance(raw_flags, list):
        raise DataValidationError(f"{context} flags must be a list if provided.")
    return frozenset(_require_str(flag, f"{context} flag") for flag in raw_flags)


def _parse_events(raw_events: object) -> Dict[str, EventDef]:
    if raw_events is None:
        return {}
    events: Dict[str, EventDef] = {}
    for raw_id, payload in _require_mapping(raw_events, "story events").items():
        event_id = _require_identifier(raw_id, "event id")
        context = f"event '{event_id}'"
        data = _require_mapping(payload, context)
        params = _parse_params(data.get("params"), context)
        run = _optional_str(data.get("run"), f"{context} run") or ""
        events[event_id] = EventDef(id=event_id, params=params, run=run)
    return events


def _parse_hooks(raw_hooks: object) -> Dict[str, HookDef]:
    if raw_hooks is None:
        return {}
    hooks: Dict[str, HookDef] = {}
    for raw_id, payload in _require_mapping(raw_hooks, "story hooks").items():
        hook_id = _require_identifier(raw_id, "hook id")
        data = _require_mapping(payload, f"hook '{hook_id}'")
        run = _optional_str(data.get("run"), f"hook '{hook_id}' run") or ""
        hooks[hook_id] = HookDef(id=hook_id, run=run)
    return hooks


def _parse_params(raw_params: object, context: str) -> Tuple[str, ...]:
    if raw_params is None:
        return ()
    if not isinstance(raw_params, list):
        raise DataValidationError(f"{context} params must be a list if provided.")
    return tuple(_require_identifier(param, f"{context} param") for param in raw_params)


def _parse_vars(raw_vars: object, context: str) -> Dict[str, object]:
    if raw_vars is None:
        return {}
    parsed: Dict[str, object] = {}
    for name, value in _require_mapping(raw_vars, context).items():
        var_name = _require_identifier(name, f"{context} name")
        _check_var_value(value, f"{context} '{var_name}'")
        parsed[var_name] = value
    return parsed


def _check_var_value(value: object, context: str) -> None:
    if value is None or isinstance(value, _SCALAR_TYPES):
        return
    if isinstance(value, list):
        for index, item in enumerate(value):
            _check_var_value(item, f"{context}[{index}]")
        return
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, (str, int)):
                raise DataValidationError(f"{context} keys must be strings or integers.")
            _check_var_value(item, f"{context}.{key}")
        return
    raise DataValidationError(f"{context} must be a scalar, list or mapping.")


def _require_mapping(value: object, context: str) -> Mapping[object, object]:
    if not isinstance(value, dict):
        raise DataValidationError(f"{context} must be an object/dict.")
    return value


def _require_str(value: object, context: str) -> str:
    if not isinstance(value, str):
        raise DataValidationError(f"{context} must be a string.")
    return value


def _optional_str(value: object, context: str) -> str | None:
    if value is None:
        return None
    return _require_str(value, context)


def _optional_text(value: object, context: str) -> str | None:
    # YAML reads "version: 1.2" as a float.
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return _require_str(value, context)


def _require_id(value: object, context: str) -> str:
    # YAML turns numbered keys such as "12:" into ints.
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    text = _require_str(value, context)
    if not text:
        raise DataValidationError(f"{context} must not be empty.")
    return text


def _require_identifier(value: object, context: str) -> str:
    text = _require_str(value, context)
    if not _IDENTIFIER.match(text):
        raise DataValidationError(f"{context} '{text}' is not a valid script identifier.")
    return text
