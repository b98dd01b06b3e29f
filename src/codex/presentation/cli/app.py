"""Console-driven play loop for Codex stories."""
from __future__ import annotations

import logging
from typing import Callable, List

from codex.services import NavigationError, SaveLoadError, SaveService, StorySession
from codex.presentation.cli.render import (
    debug_enabled,
    render_globals,
    render_heading,
    render_notice,
    render_section,
)
from codex.presentation.cli.save_slots import SaveSlotStore

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]

HELP_TEXT = (
    "Enter an option number to choose it.\n"
    "s <slot>  save the game\n"
    "l <slot>  load a saved game\n"
    "e <event> [args...]  trigger a story event\n"
    "g  show story globals\n"
    "q  quit"
)


def run(
    session: StorySession,
    store: SaveSlotStore,
    *,
    input_fn: InputFn = input,
    save_service: SaveService | None = None,
) -> None:
    """Play ``session`` until the player quits."""
    saves = save_service or SaveService()
    print(f"=== {session.story.title} ===")
    if session.story.author:
        print(f"by {session.story.author}")
    _show(session)
    while True:
        raw = input_fn("> ").strip()
        if not raw:
            continue
        if not _handle_command(session, store, saves, raw):
            break
    print("Goodbye!")


def _show(session: StorySession) -> None:
    render_section(session.view())
    if debug_enabled():
        render_globals(session.story.get_globals())


def _handle_command(session: StorySession, store: SaveSlotStore, saves: SaveService, raw: str) -> bool:
    """Apply one line of player input. Returns False when the player quits."""
    command, _, rest = raw.partition(" ")
    command = command.lower()
    if command in ("q", "quit"):
        return False
    if command in ("h", "help", "?"):
        print(HELP_TEXT)
    elif command == "s":
        _save(session, store, saves, rest)
    elif command == "l":
        _load(session, store, saves, rest)
    elif command == "e":
        _trigger(session, rest)
    elif command == "g":
        render_globals(session.story.get_globals())
    elif command.isdigit():
        _choose(session, int(command))
    else:
        print("Unknown command. Type 'h' for help.")
    return True


def _choose(session: StorySession, number: int) -> None:
    options = session.view().options
    if not 1 <= number <= len(options):
        print(f"Please enter a value between 1 and {len(options)}." if options else "There are no options here.")
        return
    option_id = options[number - 1][0]
    try:
        result = session.choose(option_id)
    except NavigationError as exc:
        print(f"That path leads nowhere ({exc.section_id}).")
        return
    if result.restarted:
        print("\nThe story begins again...")
    render_section(result.view)
    if result.notify_message:
        render_notice(result.notify_message)
    if debug_enabled():
        render_globals(session.story.get_globals())


def _trigger(session: StorySession, rest: str) -> None:
    tokens = rest.split()
    if not tokens:
        print("Usage: e <event> [args...]")
        return
    message = session.trigger(tokens[0], *parse_event_args(tokens[1:]))
    if message:
        render_notice(message)
    _show(session)


def _save(session: StorySession, store: SaveSlotStore, saves: SaveService, rest: str) -> None:
    slot = _parse_slot(store, rest)
    if slot is None:
        return
    try:
        store.write_slot(slot, saves.serialize(session))
    except SaveLoadError as exc:
        print(f"Save failed: {exc}")
        return
    print(f"Saved to slot {slot}.")


def _load(session: StorySession, store: SaveSlotStore, saves: SaveService, rest: str) -> None:
    if not rest.strip():
        render_heading("Save Slots")
        for entry in store.list_slots():
            print(f"{entry.slot}. {entry.label}")
        return
    slot = _parse_slot(store, rest)
    if slot is None:
        return
    if not store.slot_exists(slot):
        print(f"Slot {slot} is empty.")
        return
    try:
        payload = store.read_slot(slot)
        saves.deserialize(session, payload)
    except SaveLoadError as exc:
        logger.warning("Load from slot %d failed: %s", slot, exc)
        print(f"Load failed: {exc}")
        return
    print(f"Loaded slot {slot}.")
    _show(session)


def _parse_slot(store: SaveSlotStore, raw: str) -> int | None:
    try:
        slot = int(raw.strip())
    except ValueError:
        print(f"Please give a slot number between 1 and {store.slot_count}.")
        return None
    if not 1 <= slot <= store.slot_count:
        print(f"Please give a slot number between 1 and {store.slot_count}.")
        return None
    return slot


def parse_event_args(tokens: List[str]) -> List[object]:
    """Convert command-line words into Lua-friendly values."""
    args: List[object] = []
    for token in tokens:
        lowered = token.lower()
        if lowered in ("true", "false"):
            args.append(lowered == "true")
            continue
        try:
            args.append(int(token))
            continue
        except ValueError:
            pass
        try:
            args.append(float(token))
        except ValueError:
            args.append(token)
    return args
