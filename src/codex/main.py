"""Entry-point for launching the CLI application."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from codex.data.paths import resolve_story_path
from codex.presentation.cli import app, config
from codex.presentation.cli.save_slots import SaveSlotStore
from codex.services import NavigationError, ParseError, StorySession
from codex.services.story_graph_validator import format_issue, has_errors, validate_story_graph


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI presentation layer."""
    user_config = config.load_config()
    parser = argparse.ArgumentParser(prog="codex", description="Play a Codex story in the terminal.")
    parser.add_argument(
        "story",
        nargs="?",
        default=user_config["default_story"],
        help="Story file, or the name of a bundled story (default: %(default)s)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for dice rolls")
    parser.add_argument("--validate", action="store_true", help="Check the story graph and exit")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    story_path = resolve_story_path(args.story)
    try:
        session = StorySession.from_file(story_path, seed=args.seed)
    except ParseError as exc:
        print(f"Unable to load story: {exc}", file=sys.stderr)
        return 1

    if args.validate:
        issues = validate_story_graph(session.definition)
        for issue in issues:
            print(format_issue(issue))
        return 1 if has_errors(issues) else 0

    try:
        session.start()
    except (ParseError, NavigationError) as exc:
        print(f"Unable to start story: {exc}", file=sys.stderr)
        return 1
    app.run(session, SaveSlotStore(slot_count=user_config["slot_count"]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
