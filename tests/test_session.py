import pytest

from codex.data.repositories import parse_story
from codex.services import NavigationError, StorySession
from tests.helpers.story_docs import base_document, with_section


def _session(document: dict | None = None, seed: int = 7) -> StorySession:
    return StorySession(parse_story(document if document is not None else base_document()), seed=seed)


def test_start_enters_start_section() -> None:
    session = _session()

    view = session.start()

    assert view.section_id == "start"
    assert view.title == "Start"
    assert view.text == "Hello Tess, you have 5 gold."
    assert view.options == [("north", "Go north"), ("stay", "Wait a moment")]
    assert session.current_section.visits == 1


def test_choose_follows_target() -> None:
    session = _session()
    session.start()

    result = session.choose("north")

    assert result.target_id == "hall"
    assert result.view.section_id == "hall"
    assert not result.restarted


def test_choose_self_revisits_section() -> None:
    session = _session()
    session.start()

    result = session.choose("stay")

    assert result.target_id == "start"
    assert session.current_section.visits == 2


def test_choose_unavailable_option_raises() -> None:
    session = _session()
    session.start()
    with pytest.raises(ValueError):
        session.choose("back")


def test_goto_unknown_section_keeps_current() -> None:
    session = _session()
    session.start()

    with pytest.raises(NavigationError) as excinfo:
        session.goto("nowhere")

    assert excinfo.value.section_id == "nowhere"
    assert session.current_section.id == "start"


def test_choose_missing_target_keeps_current() -> None:
    document = base_document()
    document["sections"]["start"]["options"]["void"] = ["Into the void", "void"]
    session = _session(document)
    session.start()

    with pytest.raises(NavigationError):
        session.choose("void")

    assert session.current_section.id == "start"


def test_restart_resets_story_state() -> None:
    document = with_section(
        "end",
        {"text": "The end.", "run": "gold = 100", "options": {"again": ["Again", "restart"]}},
    )
    document["sections"]["start"]["options"]["finish"] = ["Finish", "end"]
    session = _session(document)
    session.start()
    session.choose("finish")
    assert session.story.get_global("gold") == 100

    result = session.choose("again")

    assert result.restarted
    assert result.target_id == "restart"
    assert result.view.section_id == "start"
    assert session.story.get_global("gold") == 5
    assert session.story.get_section("end").visits == 0


def test_trigger_goes_through_story() -> None:
    session = _session()
    session.start()
    assert session.trigger("use_item", "knife") == "used knife"


def test_story_before_start_raises() -> None:
    session = _session()
    with pytest.raises(RuntimeError):
        session.story


def test_from_file_reads_story(tmp_path) -> None:
    story_file = tmp_path / "one.yaml"
    story_file.write_text("sections:\n  start:\n    text: Alone.\n", encoding="utf-8")

    session = StorySession.from_file(story_file, seed=1)

    assert session.seed == 1
    assert session.start().text == "Alone."
    assert session.story.title == "Untitled Story"


def test_start_unknown_section_keeps_running_game() -> None:
    session = _session()
    session.start()
    session.choose("north")
    story = session.story

    with pytest.raises(NavigationError):
        session.start("gone")

    assert session.story is story
    assert session.current_section.id == "hall"
    assert session.view().section_id == "hall"
