from pathlib import Path

import pytest

from codex.data.document_loader import load_document, parse_document
from codex.data.errors import DataLoadError, DataValidationError
from codex.data.repositories import StoryRepository, parse_option, parse_section, parse_story
from tests.helpers.story_docs import base_document


def test_parse_story_builds_definitions() -> None:
    story = parse_story(base_document())

    assert story.title == "Test Story"
    assert list(story.sections) == ["start", "hall"]
    assert story.var_names == ["gold", "name", "lit", "equip"]
    assert story.events["use_item"].params == ("item",)
    assert story.init == "gold_start = gold"


def test_parse_story_defaults_title_and_stringifies_version() -> None:
    document = base_document()
    del document["title"]
    document["version"] = 1.5
    document["author"] = "Someone"

    story = parse_story(document)

    assert story.title == "Untitled Story"
    assert story.version == "1.5"
    assert story.author == "Someone"


def test_parse_story_requires_sections() -> None:
    document = base_document()
    del document["sections"]
    with pytest.raises(DataValidationError):
        parse_story(document)


def test_parse_story_rejects_non_mapping() -> None:
    with pytest.raises(DataValidationError):
        parse_story(["not", "a", "story"])


def test_numeric_section_ids_become_strings() -> None:
    document = base_document()
    document["sections"][12] = {"text": "Twelve.", "options": {"back": ["Back", "start"]}}

    story = parse_story(document)

    assert "12" in story.sections
    assert story.sections["12"].id == "12"


def test_parse_option_pair_form() -> None:
    option = parse_option("go", ["Go", "hall"], "start")

    assert option.text == "Go"
    assert option.target == "hall"
    assert option.condition is None
    assert option.flags == frozenset()
    assert option.hidden is False


@pytest.mark.parametrize("target", [None, "", "self"])
def test_parse_option_missing_or_self_target_is_owner(target) -> None:
    raw = {"text": "Stay"}
    if target is not None:
        raw["goto"] = target
    option = parse_option("stay", raw, "cave_entry")
    assert option.target == "cave_entry"


def test_parse_option_record_form() -> None:
    option = parse_option(
        "search",
        {
            "text": "Search",
            "goto": "hall",
            "if": "not searched",
            "run": "searched = true",
            "notify": "Found {gold}",
            "flags": ["once"],
            "hidden": True,
        },
        "start",
    )

    assert option.condition == "not searched"
    assert option.run == "searched = true"
    assert option.notify == "Found {gold}"
    assert option.flags == frozenset({"once"})
    assert option.hidden is True


def test_parse_option_rejects_bad_pair() -> None:
    with pytest.raises(DataValidationError):
        parse_option("bad", ["only text"], "start")


def test_parse_option_requires_text() -> None:
    with pytest.raises(DataValidationError):
        parse_option("bad", {"goto": "hall"}, "start")


def test_parse_section_requires_text() -> None:
    with pytest.raises(DataValidationError):
        parse_section("empty", {"title": "No text"})


def test_event_names_must_be_identifiers() -> None:
    document = base_document()
    document["events"]["not valid"] = {"run": "return 1"}
    with pytest.raises(DataValidationError):
        parse_story(document)


def test_var_values_must_be_plain_data() -> None:
    document = base_document()
    document["vars"]["when"] = object()
    with pytest.raises(DataValidationError):
        parse_story(document)


def test_load_document_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DataLoadError):
        load_document(tmp_path / "missing.yaml")


def test_parse_document_invalid_yaml() -> None:
    with pytest.raises(DataLoadError):
        parse_document("sections: [unclosed", source="broken.yaml")


def test_parse_document_accepts_json() -> None:
    assert parse_document('{"title": "Json", "sections": {}}') == {"title": "Json", "sections": {}}


def test_story_repository_reads_file(tmp_path: Path) -> None:
    story_file = tmp_path / "tiny.yaml"
    story_file.write_text(
        "title: Tiny\n"
        "sections:\n"
        "  start:\n"
        "    text: Hi.\n"
        "    options:\n"
        "      loop: [Again, self]\n",
        encoding="utf-8",
    )
    repo = StoryRepository(story_file)

    assert repo.load().title == "Tiny"
    assert repo.load().sections["start"].options["loop"].target == "start"
    assert repo.load() is repo.load()
