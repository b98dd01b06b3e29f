import logging
from pathlib import Path

import pytest

from codex.core.rng import RNG
from codex.script import ScriptEngine
from codex.services import ParseError, Story
from tests.helpers.story_docs import base_document, make_story


class _CountingEngine(ScriptEngine):
    def __init__(self) -> None:
        super().__init__()
        self.calls: list[str] = []

    def call_function(self, name: str, *args: object):
        self.calls.append(name)
        return super().call_function(name, *args)


def test_parse_exposes_metadata() -> None:
    story = make_story()

    assert story.title == "Test Story"
    assert story.vars == ("gold", "name", "lit", "equip")
    assert story.events == frozenset({"use_item", "broken"})
    assert story.hooks == frozenset()
    assert list(story.sections) == ["start", "hall"]
    assert story.start_section_id == "start"


def test_sections_mapping_is_read_only() -> None:
    story = make_story()
    with pytest.raises(TypeError):
        story.sections["extra"] = story.get_section("start")


def test_init_runs_after_globals() -> None:
    story = make_story()
    assert story.get_global("gold_start") == 5


def test_parse_rejects_invalid_document() -> None:
    document = base_document()
    document["sections"]["start"]["options"]["north"] = ["Go north"]
    with pytest.raises(ParseError):
        make_story(document)


def test_parse_rejects_failing_init() -> None:
    document = base_document()
    document["init"] = "error('init failed')"
    with pytest.raises(ParseError, match="init failed"):
        make_story(document)


def test_parse_rejects_event_with_syntax_error() -> None:
    document = base_document()
    document["events"]["typo"] = {"run": "return +"}
    with pytest.raises(ParseError, match="typo"):
        make_story(document)


def test_parse_requires_live_engine() -> None:
    engine = ScriptEngine()
    engine.close()
    with pytest.raises(ParseError, match="Lua VM not initialized"):
        Story.parse(base_document(), engine=engine)


def test_state_round_trip() -> None:
    story = make_story()
    story.context.run("gold = 9\ninsert(equip, 'map')\nlit = true")

    state = story.get_state()

    assert state == {"gold": 9, "name": "Tess", "lit": True, "equip": ["rope", "knife", "map"]}

    fresh = make_story()
    fresh.set_state(state)

    assert fresh.get_state() == state


def test_set_state_ignores_undeclared_names() -> None:
    story = make_story()
    story.set_state({"gold": 1, "intruder": "x"})

    assert story.get_global("gold") == 1
    assert story.get_global("intruder") is None


def test_get_globals_hides_reserved_names() -> None:
    story = make_story()
    story.get_section("hall").visit()

    values = story.get_globals()

    assert values["gold"] == 5
    assert values["gold_start"] == 5
    assert "temp" not in values
    assert "s" not in values
    assert not any(name.startswith("__s_") for name in values)
    assert "contains" not in values
    assert "event_use_item" not in values


def test_trigger_calls_event_handler() -> None:
    story = make_story()

    assert story.trigger("use_item", "rope") == "used rope"
    assert story.trigger("use_item", "lamp") == "missing lamp"


def test_trigger_undeclared_event_skips_interpreter(caplog) -> None:
    engine = _CountingEngine()
    story = Story.parse(base_document(), engine=engine)

    with caplog.at_level(logging.WARNING):
        message = story.trigger("nonexistent")

    assert message == "Unable to trigger event: nonexistent"
    assert engine.calls == []
    assert "nonexistent" in caplog.text


def test_trigger_error_is_reported() -> None:
    story = make_story()
    message = story.trigger("broken")
    assert message.startswith("Event broken failed:")
    assert "event exploded" in message


def test_helpers_work_on_tables() -> None:
    story = make_story()
    context = story.context

    assert context.evaluate("contains(equip, 'rope')").data is True
    context.run("insert(equip, 'rope')")
    assert context.evaluate("count(equip, 'rope')").data == 2
    context.run("remove(equip, 'knife')")
    assert story.get_global("equip") == ["rope", "rope"]
    context.run("remove_all(equip, 'rope')")
    assert story.get_global("equip") == []


def test_dice_follow_seed() -> None:
    story_a = make_story(seed=3)
    story_b = make_story(seed=3)
    rolls_a = [story_a.context.evaluate("dice(3, 6, 2)").data for _ in range(5)]
    rolls_b = [story_b.context.evaluate("dice(3, 6, 2)").data for _ in range(5)]

    assert rolls_a == rolls_b
    assert all(5 <= roll <= 20 for roll in rolls_a)

    story = Story.parse(base_document(), rng=RNG(1))
    assert 1 <= story.context.evaluate("d(4)").data <= 4


def test_invalid_dice_is_an_error_value() -> None:
    story = make_story()
    assert story.context.evaluate("d(0)").is_error


def test_load_reads_yaml_file(tmp_path: Path) -> None:
    story_file = tmp_path / "tiny.yaml"
    story_file.write_text(
        "title: Tiny\nvars:\n  coins: 3\nsections:\n  start:\n    text: You have {coins} coins.\n",
        encoding="utf-8",
    )

    story = Story.load(story_file)

    assert story.title == "Tiny"
    assert story.replace_vars(story.definition.sections["start"].text) == "You have 3 coins."


def test_load_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ParseError):
        Story.load(tmp_path / "missing.yaml")


def test_state_round_trip_keeps_sparse_tables() -> None:
    story = make_story()
    story.context.run("equip = {}\nequip[2] = 'axe'\nequip[5] = 'rope'")

    state = story.get_state()
    assert state["equip"] == {2: "axe", 5: "rope"}

    story.set_state(state)

    assert story.context.evaluate("equip[2]").data == "axe"
    assert story.context.evaluate("equip[5]").data == "rope"
    assert story.get_state() == state


def test_invalid_utf8_never_breaks_rendering_or_state() -> None:
    story = make_story()
    story.context.run("temp.bag = { string.char(200) }\nequip = { string.char(255) }")

    assert story.replace_vars("Bag: {temp.bag}") == "Bag: \ufffd"
    assert story.get_state()["equip"] == ["\ufffd"]
    assert story.get_globals()["equip"] == ["\ufffd"]
