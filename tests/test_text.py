import logging

from tests.helpers.story_docs import make_story


def test_replace_vars_expands_expressions() -> None:
    story = make_story()

    assert story.replace_vars("{1+1}") == "2"
    assert story.replace_vars("Hello {name}!") == "Hello Tess!"
    assert story.replace_vars("{#equip} items: {equip}") == "2 items: rope, knife"
    assert story.replace_vars("lit={lit}") == "lit=false"


def test_replace_vars_unknown_name_is_empty() -> None:
    story = make_story()
    assert story.replace_vars("[{no_such_var}]") == "[]"


def test_replace_vars_error_renders_empty_and_continues(caplog) -> None:
    story = make_story()

    with caplog.at_level(logging.ERROR):
        text = story.replace_vars("{error('bad')}after {gold}")

    assert text == "after 5"
    assert "Error evaluating expression" in caplog.text


def test_replace_vars_without_placeholders_is_unchanged() -> None:
    story = make_story()
    assert story.replace_vars("Plain text.") == "Plain text."


def test_replace_vars_sees_current_values() -> None:
    story = make_story()
    story.set_global("gold", 12)
    assert story.replace_vars("{gold}") == "12"
