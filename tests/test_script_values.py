import pytest

from codex.script import ScriptEvaluationError, ScriptValue, ValueKind
from codex.script.values import format_number


def test_of_tags_plain_values() -> None:
    assert ScriptValue.of(None).kind is ValueKind.NIL
    assert ScriptValue.of(True).kind is ValueKind.BOOL
    assert ScriptValue.of(3).kind is ValueKind.NUMBER
    assert ScriptValue.of(2.5).kind is ValueKind.NUMBER
    assert ScriptValue.of("x").kind is ValueKind.STRING
    assert ScriptValue.of(["a"]).kind is ValueKind.SEQUENCE
    assert ScriptValue.of({"a": 1}).kind is ValueKind.MAPPING


def test_of_rejects_foreign_objects() -> None:
    with pytest.raises(TypeError):
        ScriptValue.of(object())


def test_as_bool_follows_lua_truthiness() -> None:
    assert ScriptValue.of(0).as_bool() is True
    assert ScriptValue.of("").as_bool() is True
    assert ScriptValue.of([]).as_bool() is True
    assert ScriptValue.of(False).as_bool() is False
    assert ScriptValue.nil().as_bool() is False
    assert ScriptValue.error("boom").as_bool() is False


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, ""),
        (True, "true"),
        (False, "false"),
        (2, "2"),
        (2.0, "2"),
        (0.5, "0.5"),
        (1 / 3, "0.33333333333333"),
        ("text", "text"),
        (["rope", "knife"], "rope, knife"),
        ({"hp": 3}, "hp=3"),
    ],
)
def test_as_text(value, expected) -> None:
    assert ScriptValue.of(value).as_text() == expected


def test_error_marker() -> None:
    value = ScriptValue.error("boom")

    assert value.is_error
    assert value.message == "boom"
    assert value.as_text() == ""
    assert value.to_python() is None
    with pytest.raises(ScriptEvaluationError):
        value.unwrap()


def test_unwrap_returns_data() -> None:
    assert ScriptValue.of([1, 2]).unwrap() == [1, 2]
    assert ScriptValue.of(7).message == ""


def test_format_number_special_values() -> None:
    assert format_number(float("inf")) == "inf"
    assert format_number(float("-inf")) == "-inf"
    assert format_number(float("nan")) == "nan"


def test_as_text_mapping_with_typed_keys() -> None:
    assert ScriptValue.of({2: "axe", True: "yes"}).as_text() == "2=axe, true=yes"
