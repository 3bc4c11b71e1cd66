import math

import pytest

from pubconfig.editor import (
    BooleanEditor,
    DocumentModel,
    PrimitiveEditor,
    ValidationError,
    create_value_editor,
    parse_number,
    registered_editor_kinds,
)


def test_every_value_kind_has_a_registered_editor() -> None:
    assert registered_editor_kinds() == ["array", "boolean", "object", "primitive"]


def test_create_value_editor_dispatches_on_classification() -> None:
    document = DocumentModel({"flag": True, "count": 3, "name": None})

    assert isinstance(create_value_editor(document, ("flag",)), BooleanEditor)
    assert isinstance(create_value_editor(document, ("count",)), PrimitiveEditor)
    assert isinstance(create_value_editor(document, ("name",)), PrimitiveEditor)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("", 0),
        ("  ", 0),
        ("42", 42),
        ("-7", -7),
        ("2.5", 2.5),
        ("1e3", 1000.0),
        (".5", 0.5),
        ("Infinity", math.inf),
        ("-Infinity", -math.inf),
    ],
)
def test_parse_number_follows_numeric_input_semantics(raw, expected) -> None:
    result = parse_number(raw)

    assert result == expected
    assert type(result) is type(expected)


def test_parse_number_yields_nan_for_unparseable_text() -> None:
    assert math.isnan(parse_number("12abc"))
    assert math.isnan(parse_number("abc"))


def test_numeric_field_stays_numeric_after_edit() -> None:
    document = DocumentModel({"maxAds": 4})
    editor = PrimitiveEditor(document, ("maxAds",))

    editor.on_input("12")

    assert document.root["maxAds"] == 12
    assert editor.render().attrs["input_type"] == "number"


def test_numeric_field_stores_nan_for_garbage_input() -> None:
    document = DocumentModel({"maxAds": 4})
    editor = PrimitiveEditor(document, ("maxAds",))

    editor.handle("input", {"value": "not a number"})

    assert math.isnan(document.root["maxAds"])
    assert editor.render().value == "NaN"


def test_text_field_keeps_digits_as_text() -> None:
    document = DocumentModel({"publisherId": "pub-1"})
    editor = PrimitiveEditor(document, ("publisherId",))

    editor.on_input("123")

    assert document.root["publisherId"] == "123"
    assert editor.render().attrs["input_type"] == "text"


def test_null_renders_as_empty_text_and_is_replaced_by_typed_text() -> None:
    document = DocumentModel({"notes": None})
    editor = PrimitiveEditor(document, ("notes",))

    assert editor.render().value == ""
    assert editor.input_type == "text"

    editor.on_input("first note")
    assert document.root["notes"] == "first note"


def test_boolean_editor_writes_only_on_change() -> None:
    document = DocumentModel({"enabled": False})
    editor = BooleanEditor(document, ("enabled",))
    changes: list[tuple] = []
    document.subscribe(changes.append)

    assert editor.handle("select", {"value": "false"}) is False
    assert changes == []

    assert editor.handle("select", {"value": "true"}) is True
    assert document.root["enabled"] is True
    assert changes == [("enabled",)]


def test_boolean_editor_renders_exactly_one_checked_option() -> None:
    document = DocumentModel({"enabled": True})
    widget = BooleanEditor(document, ("enabled",)).render()

    options = widget.attrs["options"]
    assert [option["label"] for option in options] == ["True", "False"]
    assert [option["checked"] for option in options] == [True, False]


def test_boolean_editor_rejects_unknown_choice() -> None:
    document = DocumentModel({"enabled": True})
    editor = BooleanEditor(document, ("enabled",))

    with pytest.raises(ValidationError):
        editor.handle("select", {"value": "maybe"})
    assert document.root["enabled"] is True


def test_unsupported_action_is_a_validation_error() -> None:
    document = DocumentModel({"count": 1})
    editor = PrimitiveEditor(document, ("count",))

    with pytest.raises(ValidationError, match="Unsupported action"):
        editor.handle("toggle", {})
