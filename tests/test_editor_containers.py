import pytest

from pubconfig.editor import (
    ArrayEditor,
    DocumentEditor,
    DocumentModel,
    FieldController,
    ObjectEditor,
    PrimitiveEditor,
    ValidationError,
    item_template,
    zero_value_like,
)


def _aurora() -> dict:
    return {
        "publisherId": "pub-aurora",
        "aliasName": "Aurora Media",
        "pages": [{"pageType": "article", "selector": "#main", "enabled": True}],
        "publisherDashboard": True,
        "monitorDashboard": False,
        "qaStatusDashboard": True,
        "maxAds": 4,
        "tags": ["news", "sports"],
    }


def test_item_template_blanks_scalar_leaves_of_last_item() -> None:
    template = item_template([{"a": "x"}, {"pageType": "article", "count": 3, "ratio": 0.5, "on": True, "ids": [1]}])

    assert template == {"pageType": "", "count": 0, "ratio": 0.0, "on": False, "ids": [0]}
    assert item_template([]) == ""
    assert zero_value_like(None) is None


def test_array_add_item_appends_template_and_mounts_one_editor() -> None:
    document = DocumentModel(_aurora())
    editor = ArrayEditor(document, ("pages",))

    editor.add_item()

    assert len(document.root["pages"]) == 2
    assert document.root["pages"][1] == {"pageType": "", "selector": "", "enabled": False}
    assert len(editor.children) == len(editor) == 2
    assert [child.path for child in editor.children] == [("pages", 0), ("pages", 1)]


def test_array_remove_item_reindexes_editors() -> None:
    document = DocumentModel({"tags": ["news", "sports", "tech"]})
    editor = ArrayEditor(document, ("tags",))

    removed = editor.handle("remove_item", {"index": "0"})

    assert removed == "news"
    assert document.root["tags"] == ["sports", "tech"]
    assert [child.path for child in editor.children] == [("tags", 0), ("tags", 1)]
    assert editor.render().attrs["length"] == 2


def test_array_remove_from_middle_keeps_prefix_and_shifts_suffix() -> None:
    document = DocumentModel({"tags": ["news", "sports", "tech", "travel", "food"]})
    editor = ArrayEditor(document, ("tags",))

    removed = editor.handle("remove_item", {"index": 2})

    assert removed == "tech"
    assert document.root["tags"][:2] == ["news", "sports"]
    assert document.root["tags"][2:] == ["travel", "food"]
    assert [child.value for child in editor.children] == ["news", "sports", "travel", "food"]
    assert [child.path for child in editor.children][2:] == [("tags", 2), ("tags", 3)]


def test_array_remove_item_out_of_range_is_rejected() -> None:
    document = DocumentModel({"tags": ["news"]})
    editor = ArrayEditor(document, ("tags",))

    with pytest.raises(ValidationError, match="out of range"):
        editor.remove_item(3)
    with pytest.raises(ValidationError, match="must be an integer"):
        editor.handle("remove_item", {"index": "first"})
    assert document.root["tags"] == ["news"]


def test_empty_array_grows_with_empty_string_items() -> None:
    document = DocumentModel({"pages": []})
    editor = ArrayEditor(document, ("pages",))

    editor.add_item()

    assert document.root["pages"] == [""]
    assert isinstance(editor.children[0], PrimitiveEditor)


def test_object_items_inside_arrays_have_fixed_structure() -> None:
    document = DocumentModel(_aurora())
    editor = ArrayEditor(document, ("pages",))
    item = editor.children[0]

    assert isinstance(item, ObjectEditor)
    assert item.fixed_structure is True
    with pytest.raises(ValidationError):
        item.add_field("extra")
    with pytest.raises(ValidationError):
        item.remove_field("selector")
    assert all(not field.removable for field in item.children)
    assert item.render().find("add_field") is None


def test_field_controller_collapses_non_boolean_values_only() -> None:
    document = DocumentModel({"enabled": True, "tags": ["a"]})
    boolean_field = FieldController(document, ("enabled",))
    array_field = FieldController(document, ("tags",))

    assert boolean_field.collapsible is False
    assert boolean_field.collapsed is False
    assert boolean_field.toggle() is False

    assert array_field.collapsed is True
    assert array_field.toggle() is False
    assert array_field.render().attrs["collapsed"] is False


def test_field_controller_without_remove_handler_refuses_removal() -> None:
    document = DocumentModel({"name": "x"})
    field = FieldController(document, ("name",))

    assert field.removable is False
    with pytest.raises(ValidationError, match="cannot be removed"):
        field.handle("remove", {})


def test_object_add_field_validates_names() -> None:
    document = DocumentModel({"targeting": {"geo": "US"}})
    editor = ObjectEditor(document, ("targeting",))

    with pytest.raises(ValidationError, match="Field name cannot be empty"):
        editor.add_field("   ")
    with pytest.raises(ValidationError, match="Field already exists"):
        editor.add_field("geo")

    editor.add_field(" premium ", "boolean")
    assert document.root["targeting"] == {"geo": "US", "premium": False}
    assert [child.path for child in editor.children] == [("targeting", "geo"), ("targeting", "premium")]


def test_object_null_field_name_is_treated_as_empty() -> None:
    document = DocumentModel({"targeting": {"geo": "US"}})
    editor = ObjectEditor(document, ("targeting",))

    with pytest.raises(ValidationError, match="Field name cannot be empty"):
        editor.handle("add_field", {"key": None, "field_type": "number"})
    with pytest.raises(ValidationError, match="does not exist"):
        editor.handle("remove_field", {"key": None})

    assert document.root["targeting"] == {"geo": "US"}


def test_object_field_remove_control_deletes_key() -> None:
    document = DocumentModel({"targeting": {"geo": "US", "premium": True}})
    editor = ObjectEditor(document, ("targeting",))

    field = editor.find(("targeting", "geo"), "remove")
    assert isinstance(field, FieldController)
    field.handle("remove", {})

    assert document.root["targeting"] == {"premium": True}
    assert len(editor.children) == 1


def test_document_editor_splits_required_and_optional_fields() -> None:
    editor = DocumentEditor(DocumentModel(_aurora()))

    assert editor.required_keys() == [
        "publisherId",
        "aliasName",
        "pages",
        "publisherDashboard",
        "monitorDashboard",
        "qaStatusDashboard",
    ]
    assert editor.optional_keys() == ["maxAds", "tags"]

    widget = editor.render()
    required, optional = widget.children
    assert required.attrs["name"] == "required"
    assert all(row.attrs["removable"] is False for row in required.children)
    assert [row.label for row in optional.children if row.kind == "field"] == ["maxAds", "tags"]
    assert optional.children[-1].kind == "add_field"


def test_document_add_field_number_defaults_to_zero() -> None:
    document = DocumentModel(_aurora())
    editor = DocumentEditor(document)

    editor.add_field("foo", "number")

    assert document.root["foo"] == 0
    assert "foo" in editor.optional_keys()
    assert editor.find(("foo",), "remove") is not None


def test_document_add_field_reports_present_required_name_as_duplicate() -> None:
    document = DocumentModel(_aurora())
    editor = DocumentEditor(document)
    before = dict(document.root)

    with pytest.raises(ValidationError, match="Field already exists"):
        editor.add_field("publisherId")

    assert document.root == before


def test_document_add_field_reports_missing_required_name_as_manual_add() -> None:
    document = DocumentModel({"publisherId": "p"})
    editor = DocumentEditor(document)

    with pytest.raises(ValidationError, match="Cannot add a required field manually"):
        editor.add_field("pages", "array")
    assert "pages" not in document.root


def test_required_fields_cannot_be_removed() -> None:
    document = DocumentModel(_aurora())
    editor = DocumentEditor(document)

    with pytest.raises(ValidationError, match="Required fields cannot be removed"):
        editor.remove_field("pages")
    assert editor.find(("pages",), "remove").removable is False


def test_required_object_field_has_fixed_structure() -> None:
    document = DocumentModel({"publisherDashboard": {"url": "https://dash"}, "extra": {"a": 1}})
    editor = DocumentEditor(document)

    required_object = editor.find(("publisherDashboard",), "add_field")
    optional_object = editor.find(("extra",), "add_field")

    assert required_object.fixed_structure is True
    assert optional_object.fixed_structure is False


def test_custom_required_fields() -> None:
    document = DocumentModel({"id": "x", "other": 1})
    editor = DocumentEditor(document, required_fields=("id",))

    assert editor.required_keys() == ["id"]
    assert editor.optional_keys() == ["other"]
