"""HTML rendering of editor widget trees for the browser shell."""

from __future__ import annotations

from html import escape
import json
from typing import Callable

from pubconfig.editor.widgets import Widget


def render_widget_html(widget: Widget) -> str:
    renderer = _RENDERERS.get(widget.kind)
    if renderer is None:
        raise ValueError(f"No HTML renderer for widget kind '{widget.kind}'")
    return renderer(widget)


def _path_attr(widget: Widget) -> str:
    return escape(json.dumps(list(widget.path), ensure_ascii=False), quote=True)


def _children(widget: Widget) -> str:
    return "".join(render_widget_html(child) for child in widget.children)


def _render_document(widget: Widget) -> str:
    return f'<div class="form-document" data-path="{_path_attr(widget)}">{_children(widget)}</div>'


def _render_section(widget: Widget) -> str:
    name = escape(str(widget.attrs.get("name", "")), quote=True)
    title = escape(str(widget.attrs.get("title", "")))
    return (
        f'<div class="{name}-fields">'
        f'<h3 class="{name}-fields__header">{title}</h3>'
        f'<section class="{name}-fields__form-fields">{_children(widget)}</section>'
        "</div>"
    )


def _render_field(widget: Widget) -> str:
    path = _path_attr(widget)
    label = escape(widget.label or "")
    attrs = widget.attrs
    remove = (
        f'<button type="button" class="delete-button base-button" data-action="remove" '
        f'data-path="{path}" title="Remove Field">Remove Field</button>'
        if attrs.get("removable")
        else ""
    )

    if not attrs.get("collapsible"):
        return (
            f'<div class="form-field form-field--checkbox" data-path="{path}">'
            f'<label class="form-field-checkbox-label">{label}</label>'
            f"{_children(widget)}{remove}</div>"
        )

    collapsed = bool(attrs.get("collapsed"))
    toggle_class = "toggle-button base-button" + ("" if collapsed else " expanded")
    content_class = "form-field__content" + (" collapsed" if collapsed else "")
    return (
        f'<div class="form-field" data-path="{path}">'
        '<div class="form-field__header">'
        f'<button type="button" class="{toggle_class}" data-action="toggle" data-path="{path}">'
        '<span class="toggle-icon">&#9654;</span></button>'
        f'<label class="form-field__label">{label}</label>{remove}</div>'
        f'<div class="{content_class}">{_children(widget)}</div>'
        "</div>"
    )


def _render_primitive(widget: Widget) -> str:
    input_type = "number" if widget.attrs.get("input_type") == "number" else "text"
    value = escape(str(widget.value if widget.value is not None else ""), quote=True)
    return (
        f'<input class="form-field__input base-input" type="{input_type}" '
        f'value="{value}" data-action="input" data-path="{_path_attr(widget)}" />'
    )


def _render_boolean(widget: Widget) -> str:
    path = _path_attr(widget)
    options: list[str] = []
    for option in widget.attrs.get("options", []):
        checked = " checked" if option.get("checked") else ""
        value = "true" if option.get("value") else "false"
        options.append(
            '<label class="radio-option">'
            f'<input type="radio" name="bool-{path}" value="{value}" data-action="select" '
            f'data-path="{path}"{checked} />'
            f"<span>{escape(str(option.get('label', '')))}</span></label>"
        )
    return f'<div class="boolean-field"><div class="radio-group">{"".join(options)}</div></div>'


def _render_array(widget: Widget) -> str:
    path = _path_attr(widget)
    return (
        f'<div class="array-container" data-path="{path}">{_children(widget)}'
        f'<button type="button" class="add-button base-button" data-action="add_item" '
        f'data-path="{path}">+ Add Item</button></div>'
    )


def _render_array_item(widget: Widget) -> str:
    parent_path = escape(json.dumps(list(widget.path[:-1]), ensure_ascii=False), quote=True)
    index = int(widget.attrs.get("index", 0))
    return (
        '<div class="array-item">'
        f'<div class="array-item-content">{_children(widget)}</div>'
        f'<button type="button" class="delete-button base-button" data-action="remove_item" '
        f'data-path="{parent_path}" data-index="{index}" title="Remove Item">Remove Item</button>'
        "</div>"
    )


def _render_object(widget: Widget) -> str:
    return (
        f'<div class="nested-group" data-path="{_path_attr(widget)}">'
        f'<div class="fields-container">{_children(widget)}</div></div>'
    )


def _render_add_field(widget: Widget) -> str:
    path = _path_attr(widget)
    placeholder = escape(str(widget.attrs.get("placeholder", "")), quote=True)
    options = "".join(
        f'<option value="{escape(item["value"], quote=True)}">{escape(item["label"])}</option>'
        for item in widget.attrs.get("types", [])
    )
    return (
        f'<div class="add-field" data-path="{path}">'
        f'<input class="add-field__input base-input" type="text" placeholder="{placeholder}" />'
        f'<select class="add-field__select base-input">{options}</select>'
        f'<button type="button" class="add-field__button base-button" data-action="add_field" '
        f'data-path="{path}">+ Add</button></div>'
    )


_RENDERERS: dict[str, Callable[[Widget], str]] = {
    "document": _render_document,
    "section": _render_section,
    "field": _render_field,
    "primitive": _render_primitive,
    "boolean": _render_boolean,
    "array": _render_array,
    "array_item": _render_array_item,
    "object": _render_object,
    "add_field": _render_add_field,
}


def render_form_html(widget: Widget | None) -> str:
    if widget is None:
        return '<p class="form-empty">No document loaded.</p>'
    return render_widget_html(widget)
