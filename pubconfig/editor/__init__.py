"""Recursive form editor for schema-less JSON documents."""

from pubconfig.editor.base import Editor, create_value_editor, register_editor, registered_editor_kinds
from pubconfig.editor.primitive import PrimitiveEditor, format_scalar, parse_number
from pubconfig.editor.boolean import BooleanEditor
from pubconfig.editor.array import ArrayEditor
from pubconfig.editor.object import ObjectEditor
from pubconfig.editor.field import FieldController
from pubconfig.editor.document import DocumentEditor
from pubconfig.editor.exceptions import EditorError, ValidationError
from pubconfig.editor.html import render_form_html, render_widget_html
from pubconfig.editor.model import DocumentModel
from pubconfig.editor.session import EditSession, SaveResult
from pubconfig.editor.template import item_template, zero_value_like
from pubconfig.editor.widgets import Widget

__all__ = [
    "Editor",
    "create_value_editor",
    "register_editor",
    "registered_editor_kinds",
    "PrimitiveEditor",
    "BooleanEditor",
    "ArrayEditor",
    "ObjectEditor",
    "FieldController",
    "DocumentEditor",
    "EditorError",
    "ValidationError",
    "DocumentModel",
    "EditSession",
    "SaveResult",
    "Widget",
    "format_scalar",
    "parse_number",
    "item_template",
    "zero_value_like",
    "render_form_html",
    "render_widget_html",
]
