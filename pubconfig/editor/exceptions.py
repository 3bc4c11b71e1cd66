"""Editor subsystem exceptions."""


class EditorError(Exception):
    """Base class for editor errors."""


class ValidationError(EditorError):
    """An edit was rejected; the document was left unchanged."""
