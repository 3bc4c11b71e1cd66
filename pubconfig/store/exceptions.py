"""Configuration store exceptions."""


class StoreError(Exception):
    """Base class for configuration store errors."""


class DocumentNotFoundError(StoreError):
    """Document or version does not exist."""


class InvalidDocumentError(StoreError):
    """Stored content is not a parseable JSON object."""


class InvalidDocumentIdError(StoreError, ValueError):
    """Document id is not a plain file name."""


class StoreUnavailableError(StoreError):
    """Store could not be reached."""
