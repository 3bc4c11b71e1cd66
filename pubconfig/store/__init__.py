"""Configuration store subsystem for pubconfig."""

from pubconfig.store.base import (
    ConfigStore,
    Publisher,
    document_stem,
    filter_publishers,
    normalize_document_id,
    parse_version,
)
from pubconfig.store.exceptions import (
    DocumentNotFoundError,
    InvalidDocumentError,
    InvalidDocumentIdError,
    StoreError,
    StoreUnavailableError,
)
from pubconfig.store.filesystem import PUBLISHERS_FILE_NAME, FileSystemConfigStore
from pubconfig.store.remote import HttpConfigStore

__all__ = [
    "ConfigStore",
    "Publisher",
    "document_stem",
    "filter_publishers",
    "normalize_document_id",
    "parse_version",
    "StoreError",
    "DocumentNotFoundError",
    "InvalidDocumentError",
    "InvalidDocumentIdError",
    "StoreUnavailableError",
    "PUBLISHERS_FILE_NAME",
    "FileSystemConfigStore",
    "HttpConfigStore",
]
