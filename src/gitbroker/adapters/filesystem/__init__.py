"""Public interface for the working-tree adapter."""

from __future__ import annotations

from .catalog import CatalogError, CatalogSnapshot, InstanceCatalog, MalformedDocumentError
from .files import atomic_write_text
from .module_writer import write_module
from .status import FileStatusRecorder, render_status
from .store import LocalRepositoryStore

__all__ = [
    "CatalogError",
    "CatalogSnapshot",
    "FileStatusRecorder",
    "InstanceCatalog",
    "LocalRepositoryStore",
    "MalformedDocumentError",
    "atomic_write_text",
    "render_status",
    "write_module",
]
