"""
Resource module - document sources and schema validation.
"""

from runtime.resources.documents import (
    DocumentSource,
    FileDocumentSource,
    MemoryDocumentSource,
    DocumentNotFoundError,
    validate_document,
    load_documents,
)

__all__ = [
    "DocumentSource",
    "FileDocumentSource",
    "MemoryDocumentSource",
    "DocumentNotFoundError",
    "validate_document",
    "load_documents",
]
