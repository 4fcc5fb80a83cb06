"""
Document sources.

Fetches data documents (dialogue trees, definitions) by id and
validates them against JSON schemas. The storage medium is hidden
behind DocumentSource so games can serve documents from disk, from
memory, or from a packed archive.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

import jsonschema
import yaml

logger = logging.getLogger(__name__)

# Decoder receives the raw text and the requested document id
Decoder = Callable[[str, str], Any]


class DocumentNotFoundError(LookupError):
    """Raised when a source has no document for the requested id."""

    def __init__(self, document_id: str, location: str = ""):
        self.document_id = document_id
        self.location = location
        message = f"Document not found: {document_id}"
        if location:
            message += f" ({location})"
        super().__init__(message)


def _decode_yaml(text: str, _document_id: str) -> Any:
    return yaml.safe_load(text)


def _decode_json(text: str, _document_id: str) -> Any:
    return json.loads(text)


DEFAULT_DECODERS: dict[str, Decoder] = {
    '.yaml': _decode_yaml,
    '.yml': _decode_yaml,
    '.json': _decode_json,
}


def validate_document(data: Any, schema: dict[str, Any]) -> list[str]:
    """
    Validate a document against a JSON schema.

    Args:
        data: Decoded document
        schema: JSON schema

    Returns:
        List of error messages (empty if valid)
    """
    validator = jsonschema.Draft7Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    messages = []
    for error in errors:
        location = "/".join(str(p) for p in error.absolute_path)
        messages.append(f"{location or '<root>'}: {error.message}")
    return messages


class DocumentSource(ABC):
    """Fetches raw documents by id."""

    @abstractmethod
    async def fetch(self, document_id: str) -> Any:
        """
        Fetch a decoded document.

        Raises:
            DocumentNotFoundError: If no document exists for the id
        """
        ...

    def list_ids(self) -> list[str]:
        """List the document ids this source can serve (if known)."""
        return []


class FileDocumentSource(DocumentSource):
    """
    Reads documents from a directory.

    A document id maps to `<root>/<id><ext>` for the first extension
    (in registration order) that exists. YAML and JSON are supported
    out of the box; pass extra decoders for custom formats.

    Usage:
        source = FileDocumentSource("assets/dialogues")
        data = await source.fetch("merchant")  # merchant.yaml
    """

    def __init__(
        self,
        root: str | Path,
        decoders: Optional[dict[str, Decoder]] = None,
    ):
        self.root = Path(root)
        self._decoders: dict[str, Decoder] = dict(DEFAULT_DECODERS)
        if decoders:
            self._decoders.update(decoders)

    @property
    def extensions(self) -> list[str]:
        return list(self._decoders)

    def find_path(self, document_id: str) -> Optional[Path]:
        """Get the file backing a document id, if any."""
        # Ids are plain names, never paths
        if not document_id or Path(document_id).name != document_id:
            return None

        for ext in self._decoders:
            path = self.root / f"{document_id}{ext}"
            if path.is_file():
                return path
        return None

    async def fetch(self, document_id: str) -> Any:
        """Fetch a document, reading the file on a worker thread."""
        path = self.find_path(document_id)
        if path is None:
            raise DocumentNotFoundError(document_id, str(self.root))

        logger.debug(f"Read document {document_id} from {path}")
        return await asyncio.to_thread(self.read, path, document_id)

    def read(self, path: Path, document_id: str) -> Any:
        """Read and decode one file."""
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
        return self._decoders[path.suffix](text, document_id)

    def list_ids(self) -> list[str]:
        if not self.root.is_dir():
            return []
        ids = {
            p.stem for p in self.root.iterdir()
            if p.is_file() and p.suffix in self._decoders
        }
        return sorted(ids)


class MemoryDocumentSource(DocumentSource):
    """
    Serves documents from an in-process mapping.

    Every fetch returns a deep copy so callers can't mutate the
    stored documents. `fetch_count` records how many fetches each id
    has received.
    """

    def __init__(self, documents: Optional[dict[str, Any]] = None):
        self._documents: dict[str, Any] = dict(documents or {})
        self.fetch_count: dict[str, int] = {}

    def add(self, document_id: str, document: Any) -> None:
        self._documents[document_id] = document

    def remove(self, document_id: str) -> None:
        self._documents.pop(document_id, None)

    async def fetch(self, document_id: str) -> Any:
        self.fetch_count[document_id] = self.fetch_count.get(document_id, 0) + 1
        if document_id not in self._documents:
            raise DocumentNotFoundError(document_id, "memory")
        return copy.deepcopy(self._documents[document_id])

    def list_ids(self) -> list[str]:
        return sorted(self._documents)


def load_documents(
    source: FileDocumentSource,
    schema: dict[str, Any],
    ids: Optional[Iterable[str]] = None,
) -> tuple[dict[str, Any], dict[str, list[str]]]:
    """
    Synchronously load and validate documents from a directory.

    Used by tooling (verification scripts) outside the game loop.

    Returns:
        (valid documents by id, error messages by id)
    """
    valid: dict[str, Any] = {}
    failures: dict[str, list[str]] = {}

    for document_id in ids if ids is not None else source.list_ids():
        path = source.find_path(document_id)
        if path is None:
            failures[document_id] = ["document not found"]
            continue

        try:
            data = source.read(path, document_id)
        except (OSError, ValueError, yaml.YAMLError) as e:
            failures[document_id] = [f"failed to decode {path.name}: {e}"]
            continue

        errors = validate_document(data, schema)
        if errors:
            failures[document_id] = errors
        else:
            valid[document_id] = data

    return valid, failures
