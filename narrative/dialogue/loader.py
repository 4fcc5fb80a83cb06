"""
Dialogue loader - fetches, validates and caches dialogue trees.

Each dialogue id is fetched at most once at a time: concurrent
`load_dialogue` calls for the same uncached id share one in-flight
task. Successful loads are cached for the loader's lifetime; failures
are logged, never cached, and may be retried.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import yaml

from runtime.resources.documents import (
    DocumentNotFoundError,
    DocumentSource,
    validate_document,
)
from narrative.components.dialogue import Conversation, DialogueTree
from narrative.dialogue.schema import DIALOGUE_SCHEMA
from narrative.errors import DataError

logger = logging.getLogger(__name__)


class DialogueLoader:
    """
    Loads DialogueTrees from a DocumentSource.

    Usage:
        loader = DialogueLoader(FileDocumentSource("assets/dialogues"))
        tree = await loader.load_dialogue("merchant")
        if tree is None:
            ...  # missing or invalid, already logged
    """

    def __init__(self, source: DocumentSource):
        self.source = source
        self._cache: dict[str, DialogueTree] = {}
        self._pending: dict[str, asyncio.Task] = {}

    async def load_dialogue(self, dialogue_id: str) -> Optional[DialogueTree]:
        """
        Load a dialogue tree.

        Args:
            dialogue_id: Dialogue document id

        Returns:
            The tree, or None if it's missing or invalid
        """
        tree = self._cache.get(dialogue_id)
        if tree is not None:
            return tree

        task = self._pending.get(dialogue_id)
        if task is None:
            task = asyncio.ensure_future(self._fetch(dialogue_id))
            self._pending[dialogue_id] = task

        # Shielded: cancelling one caller leaves the shared fetch running
        return await asyncio.shield(task)

    async def _fetch(self, dialogue_id: str) -> Optional[DialogueTree]:
        try:
            tree = await self._read(dialogue_id)
        except DataError as e:
            logger.error(f"Failed to load dialogue {dialogue_id}: {e}")
            return None
        except Exception:
            logger.exception(f"Failed to load dialogue {dialogue_id}")
            return None
        finally:
            if self._pending.get(dialogue_id) is asyncio.current_task():
                del self._pending[dialogue_id]

        self._cache[dialogue_id] = tree
        logger.debug(f"Dialogue loaded: {dialogue_id} ({len(tree.conversations)} conversations)")
        return tree

    async def _read(self, dialogue_id: str) -> DialogueTree:
        try:
            data = await self.source.fetch(dialogue_id)
        except DocumentNotFoundError as e:
            raise DataError(str(e)) from e
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise DataError(f"unreadable document: {e}") from e

        errors = validate_document(data, DIALOGUE_SCHEMA)
        if errors:
            raise DataError(f"invalid document: {'; '.join(errors)}")

        return DialogueTree.from_document(data)

    async def get_conversation(
        self,
        dialogue_id: str,
        conversation_id: str,
    ) -> Optional[Conversation]:
        """Load a dialogue and get one of its conversations."""
        tree = await self.load_dialogue(dialogue_id)
        if tree is None:
            return None
        return tree.get_conversation(conversation_id)

    def is_cached(self, dialogue_id: str) -> bool:
        return dialogue_id in self._cache

    def clear_cache(self) -> None:
        """Forget every cached tree."""
        self._cache.clear()
        self._pending.clear()

    def get_cached_dialogues(self) -> list[str]:
        """Get the ids of all cached trees."""
        return list(self._cache)
