"""
Narrative session - wires the dialogue core together.

Builds every collaborator from a RuntimeConfig so a game only has to
hand over its EventBus:

    config = RuntimeConfig.from_file("narrative.yaml")
    session = NarrativeSession.from_config(config, event_bus)
    await session.dialogue.start_dialogue(npc)
"""

from __future__ import annotations

import logging
from typing import Optional

from runtime.core.config import RuntimeConfig
from runtime.core.events import EventBus
from runtime.resources.documents import DocumentSource, FileDocumentSource
from narrative.dialogue.loader import DialogueLoader
from narrative.dialogue.manager import DialogueManager
from narrative.dialogue.parser import SCRIPT_DECODERS
from narrative.inventory.items import ItemCatalog
from narrative.save.globals import GlobalVariableStore
from narrative.save.manager import JsonFileSaveBackend, SaveBackend, SaveManager
from narrative.scripting.actions import ActionProcessor
from narrative.scripting.conditions import ConditionEvaluator
from narrative.world.abilities import AbilityUnlockSystem
from narrative.world.player import Player

logger = logging.getLogger(__name__)


class NarrativeSession:
    """Holds one explicitly wired set of narrative collaborators."""

    def __init__(
        self,
        source: DocumentSource,
        save_backend: Optional[SaveBackend] = None,
        event_bus: Optional[EventBus] = None,
        config: Optional[RuntimeConfig] = None,
        catalog: Optional[ItemCatalog] = None,
    ):
        self.config = config or RuntimeConfig()
        self.events = event_bus or EventBus()

        self.save_manager = SaveManager(
            backend=save_backend,
            event_bus=self.events,
            version=self.config.save_version,
            auto_commit=self.config.auto_commit,
        )
        self.globals = GlobalVariableStore(self.save_manager)
        self.player = Player(self.save_manager, catalog)
        self.abilities = AbilityUnlockSystem(self.globals, self.events)

        self.evaluator = ConditionEvaluator(self.player, self.save_manager, self.globals)
        self.processor = ActionProcessor(
            self.player,
            self.save_manager,
            self.globals,
            abilities=self.abilities,
            event_bus=self.events,
        )
        self.loader = DialogueLoader(source)
        self.dialogue = DialogueManager(
            self.loader,
            self.evaluator,
            self.processor,
            self.save_manager,
            self.events,
            intro_conversation_id=self.config.intro_conversation_id,
        )

    @classmethod
    def from_config(
        cls,
        config: RuntimeConfig,
        event_bus: Optional[EventBus] = None,
    ) -> NarrativeSession:
        """Build a session reading dialogues and the save from disk."""
        source = FileDocumentSource(config.dialogue_path, decoders=SCRIPT_DECODERS)
        backend = JsonFileSaveBackend(config.save_path)
        logger.info(f"Narrative session: dialogues={config.dialogue_path} save={config.save_path}")
        return cls(source, backend, event_bus, config)

    def new_game(self) -> None:
        """Reset the save and seed the default story variables."""
        self.save_manager.clear_save()
        self.globals.initialize_defaults()
