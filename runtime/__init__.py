"""
Narrative Runtime - shared infrastructure.

Game-agnostic pieces the dialogue-and-scripting core is built on:
- Typed event bus
- Pydantic state model base
- Configuration and logging setup
- Document sources (files, memory) with schema validation
"""

__version__ = "0.1.0"

from runtime.core import (
    EventBus,
    Event,
    DialogueEvent,
    WorldEvent,
    StateModel,
    RuntimeConfig,
    configure_logging,
)
from runtime.resources import (
    DocumentSource,
    FileDocumentSource,
    MemoryDocumentSource,
    DocumentNotFoundError,
)

__all__ = [
    # Events
    "EventBus",
    "Event",
    "DialogueEvent",
    "WorldEvent",
    # State
    "StateModel",
    # Config
    "RuntimeConfig",
    "configure_logging",
    # Resources
    "DocumentSource",
    "FileDocumentSource",
    "MemoryDocumentSource",
    "DocumentNotFoundError",
]
