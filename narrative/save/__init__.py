"""
Save module - game state persistence.

Provides:
- SaveManager over pluggable backends (memory, JSON file)
- Checksum validation and version fallback
- Flags, global variables and per-NPC dialogue progress
"""

from narrative.save.manager import (
    SaveManager,
    SaveBackend,
    MemorySaveBackend,
    JsonFileSaveBackend,
    SaveCorruptedError,
    GameSaveData,
    PlayerSaveData,
    Position,
    SaveEvent,
)
from narrative.save.globals import GlobalVariableStore

__all__ = [
    "SaveManager",
    "SaveBackend",
    "MemorySaveBackend",
    "JsonFileSaveBackend",
    "SaveCorruptedError",
    "GameSaveData",
    "PlayerSaveData",
    "Position",
    "SaveEvent",
    "GlobalVariableStore",
]
