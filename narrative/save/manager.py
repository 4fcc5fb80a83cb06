"""
Save system - game state persistence.

Provides:
- A single save document holding player stats, inventory, flags,
  global variables and per-NPC dialogue progress
- Pluggable storage backends (memory, JSON file)
- Checksum validation for JSON saves
- Version check with fallback to defaults
- Auto-commit: every mutation through the manager is persisted
"""

from __future__ import annotations

import base64
import copy
import hashlib
import json
import logging
import os
import time
from abc import ABC, abstractmethod
from enum import Enum, auto
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Optional

from pydantic import Field, ValidationError

from runtime.core.component import StateModel
from narrative.components import DialogueProgress, Inventory, PlayerStats

if TYPE_CHECKING:
    from runtime.core.events import EventBus

logger = logging.getLogger(__name__)


class SaveEvent(Enum):
    """Save system events."""
    SAVE_COMPLETED = auto()
    SAVE_FAILED = auto()
    LOAD_COMPLETED = auto()
    LOAD_FAILED = auto()
    SAVE_CLEARED = auto()


class SaveCorruptedError(ValueError):
    """Raised when a save file fails checksum validation."""


class Position(StateModel):
    """Player position in world pixels."""
    x: float = 512.0
    y: float = 512.0


class PlayerSaveData(StateModel):
    """Saved data for the player."""
    stats: PlayerStats = Field(default_factory=PlayerStats)
    position: Position = Field(default_factory=Position)
    inventory: Inventory = Field(default_factory=Inventory)


class GameSaveData(StateModel):
    """Complete game save data."""
    version: str = "1.0.0"
    last_saved: float = Field(default=0.0, alias='lastSaved')
    player: PlayerSaveData = Field(default_factory=PlayerSaveData)
    dialogues: dict[str, DialogueProgress] = Field(default_factory=dict)
    flags: dict[str, bool] = Field(default_factory=dict)
    custom_data: dict[str, Any] = Field(default_factory=dict, alias='customData')
    current_scene: str = Field(default="GameScene", alias='currentScene')


class SaveBackend(ABC):
    """Storage medium behind the save store."""

    @abstractmethod
    def read(self) -> Optional[dict[str, Any]]:
        """Read the raw save document (None if nothing is saved)."""
        ...

    @abstractmethod
    def write(self, data: dict[str, Any]) -> None:
        """Write the raw save document."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Delete the saved document."""
        ...


class MemorySaveBackend(SaveBackend):
    """Keeps the save document in memory (tests, sessions without disk)."""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._data = copy.deepcopy(initial) if initial is not None else None
        self.write_count = 0

    def read(self) -> Optional[dict[str, Any]]:
        return copy.deepcopy(self._data) if self._data is not None else None

    def write(self, data: dict[str, Any]) -> None:
        self._data = copy.deepcopy(data)
        self.write_count += 1

    def clear(self) -> None:
        self._data = None


class JsonFileSaveBackend(SaveBackend):
    """
    Stores the save document as a JSON file with a checksum.

    Writes go to a temporary file that replaces the real one, so an
    interrupted write never leaves a half-written save behind.
    """

    def __init__(self, path: str | Path, validate: bool = True):
        self.path = Path(path)
        self.validate = validate

    def read(self) -> Optional[dict[str, Any]]:
        if not self.path.exists():
            return None

        with open(self.path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise SaveCorruptedError(f"Save data in {self.path} is not an object")

        checksum = data.pop('checksum', None)
        if self.validate and checksum and not self._verify_checksum(data, checksum):
            raise SaveCorruptedError(f"Checksum mismatch in {self.path}")

        return data

    def write(self, data: dict[str, Any]) -> None:
        save_dict = dict(data)
        save_dict['checksum'] = self._calculate_checksum(data)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + '.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(save_dict, f, indent=2)
        os.replace(tmp_path, self.path)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()

    # Checksum validation

    def _calculate_checksum(self, data: dict) -> str:
        """Calculate checksum for save data."""
        # Create a deterministic JSON string
        json_str = json.dumps(data, sort_keys=True, separators=(',', ':'))
        hash_bytes = hashlib.sha256(json_str.encode('utf-8')).digest()
        return base64.b64encode(hash_bytes).decode('ascii')

    def _verify_checksum(self, data: dict, expected_checksum: str) -> bool:
        """Verify save data checksum."""
        return self._calculate_checksum(data) == expected_checksum


class SaveManager:
    """
    Owns the in-memory save document and persists it.

    Every component that reads or writes game state (the condition
    evaluator, the action processor, the dialogue manager) receives
    the same SaveManager instance; there is no module-level state.

    Usage:
        save_mgr = SaveManager(JsonFileSaveBackend("saves/save.json"), event_bus)
        save_mgr.set_flag("shop_unlocked", True)   # persisted immediately
        save_mgr.get_flag("shop_unlocked")          # True
    """

    VERSION = "1.0.0"

    def __init__(
        self,
        backend: Optional[SaveBackend] = None,
        event_bus: Optional[EventBus] = None,
        version: Optional[str] = None,
        auto_commit: bool = True,
        clock: Callable[[], float] = time.time,
    ):
        self.backend = backend or MemorySaveBackend()
        self.event_bus = event_bus
        self.version = version or self.VERSION
        self.auto_commit = auto_commit
        self._clock = clock

        self.data: GameSaveData = self.load()

    def default_data(self) -> GameSaveData:
        """Fresh game state."""
        return GameSaveData(version=self.version, last_saved=self._clock())

    def load(self) -> GameSaveData:
        """
        Load the saved game, falling back to defaults.

        A missing save, a version mismatch, or a corrupt/unreadable
        save all yield fresh defaults.
        """
        try:
            raw = self.backend.read()
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read save data: {e}")
            self._publish(SaveEvent.LOAD_FAILED, error=str(e))
            return self.default_data()

        if raw is None:
            return self.default_data()

        if raw.get('version') != self.version:
            logger.warning(
                f"Save version mismatch ({raw.get('version')} != {self.version}), "
                f"using defaults"
            )
            return self.default_data()

        try:
            data = GameSaveData.model_validate(raw)
        except ValidationError as e:
            logger.error(f"Invalid save data: {e}")
            self._publish(SaveEvent.LOAD_FAILED, error=str(e))
            return self.default_data()

        self._publish(SaveEvent.LOAD_COMPLETED)
        return data

    def save(self) -> bool:
        """
        Persist the current state.

        Returns:
            True if save was successful
        """
        self.data.version = self.version
        self.data.last_saved = self._clock()

        try:
            self.backend.write(self.data.model_dump(mode='json', by_alias=True))
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Save failed: {e}")
            self._publish(SaveEvent.SAVE_FAILED, error=str(e))
            return False

        self._publish(SaveEvent.SAVE_COMPLETED)
        return True

    def commit(self) -> bool:
        """Persist after a mutation if auto-commit is enabled."""
        if self.auto_commit:
            return self.save()
        return True

    def reload(self) -> None:
        """Discard in-memory state and re-read the backend."""
        self.data = self.load()

    def clear_save(self) -> None:
        """Delete the save and reset to defaults."""
        try:
            self.backend.clear()
        except OSError as e:
            logger.error(f"Failed to clear save data: {e}")
        self.data = self.default_data()
        self._publish(SaveEvent.SAVE_CLEARED)

    # Player

    @property
    def stats(self) -> PlayerStats:
        return self.data.player.stats

    @property
    def inventory(self) -> Inventory:
        return self.data.player.inventory

    # Flags

    def get_flag(self, key: str) -> bool:
        """Get a game flag (False if never set)."""
        return self.data.flags.get(key, False)

    def has_flag(self, key: str) -> bool:
        return key in self.data.flags

    def set_flag(self, key: str, value: bool) -> None:
        """Set a game flag."""
        self.data.flags[key] = bool(value)
        self.commit()

    def get_all_flags(self) -> dict[str, bool]:
        return dict(self.data.flags)

    # Custom data (backing store for global variables)

    @property
    def custom_data(self) -> dict[str, Any]:
        return self.data.custom_data

    # Dialogue progress

    def get_dialogue_progress(self, npc_id: str) -> Optional[DialogueProgress]:
        """Get a copy of an NPC's dialogue progress (None if never talked to)."""
        progress = self.data.dialogues.get(npc_id)
        return progress.model_copy(deep=True) if progress else None

    def update_dialogue_progress(self, npc_id: str, progress: DialogueProgress) -> None:
        """Store an NPC's dialogue progress."""
        self.data.dialogues[npc_id] = progress.model_copy(deep=True)
        self.commit()

    def _publish(self, event_type: SaveEvent, **data: Any) -> None:
        if self.event_bus:
            self.event_bus.publish(event_type, **data)
