"""
Global variables - process-wide story state backed by the save.

Global variables hold story progress, reputation and similar values
that conditions (`global.reputation>=10`) and actions
(`add_global:reputation:5`) read and write. Values are numbers,
strings or booleans.
"""

from __future__ import annotations

import logging
from typing import Any

from narrative.save.manager import SaveManager

logger = logging.getLogger(__name__)


def is_number(value: Any) -> bool:
    """Check for int/float values (bools don't count)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class GlobalVariableStore:
    """
    Reads and writes global variables in the save's custom data.

    Usage:
        globals_ = GlobalVariableStore(save_manager)
        globals_.set("reputation", 5)
        globals_.add("reputation", 3)
        globals_.get("reputation")  # 8
    """

    DEFAULTS: dict[str, Any] = {
        'story_progress': 'intro',
        'reputation': 0,
        'difficulty': 'normal',
        'player_name': 'Adventurer',
    }

    def __init__(self, save_manager: SaveManager):
        self.save_manager = save_manager

    @property
    def _variables(self) -> dict[str, Any]:
        return self.save_manager.custom_data

    def get(self, key: str, default: Any = None) -> Any:
        """Get a global variable."""
        return self._variables.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a global variable."""
        self._variables[key] = value
        self.save_manager.commit()
        logger.debug(f"Global variable set: {key} = {value!r}")

    def add(self, key: str, amount: int | float) -> bool:
        """
        Increment a numeric global variable (missing counts as 0).

        Returns:
            False if the current value isn't a number
        """
        current = self.get(key, 0)
        if not is_number(current):
            logger.warning(
                f"Global variable {key} is not a number: {type(current).__name__}"
            )
            return False

        self.set(key, current + amount)
        return True

    def has(self, key: str) -> bool:
        """Check if a global variable exists."""
        return key in self._variables

    def remove(self, key: str) -> None:
        """Delete a global variable."""
        if key in self._variables:
            del self._variables[key]
            self.save_manager.commit()
            logger.debug(f"Global variable removed: {key}")

    def get_all(self) -> dict[str, Any]:
        """Get a copy of all global variables."""
        return dict(self._variables)

    def clear(self) -> None:
        """Remove all global variables."""
        self._variables.clear()
        self.save_manager.commit()
        logger.info("All global variables cleared")

    def initialize_defaults(self) -> None:
        """Set default story variables that don't exist yet (call at game start)."""
        for key, value in self.DEFAULTS.items():
            if not self.has(key):
                self._variables[key] = value
        self.save_manager.commit()
