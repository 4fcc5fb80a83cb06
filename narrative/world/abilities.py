"""
Ability unlocks - permanent player abilities granted by scripts.

Unlock state is stored as `ability_<id>_unlocked` global variables so
it travels with the save and is visible to conditions
(`global.ability_mirror_unlocked==true`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from runtime.core.events import WorldEvent
from narrative.save.globals import GlobalVariableStore

if TYPE_CHECKING:
    from runtime.core.events import EventBus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AbilityConfig:
    """Static ability definition."""
    id: str
    name: str
    description: str
    icon: Optional[str] = None


ABILITY_CONFIGS: dict[str, AbilityConfig] = {
    'watering_can': AbilityConfig(
        id='watering_can',
        name='Watering Can',
        description='Press Shift to sprinkle water',
    ),
    'vine_extension': AbilityConfig(
        id='vine_extension',
        name='Vine Extension',
        description='Press E to extend a vine',
    ),
    'mirror': AbilityConfig(
        id='mirror',
        name='Mirror',
        description='Press E to enter mirror mode',
    ),
}


class AbilityUnlockSystem:
    """
    Tracks which abilities the player has unlocked.

    Usage:
        abilities = AbilityUnlockSystem(globals_store, event_bus)
        abilities.unlock_ability("watering_can")  # True
        abilities.unlock_ability("watering_can")  # False, already unlocked
    """

    def __init__(
        self,
        global_store: GlobalVariableStore,
        event_bus: Optional[EventBus] = None,
        configs: Optional[dict[str, AbilityConfig]] = None,
    ):
        self.global_store = global_store
        self.event_bus = event_bus
        self.configs = dict(ABILITY_CONFIGS if configs is None else configs)

    @staticmethod
    def variable_name(ability_id: str) -> str:
        return f"ability_{ability_id}_unlocked"

    def unlock_ability(self, ability_id: str) -> bool:
        """
        Unlock an ability.

        Returns:
            True if newly unlocked; False if unknown or already unlocked
        """
        config = self.configs.get(ability_id)
        if not config:
            logger.warning(f"Unknown ability: {ability_id}")
            return False

        if self.is_ability_unlocked(ability_id):
            logger.info(f"Ability already unlocked: {ability_id}")
            return False

        self.global_store.set(self.variable_name(ability_id), True)

        if self.event_bus:
            self.event_bus.publish(
                WorldEvent.ABILITY_UNLOCKED,
                ability_id=ability_id,
                name=config.name,
                description=config.description,
            )

        logger.info(f"Ability unlocked: {ability_id}")
        return True

    def is_ability_unlocked(self, ability_id: str) -> bool:
        return self.global_store.get(self.variable_name(ability_id)) is True

    def get_unlocked_abilities(self) -> list[str]:
        return [a for a in self.configs if self.is_ability_unlocked(a)]

    def reset_all_abilities(self) -> None:
        """Lock every ability again."""
        for ability_id in self.configs:
            self.global_store.set(self.variable_name(ability_id), False)
        logger.info("All abilities have been reset")
