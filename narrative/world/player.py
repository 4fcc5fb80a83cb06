"""
Player service - stat and inventory mutations.

Components are data-only; this service applies the game's stat rules
(clamps) on top of PlayerStats and persists through the SaveManager.
"""

from __future__ import annotations

import logging
from typing import Optional

from narrative.components import Inventory, InventoryItem, PlayerStats
from narrative.inventory.items import ItemCatalog
from narrative.save.manager import SaveManager

logger = logging.getLogger(__name__)

# (current, maximum) stat pairs: current is kept within [0, maximum]
CAPPED_STATS: tuple[tuple[str, str], ...] = (
    ('health', 'max_health'),
    ('hearts_p1', 'max_hearts_p1'),
    ('hearts_p2', 'max_hearts_p2'),
)

NON_NEGATIVE_STATS = frozenset({'gold', 'max_health', 'max_hearts_p1', 'max_hearts_p2'})


class Player:
    """
    Mutates the player's saved stats and inventory.

    Usage:
        player = Player(save_manager)
        player.add_stat("gold", 50)
        player.add_stat("health", 500)   # clamped to maxHealth
        player.add_item("health_potion", 2)
    """

    def __init__(self, save_manager: SaveManager, catalog: Optional[ItemCatalog] = None):
        self.save_manager = save_manager
        self.catalog = catalog or ItemCatalog()

    @property
    def stats(self) -> PlayerStats:
        return self.save_manager.stats

    @property
    def inventory(self) -> Inventory:
        return self.save_manager.inventory

    # Stats

    def get_stat(self, name: str) -> Optional[int]:
        """Get a stat by name (None for unknown stats)."""
        return self.stats.get(name)

    def add_stat(self, name: str, amount: int) -> bool:
        """
        Add to a stat, applying clamps.

        Returns:
            False if the stat doesn't exist
        """
        current = self.get_stat(name)
        if current is None:
            logger.warning(f"Unknown player stat: {name}")
            return False

        self._apply(name, current + amount)
        sign = '+' if amount > 0 else ''
        logger.info(f"{name} {sign}{amount}: {self.get_stat(name)}")
        return True

    def set_stat(self, name: str, value: int) -> bool:
        """
        Overwrite a stat, applying clamps.

        Returns:
            False if the stat doesn't exist
        """
        if self.get_stat(name) is None:
            logger.warning(f"Unknown player stat: {name}")
            return False

        self._apply(name, value)
        logger.info(f"{name} = {self.get_stat(name)}")
        return True

    def level_up(self) -> int:
        """
        Raise the level by one, add 10 max health and fully heal.

        Returns:
            The new level
        """
        stats = self.stats
        stats.level += 1
        stats.max_health += 10
        stats.health = stats.max_health
        self.save_manager.commit()
        logger.info(f"Level up! {stats.level - 1} -> {stats.level}")
        return stats.level

    def _apply(self, name: str, value: int) -> None:
        field_name = PlayerStats.resolve_name(name)
        stats = self.stats

        if field_name in NON_NEGATIVE_STATS:
            value = max(0, value)
        setattr(stats, field_name, value)

        for current_name, max_name in CAPPED_STATS:
            if field_name in (current_name, max_name):
                current = getattr(stats, current_name)
                maximum = getattr(stats, max_name)
                setattr(stats, current_name, max(0, min(current, maximum)))

        self.save_manager.commit()

    # Inventory

    def add_item(self, item_id: str, quantity: int) -> Optional[InventoryItem]:
        """Add items, naming new entries from the catalog."""
        entry = self.inventory.add_item(
            item_id,
            quantity,
            name=self.catalog.get_name(item_id),
            item_type=self.catalog.get_type(item_id),
        )
        self.save_manager.commit()
        logger.info(f"Item added: {item_id} x{quantity}")
        return entry

    def remove_item(self, item_id: str, quantity: int) -> int:
        """
        Remove items; entries at zero are dropped.

        Returns:
            Amount actually removed (0 if the item isn't carried)
        """
        if not self.inventory.has_item(item_id):
            logger.warning(f"Item to remove not found: {item_id}")
            return 0

        removed = self.inventory.remove_item(item_id, quantity)
        self.save_manager.commit()
        logger.info(f"Item removed: {item_id} x{quantity}")
        return removed
