"""
Inventory components - carried items.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from runtime.core.component import StateModel


class InventoryItem(StateModel):
    """
    A stack of one item kind in the player's inventory.

    Attributes:
        id: Item definition ID
        name: Display name
        quantity: Number carried
        type: Item category (consumable, key_item, weapon, ...)
    """
    id: str
    name: str = ""
    quantity: int = 1
    type: str = "misc"


class Inventory(StateModel):
    """
    Item container.

    Holds at most one entry per item id; an entry whose quantity
    drops to zero or below is removed.
    """
    items: list[InventoryItem] = Field(default_factory=list)

    def get_item(self, item_id: str) -> Optional[InventoryItem]:
        """Get the entry for an item id."""
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def add_item(
        self,
        item_id: str,
        quantity: int = 1,
        name: str = "",
        item_type: str = "misc",
    ) -> InventoryItem | None:
        """
        Add items, creating the entry if needed.

        Args:
            item_id: Item definition ID
            quantity: Amount to add
            name: Display name for a new entry
            item_type: Category for a new entry

        Returns:
            The updated entry, or None if the entry ended up empty
        """
        existing = self.get_item(item_id)
        if existing:
            existing.quantity += quantity
            if existing.quantity <= 0:
                self.items = [i for i in self.items if i.id != item_id]
                return None
            return existing

        if quantity <= 0:
            return None

        entry = InventoryItem(
            id=item_id,
            name=name or item_id,
            quantity=quantity,
            type=item_type,
        )
        self.items = [*self.items, entry]
        return entry

    def remove_item(self, item_id: str, quantity: int = 1) -> int:
        """
        Remove items; the entry is dropped once its quantity reaches zero.

        Args:
            item_id: Item definition ID
            quantity: Amount to remove

        Returns:
            Amount actually removed
        """
        existing = self.get_item(item_id)
        if not existing:
            return 0

        removed = min(quantity, existing.quantity)
        existing.quantity -= quantity
        if existing.quantity <= 0:
            self.items = [i for i in self.items if i.id != item_id]
        return removed

    def count_item(self, item_id: str) -> int:
        """Count total quantity of an item."""
        item = self.get_item(item_id)
        return item.quantity if item else 0

    def has_item(self, item_id: str, quantity: int = 1) -> bool:
        """Check if inventory contains enough of an item."""
        return self.count_item(item_id) >= quantity

    def get_item_ids(self) -> list[str]:
        return [item.id for item in self.items]
