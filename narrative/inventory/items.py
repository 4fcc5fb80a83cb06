"""
Item catalog - static item definitions.

The action processor looks up display names and categories here when
`add_item` creates a new inventory entry.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemDefinition:
    """Static item definition."""
    id: str
    name: str
    item_type: str = "misc"
    description: str = ""


DEFAULT_ITEMS: tuple[ItemDefinition, ...] = (
    ItemDefinition('health_potion', 'Health Potion', 'consumable'),
    ItemDefinition('mana_potion', 'Mana Potion', 'consumable'),
    ItemDefinition('key', 'Key', 'key_item'),
    ItemDefinition('sword', 'Sword', 'weapon'),
    ItemDefinition('shield', 'Shield', 'armor'),
)


class ItemCatalog:
    """
    Catalog of item definitions.

    Unknown ids fall back to the id itself as the name and `misc` as
    the category.
    """

    def __init__(self, items: Optional[tuple[ItemDefinition, ...] | list[ItemDefinition]] = None):
        self._items: dict[str, ItemDefinition] = {}
        for item in DEFAULT_ITEMS if items is None else items:
            self.register_item(item)

    def load_items(self, path: str | Path) -> int:
        """
        Load item definitions from a YAML or JSON file.

        The file holds `{"items": [{"id", "name", "type", "description"}]}`.

        Returns:
            Number of items loaded
        """
        path = Path(path)
        if not path.exists():
            logger.warning(f"Item catalog not found: {path}")
            return 0

        with open(path, 'r', encoding='utf-8') as f:
            if path.suffix == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f)

        count = 0
        for item_data in (data or {}).get('items', []):
            try:
                self.register_item(ItemDefinition(
                    id=item_data['id'],
                    name=item_data.get('name', item_data['id']),
                    item_type=item_data.get('type', 'misc'),
                    description=item_data.get('description', ''),
                ))
                count += 1
            except (KeyError, TypeError) as e:
                logger.error(f"Bad item definition in {path}: {e}")

        return count

    def register_item(self, item: ItemDefinition) -> None:
        """Register an item definition."""
        self._items[item.id] = item

    def get_item(self, item_id: str) -> Optional[ItemDefinition]:
        """Get an item definition."""
        return self._items.get(item_id)

    def get_name(self, item_id: str) -> str:
        item = self._items.get(item_id)
        return item.name if item else item_id

    def get_type(self, item_id: str) -> str:
        item = self._items.get(item_id)
        return item.item_type if item else 'misc'

    def get_items_by_type(self, item_type: str) -> list[ItemDefinition]:
        """Get all items of a category."""
        return [i for i in self._items.values() if i.item_type == item_type]
