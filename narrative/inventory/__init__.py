"""
Inventory module - item definitions.
"""

from narrative.inventory.items import ItemCatalog, ItemDefinition, DEFAULT_ITEMS

__all__ = [
    "ItemCatalog",
    "ItemDefinition",
    "DEFAULT_ITEMS",
]
