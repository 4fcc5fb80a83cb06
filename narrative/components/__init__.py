"""
Narrative components - data-only state models and dialogue data.

Persisted state uses Pydantic models; immutable dialogue data
(trees, conversations, choices) uses frozen dataclasses.
"""

from narrative.components.dialogue import (
    DialogueState,
    DialogueTree,
    Conversation,
    Choice,
    DialogueProgress,
)
from narrative.components.stats import PlayerStats
from narrative.components.inventory import Inventory, InventoryItem

__all__ = [
    # Dialogue
    "DialogueState",
    "DialogueTree",
    "Conversation",
    "Choice",
    "DialogueProgress",
    # Player
    "PlayerStats",
    # Inventory
    "Inventory",
    "InventoryItem",
]
