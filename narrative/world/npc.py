"""
NPC definitions - which dialogue each NPC speaks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class NPC:
    """
    A speaking NPC as seen by the dialogue core.

    Attributes:
        npc_id: Unique NPC id (keys saved dialogue progress)
        dialogue_id: Dialogue tree to load; several NPCs may share one
        name: Display name
    """
    npc_id: str
    dialogue_id: str
    name: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.npc_id


def create_npc(npc_id: str, dialogue_id: Optional[str] = None, name: str = "") -> NPC:
    """
    Factory function to create an NPC.

    Args:
        npc_id: Unique NPC id
        dialogue_id: Dialogue tree id (defaults to the NPC id)
        name: Display name

    Returns:
        The created NPC
    """
    return NPC(npc_id=npc_id, dialogue_id=dialogue_id or npc_id, name=name)


def load_npc_definitions(definitions: dict[str, dict[str, Any]]) -> dict[str, NPC]:
    """
    Build NPCs from definition records.

    Accepts the map-data spelling (`npcId`, `dialogueId`) as well as
    snake_case keys:

        {"merchant_001": {"dialogueId": "merchant"}}
    """
    npcs = {}
    for key, data in definitions.items():
        npc_id = data.get('npcId') or data.get('npc_id') or key
        dialogue_id = data.get('dialogueId') or data.get('dialogue_id')
        npcs[npc_id] = create_npc(npc_id, dialogue_id, data.get('name', ''))
    return npcs
