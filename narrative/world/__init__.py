"""
World module - player, NPCs and ability unlocks.
"""

from narrative.world.player import Player
from narrative.world.npc import NPC, create_npc, load_npc_definitions
from narrative.world.abilities import AbilityUnlockSystem, AbilityConfig, ABILITY_CONFIGS

__all__ = [
    "Player",
    "NPC",
    "create_npc",
    "load_npc_definitions",
    "AbilityUnlockSystem",
    "AbilityConfig",
    "ABILITY_CONFIGS",
]
