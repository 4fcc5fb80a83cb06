"""
Player stat components.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from runtime.core.component import StateModel


class PlayerStats(StateModel):
    """
    Numeric player statistics.

    Field names are snake_case; data files and conditions may also use
    the camelCase spelling (`maxHealth`, `maxHearts_p1`).

    Attributes:
        health: Current health
        max_health: Health cap
        gold: Currency
        experience: Experience points
        level: Character level
        hearts_p1: Discrete hearts for player one
        max_hearts_p1: Heart cap for player one
        hearts_p2: Discrete hearts for player two
        max_hearts_p2: Heart cap for player two
    """
    health: int = 100
    max_health: int = Field(default=100, alias='maxHealth')
    gold: int = 0
    experience: int = 0
    level: int = 1
    hearts_p1: int = 3
    max_hearts_p1: int = Field(default=3, alias='maxHearts_p1')
    hearts_p2: int = 3
    max_hearts_p2: int = Field(default=3, alias='maxHearts_p2')

    @classmethod
    def resolve_name(cls, name: str) -> Optional[str]:
        """
        Map a stat name from data (either spelling) to its field name.

        Returns:
            The field name, or None for unknown stats
        """
        if name in cls.model_fields:
            return name
        for field_name, info in cls.model_fields.items():
            if info.alias == name:
                return field_name
        return None

    def get(self, name: str) -> Optional[int]:
        """Get a stat by name (either spelling)."""
        field_name = self.resolve_name(name)
        if field_name is None:
            return None
        return getattr(self, field_name)

    def as_dict(self) -> dict[str, int]:
        """Stats keyed by their data-file spelling."""
        return self.model_dump(by_alias=True)
