"""
Base class for persisted, data-only state models.

State models are plain data containers. Logic that mutates game
state lives in services (the player service, the action processor),
which keeps serialization trivial:

    class Position(StateModel):
        x: float = 0.0
        y: float = 0.0

    data = Position(x=4).model_dump()
    Position.model_validate(data)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class StateModel(BaseModel):
    """
    Base class for all persisted state.

    Uses Pydantic for:
    - Automatic validation
    - JSON serialization
    - Type hints
    - Default values
    """

    model_config = ConfigDict(
        # Validate on assignment so services can't store garbage
        validate_assignment=True,
        # Data files use camelCase for some fields
        populate_by_name=True,
        extra='forbid',
    )

    def clone(self) -> StateModel:
        """Create a deep copy of this model."""
        return self.model_copy(deep=True)
