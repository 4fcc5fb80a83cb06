"""
Narrative - the dialogue-and-scripting core.

Provides:
- State models (stats, inventory, dialogue progress)
- Save store and global variables
- Player, NPC and ability services
- Condition evaluator and action processor
- Dialogue loader, manager and script compiler
"""

from narrative.errors import (
    NarrativeError,
    DataError,
    ExpressionError,
    CommandError,
    StateError,
    ConversationReferenceError,
)
from narrative.session import NarrativeSession

__all__ = [
    'NarrativeError',
    'DataError',
    'ExpressionError',
    'CommandError',
    'StateError',
    'ConversationReferenceError',
    'NarrativeSession',
]
