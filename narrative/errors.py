"""
Error taxonomy for the dialogue-and-scripting core.

These are raised at parse and validation seams and caught at each
component's public boundary, where they degrade to a safe default
and are logged. None of them escape the public API.
"""


class NarrativeError(Exception):
    """Base class for narrative runtime errors."""


class DataError(NarrativeError):
    """A dialogue tree is missing, invalid, or failed to fetch."""


class ExpressionError(NarrativeError):
    """A condition expression is malformed or can't be evaluated."""


class CommandError(NarrativeError):
    """An action sub-command is malformed or can't be applied."""

    def __init__(self, message: str, command: str = ""):
        self.command = command
        super().__init__(f"{message}: {command!r}" if command else message)


class StateError(NarrativeError):
    """A call is not valid in the manager's current state."""


class ConversationReferenceError(NarrativeError):
    """A referenced conversation id does not exist in the tree."""
