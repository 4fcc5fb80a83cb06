"""
Dialogue - loading, running and compiling NPC conversations.

Provides:
- DialogueLoader for cached, coalesced tree loading
- DialogueManager state machine
- DialogueParser for the plain-text script format
"""

from narrative.dialogue.schema import DIALOGUE_SCHEMA
from narrative.dialogue.loader import DialogueLoader
from narrative.dialogue.manager import (
    DialogueManager,
    DialogueSnapshot,
    DialogueMessage,
    Advance,
    SelectChoice,
    CompleteTyping,
    CancelDialogue,
)
from narrative.dialogue.parser import (
    DialogueParser,
    DialogueScriptError,
    ParsedDialogue,
    ParsedConversation,
    ParsedChoice,
    SCRIPT_DECODERS,
    decode_dialogue_script,
    compile_dialogue_file,
)

__all__ = [
    'DIALOGUE_SCHEMA',
    'DialogueLoader',
    'DialogueManager',
    'DialogueSnapshot',
    'DialogueMessage',
    'Advance',
    'SelectChoice',
    'CompleteTyping',
    'CancelDialogue',
    'DialogueParser',
    'DialogueScriptError',
    'ParsedDialogue',
    'ParsedConversation',
    'ParsedChoice',
    'SCRIPT_DECODERS',
    'decode_dialogue_script',
    'compile_dialogue_file',
]
