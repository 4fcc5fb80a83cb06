"""
Dialogue components - trees, conversations, choices, progress.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Any

from pydantic import Field

from runtime.core.component import StateModel


class DialogueState(Enum):
    """State of the dialogue manager."""
    INACTIVE = auto()
    TYPING = auto()
    WAITING_FOR_CHOICE = auto()
    WAITING_TO_ADVANCE = auto()


@dataclass(frozen=True)
class Choice:
    """A single player-selectable branch."""
    text: str
    condition: Optional[str] = None  # Condition expression
    action: Optional[str] = None     # Action command string
    next: Optional[str] = None       # Next conversation id


@dataclass(frozen=True)
class Conversation:
    """A single node of a dialogue tree."""
    id: str
    text: str
    choices: tuple[Choice, ...] = ()
    next: Optional[str] = None
    action: Optional[str] = None  # Run on entering the conversation

    @property
    def has_choices(self) -> bool:
        return len(self.choices) > 0


@dataclass(frozen=True)
class DialogueTree:
    """A complete branching conversation graph for one dialogue id."""
    id: str
    conversations: dict[str, Conversation] = field(default_factory=dict)

    def get_conversation(self, conversation_id: Optional[str]) -> Optional[Conversation]:
        """Get a conversation by ID."""
        if conversation_id is None:
            return None
        return self.conversations.get(conversation_id)

    def __contains__(self, conversation_id: object) -> bool:
        return conversation_id in self.conversations

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> DialogueTree:
        """
        Build a tree from an already-validated document.

        Documents look like:

            npc_id: merchant
            conversations:
              introduction:
                text: "Welcome!"
                action: "set_flag:met_merchant:true"
                choices:
                  - text: "Buy"
                    condition: "player.gold>=100"
                    next: shop
                  - text: "Bye"
        """
        dialogue_id = data.get('npc_id') or data.get('id')

        conversations = {}
        for conversation_id, conv_data in data['conversations'].items():
            choices = tuple(
                Choice(
                    text=str(choice_data.get('text', '')),
                    condition=choice_data.get('condition'),
                    action=choice_data.get('action'),
                    next=choice_data.get('next'),
                )
                for choice_data in conv_data.get('choices') or []
            )
            conversations[str(conversation_id)] = Conversation(
                id=str(conversation_id),
                text=conv_data['text'],
                choices=choices,
                next=conv_data.get('next'),
                action=conv_data.get('action'),
            )

        return cls(id=str(dialogue_id), conversations=conversations)


class DialogueProgress(StateModel):
    """
    Persisted per-NPC dialogue progress.

    Attributes:
        completed_dialogues: Conversation ids the NPC's dialogue ended on (no duplicates)
        current_conversation: Conversation the next dialogue starts from
        variables: Free-form per-NPC variables
        last_interaction_time: Epoch seconds of the last dialogue end
    """
    completed_dialogues: list[str] = Field(default_factory=list, alias='completedDialogues')
    current_conversation: Optional[str] = Field(default=None, alias='currentConversation')
    variables: dict[str, Any] = Field(default_factory=dict)
    last_interaction_time: Optional[float] = Field(default=None, alias='lastInteractionTime')

    def mark_completed(self, conversation_id: str) -> bool:
        """
        Record a completed conversation.

        Returns:
            True if the id was newly added
        """
        if conversation_id in self.completed_dialogues:
            return False
        self.completed_dialogues = [*self.completed_dialogues, conversation_id]
        return True
