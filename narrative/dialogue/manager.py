"""
Dialogue manager - the conversation state machine.

States:
    INACTIVE -> TYPING               start_dialogue(npc)
    TYPING -> WAITING_FOR_CHOICE     complete_typing(), eligible choices
    TYPING -> WAITING_TO_ADVANCE     complete_typing(), no eligible choices, has next
    WAITING_FOR_CHOICE -> TYPING     select_choice(index), choice has next
    WAITING_TO_ADVANCE -> TYPING     advance(), conversation has next
    * -> INACTIVE                    end_dialogue() or a missing next

The presentation layer drives the machine through the methods above
or through `handle(message)`, and listens on the EventBus for
DialogueEvent notifications. Calls that are invalid for the current
state are ignored.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from runtime.core.events import DialogueEvent, EventBus
from narrative.components.dialogue import (
    Choice,
    Conversation,
    DialogueProgress,
    DialogueState,
    DialogueTree,
)
from narrative.dialogue.loader import DialogueLoader
from narrative.errors import ConversationReferenceError, StateError

if TYPE_CHECKING:
    from narrative.save.manager import SaveManager
    from narrative.scripting.actions import ActionProcessor
    from narrative.scripting.conditions import ConditionEvaluator
    from narrative.world.npc import NPC

logger = logging.getLogger(__name__)


# Presentation -> manager messages

@dataclass(frozen=True)
class Advance:
    pass


@dataclass(frozen=True)
class SelectChoice:
    index: int


@dataclass(frozen=True)
class CompleteTyping:
    pass


@dataclass(frozen=True)
class CancelDialogue:
    pass


DialogueMessage = Union[Advance, SelectChoice, CompleteTyping, CancelDialogue]


@dataclass(frozen=True)
class DialogueSnapshot:
    """Immutable view of the manager's state."""
    state: DialogueState
    npc: Optional[NPC] = None
    tree: Optional[DialogueTree] = None
    conversation_id: Optional[str] = None
    conversation: Optional[Conversation] = None
    choices: tuple[Choice, ...] = ()

    @property
    def is_active(self) -> bool:
        return self.state is not DialogueState.INACTIVE


class DialogueManager:
    """
    Runs one dialogue session at a time.

    Usage:
        manager = DialogueManager(loader, evaluator, processor, save_manager, bus)
        bus.subscribe(DialogueEvent.CONVERSATION_CHANGED, dialogue_box.show)

        if await manager.start_dialogue(npc):
            ...
        manager.complete_typing()   # text fully rendered
        manager.select_choice(0)    # or manager.advance()
    """

    def __init__(
        self,
        loader: DialogueLoader,
        evaluator: ConditionEvaluator,
        processor: ActionProcessor,
        save_manager: SaveManager,
        event_bus: EventBus,
        intro_conversation_id: str = "introduction",
        clock: Callable[[], float] = time.time,
    ):
        self.loader = loader
        self.evaluator = evaluator
        self.processor = processor
        self.save_manager = save_manager
        self.events = event_bus
        self.intro_conversation_id = intro_conversation_id
        self._clock = clock

        self._state = DialogueState.INACTIVE
        self._starting = False
        self._npc: Optional[NPC] = None
        self._tree: Optional[DialogueTree] = None
        self._conversation_id: Optional[str] = None
        self._conversation: Optional[Conversation] = None
        self._choices: tuple[Choice, ...] = ()

        self._message_handlers: dict[type, Callable[[Any], None]] = {
            Advance: lambda message: self.advance(),
            SelectChoice: lambda message: self.select_choice(message.index),
            CompleteTyping: lambda message: self.complete_typing(),
            CancelDialogue: lambda message: self.end_dialogue(),
        }

    # Properties

    @property
    def state(self) -> DialogueState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is not DialogueState.INACTIVE

    @property
    def is_starting(self) -> bool:
        return self._starting

    def get_state(self) -> DialogueSnapshot:
        """Get an immutable snapshot of the current session."""
        return DialogueSnapshot(
            state=self._state,
            npc=self._npc,
            tree=self._tree,
            conversation_id=self._conversation_id,
            conversation=self._conversation,
            choices=self._choices,
        )

    # Transitions

    async def start_dialogue(self, npc: NPC) -> bool:
        """
        Start a dialogue with an NPC.

        Args:
            npc: The NPC to talk to

        Returns:
            True if the dialogue started
        """
        try:
            self._require(not self.is_active and not self._starting, "a dialogue is already active")
        except StateError as e:
            logger.warning(f"Cannot start dialogue with {npc.npc_id}: {e}")
            return False

        self._starting = True
        try:
            tree = await self.loader.load_dialogue(npc.dialogue_id)
        finally:
            self._starting = False

        if tree is None:
            logger.error(f"No dialogue data for {npc.npc_id} ({npc.dialogue_id})")
            return False

        conversation_id = self._resolve_start_conversation(npc)
        conversation = tree.get_conversation(conversation_id)
        if conversation is None:
            logger.error(f"Start conversation not found: {npc.dialogue_id}/{conversation_id}")
            return False

        self._npc = npc
        self._tree = tree
        logger.info(f"Dialogue started: {npc.npc_id} - {conversation_id}")
        self._enter(conversation, starting=True)
        return True

    def complete_typing(self) -> None:
        """Called by the presentation layer once the text is fully shown."""
        if self._state is not DialogueState.TYPING:
            return

        conversation = self._conversation
        choices = self._available_choices(conversation)
        if choices != self._choices:
            self._choices = choices
            self.events.publish(
                DialogueEvent.CONVERSATION_CHANGED,
                conversation=conversation,
                choices=choices,
            )
            if self._state is not DialogueState.TYPING:
                return

        if self._choices:
            self._state = DialogueState.WAITING_FOR_CHOICE
        elif conversation.next:
            self._state = DialogueState.WAITING_TO_ADVANCE
        else:
            self.end_dialogue()
            return

        self.events.publish(DialogueEvent.TYPING_COMPLETE, conversation=conversation, state=self._state)

    def select_choice(self, index: int) -> None:
        """
        Pick one of the offered choices.

        Args:
            index: Position in the offered (condition-filtered) list
        """
        try:
            self._require(self._state is DialogueState.WAITING_FOR_CHOICE, "not waiting for a choice")
            self._require(0 <= index < len(self._choices), f"choice index out of range: {index}")
        except StateError as e:
            logger.debug(f"select_choice ignored: {e}")
            return

        choice = self._choices[index]
        self.processor.process_action(choice.action)

        # The action may have ended the dialogue
        if not self.is_active:
            return
        self._follow(choice.next)

    def advance(self) -> None:
        """Continue to the conversation's next node."""
        if self._state is not DialogueState.WAITING_TO_ADVANCE:
            return
        self._follow(self._conversation.next)

    def end_dialogue(self) -> None:
        """End the session, recording progress for the NPC."""
        if not self.is_active:
            return

        npc = self._npc
        self._save_progress(npc.npc_id, self._conversation_id)

        self._state = DialogueState.INACTIVE
        self._npc = None
        self._tree = None
        self._conversation_id = None
        self._conversation = None
        self._choices = ()

        logger.info(f"Dialogue ended: {npc.npc_id}")
        self.events.publish(DialogueEvent.DIALOGUE_ENDED, npc=npc)

    def handle(self, message: DialogueMessage) -> None:
        """Apply a presentation message."""
        handler = self._message_handlers.get(type(message))
        if handler is None:
            logger.warning(f"Unknown dialogue message: {message!r}")
            return
        handler(message)

    # Internal

    def _resolve_start_conversation(self, npc: NPC) -> str:
        progress = self.save_manager.get_dialogue_progress(npc.npc_id)
        if progress is not None and progress.current_conversation:
            return progress.current_conversation
        return self.intro_conversation_id

    def _follow(self, conversation_id: Optional[str]) -> None:
        if conversation_id:
            self._move_to(conversation_id)
        else:
            self.end_dialogue()

    def _move_to(self, conversation_id: str) -> None:
        conversation = self._tree.get_conversation(conversation_id)
        if conversation is None:
            error = ConversationReferenceError(
                f"Conversation not found: {self._tree.id}/{conversation_id}"
            )
            logger.error(str(error))
            self.end_dialogue()
            return

        self._enter(conversation)

    def _enter(self, conversation: Conversation, starting: bool = False) -> None:
        self._conversation_id = conversation.id
        self._conversation = conversation
        self._choices = ()
        self._state = DialogueState.TYPING

        self.processor.process_action(conversation.action)
        if not self.is_active:
            return

        if starting:
            self.events.publish(DialogueEvent.DIALOGUE_STARTED, npc=self._npc, tree=self._tree)
            if not self.is_active:
                return

        # Re-evaluated on every visit
        self._choices = self._available_choices(conversation)
        self.events.publish(
            DialogueEvent.CONVERSATION_CHANGED,
            conversation=conversation,
            choices=self._choices,
        )

    def _available_choices(self, conversation: Conversation) -> tuple[Choice, ...]:
        return tuple(
            choice for choice in conversation.choices
            if self.evaluator.evaluate(choice.condition)
        )

    def _save_progress(self, npc_id: str, conversation_id: str) -> None:
        progress = self.save_manager.get_dialogue_progress(npc_id) or DialogueProgress()
        progress.mark_completed(conversation_id)
        progress.current_conversation = conversation_id
        progress.last_interaction_time = self._clock()
        self.save_manager.update_dialogue_progress(npc_id, progress)

    @staticmethod
    def _require(condition: bool, message: str) -> None:
        if not condition:
            raise StateError(message)
