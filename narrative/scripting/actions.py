"""
Action processor - the command language run by dialogue nodes.

An action string is a `;`-separated sequence of `verb:arg:arg` commands:

    add_stat:gold:50;add_item:health_potion:2;set_flag:met_merchant:true

Each sub-command is parsed into one of the command dataclasses below
and executed in order, so later commands see earlier side effects.
A malformed sub-command is logged and skipped; the rest still run.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Union

from runtime.core.events import WorldEvent
from narrative.errors import CommandError
from narrative.scripting.values import SIGNED_INTEGER, parse_scalar

if TYPE_CHECKING:
    from runtime.core.events import EventBus
    from narrative.save.globals import GlobalVariableStore
    from narrative.save.manager import SaveManager
    from narrative.world.abilities import AbilityUnlockSystem
    from narrative.world.player import Player

logger = logging.getLogger(__name__)

SIGNED_FLOAT = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)$')

EventHandler = Callable[[], None]


@dataclass(frozen=True)
class AddStat:
    stat: str
    amount: int


@dataclass(frozen=True)
class SetStat:
    stat: str
    value: int


@dataclass(frozen=True)
class AddItem:
    item_id: str
    quantity: int


@dataclass(frozen=True)
class RemoveItem:
    item_id: str
    quantity: int


@dataclass(frozen=True)
class SetFlag:
    name: str
    value: bool


@dataclass(frozen=True)
class SetGlobal:
    name: str
    value: Union[int, float, str]


@dataclass(frozen=True)
class AddGlobal:
    name: str
    amount: Union[int, float]


@dataclass(frozen=True)
class UnlockAbility:
    ability_id: str


@dataclass(frozen=True)
class Teleport:
    map_id: str
    x: int
    y: int


@dataclass(frozen=True)
class TriggerEvent:
    name: str


Command = Union[
    AddStat, SetStat, AddItem, RemoveItem, SetFlag,
    SetGlobal, AddGlobal, UnlockAbility, Teleport, TriggerEvent,
]


# Argument parsers

def _int_arg(text: str, command: str) -> int:
    text = text.strip()
    if not SIGNED_INTEGER.match(text):
        raise CommandError("Expected an integer", command)
    return int(text)


def _float_arg(text: str, command: str) -> int | float:
    text = text.strip()
    if not SIGNED_FLOAT.match(text):
        raise CommandError("Expected a number", command)
    # Whole amounts stay int so integer globals stay integers
    if SIGNED_INTEGER.match(text):
        return int(text)
    return float(text)


def _bool_arg(text: str, command: str) -> bool:
    lowered = text.strip().lower()
    if lowered == 'true':
        return True
    if lowered == 'false':
        return False
    raise CommandError("Expected true or false", command)


def _coordinates(text: str, command: str) -> tuple[int, int]:
    parts = text.split(',')
    if len(parts) != 2:
        raise CommandError("Expected coordinates as x,y", command)
    return _int_arg(parts[0], command), _int_arg(parts[1], command)


# verb -> (arity, builder)
_PARSERS: dict[str, tuple[int, Callable[[list[str], str], Command]]] = {
    'add_stat': (2, lambda a, c: AddStat(a[0], _int_arg(a[1], c))),
    'set_stat': (2, lambda a, c: SetStat(a[0], _int_arg(a[1], c))),
    'add_item': (2, lambda a, c: AddItem(a[0], _int_arg(a[1], c))),
    'remove_item': (2, lambda a, c: RemoveItem(a[0], _int_arg(a[1], c))),
    'set_flag': (2, lambda a, c: SetFlag(a[0], _bool_arg(a[1], c))),
    'set_global': (2, lambda a, c: SetGlobal(a[0], parse_scalar(a[1]))),
    'add_global': (2, lambda a, c: AddGlobal(a[0], _float_arg(a[1], c))),
    'unlock_ability': (1, lambda a, c: UnlockAbility(a[0])),
    'teleport': (2, lambda a, c: Teleport(a[0], *_coordinates(a[1], c))),
    'trigger_event': (1, lambda a, c: TriggerEvent(a[0])),
}

VERBS = frozenset(_PARSERS)


def parse_command(command: str) -> Command:
    """
    Parse one `verb:arg:...` sub-command.

    Raises:
        CommandError: Unknown verb, wrong arity, empty or non-numeric argument
    """
    text = command.strip()
    verb, *args = text.split(':')
    verb = verb.strip()

    if verb not in _PARSERS:
        raise CommandError(f"Unknown action '{verb}'", text)

    arity, build = _PARSERS[verb]
    if len(args) != arity:
        raise CommandError(f"{verb} takes {arity} argument(s)", text)

    args = [arg.strip() for arg in args]
    if not all(args):
        raise CommandError(f"{verb} has an empty argument", text)

    return build(args, text)


class ActionProcessor:
    """
    Executes action strings against the player and story state.

    Usage:
        processor = ActionProcessor(player, save_manager, global_store,
                                    abilities=abilities, event_bus=bus)
        processor.process_action("add_stat:gold:50;add_stat:experience:10")

        # Custom trigger_event names
        processor.register_event_handler("festival_start", start_festival)
    """

    def __init__(
        self,
        player: Player,
        save_manager: SaveManager,
        global_store: GlobalVariableStore,
        abilities: Optional[AbilityUnlockSystem] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self.player = player
        self.save_manager = save_manager
        self.global_store = global_store
        self.abilities = abilities
        self.event_bus = event_bus

        self._executors: dict[type, Callable[[Command], None]] = {
            AddStat: self._add_stat,
            SetStat: self._set_stat,
            AddItem: self._add_item,
            RemoveItem: self._remove_item,
            SetFlag: self._set_flag,
            SetGlobal: self._set_global,
            AddGlobal: self._add_global,
            UnlockAbility: self._unlock_ability,
            Teleport: self._teleport,
            TriggerEvent: self._trigger_event,
        }
        self._event_handlers: dict[str, EventHandler] = {
            'level_up': self._level_up,
            'shop_open': self._shop_open,
        }

    def register_event_handler(self, name: str, handler: EventHandler) -> None:
        """Add (or replace) a handler for `trigger_event:<name>`."""
        self._event_handlers[name] = handler

    def process_action(self, action_string: Optional[str]) -> None:
        """Run every sub-command of an action string in order."""
        if not action_string or not action_string.strip():
            return

        for part in action_string.split(';'):
            if not part.strip():
                continue
            try:
                self.execute(parse_command(part))
            except CommandError as e:
                logger.error(f"Skipped action: {e}")

    def execute(self, command: Command) -> None:
        """Execute one parsed command."""
        self._executors[type(command)](command)

    # Executors

    def _add_stat(self, command: AddStat) -> None:
        if not self.player.add_stat(command.stat, command.amount):
            raise CommandError(f"Unknown stat '{command.stat}'")

    def _set_stat(self, command: SetStat) -> None:
        if not self.player.set_stat(command.stat, command.value):
            raise CommandError(f"Unknown stat '{command.stat}'")

    def _add_item(self, command: AddItem) -> None:
        self.player.add_item(command.item_id, command.quantity)

    def _remove_item(self, command: RemoveItem) -> None:
        self.player.remove_item(command.item_id, command.quantity)

    def _set_flag(self, command: SetFlag) -> None:
        self.save_manager.set_flag(command.name, command.value)
        logger.info(f"Flag set: {command.name} = {command.value}")

    def _set_global(self, command: SetGlobal) -> None:
        self.global_store.set(command.name, command.value)
        logger.info(f"Global variable set: {command.name} = {command.value!r}")

    def _add_global(self, command: AddGlobal) -> None:
        if not self.global_store.add(command.name, command.amount):
            raise CommandError(f"Global variable '{command.name}' is not a number")

    def _unlock_ability(self, command: UnlockAbility) -> None:
        if self.abilities is None:
            logger.warning("Ability unlock system is not set up")
            return
        self.abilities.unlock_ability(command.ability_id)

    def _teleport(self, command: Teleport) -> None:
        logger.info(f"Teleport: {command.map_id} ({command.x}, {command.y})")
        self._publish(WorldEvent.TELEPORT_REQUESTED, map_id=command.map_id, x=command.x, y=command.y)

    def _trigger_event(self, command: TriggerEvent) -> None:
        handler = self._event_handlers.get(command.name)
        if handler is None:
            logger.info(f"Unhandled event: {command.name}")
            return
        logger.info(f"Event triggered: {command.name}")
        try:
            handler()
        except Exception:
            logger.exception(f"Error in event handler for {command.name}")

    # Built-in events

    def _level_up(self) -> None:
        level = self.player.level_up()
        self._publish(WorldEvent.LEVEL_UP, level=level)

    def _shop_open(self) -> None:
        self._publish(WorldEvent.SHOP_OPEN_REQUESTED)

    def _publish(self, event_type: WorldEvent, **data) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(event_type, **data)
