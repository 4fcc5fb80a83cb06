"""
Condition evaluator - boolean expressions over game state.

Two grammars are supported:

    player.gold >= 100          namespaced: player | flags | global
    flags.shop_unlocked==true
    global.story_progress == "chapter2"

    gold>=10                    legacy: numeric player stats only, no spaces

Expressions are parsed into NamespacedCondition / LegacyCondition
first, then evaluated against the live state. Evaluation never
raises: malformed expressions and missing player stats yield False
and are logged.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Union

from narrative.errors import ExpressionError
from narrative.scripting.values import (
    NumberValue,
    Operator,
    OPERATOR_PATTERN,
    Value,
    compare,
    from_native,
    parse_literal,
)

if TYPE_CHECKING:
    from narrative.save.globals import GlobalVariableStore
    from narrative.save.manager import SaveManager
    from narrative.world.player import Player

logger = logging.getLogger(__name__)


class Namespace(Enum):
    """Which store the left side of a condition reads."""
    PLAYER = 'player'
    FLAGS = 'flags'
    GLOBAL = 'global'


NAMESPACED_PATTERN = re.compile(
    rf'^(player|flags|global)\.(\w+)\s*({OPERATOR_PATTERN})\s*([^\s<>=!].*)$'
)
LEGACY_PATTERN = re.compile(rf'^(\w+)({OPERATOR_PATTERN})([^\s<>=!]\S*)$')


@dataclass(frozen=True)
class NamespacedCondition:
    namespace: Namespace
    prop: str
    operator: Operator
    literal: Value


@dataclass(frozen=True)
class LegacyCondition:
    prop: str
    operator: Operator
    literal: Value


Condition = Union[NamespacedCondition, LegacyCondition]


@lru_cache(maxsize=512)
def parse_condition(expression: str) -> Condition:
    """
    Parse a non-blank condition expression.

    Raises:
        ExpressionError: If the expression matches neither grammar
    """
    text = expression.strip()

    match = NAMESPACED_PATTERN.match(text)
    if match:
        namespace, prop, symbol, literal = match.groups()
        return NamespacedCondition(
            namespace=Namespace(namespace),
            prop=prop,
            operator=Operator.from_symbol(symbol),
            literal=parse_literal(literal),
        )

    match = LEGACY_PATTERN.match(text)
    if match:
        prop, symbol, literal = match.groups()
        return LegacyCondition(
            prop=prop,
            operator=Operator.from_symbol(symbol),
            literal=parse_literal(literal),
        )

    raise ExpressionError(f"Malformed condition: {expression!r}")


class ConditionEvaluator:
    """
    Evaluates condition expressions against player, flag and global state.

    Usage:
        evaluator = ConditionEvaluator(player, save_manager, global_store)
        evaluator.evaluate("player.gold>=100")
        evaluator.evaluate("")  # True: no condition
    """

    def __init__(
        self,
        player: Player,
        save_manager: SaveManager,
        global_store: GlobalVariableStore,
    ):
        self.player = player
        self.save_manager = save_manager
        self.global_store = global_store

    def evaluate(self, expression: str | None) -> bool:
        """Evaluate an expression; blank means no condition (True)."""
        if expression is None or not expression.strip():
            return True

        try:
            condition = parse_condition(expression)
            if isinstance(condition, NamespacedCondition):
                return self._evaluate_namespaced(condition)
            return self._evaluate_legacy(condition)
        except ExpressionError as e:
            logger.warning(str(e))
            return False
        except Exception:
            logger.exception(f"Condition evaluation error: {expression!r}")
            return False

    def _evaluate_namespaced(self, condition: NamespacedCondition) -> bool:
        namespace, prop = condition.namespace, condition.prop

        if namespace is Namespace.PLAYER:
            current = self.player.get_stat(prop)
            if current is None:
                raise ExpressionError(f"Unknown value: player.{prop}")
        elif namespace is Namespace.FLAGS:
            current = self.save_manager.get_flag(prop)
        else:
            current = self.global_store.get(prop, 0)

        left = from_native(current)
        if left is None:
            raise ExpressionError(
                f"Unsupported value type for {namespace.value}.{prop}: {type(current).__name__}"
            )
        return compare(left, condition.operator, condition.literal)

    def _evaluate_legacy(self, condition: LegacyCondition) -> bool:
        current = self.player.get_stat(condition.prop)
        if current is None:
            raise ExpressionError(f"Unknown player stat: {condition.prop}")
        return compare(NumberValue(current), condition.operator, condition.literal)

    # Debugging

    def get_context(self) -> dict[str, Any]:
        """Snapshot of everything conditions can read."""
        return {
            'player': self.player.stats.as_dict(),
            'flags': self.save_manager.get_all_flags(),
            'global': self.global_store.get_all(),
        }

    def debug_test(self, expression: str) -> bool:
        """Evaluate and log the result together with the current context."""
        result = self.evaluate(expression)
        logger.info(f"Condition {expression!r} -> {result} (context: {self.get_context()})")
        return result
