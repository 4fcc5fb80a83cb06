"""
Scripting - condition expressions and action commands.

Provides:
- Literal values and comparison
- ConditionEvaluator for `player.gold>=100` style conditions
- ActionProcessor for `add_stat:gold:50;set_flag:x:true` style actions
"""

from narrative.scripting.values import (
    BoolValue,
    NumberValue,
    StringValue,
    Value,
    Operator,
    parse_literal,
    coerce,
    compare,
)
from narrative.scripting.conditions import (
    Namespace,
    NamespacedCondition,
    LegacyCondition,
    Condition,
    parse_condition,
    ConditionEvaluator,
)
from narrative.scripting.actions import (
    AddStat,
    SetStat,
    AddItem,
    RemoveItem,
    SetFlag,
    SetGlobal,
    AddGlobal,
    UnlockAbility,
    Teleport,
    TriggerEvent,
    Command,
    parse_command,
    ActionProcessor,
)

__all__ = [
    'BoolValue',
    'NumberValue',
    'StringValue',
    'Value',
    'Operator',
    'parse_literal',
    'coerce',
    'compare',
    'Namespace',
    'NamespacedCondition',
    'LegacyCondition',
    'Condition',
    'parse_condition',
    'ConditionEvaluator',
    'AddStat',
    'SetStat',
    'AddItem',
    'RemoveItem',
    'SetFlag',
    'SetGlobal',
    'AddGlobal',
    'UnlockAbility',
    'Teleport',
    'TriggerEvent',
    'Command',
    'parse_command',
    'ActionProcessor',
]
