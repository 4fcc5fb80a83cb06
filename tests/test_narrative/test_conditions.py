import pytest
from narrative.errors import ExpressionError
from narrative.scripting.conditions import (
    LegacyCondition,
    Namespace,
    NamespacedCondition,
    parse_condition,
)
from narrative.scripting.values import NumberValue, Operator, StringValue

def test_parse_namespaced():
    condition = parse_condition("player.gold >= 100")
    assert condition == NamespacedCondition(Namespace.PLAYER, "gold", Operator.GE, NumberValue(100))

def test_parse_legacy():
    assert parse_condition("gold>=10") == LegacyCondition("gold", Operator.GE, NumberValue(10))

def test_parse_quoted_string():
    condition = parse_condition('global.story_progress == "chapter 2"')
    assert condition.literal == StringValue("chapter 2")

@pytest.mark.parametrize("expression", [
    "player.gold => 100",
    "gold >= 10",
    "enemy.hp>0",
    "player.gold",
    "just some words",
    "global.name >< abc",
    "player.gold > = 100",
    "gold<>5",
])
def test_parse_malformed(expression):
    with pytest.raises(ExpressionError):
        parse_condition(expression)

@pytest.mark.parametrize("expression", ["", "   ", None])
def test_blank_is_true(evaluator, expression):
    assert evaluator.evaluate(expression) is True

def test_choice_filter_on_gold(evaluator, player):
    player.set_stat("gold", 50)
    assert evaluator.evaluate("player.gold>=100") is False

    player.set_stat("gold", 150)
    assert evaluator.evaluate("player.gold>=100") is True

def test_unset_flag_is_false(evaluator):
    assert evaluator.evaluate("flags.shop_unlocked==true") is False
    assert evaluator.evaluate("flags.shop_unlocked==false") is True

def test_set_flag_is_read(evaluator, save_manager):
    save_manager.set_flag("shop_unlocked", True)
    assert evaluator.evaluate("flags.shop_unlocked == TRUE") is True

def test_missing_global_defaults_to_zero(evaluator):
    assert evaluator.evaluate("global.reputation>=10") is False
    assert evaluator.evaluate("global.reputation==0") is True

def test_string_global(evaluator, global_store):
    global_store.set("story_progress", "chapter2")

    assert evaluator.evaluate('global.story_progress=="chapter2"') is True
    assert evaluator.evaluate("global.story_progress!=intro") is True

def test_numeric_string_global_is_coerced(evaluator, global_store):
    global_store.set("count", "12")
    assert evaluator.evaluate("global.count>10") is True

def test_camel_case_stat_names(evaluator):
    assert evaluator.evaluate("player.maxHealth==100") is True
    assert evaluator.evaluate("player.max_health==100") is True

def test_unknown_player_stat_is_false(evaluator, caplog):
    assert evaluator.evaluate("player.mana>=0") is False
    assert "player.mana" in caplog.text

def test_legacy_grammar_reads_player_stats(evaluator, player):
    player.set_stat("level", 3)

    assert evaluator.evaluate("level>=3") is True
    assert evaluator.evaluate("level<3") is False
    assert evaluator.evaluate("reputation>=0") is False

def test_malformed_is_false(evaluator, caplog):
    assert evaluator.evaluate("player.gold ~ 5") is False
    assert "Malformed condition" in caplog.text

def test_cross_type_ordering_is_false(evaluator, global_store):
    global_store.set("story_progress", "chapter2")
    assert evaluator.evaluate("global.story_progress>=1") is False

def test_unsupported_global_type_is_false(evaluator, global_store):
    global_store.set("party", ["a", "b"])
    assert evaluator.evaluate("global.party==1") is False

def test_evaluation_is_deterministic(evaluator, player):
    player.set_stat("gold", 120)
    expression = "player.gold>=100"
    assert evaluator.evaluate(expression) == evaluator.evaluate(expression)

def test_get_context(evaluator, save_manager, global_store):
    save_manager.set_flag("met_merchant", True)
    global_store.set("reputation", 4)

    context = evaluator.get_context()

    assert context["player"]["maxHealth"] == 100
    assert context["flags"] == {"met_merchant": True}
    assert context["global"] == {"reputation": 4}

def test_debug_test_logs_context(evaluator, caplog):
    with caplog.at_level("INFO"):
        assert evaluator.debug_test("player.level==1") is True
    assert "player.level==1" in caplog.text

def test_bogus_operator_is_false(evaluator, global_store):
    global_store.set("name", "zed")
    assert evaluator.evaluate("global.name >< abc") is False
    assert evaluator.evaluate("global.name > abc") is True
