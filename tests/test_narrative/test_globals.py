from narrative.save.globals import GlobalVariableStore, is_number

def test_get_set(global_store, save_backend):
    assert global_store.get("reputation") is None
    assert global_store.get("reputation", 0) == 0

    global_store.set("reputation", 5)

    assert global_store.get("reputation") == 5
    assert global_store.has("reputation")
    assert save_backend.read()["customData"] == {"reputation": 5}

def test_add(global_store):
    assert global_store.add("reputation", 3) is True
    assert global_store.add("reputation", 2) is True
    assert global_store.get("reputation") == 5

def test_add_to_non_number(global_store):
    global_store.set("story_progress", "intro")
    assert global_store.add("story_progress", 1) is False
    assert global_store.get("story_progress") == "intro"

    global_store.set("flag", True)
    assert global_store.add("flag", 1) is False

def test_remove_and_clear(global_store):
    global_store.set("a", 1)
    global_store.set("b", 2)

    global_store.remove("a")
    global_store.remove("missing")
    assert global_store.get_all() == {"b": 2}

    global_store.clear()
    assert global_store.get_all() == {}

def test_get_all_is_a_copy(global_store):
    global_store.set("a", 1)
    snapshot = global_store.get_all()
    snapshot["a"] = 2

    assert global_store.get("a") == 1

def test_initialize_defaults_keeps_existing(global_store):
    global_store.set("reputation", 7)
    global_store.initialize_defaults()

    assert global_store.get("reputation") == 7
    assert global_store.get("story_progress") == "intro"
    assert global_store.get("player_name") == "Adventurer"

def test_stores_are_independent(save_manager):
    from narrative.save.manager import SaveManager

    other = GlobalVariableStore(SaveManager())
    other.set("reputation", 99)

    assert GlobalVariableStore(save_manager).get("reputation") is None

def test_is_number():
    assert is_number(1)
    assert is_number(1.5)
    assert not is_number(True)
    assert not is_number("1")
