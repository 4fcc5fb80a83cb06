import os
import sys
import pytest

# Ensure runtime/narrative packages can be imported
sys.path.append(os.getcwd())

MERCHANT_DIALOGUE = {
    "npc_id": "merchant",
    "conversations": {
        "introduction": {
            "text": "Welcome to my shop!",
            "action": "set_flag:met_merchant:true",
            "choices": [
                {"text": "Show me your wares", "condition": "player.gold>=100", "next": "shop"},
                {"text": "Any news?", "next": "rumors"},
                {"text": "Goodbye"},
            ],
        },
        "shop": {
            "text": "Here you go.",
            "action": "add_stat:gold:-100;add_item:health_potion:1",
            "next": "farewell",
        },
        "rumors": {
            "text": "They say the old mill is haunted.",
            "choices": [
                {"text": "Tell me more", "condition": "global.reputation>=10", "next": "secret"},
                {"text": "Thanks", "action": "add_global:reputation:1", "next": "farewell"},
            ],
        },
        "secret": {
            "text": "The miller hid a key under the stairs.",
            "action": "add_item:key:1",
            "next": "missing_node",
        },
        "farewell": {
            "text": "Come again!",
        },
    },
}


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from runtime.core.events import EventBus
    return EventBus()


@pytest.fixture
def save_backend():
    from narrative.save.manager import MemorySaveBackend
    return MemorySaveBackend()


@pytest.fixture
def save_manager(save_backend, event_bus):
    """SaveManager over an in-memory backend."""
    from narrative.save.manager import SaveManager
    return SaveManager(save_backend, event_bus, clock=lambda: 1000.0)


@pytest.fixture
def global_store(save_manager):
    from narrative.save.globals import GlobalVariableStore
    return GlobalVariableStore(save_manager)


@pytest.fixture
def player(save_manager):
    from narrative.world.player import Player
    return Player(save_manager)


@pytest.fixture
def abilities(global_store, event_bus):
    from narrative.world.abilities import AbilityUnlockSystem
    return AbilityUnlockSystem(global_store, event_bus)


@pytest.fixture
def evaluator(player, save_manager, global_store):
    from narrative.scripting.conditions import ConditionEvaluator
    return ConditionEvaluator(player, save_manager, global_store)


@pytest.fixture
def processor(player, save_manager, global_store, abilities, event_bus):
    from narrative.scripting.actions import ActionProcessor
    return ActionProcessor(player, save_manager, global_store, abilities, event_bus)


@pytest.fixture
def document_source():
    """In-memory dialogue documents."""
    from runtime.resources.documents import MemoryDocumentSource
    return MemoryDocumentSource({"merchant": MERCHANT_DIALOGUE})


@pytest.fixture
def loader(document_source):
    from narrative.dialogue.loader import DialogueLoader
    return DialogueLoader(document_source)


@pytest.fixture
def dialogue_manager(loader, evaluator, processor, save_manager, event_bus):
    from narrative.dialogue.manager import DialogueManager
    return DialogueManager(
        loader, evaluator, processor, save_manager, event_bus,
        clock=lambda: 2000.0,
    )


@pytest.fixture
def merchant():
    from narrative.world.npc import create_npc
    return create_npc("merchant_001", "merchant", name="Merchant")


@pytest.fixture
def recorder(event_bus):
    """Records every dialogue notification published on the bus."""
    from runtime.core.events import DialogueEvent

    received = []

    def record(event):
        received.append(event)

    for event_type in DialogueEvent:
        event_bus.subscribe(event_type, record, weak=False)
    return received


@pytest.fixture
def merchant_document():
    """A fresh copy of the merchant dialogue document."""
    import copy
    return copy.deepcopy(MERCHANT_DIALOGUE)
