import asyncio
import yaml
from runtime.core.config import RuntimeConfig
from runtime.core.events import DialogueEvent, EventBus
from runtime.resources.documents import MemoryDocumentSource
from narrative.components.dialogue import DialogueState
from narrative.session import NarrativeSession
from narrative.world.npc import create_npc

def test_session_runs_a_dialogue(merchant_document):
    session = NarrativeSession(MemoryDocumentSource({"merchant": merchant_document}))
    npc = create_npc("merchant_001", "merchant")

    assert asyncio.run(session.dialogue.start_dialogue(npc)) is True
    session.dialogue.complete_typing()
    session.dialogue.select_choice(0)  # "Any news?"
    session.dialogue.complete_typing()
    session.dialogue.select_choice(0)  # "Thanks"

    assert session.globals.get("reputation") == 1
    assert session.save_manager.get_flag("met_merchant") is True

def test_from_config_reads_disk(tmp_path):
    dialogues = tmp_path / "dialogues"
    dialogues.mkdir()
    (dialogues / "guard.dialogue").write_text("# hello\nHalt!\n! add_stat:gold:5\n", encoding="utf-8")
    with open(dialogues / "elder.yaml", "w") as f:
        yaml.safe_dump({"npc_id": "elder", "conversations": {"hello": {"text": "Welcome."}}}, f)

    config = RuntimeConfig(
        dialogue_path=str(dialogues),
        save_path=str(tmp_path / "save.json"),
        intro_conversation_id="hello",
    )
    bus = EventBus()
    ended = []
    def on_end(event):
        ended.append(event)
    bus.subscribe(DialogueEvent.DIALOGUE_ENDED, on_end)

    session = NarrativeSession.from_config(config, bus)

    assert asyncio.run(session.dialogue.start_dialogue(create_npc("guard"))) is True
    session.dialogue.complete_typing()
    assert session.dialogue.state is DialogueState.INACTIVE
    assert len(ended) == 1

    assert asyncio.run(session.dialogue.start_dialogue(create_npc("elder"))) is True

    # Progress and stats were written to the save file
    reloaded = NarrativeSession.from_config(config)
    assert reloaded.player.get_stat("gold") == 5
    assert reloaded.save_manager.get_dialogue_progress("guard").completed_dialogues == ["hello"]

def test_new_game():
    session = NarrativeSession(MemoryDocumentSource({}))
    session.save_manager.set_flag("x", True)

    session.new_game()

    assert session.save_manager.get_flag("x") is False
    assert session.globals.get("story_progress") == "intro"
