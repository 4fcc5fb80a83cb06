import asyncio
import pytest
from runtime.resources.documents import DocumentSource, MemoryDocumentSource
from narrative.components.dialogue import DialogueTree
from narrative.dialogue.loader import DialogueLoader

class SlowSource(DocumentSource):
    """Source whose fetches block until released."""

    def __init__(self, documents):
        self.documents = documents
        self.calls = 0
        self.release = None

    async def fetch(self, document_id):
        self.calls += 1
        await self.release.wait()
        if document_id not in self.documents:
            raise OSError("connection reset")
        return self.documents[document_id]

def test_load_builds_tree(loader):
    tree = asyncio.run(loader.load_dialogue("merchant"))

    assert isinstance(tree, DialogueTree)
    assert tree.id == "merchant"
    assert "introduction" in tree
    intro = tree.get_conversation("introduction")
    assert intro.action == "set_flag:met_merchant:true"
    assert [c.text for c in intro.choices] == ["Show me your wares", "Any news?", "Goodbye"]
    assert intro.choices[0].condition == "player.gold>=100"
    assert intro.choices[2].next is None

def test_trees_are_cached(loader, document_source):
    first = asyncio.run(loader.load_dialogue("merchant"))
    second = asyncio.run(loader.load_dialogue("merchant"))

    assert first is second
    assert document_source.fetch_count["merchant"] == 1
    assert loader.is_cached("merchant")
    assert loader.get_cached_dialogues() == ["merchant"]

def test_concurrent_loads_are_coalesced(merchant_document):
    source = SlowSource({"merchant": merchant_document})
    loader = DialogueLoader(source)

    async def scenario():
        source.release = asyncio.Event()
        pending = asyncio.gather(*(loader.load_dialogue("merchant") for _ in range(3)))
        await asyncio.sleep(0)
        source.release.set()
        return await pending

    trees = asyncio.run(scenario())

    assert source.calls == 1
    assert trees[0] is trees[1] is trees[2]

def test_concurrent_failures_are_shared_and_not_cached():
    source = SlowSource({})
    loader = DialogueLoader(source)

    async def scenario():
        source.release = asyncio.Event()
        pending = asyncio.gather(loader.load_dialogue("ghost"), loader.load_dialogue("ghost"))
        await asyncio.sleep(0)
        source.release.set()
        return await pending

    assert asyncio.run(scenario()) == [None, None]
    assert source.calls == 1
    assert not loader.is_cached("ghost")

def test_missing_dialogue_returns_none(loader, caplog):
    assert asyncio.run(loader.load_dialogue("nobody")) is None
    assert "nobody" in caplog.text
    assert not loader.is_cached("nobody")

def test_failure_is_retried(loader, document_source, merchant_document):
    assert asyncio.run(loader.load_dialogue("late")) is None

    merchant_document["npc_id"] = "late"
    document_source.add("late", merchant_document)

    tree = asyncio.run(loader.load_dialogue("late"))
    assert tree.id == "late"
    assert document_source.fetch_count["late"] == 2

@pytest.mark.parametrize("document", [
    {"conversations": {"introduction": {"text": "hi"}}},
    {"npc_id": "x", "conversations": {}},
    {"npc_id": "x", "conversations": {"introduction": {"text": ""}}},
    {"npc_id": "x", "conversations": {"introduction": {"next": "a"}}},
    {"npc_id": "x", "conversations": {"introduction": {"text": "hi", "choices": "yes"}}},
    {"npc_id": "x", "conversations": {"introduction": {"text": "hi", "choices": [{"next": "a"}]}}},
    ["not", "a", "mapping"],
])
def test_invalid_documents_are_rejected(document, caplog):
    loader = DialogueLoader(MemoryDocumentSource({"bad": document}))

    assert asyncio.run(loader.load_dialogue("bad")) is None
    assert "invalid document" in caplog.text
    assert not loader.is_cached("bad")

def test_id_alias_is_accepted():
    loader = DialogueLoader(MemoryDocumentSource({
        "guard": {"id": "guard", "conversations": {"introduction": {"text": "Halt!"}}},
    }))

    tree = asyncio.run(loader.load_dialogue("guard"))
    assert tree.id == "guard"
    assert not tree.get_conversation("introduction").has_choices

def test_get_conversation(loader):
    conversation = asyncio.run(loader.get_conversation("merchant", "farewell"))
    assert conversation.text == "Come again!"

    assert asyncio.run(loader.get_conversation("merchant", "nope")) is None
    assert asyncio.run(loader.get_conversation("nobody", "introduction")) is None

def test_clear_cache(loader, document_source):
    asyncio.run(loader.load_dialogue("merchant"))
    loader.clear_cache()

    assert loader.get_cached_dialogues() == []
    asyncio.run(loader.load_dialogue("merchant"))
    assert document_source.fetch_count["merchant"] == 2
