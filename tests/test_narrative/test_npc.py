from narrative.world.npc import NPC, create_npc, load_npc_definitions

def test_create_npc_defaults_dialogue_to_id():
    npc = create_npc("guard")

    assert npc == NPC("guard", "guard")
    assert npc.display_name == "guard"

def test_load_npc_definitions():
    npcs = load_npc_definitions({
        "merchant_001": {"npcId": "merchant_001", "dialogueId": "merchant", "name": "Merchant"},
        "elder": {"dialogue_id": "village_elder"},
        "cat": {},
    })

    assert npcs["merchant_001"].dialogue_id == "merchant"
    assert npcs["merchant_001"].display_name == "Merchant"
    assert npcs["elder"].dialogue_id == "village_elder"
    assert npcs["cat"].dialogue_id == "cat"
