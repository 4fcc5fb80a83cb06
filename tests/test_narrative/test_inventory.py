from narrative.components.inventory import Inventory
from narrative.inventory.items import DEFAULT_ITEMS, ItemCatalog

def test_add_stacks():
    inventory = Inventory()
    inventory.add_item("key", 1, name="Key", item_type="key_item")
    inventory.add_item("key", 2)

    assert inventory.count_item("key") == 3
    assert inventory.get_item_ids() == ["key"]
    assert inventory.get_item("key").type == "key_item"

def test_new_entry_defaults_name_to_id():
    inventory = Inventory()
    inventory.add_item("pebble")
    assert inventory.get_item("pebble").name == "pebble"

def test_zero_quantity_never_kept():
    inventory = Inventory()
    inventory.add_item("key", 2)
    inventory.remove_item("key", 2)
    assert inventory.get_item("key") is None

    assert inventory.add_item("key", 0) is None
    assert inventory.items == []

    inventory.add_item("coin", 1)
    assert inventory.add_item("coin", -1) is None
    assert inventory.items == []

def test_has_item():
    inventory = Inventory()
    inventory.add_item("arrow", 5)

    assert inventory.has_item("arrow", 5)
    assert not inventory.has_item("arrow", 6)
    assert not inventory.has_item("bow")

def test_inventory_serialization():
    inventory = Inventory()
    inventory.add_item("key", 2, name="Key", item_type="key_item")

    data = inventory.model_dump()
    assert Inventory.model_validate(data).count_item("key") == 2

def test_catalog_defaults():
    catalog = ItemCatalog()

    assert catalog.get_name("health_potion") == "Health Potion"
    assert catalog.get_type("key") == "key_item"
    assert catalog.get_name("unknown") == "unknown"
    assert catalog.get_type("unknown") == "misc"
    assert [i.id for i in catalog.get_items_by_type("consumable")] == ["health_potion", "mana_potion"]
    assert len(DEFAULT_ITEMS) == 5

def test_catalog_load_items(tmp_path):
    path = tmp_path / "items.yaml"
    path.write_text(
        "items:\n"
        "  - {id: lantern, name: Old Lantern, type: tool}\n"
        "  - {name: nameless}\n"
        "  - {id: rope}\n"
    )
    catalog = ItemCatalog()

    assert catalog.load_items(path) == 2
    assert catalog.get_name("lantern") == "Old Lantern"
    assert catalog.get_name("rope") == "rope"
    assert catalog.get_item("health_potion") is not None

def test_catalog_missing_file(tmp_path):
    assert ItemCatalog().load_items(tmp_path / "nope.json") == 0
