import json
from pathlib import Path

from appearance_manager.enginelib.state_store import JsonStateStore, MemoryStateStore


def test_json_state_store_persists_atomically(tmp_path):
    path = tmp_path / "state" / "selection.json"
    store = JsonStateStore(path)

    assert store.get("selectedThemeIndex", 0) == 0
    store.set("selectedThemeIndex", 3)
    store.set("selectedPencilID", "pencil_gold")

    with open(path, "r", encoding="utf-8") as handle:
        persisted = json.load(handle)
    assert persisted == {"selectedThemeIndex": 3, "selectedPencilID": "pencil_gold"}
    assert not Path(f"{path}.tmp").exists()
    assert JsonStateStore(path).get("selectedPencilID") == "pencil_gold"


def test_unreadable_state_file_reads_as_empty(tmp_path):
    path = tmp_path / "selection.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonStateStore(path)

    assert store.get("selectedThemeIndex", 0) == 0
    store.set("selectedThemeIndex", 1)
    assert store.load() == {"selectedThemeIndex": 1}


def test_clear_removes_state(tmp_path):
    store = JsonStateStore(tmp_path / "selection.json")
    store.set("userName", "Ada")
    store.clear()
    store.clear()

    assert store.get("userName") is None


def test_memory_state_store():
    store = MemoryStateStore({"a": 1})
    store.set("b", 2)

    assert store.get("a") == 1
    assert store.get("b") == 2
    assert store.get("c", "fallback") == "fallback"
