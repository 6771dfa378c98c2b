import json

from homefinder.db.kv import JsonFileStore, MemoryStore
from homefinder.services.favorites import FAVORITES_KEY, FavoritesLedger

from helpers import memory_ledger


def test_toggle_twice_restores_original_state():
    ledger = memory_ledger("[1, 2]")
    for property_id in (1, 5):
        before = ledger.is_favorite(property_id)
        ledger.toggle_favorite(property_id)
        ledger.toggle_favorite(property_id)
        assert ledger.is_favorite(property_id) == before
    assert ledger.list_favorite_ids() == {1, 2}


def test_is_favorite_matches_toggle_result():
    ledger = memory_ledger()
    state = ledger.toggle_favorite(7)
    assert state is True
    assert ledger.is_favorite(7) is state
    state = ledger.toggle_favorite("7")
    assert state is False
    assert ledger.is_favorite(7) is state


def test_corrupted_slot_behaves_as_empty():
    store = MemoryStore({FAVORITES_KEY: "{not valid json"})
    ledger = FavoritesLedger(store)
    assert ledger.list_favorite_ids() == set()
    assert ledger.toggle_favorite(42) is True
    assert json.loads(store.get(FAVORITES_KEY)) == [42]


def test_non_list_and_mixed_payloads():
    assert memory_ledger('{"a": 1}').list_favorite_ids() == set()
    assert memory_ledger('[3, "4", "x", null, true, 3]').list_favorite_ids() == {3, 4}


def test_persisted_set_has_no_duplicates():
    store = MemoryStore({FAVORITES_KEY: "[1, 1, 2]"})
    ledger = FavoritesLedger(store)
    ledger.toggle_favorite(3)
    assert json.loads(store.get(FAVORITES_KEY)) == [1, 2, 3]


def test_subscribers_are_notified_and_can_unsubscribe():
    ledger = memory_ledger()
    events = []
    unsubscribe = ledger.subscribe(lambda pid, state: events.append((pid, state)))
    ledger.toggle_favorite(9)
    ledger.toggle_favorite(9)
    unsubscribe()
    ledger.toggle_favorite(9)
    assert events == [(9, True), (9, False)]


def test_failing_subscriber_does_not_block_mutation():
    ledger = memory_ledger()

    def broken(pid, state):
        raise RuntimeError("boom")

    seen = []
    ledger.subscribe(broken)
    ledger.subscribe(lambda pid, state: seen.append(pid))
    assert ledger.toggle_favorite(1) is True
    assert ledger.is_favorite(1)
    assert seen == [1]


def test_file_store_persists_across_instances(tmp_path):
    path = tmp_path / "state" / "favorites.json"
    FavoritesLedger(JsonFileStore(str(path))).toggle_favorite(11)
    assert FavoritesLedger(JsonFileStore(str(path))).list_favorite_ids() == {11}


def test_unreadable_file_reads_as_empty(tmp_path):
    path = tmp_path / "favorites.json"
    path.write_text("not json at all")
    ledger = FavoritesLedger(JsonFileStore(str(path)))
    assert ledger.list_favorite_ids() == set()
    assert ledger.toggle_favorite(42) is True
    assert json.loads(json.loads(path.read_text())[FAVORITES_KEY]) == [42]
