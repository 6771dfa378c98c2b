import threading

import pytest
import requests

import app.backend_client as backend_client
from homefinder.models.search import SearchCriteria

from helpers import FakeStore, memory_ledger, raw_row


def _offline_client(monkeypatch, ledger=None):
    def refuse(*args, **kwargs):
        raise requests.ConnectionError("api down")

    monkeypatch.setattr(requests.Session, "get", refuse)
    monkeypatch.setattr(backend_client, "get_ledger", lambda: ledger or memory_ledger())
    monkeypatch.setattr(backend_client, "get_repository", lambda: FakeStore([raw_row(1), raw_row(2, price=900000)]))
    return backend_client.BackendClient()


def test_falls_back_to_local_services(monkeypatch):
    client = _offline_client(monkeypatch)
    assert client.use_api is False
    results = client.search_properties(SearchCriteria(sort_by="price-high"))
    assert [r.id for r in results] == [2, 1]
    assert client.get_property(1).title == "Listing 1"


def test_local_toggle_notifies_subscribers(monkeypatch):
    ledger = memory_ledger()
    client = _offline_client(monkeypatch, ledger)
    events = []
    unsubscribe = client.subscribe(lambda pid, state: events.append((pid, state)))
    assert client.toggle_favorite(2) is True
    assert client.favorite_count() == 1
    unsubscribe()
    client.toggle_favorite(2)
    assert events == [(2, True)]
    assert [r.id for r in client.list_favorites()] == []


def test_criteria_are_encoded_as_query_params():
    params = backend_client.BackendClient._criteria_params(
        SearchCriteria(search_query="lake", price_max=800000, status=["for-rent", "for-sale"])
    )
    assert ("search", "lake") in params
    assert ("price_max", 800000) in params
    assert [value for name, value in params if name == "status"] == ["for-rent", "for-sale"]


def _response(status_code, body=b"{}"):
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = body
    resp.url = "http://api.test/api"
    return resp


def _online_client(monkeypatch, status_code):
    monkeypatch.setattr(backend_client.BackendClient, "_ping_api", lambda self: True)
    monkeypatch.setattr(backend_client, "get_ledger", memory_ledger)
    monkeypatch.setattr(backend_client, "get_repository", lambda: FakeStore([raw_row(1), raw_row(2, price=900000)]))
    monkeypatch.setattr(requests.Session, "get", lambda self, *args, **kwargs: _response(status_code))
    return backend_client.BackendClient()


def test_client_errors_keep_the_api_mode(monkeypatch):
    client = _online_client(monkeypatch, 422)
    assert client.get_property("abc") is None
    assert client.use_api is True
    with pytest.raises(requests.HTTPError):
        client.search_properties(SearchCriteria())
    assert client.use_api is True


def test_server_errors_switch_to_local_services(monkeypatch):
    client = _online_client(monkeypatch, 500)
    results = client.search_properties(SearchCriteria(sort_by="price-low"))
    assert client.use_api is False
    assert [r.id for r in results] == [1, 2]


def test_toggle_callback_is_scoped_to_the_call(monkeypatch):
    client = _offline_client(monkeypatch)
    events = []
    assert client.toggle_favorite(1, on_change=lambda pid, state: events.append((pid, state))) is True
    client.toggle_favorite(2)
    assert events == [(1, True)]
    assert client._listeners == []


def test_toggle_callback_ignores_other_threads(monkeypatch):
    client = _offline_client(monkeypatch)
    events = []

    def toggle_elsewhere(pid, state):
        events.append((pid, state))
        worker = threading.Thread(target=client.toggle_favorite, args=(2,))
        worker.start()
        worker.join(2)

    client.toggle_favorite(1, on_change=toggle_elsewhere)
    assert events == [(1, True)]
    assert client.ledger.list_favorite_ids() == {1, 2}


def test_live_search_delivers_only_the_latest_submission(monkeypatch):
    client = _offline_client(monkeypatch)
    results = []
    live = client.live_search(results.append, delay=60)
    live.submit(SearchCriteria(sort_by="price-low"))
    live.submit(SearchCriteria(sort_by="price-high"))
    live.flush()
    assert [[r.id for r in batch] for batch in results] == [[2, 1]]
