import pytest

from orbit_core.errors import (
    Unauthenticated, HttpError, NetworkError, FetchFailed, ParseFailed,
)
from orbit_core.store_client import NO_VALUE, build
from orbit_core.utils import content_key


@pytest.fixture
def anon(store, transport, base_url):
    return build(base_url, session_store=store, transport=transport)


@pytest.fixture
def scoped(store, transport, alice_keys, base_url):
    return build(base_url, alice_keys.pub, session_store=store, transport=transport)


def test_base_path_follows_user(anon, scoped, alice_keys):
    assert anon.base_path == ""
    assert scoped.base_path == f"users/{alice_keys.pub}"


def test_path_builder_does_not_duplicate_prefix(anon):
    node = anon.get("users/abc").get("users/abc/nfts")
    assert node.path == "users/abc/nfts"
    assert anon.get("users/abc").get("nfts").get("1000").path == "users/abc/nfts/1000"


def test_path_builder_is_segment_aware(anon):
    assert anon.get("users/abc").get("users/abcd").path == "users/abc/users/abcd"


def test_scoped_client_prefixes_once(scoped, alice_keys, base_url):
    pub = alice_keys.pub
    assert scoped.get("nfts").path == f"users/{pub}/nfts"
    assert scoped.get(f"users/{pub}/nfts").path == f"users/{pub}/nfts"
    assert scoped.get("nfts").url == f"{base_url}/users/{pub}/nfts"


def test_nodes_are_immutable_builders(anon):
    parent = anon.get("nfts")
    child = parent.get("1000")
    assert parent.path == "nfts"
    assert child.path == "nfts/1000"
    with pytest.raises(AttributeError):
        parent.path = "other"


def test_user_returns_new_client(anon):
    bob = anon.user("bob")
    assert bob.base_path == "users/bob"
    assert anon.base_path == ""
    assert bob.user("carol").base_path == "users/carol"
    assert bob.session_store is anon.session_store


def test_put_without_session_sends_nothing(anon, fake_http, alice_keys):
    result = anon.get(f"users/{alice_keys.pub}").get("nfts").put({"id": "1000"})
    assert not result.ok
    assert isinstance(result.error, Unauthenticated)
    assert fake_http.calls == []


def test_put_sends_bearer_and_payload(scoped, store, fake_http, alice_session):
    store.save(alice_session)
    node = scoped.get("nfts").get("1000")
    fake_http.route("POST", node.url, body={"stored": True})

    result = node.put({"id": "1000"})

    assert result.ok
    assert result.value == {"stored": True}
    [call] = fake_http.calls
    assert call.method == "POST"
    assert call.url == node.url
    assert call.body == {"id": "1000"}
    assert call.headers["Authorization"] == "Bearer T1"
    assert call.headers["Content-Type"] == "application/json"


def test_put_empty_success_body(scoped, store, fake_http, alice_session):
    store.save(alice_session)
    node = scoped.get("profile")
    fake_http.route("POST", node.url, status=204, text="")
    result = node.put({"name": "alice"})
    assert result.ok and result.value is None


def test_put_http_error_carries_body(scoped, store, fake_http, alice_session):
    store.save(alice_session)
    node = scoped.get("nfts")
    fake_http.route("POST", node.url, status=403, text="write access denied")

    result = node.put({"id": "1"})

    assert not result.ok
    assert isinstance(result.error, HttpError)
    assert result.error.detail == "write access denied"
    assert result.error.status == 403


def test_put_network_error(scoped, store, fake_http, alice_session, network_down):
    store.save(alice_session)
    node = scoped.get("nfts")
    fake_http.route("POST", node.url, error=network_down)

    result = node.put({"id": "1"})

    assert isinstance(result.error, NetworkError)
    assert str(result.error) == "Network error"


def test_set_is_content_addressed(scoped, store, fake_http, alice_session, alice_keys, base_url):
    store.save(alice_session)
    nfts = scoped.get("nfts")
    target = scoped.get(content_key({"x": 1}))
    fake_http.route("POST", target.url, body={})

    assert nfts.set({"x": 1}).ok
    assert nfts.set({"x": 1}).ok

    urls = {c.url for c in fake_http.calls}
    assert urls == {f"{base_url}/users/{alice_keys.pub}/{content_key({'x': 1})}"}
    assert len(fake_http.calls) == 2


def test_set_lands_at_client_scope_from_any_node(scoped, store, fake_http, alice_session):
    store.save(alice_session)
    scoped.get("nfts").set({"x": 1})
    scoped.get("nfts").get("1000").set({"x": 1})
    assert fake_http.calls[0].url == fake_http.calls[1].url == scoped.get(content_key({"x": 1})).url


def test_set_key_ignores_field_order(scoped, store, fake_http, alice_session):
    store.save(alice_session)
    nfts = scoped.get("nfts")
    nfts.set({"a": 1, "b": 2})
    nfts.set({"b": 2, "a": 1})
    assert fake_http.calls[0].url == fake_http.calls[1].url


def test_set_without_session(anon, fake_http):
    result = anon.get("nfts").set({"x": 1})
    assert isinstance(result.error, Unauthenticated)
    assert fake_http.calls == []


def test_load_is_anonymous_get(anon, fake_http):
    node = anon.get("users/bob/nfts")
    fake_http.route("GET", node.url, body=[{"id": "1"}])

    assert node.load() == [{"id": "1"}]
    [call] = fake_http.calls
    assert "Authorization" not in call.headers


def test_load_failures(anon, fake_http):
    missing = anon.get("missing")
    fake_http.route("GET", missing.url, status=500, text="boom")
    with pytest.raises(FetchFailed) as exc:
        missing.load()
    assert exc.value.status == 500

    garbled = anon.get("garbled")
    fake_http.route("GET", garbled.url, text="<html>")
    with pytest.raises(ParseFailed):
        garbled.load()


def test_once_delivers_first_record(anon, fake_http):
    node = anon.get("nfts")
    fake_http.route("GET", node.url, body=[{"id": "1"}, {"id": "2"}])
    seen = []
    node.once(seen.append)
    assert seen == [{"id": "1"}]


def test_once_empty_sequence(anon, fake_http):
    node = anon.get("nfts")
    fake_http.route("GET", node.url, body=[])
    seen = []
    node.once(seen.append)
    assert seen == [NO_VALUE]
    assert not NO_VALUE


def test_once_non_sequence_body_gives_no_value(anon, fake_http):
    node = anon.get("profile")
    fake_http.route("GET", node.url, body={"name": "a"})
    seen = []
    node.once(seen.append)
    assert seen == [NO_VALUE]


def test_clients_without_transport_share_one_adapter():
    a = build("http://shared.test")
    b = build("http://shared.test/", "bob")
    assert a.transport is b.transport
    assert a.user("carol").transport is a.transport


def test_once_logs_failures(anon, fake_http, caplog):
    node = anon.get("nfts")
    fake_http.route("GET", node.url, status=404, text="nope")
    seen = []
    node.once(seen.append)
    assert seen == []
    assert "[ONCE] load failed" in caplog.text
