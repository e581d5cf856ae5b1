"""Client facade: construction, config merging and the public operations."""
import asyncio

import pytest
from structlog.testing import capture_logs

import mixpanel_events
from mixpanel_events import ConfigurationError, ConstructionError, Mixpanel, init
from tests.conftest import RecordingTransport, decode_data


@pytest.mark.parametrize("token", ["", None])
def test_missing_token_fails_fast(token):
    with pytest.raises(ConstructionError):
        init(token)


def test_default_config():
    mp = init("tok")
    assert mp.token == "tok"
    assert mp.config.test is False
    assert mp.config.debug is False
    assert mp.config.api_key is None


def test_config_at_construction_accepts_key_alias():
    mp = init("tok", {"key": "secret", "test": True})
    assert mp.config.api_key == "secret"
    assert mp.config.test is True


def test_set_config_merges():
    mp = init("tok")
    mp.set_config({"debug": True})
    mp.set_config(test=True)
    assert mp.config.debug is True
    assert mp.config.test is True


def test_set_config_keeps_unknown_keys():
    mp = init("tok", {"custom": "x"})
    mp.set_config({"debug": True})
    assert mp.config.model_dump()["custom"] == "x"


def test_token_cannot_be_replaced():
    mp = init("tok")
    with pytest.raises(ValueError):
        mp.set_config({"token": "other"})
    assert mp.token == "tok"


def test_deprecated_client_factory():
    with pytest.warns(DeprecationWarning):
        mp = mixpanel_events.Client("tok")
    assert isinstance(mp, Mixpanel)


async def test_track_live_event(mp, transport):
    err = await mp.track("signup", {"plan": "premium"})

    assert err is None
    request = transport.requests[0]
    assert request.url.path == "/track"
    assert "api_key" not in request.url.params
    props = decode_data(request)["properties"]
    assert props["token"] == "tok123"
    assert props["plan"] == "premium"
    assert props["mp_lib"] == "python"


async def test_track_with_time_imports(transport):
    mp = Mixpanel("tok123", {"api_key": "secret"}, transport=transport)

    err = await mp.track("old_event", {"time": 1330000000})

    assert err is None
    request = transport.requests[0]
    assert request.url.path == "/import"
    assert request.url.params["api_key"] == "secret"
    assert decode_data(request)["properties"]["time"] == 1330000000


async def test_track_import_without_key_raises_synchronously(mp, transport):
    with pytest.raises(ConfigurationError):
        mp.track("old_event", {"time": 1330000000})
    await asyncio.sleep(0)
    assert transport.requests == []


async def test_track_callback_in_properties_slot(mp):
    seen = []
    await mp.track("ping", seen.append)
    assert seen == [None]


async def test_test_mode_adds_flag(mp, transport):
    mp.set_config({"test": True})
    await mp.track("ping")
    assert transport.requests[0].url.params["test"] == "1"


async def test_people_set_single(mp, transport):
    await mp.people.set("bob", "gender", "m")
    data = decode_data(transport.requests[0])
    assert transport.requests[0].url.path == "/engage"
    assert data == {"$token": "tok123", "$distinct_id": "bob", "$set": {"gender": "m"}}


async def test_people_set_mapping_with_callback_in_value_slot(mp, transport):
    seen = []
    await mp.people.set("joe", {"company": "acme", "plan": "premium"}, seen.append)
    assert seen == [None]
    assert decode_data(transport.requests[0])["$set"] == {"company": "acme", "plan": "premium"}


async def test_people_increment_shapes(mp, transport):
    await mp.people.increment("u", "counter")
    await mp.people.increment("u", "counter", -2)
    await mp.people.increment("u", {"a": 5, "b": "bad", "c": 3})
    adds = [decode_data(r)["$add"] for r in transport.requests]
    assert adds == [{"counter": 1}, {"counter": -2}, {"a": 5, "c": 3}]


async def test_people_increment_debug_does_not_change_result(transport):
    mp = Mixpanel("tok123", {"debug": True}, transport=transport)
    err = await mp.people.increment("u", {"a": 5, "b": "bad"})
    assert err is None
    assert decode_data(transport.requests[0])["$add"] == {"a": 5}


async def test_people_delete_user(mp, transport):
    seen = []
    await mp.people.delete_user("bob", seen.append)
    assert seen == [None]
    assert decode_data(transport.requests[0]) == {
        "$delete": "bob",
        "$token": "tok123",
        "$distinct_id": "bob",
    }


async def test_every_payload_carries_token(mp, transport):
    await asyncio.gather(
        mp.track("e"),
        mp.people.set("u", "p", 1),
        mp.people.increment("u", "p"),
        mp.people.delete_user("u"),
    )
    payloads = [decode_data(r) for r in transport.requests]
    assert len(payloads) == 4
    for payload in payloads:
        token = payload["properties"]["token"] if "properties" in payload else payload["$token"]
        assert token == "tok123"


async def test_rejection_reaches_callback():
    mp = Mixpanel("tok", transport=RecordingTransport("0"))
    seen = []
    err = await mp.track("e", callback=seen.append)
    assert seen == [err]
    assert "0" in str(err)


async def test_people_increment_callback_in_amount_slot(mp, transport):
    seen = []
    err = await mp.people.increment("u", "counter", seen.append)
    assert err is None
    assert seen == [None]
    assert decode_data(transport.requests[0])["$add"] == {"counter": 1}


async def test_people_set_single_with_callback_in_value_slot(mp, transport):
    seen = []
    await mp.people.set("bob", "flagged", seen.append)
    assert seen == [None]
    assert decode_data(transport.requests[0])["$set"] == {"flagged": None}


async def test_debug_logs_outgoing_event(transport):
    mp = Mixpanel("tok123", {"debug": True}, transport=transport)
    with capture_logs() as logs:
        await mp.track("signup", {"plan": "premium"})
    entry = next(e for e in logs if e["event"] == "sending_event")
    assert entry["endpoint"] == "/track"
    assert entry["data"]["event"] == "signup"
    assert entry["data"]["properties"]["plan"] == "premium"
    assert entry["data"]["properties"]["token"] == "tok123"


async def test_debug_logs_engage_payloads(transport):
    mp = Mixpanel("tok123", {"debug": True}, transport=transport)
    with capture_logs() as logs:
        await mp.people.set("bob", "gender", "m")
        await mp.people.increment("bob", {"visits": 2, "bad": "x"})
        await mp.people.delete_user("bob")
    sent = [e["data"] for e in logs if e["event"] == "sending_engage"]
    assert sent[0]["$set"] == {"gender": "m"}
    assert sent[1]["$add"] == {"visits": 2}
    dropped = next(e for e in logs if e["event"] == "invalid_increment_value")
    assert dropped["key"] == "bad"
    assert dropped["value"] == "'x'"
    assert dropped["log_level"] == "warning"
    deleted = next(e for e in logs if e["event"] == "deleting_user")
    assert deleted["distinct_id"] == "bob"


async def test_no_logs_without_debug(mp):
    with capture_logs() as logs:
        await mp.track("signup")
        await mp.people.increment("bob", {"visits": 2, "bad": "x"})
        await mp.people.delete_user("bob")
    assert logs == []
