from datetime import datetime, timezone as dt_timezone

import pytest
import requests

from core.services.remote_store import RemoteStoreClient, RemoteStoreError, mexico_city_now
from core.tests.conftest import FakeResponse, FakeSession

STORE = "https://store.test/api/v1/dispositivos_IoT"
IPIFY = "https://ip.test/?format=json"


def make_client(routes):
    session = FakeSession(routes)
    client = RemoteStoreClient(
        STORE,
        ip_lookup_url=IPIFY,
        fallback_ip="127.0.0.1",
        timeout=3,
        session=session,
    )
    return client, session


def test_mexico_city_now_format():
    # 18:30 UTC -> 12:30 en CDMX (UTC-6, sin horario de verano desde 2022)
    stamp = mexico_city_now(datetime(2025, 3, 1, 18, 30, 5, tzinfo=dt_timezone.utc))
    assert stamp == "01/03/2025 12:30:05"


def test_create_record_with_ip_lookup_failing_uses_fallback():
    client, session = make_client({
        ("GET", IPIFY): requests.ConnectionError("down"),
        ("POST", STORE): FakeResponse(201, {"id": "7"}),
    })

    ok = client.create_record("RobotA", "ADELANTE")

    assert ok is True
    method, url, kwargs = session.calls[-1]
    assert (method, url) == ("POST", STORE)
    body = kwargs["json"]
    assert body["name"] == "RobotA"
    assert body["status"] == "ADELANTE"
    assert body["ip"] == "127.0.0.1"
    assert body["date"]
    assert kwargs["timeout"] == 3


def test_create_record_uses_resolved_ip():
    client, session = make_client({
        ("GET", IPIFY): FakeResponse(200, {"ip": "201.10.20.30"}),
        ("POST", STORE): FakeResponse(201, {"id": "8"}),
    })

    assert client.create_record("RobotB", "DETENER") is True
    assert session.calls[-1][2]["json"]["ip"] == "201.10.20.30"


def test_ip_lookup_bad_body_falls_back():
    client, _ = make_client({("GET", IPIFY): FakeResponse(200, json_error=True)})
    assert client.resolve_client_ip() == "127.0.0.1"


@pytest.mark.parametrize(
    "outcome",
    [FakeResponse(500), FakeResponse(400), requests.Timeout("slow")],
)
def test_create_record_failures_return_false(outcome):
    client, _ = make_client({
        ("GET", IPIFY): FakeResponse(200, {"ip": "1.1.1.1"}),
        ("POST", STORE): outcome,
    })

    assert client.create_record("RobotA", "ADELANTE") is False


def test_fetch_records_parses_payload():
    client, _ = make_client({
        ("GET", STORE): FakeResponse(200, [
            {"id": "1", "name": "RobotA", "status": "ADELANTE", "ip": "1.1.1.1", "date": "x"},
            {"id": "2", "name": "RobotB", "status": "DETENER", "ip": "2.2.2.2", "date": "y"},
        ]),
    })

    records = client.fetch_records()

    assert [r.id for r in records] == [1, 2]
    assert records[1].status == "DETENER"


@pytest.mark.parametrize(
    "outcome, status_code",
    [
        (FakeResponse(503), 503),
        (FakeResponse(200, json_error=True), 200),
        (FakeResponse(200, {"not": "a list"}), 200),
        (requests.ConnectionError("boom"), None),
    ],
)
def test_fetch_records_raises_store_error(outcome, status_code):
    client, _ = make_client({("GET", STORE): outcome})

    with pytest.raises(RemoteStoreError) as exc:
        client.fetch_records()

    assert exc.value.status_code == status_code


def test_list_records_swallows_to_empty():
    client, _ = make_client({("GET", STORE): FakeResponse(500)})
    assert client.list_records() == []


def test_last_records_returns_newest_first():
    client, _ = make_client({
        ("GET", STORE): FakeResponse(200, [
            {"id": str(i), "name": "R", "status": "ADELANTE"} for i in (3, 1, 4, 5, 2, 9)
        ]),
    })

    assert [r.id for r in client.last_records(5)] == [9, 5, 4, 3, 2]


def test_get_record():
    client, _ = make_client({
        ("GET", f"{STORE}/4"): FakeResponse(200, {"id": "4", "name": "R", "status": "GIRO"}),
    })

    assert client.get_record(4).status == "GIRO"
    assert client.get_record(99) is None
