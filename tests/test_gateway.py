"""Tests for the HTTP gateway."""

import pytest
from fastapi.testclient import TestClient

from walletguard.gateway import create_app
from walletguard.indexer import IndexingScheduler, InMemorySink, MockLedgerFetcher
from walletguard.risk import RiskEngine

SCAM = "0xBadScamContract123456789000000000000"
URL = "/api/v1/simulate_tx"


@pytest.fixture
def client():
    with TestClient(create_app(RiskEngine([SCAM]))) as c:
        yield c


def test_denylisted_destination(client):
    r = client.post(URL, json={"from": "0xuser", "to": SCAM, "data": "0x", "value": "0"})
    assert r.status_code == 200
    body = r.json()
    assert body["risk_level"] == "HIGH"
    assert body["warnings"] == ["DENYLISTED_ADDRESS"]


def test_unlimited_approval(client):
    r = client.post(URL, json={"to": "0xsafe", "data": "0x095ea7b3" + "f" * 64})
    assert r.status_code == 200
    assert r.json()["risk_level"] == "MEDIUM"
    assert r.json()["warnings"] == ["UNLIMITED_APPROVAL"]


def test_default_verdict(client):
    r = client.post(URL, json={"to": "0xsafe", "data": "0xnothex", "value": "1"})
    assert r.json() == {"risk_level": "LOW", "analysis": "no obvious risk detected", "warnings": []}


def test_get_not_allowed(client):
    assert client.get(URL).status_code == 405


@pytest.mark.parametrize("payload", ["{not json", "", "[1, 2]", '{"to": 5}'])
def test_undecodable_body_is_bad_request(client, payload):
    r = client.post(URL, content=payload, headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json() == {"detail": "invalid request body"}


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}


def test_lifespan_starts_and_stops_scheduler():
    scheduler = IndexingScheduler(["0xaaa"], interval=30, fetch=MockLedgerFetcher(), sink=InMemorySink())
    with TestClient(create_app(RiskEngine(), scheduler)):
        assert scheduler.running
    assert not scheduler.running


def test_null_fields_use_defaults(client):
    r = client.post(URL, json={"from": None, "to": SCAM, "data": None, "value": None})
    assert r.status_code == 200
    assert r.json()["risk_level"] == "HIGH"
    assert r.json()["warnings"] == ["DENYLISTED_ADDRESS"]


def test_null_destination_gets_default_verdict(client):
    r = client.post(URL, json={"to": None, "data": "0x"})
    assert r.status_code == 200
    assert r.json()["analysis"] == "no obvious risk detected"
