"""Tests for the ledger fetchers, using a fake requests session."""

import pytest
import requests

from walletguard.errors import LedgerFetchError, MalformedTransactionError
from walletguard.indexer import ExplorerLedgerFetcher, MockLedgerFetcher
from walletguard.models import LedgerTransaction

WALLET = "0x1234567890abcdef1234567890abcdef12345678"

ROW = {
    "hash": "0xabc",
    "from": WALLET,
    "to": "0xdef",
    "value": "100000000000000000",
    "timeStamp": "1700000000",
}


class FakeResponse:
    def __init__(self, body=None, status=200, bad_json=False):
        self.body = body
        self.status = status
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def json(self):
        if self.bad_json:
            raise ValueError("no json")
        return self.body


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params, timeout))
        if self.error:
            raise self.error
        return self.response


def make_fetcher(session, api_key="KEY"):
    return ExplorerLedgerFetcher("https://explorer.test/api", api_key=api_key, timeout=3, session=session)


def test_parses_txlist_rows():
    session = FakeSession(FakeResponse({"status": "1", "message": "OK", "result": [ROW]}))
    txs = make_fetcher(session).fetch(WALLET)

    assert txs == [
        LedgerTransaction("0xabc", WALLET, "0xdef", "100000000000000000", 1700000000, "ETH")
    ]
    url, params, timeout = session.requests[0]
    assert url == "https://explorer.test/api"
    assert params["action"] == "txlist"
    assert params["address"] == WALLET
    assert params["apikey"] == "KEY"
    assert timeout == 3


def test_token_symbol_overrides_default():
    row = dict(ROW, tokenSymbol="PYUSD")
    session = FakeSession(FakeResponse({"status": "1", "message": "OK", "result": [row]}))
    assert make_fetcher(session).fetch(WALLET)[0].asset_symbol == "PYUSD"


def test_no_api_key_not_sent():
    session = FakeSession(FakeResponse({"status": "1", "message": "OK", "result": []}))
    make_fetcher(session, api_key="").fetch(WALLET)
    assert "apikey" not in session.requests[0][1]


def test_empty_history_is_not_an_error():
    session = FakeSession(FakeResponse({"status": "0", "message": "No transactions found", "result": []}))
    assert make_fetcher(session).fetch(WALLET) == []


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse({"status": "0", "message": "NOTOK", "result": "Invalid API Key"}),
        FakeResponse(status=502),
        FakeResponse(bad_json=True),
        FakeResponse(["not", "an", "envelope"]),
        FakeResponse({"status": "1", "message": "OK", "result": [dict(ROW, value="-5")]}),
        FakeResponse({"status": "1", "message": "OK", "result": [{"hash": "0x1"}]}),
    ],
)
def test_provider_failures_raise_fetch_error(response):
    with pytest.raises(LedgerFetchError):
        make_fetcher(FakeSession(response)).fetch(WALLET)


def test_network_error_wrapped():
    session = FakeSession(error=requests.ConnectionError("refused"))
    with pytest.raises(LedgerFetchError, match="refused"):
        make_fetcher(session).fetch(WALLET)


def test_mock_fetcher_returns_canned_history():
    txs = MockLedgerFetcher(now=1_700_000_000).fetch(WALLET)
    assert [t.asset_symbol for t in txs] == ["ETH", "PYUSD"]
    assert txs[0].from_address == WALLET
    assert txs[1].to_address == WALLET
    assert txs[0].timestamp == 1_700_000_000 - 86400


@pytest.mark.parametrize("amount", ["1.5", "-1", "", "\u00b2", "\u0661\u0662"])
def test_ledger_transaction_rejects_bad_amount(amount):
    with pytest.raises(MalformedTransactionError):
        LedgerTransaction("0x1", "a", "b", amount, 0, "ETH")
