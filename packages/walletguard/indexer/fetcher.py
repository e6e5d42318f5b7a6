import logging
import time
from typing import List, Optional, Protocol

import requests

from ..errors import LedgerFetchError, MalformedTransactionError
from ..models import LedgerTransaction

logger = logging.getLogger(__name__)

NO_TRANSACTIONS = "No transactions found"


class LedgerFetcher(Protocol):
    def fetch(self, address: str) -> List[LedgerTransaction]:
        ...


class ExplorerLedgerFetcher:
    """Reads a wallet's history from an Etherscan-compatible txlist endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        asset_symbol: str = "ETH",
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()
        self.asset_symbol = asset_symbol

    def fetch(self, address: str) -> List[LedgerTransaction]:
        logger.info("fetching transactions for %s", address)
        params = {
            "module": "account",
            "action": "txlist",
            "address": address,
            "sort": "desc",
        }
        if self.api_key:
            params["apikey"] = self.api_key
        try:
            r = self.session.get(self.base_url, params=params, timeout=self.timeout)
            r.raise_for_status()
            body = r.json()
        except requests.RequestException as e:
            raise LedgerFetchError(f"provider request failed for {address}: {e}") from e
        except ValueError as e:
            raise LedgerFetchError(f"provider returned non-JSON for {address}") from e

        if not isinstance(body, dict):
            raise LedgerFetchError(f"unexpected provider payload for {address}")
        status, message, result = body.get("status"), body.get("message", ""), body.get("result")
        if status == "0" and message == NO_TRANSACTIONS:
            return []
        if status != "1" or not isinstance(result, list):
            raise LedgerFetchError(f"provider error for {address}: {message or result}")

        try:
            return [LedgerTransaction.from_explorer(row, self.asset_symbol) for row in result]
        except MalformedTransactionError as e:
            raise LedgerFetchError(f"bad transaction row for {address}: {e}") from e


class MockLedgerFetcher:
    """Canned history for offline runs and demos."""

    def __init__(self, now: Optional[float] = None):
        self.now = now

    def fetch(self, address: str) -> List[LedgerTransaction]:
        logger.info("fetching mock transactions for %s", address)
        now = int(self.now if self.now is not None else time.time())
        return [
            LedgerTransaction(
                hash=f"0xabc123{address[2:10].lower()}",
                from_address=address,
                to_address="0xdef4560000000000000000000000000000000000",
                amount="100000000000000000",  # 0.1 ETH
                timestamp=now - 24 * 3600,
                asset_symbol="ETH",
            ),
            LedgerTransaction(
                hash=f"0xdef789{address[2:10].lower()}",
                from_address="0x0120000000000000000000000000000000000000",
                to_address=address,
                amount="500000000000000000000",  # 500 PYUSD
                timestamp=now - 48 * 3600,
                asset_symbol="PYUSD",
            ),
        ]
