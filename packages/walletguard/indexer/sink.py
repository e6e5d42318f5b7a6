import logging
import threading
from typing import Dict, List, Protocol, Sequence

from ..errors import StorageError
from ..models import LedgerTransaction

logger = logging.getLogger(__name__)


class StorageSink(Protocol):
    def store(self, address: str, transactions: Sequence[LedgerTransaction]) -> None:
        ...


class InMemorySink:
    """Keeps the latest copy of each transaction per wallet, keyed by hash."""

    def __init__(self):
        self._lock = threading.Lock()
        self._by_wallet: Dict[str, Dict[str, LedgerTransaction]] = {}

    def store(self, address: str, transactions: Sequence[LedgerTransaction]) -> None:
        transactions = tuple(transactions)
        for tx in transactions:
            if not isinstance(tx, LedgerTransaction):
                raise StorageError(f"cannot store {type(tx).__name__} for {address}")
        with self._lock:
            cache = self._by_wallet.setdefault(address.lower(), {})
            for tx in transactions:
                cache[tx.hash] = tx

    def transactions_for(self, address: str) -> List[LedgerTransaction]:
        with self._lock:
            txs = list(self._by_wallet.get(address.lower(), {}).values())
        return sorted(txs, key=lambda tx: (-tx.timestamp, tx.hash))


class LoggingSink:
    def store(self, address: str, transactions: Sequence[LedgerTransaction]) -> None:
        logger.info("found %d transactions for %s", len(transactions), address)
