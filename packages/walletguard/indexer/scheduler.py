"""
Background indexing loop.

One asyncio task per scheduler. Every `interval` seconds it walks the tracked
wallets in order, fetches each wallet's history and hands it to the sink. A
failing or slow wallet is logged and skipped; it never stops the cycle.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from ..errors import SchedulerError
from .fetcher import LedgerFetcher
from .sink import StorageSink

logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    stored: Dict[str, int] = field(default_factory=dict)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


class IndexingScheduler:
    def __init__(
        self,
        wallets: Iterable[str],
        interval: float,
        fetch: LedgerFetcher,
        sink: StorageSink,
        fetch_timeout: float = 10.0,
    ):
        if interval <= 0:
            raise SchedulerError("interval must be positive")
        if fetch_timeout <= 0:
            raise SchedulerError("fetch_timeout must be positive")
        # dict.fromkeys drops duplicates and keeps the configured order
        self.wallets = tuple(dict.fromkeys(wallets))
        self.interval = interval
        self.fetch = fetch
        self.sink = sink
        self.fetch_timeout = fetch_timeout
        self._task: Optional[asyncio.Task] = None
        self._stop: Optional[asyncio.Event] = None

    async def _index_wallet(self, address: str) -> int:
        try:
            txs = await asyncio.wait_for(
                asyncio.to_thread(self.fetch.fetch, address), timeout=self.fetch_timeout
            )
        except asyncio.TimeoutError:
            raise SchedulerError(f"fetch timed out after {self.fetch_timeout}s") from None
        await asyncio.to_thread(self.sink.store, address, txs)
        return len(txs)

    async def tick(self) -> TickReport:
        logger.info("running indexing cycle over %d wallets", len(self.wallets))
        report = TickReport()
        for address in self.wallets:
            try:
                report.stored[address] = await self._index_wallet(address)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning("indexing failed for %s: %s", address, e)
                report.failed[address] = str(e) or type(e).__name__
            else:
                logger.info("stored %d transactions for %s", report.stored[address], address)
        return report

    async def run(self, stop: Optional[asyncio.Event] = None) -> None:
        """Tick every `interval` seconds until `stop` is set or the task is cancelled."""
        stop = stop or asyncio.Event()
        logger.info("indexer started, interval %ss", self.interval)
        try:
            while not stop.is_set():
                try:
                    await asyncio.wait_for(stop.wait(), timeout=self.interval)
                except asyncio.TimeoutError:
                    await self.tick()
        finally:
            logger.info("indexer stopped")

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self.running:
            raise SchedulerError("scheduler already running")
        self._stop = asyncio.Event()
        self._task = asyncio.create_task(self.run(self._stop), name="walletguard-indexer")
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stop.set()
        try:
            await self._task
        finally:
            self._task = None
            self._stop = None
