from .fetcher import ExplorerLedgerFetcher, LedgerFetcher, MockLedgerFetcher
from .scheduler import IndexingScheduler, TickReport
from .sink import InMemorySink, LoggingSink, StorageSink

__all__ = [
    "ExplorerLedgerFetcher",
    "LedgerFetcher",
    "MockLedgerFetcher",
    "IndexingScheduler",
    "TickReport",
    "InMemorySink",
    "LoggingSink",
    "StorageSink",
]
