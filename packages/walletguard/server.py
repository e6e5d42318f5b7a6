import argparse
import logging
import sys
from typing import Optional, Sequence

import uvicorn
from fastapi import FastAPI

from .config import Settings, configure_logging
from .errors import ConfigError
from .gateway import create_app
from .indexer import (
    ExplorerLedgerFetcher,
    IndexingScheduler,
    InMemorySink,
    LedgerFetcher,
    MockLedgerFetcher,
)
from .risk import RiskEngine

logger = logging.getLogger(__name__)


def build_fetcher(settings: Settings) -> LedgerFetcher:
    if settings.ledger_provider == "explorer":
        return ExplorerLedgerFetcher(
            settings.explorer_api_url,
            api_key=settings.explorer_api_key,
            timeout=settings.fetch_timeout,
        )
    return MockLedgerFetcher()


def build_scheduler(settings: Settings, sink=None) -> IndexingScheduler:
    return IndexingScheduler(
        settings.tracked_wallets,
        interval=settings.index_interval,
        fetch=build_fetcher(settings),
        sink=sink if sink is not None else InMemorySink(),
        fetch_timeout=settings.fetch_timeout,
    )


def build_app(settings: Settings, with_indexer: bool = True) -> FastAPI:
    scheduler = build_scheduler(settings) if with_indexer else None
    return create_app(RiskEngine(settings.denylist), scheduler, cors_origins=settings.cors_origins)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="walletguard", description="Transaction risk API and wallet indexer")
    parser.add_argument("--host", help="bind address (default from WALLETGUARD_HOST)")
    parser.add_argument("--port", type=int, help="bind port (default from WALLETGUARD_PORT)")
    parser.add_argument("--log-level", help="logging level (default from LOG_LEVEL)")
    parser.add_argument("--no-indexer", action="store_true", help="serve the risk API only")
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
    except ConfigError as e:
        print(f"configuration error: {e}", file=sys.stderr)
        return 2

    configure_logging(args.log_level or settings.log_level)
    host = args.host or settings.host
    port = args.port or settings.port
    app = build_app(settings, with_indexer=not args.no_indexer)

    logger.info("starting server on http://%s:%d", host, port)
    logger.info("risk endpoint available at POST /api/v1/simulate_tx")
    try:
        uvicorn.run(app, host=host, port=port, log_level=(args.log_level or settings.log_level).lower())
    except OSError as e:
        logger.error("could not start server: %s", e)
        return 1
    except SystemExit as e:
        # uvicorn exits on bind failure
        if e.code:
            logger.error("server exited during startup")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
