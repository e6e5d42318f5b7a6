import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from .errors import ConfigError

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s | %(message)s"

DEFAULT_TRACKED_WALLETS = (
    "0x1234567890abcdef1234567890abcdef12345678",
    "0xabcdef1234567890abcdef1234567890abcdef12",
)
DEFAULT_DENYLIST = ("0xBadScamContract123456789000000000000",)


def _split(raw: Optional[str], default: Tuple[str, ...]) -> Tuple[str, ...]:
    if raw is None:
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _number(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 8080
    tracked_wallets: Tuple[str, ...] = DEFAULT_TRACKED_WALLETS
    denylist: Tuple[str, ...] = DEFAULT_DENYLIST
    index_interval: float = 60.0
    fetch_timeout: float = 10.0
    explorer_api_url: str = "https://api.etherscan.io/api"
    explorer_api_key: str = ""
    ledger_provider: str = "mock"
    cors_origins: Tuple[str, ...] = ("http://localhost:4200",)
    log_level: str = "INFO"
    agent_seed: str = "indexer-agent-seed"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from the environment (a .env file is loaded first)."""
        if env is None:
            load_dotenv()
            env = os.environ

        provider = env.get("LEDGER_PROVIDER", "mock").strip().lower()
        if provider not in ("mock", "explorer"):
            raise ConfigError(f"LEDGER_PROVIDER must be 'mock' or 'explorer', got {provider!r}")

        return cls(
            host=env.get("WALLETGUARD_HOST", "0.0.0.0"),
            port=int(_number(env, "WALLETGUARD_PORT", 8080)),
            tracked_wallets=_split(env.get("TRACKED_WALLETS"), DEFAULT_TRACKED_WALLETS),
            denylist=_split(env.get("DENYLIST_ADDRESSES"), DEFAULT_DENYLIST),
            index_interval=_number(env, "INDEX_INTERVAL_SECONDS", 60.0),
            fetch_timeout=_number(env, "FETCH_TIMEOUT_SECONDS", 10.0),
            explorer_api_url=env.get("EXPLORER_API_URL", "https://api.etherscan.io/api"),
            explorer_api_key=env.get("EXPLORER_API_KEY", ""),
            ledger_provider=provider,
            cors_origins=_split(env.get("CORS_ORIGINS"), ("http://localhost:4200",)),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            agent_seed=env.get("INDEXER_AGENT_SEED", "indexer-agent-seed"),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
