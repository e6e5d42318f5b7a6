"""
Data model shared by the indexer and the risk engine.

LedgerTransaction  a historical transaction returned by the ledger provider
ProposedTransaction  an unsigned transaction the user is about to submit
RiskVerdict        the engine's answer for one ProposedTransaction
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

from .errors import MalformedTransactionError


@dataclass(frozen=True)
class LedgerTransaction:
    hash: str
    from_address: str
    to_address: str
    amount: str  # smallest unit, decimal digits
    timestamp: int  # epoch seconds
    asset_symbol: str

    def __post_init__(self):
        if not self.hash:
            raise MalformedTransactionError("transaction hash is required")
        if not (self.amount.isascii() and self.amount.isdigit()):
            raise MalformedTransactionError(
                f"amount for {self.hash} must be a non-negative integer string, got {self.amount!r}"
            )

    @classmethod
    def from_explorer(cls, row: Mapping[str, Any], default_asset: str = "ETH") -> LedgerTransaction:
        """Build from one row of an Etherscan-style txlist response."""
        try:
            return cls(
                hash=str(row["hash"]),
                from_address=str(row.get("from") or ""),
                to_address=str(row.get("to") or ""),
                amount=str(row.get("value", "0")),
                timestamp=int(row["timeStamp"]),
                asset_symbol=str(row.get("tokenSymbol") or default_asset),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedTransactionError(f"unusable provider row: {e}") from e


@dataclass(frozen=True)
class ProposedTransaction:
    from_address: str = ""
    to_address: str = ""
    call_data: str = "0x"
    value: str = "0"


@functools.total_ordering
class RiskLevel(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank


_RANKS = {RiskLevel.LOW: 0, RiskLevel.MEDIUM: 1, RiskLevel.HIGH: 2}


@dataclass(frozen=True)
class RiskVerdict:
    risk_level: RiskLevel
    explanation: str
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # a HIGH verdict must say why
        if self.risk_level is RiskLevel.HIGH and not self.warnings:
            raise ValueError("a HIGH verdict needs at least one warning tag")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "risk_level": self.risk_level.value,
            "analysis": self.explanation,
            "warnings": list(self.warnings),
        }
