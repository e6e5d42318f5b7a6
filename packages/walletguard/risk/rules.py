"""
Ordered risk rules.

Each rule is an independent predicate over the raw transaction. The engine
walks DEFAULT_RULES top to bottom and the first rule that matches decides the
verdict; rules are never combined or scored. A new rule goes in at the
position matching its severity.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Callable, FrozenSet, Optional

from ..models import ProposedTransaction, RiskLevel, RiskVerdict

APPROVE_SELECTOR = "095ea7b3"  # approve(address,uint256)
TRANSFER_SELECTOR = "a9059cbb"  # transfer(address,uint256)
MAX_UINT256_WORD = "f" * 64

DENYLISTED_ADDRESS = "DENYLISTED_ADDRESS"
UNLIMITED_APPROVAL = "UNLIMITED_APPROVAL"

_HEX_DIGITS = frozenset(string.hexdigits.lower())


def normalize_call_data(call_data: Optional[str]) -> Optional[str]:
    """Lower-case hex without the 0x prefix, or None when it is not valid hex."""
    if not isinstance(call_data, str):
        return None
    payload = call_data.strip().lower()
    if payload.startswith("0x"):
        payload = payload[2:]
    if len(payload) % 2 or not _HEX_DIGITS.issuperset(payload):
        return None
    return payload


def has_selector(payload: Optional[str], selector: str) -> bool:
    return payload is not None and len(payload) >= 8 and payload[:8] == selector


@dataclass(frozen=True)
class Rule:
    name: str
    matches: Callable[[ProposedTransaction, Optional[str], FrozenSet[str]], bool]
    verdict: RiskVerdict


def _denylisted(tx, payload, denylist):
    return isinstance(tx.to_address, str) and tx.to_address.strip().lower() in denylist


def _unlimited_approval(tx, payload, denylist):
    return (
        has_selector(payload, APPROVE_SELECTOR)
        and len(payload) >= 8 + 64
        and payload[-64:] == MAX_UINT256_WORD
    )


def _plain_transfer(tx, payload, denylist):
    return has_selector(payload, TRANSFER_SELECTOR)


DENYLIST_RULE = Rule(
    name="denylist",
    matches=_denylisted,
    verdict=RiskVerdict(
        RiskLevel.HIGH,
        "destination is a known malicious address",
        (DENYLISTED_ADDRESS,),
    ),
)

UNLIMITED_APPROVAL_RULE = Rule(
    name="unlimited_approval",
    matches=_unlimited_approval,
    verdict=RiskVerdict(
        RiskLevel.MEDIUM,
        "you are about to grant this contract UNLIMITED permission to spend your tokens; "
        "only continue if you fully trust this site",
        (UNLIMITED_APPROVAL,),
    ),
)

TRANSFER_RULE = Rule(
    name="plain_transfer",
    matches=_plain_transfer,
    verdict=RiskVerdict(RiskLevel.LOW, "simple token transfer, destination appears safe"),
)

DEFAULT_VERDICT = RiskVerdict(RiskLevel.LOW, "no obvious risk detected")

DEFAULT_RULES = (DENYLIST_RULE, UNLIMITED_APPROVAL_RULE, TRANSFER_RULE)
