import logging
from typing import Iterable, Optional, Sequence, Tuple

from ..models import ProposedTransaction, RiskVerdict
from .rules import DEFAULT_RULES, DEFAULT_VERDICT, Rule, normalize_call_data

logger = logging.getLogger(__name__)


class RiskEngine:
    """
    Classifies a proposed transaction before it is signed.

    evaluate() is pure and total: it never raises, and malformed call data
    simply fails every selector check and lands on the default verdict.
    """

    def __init__(self, denylist: Iterable[str] = (), rules: Sequence[Rule] = DEFAULT_RULES):
        self.denylist = frozenset(a.strip().lower() for a in denylist if a and a.strip())
        self.rules: Tuple[Rule, ...] = tuple(rules)

    def _match(self, tx: ProposedTransaction) -> Optional[Rule]:
        payload = normalize_call_data(tx.call_data)
        for rule in self.rules:
            if rule.matches(tx, payload, self.denylist):
                return rule
        return None

    def explain(self, tx: ProposedTransaction) -> str:
        """Name of the rule that decides the verdict for tx."""
        rule = self._match(tx)
        return rule.name if rule else "default"

    def evaluate(self, tx: ProposedTransaction) -> RiskVerdict:
        rule = self._match(tx)
        logger.debug("risk rule %s matched for destination %s", rule.name if rule else "default", tx.to_address)
        return rule.verdict if rule else DEFAULT_VERDICT


def evaluate(tx: ProposedTransaction, denylist: Iterable[str] = ()) -> RiskVerdict:
    return RiskEngine(denylist).evaluate(tx)
