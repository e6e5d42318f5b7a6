from .engine import RiskEngine, evaluate
from .rules import DEFAULT_RULES, Rule

__all__ = ["RiskEngine", "evaluate", "Rule", "DEFAULT_RULES"]
