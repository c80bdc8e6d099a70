from stratlab.rules.conditions import evaluate, indicator_value
from stratlab.rules.matcher import passes_scanner, should_buy, should_sell

__all__ = ["evaluate", "indicator_value", "passes_scanner", "should_buy", "should_sell"]
