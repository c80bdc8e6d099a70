"""Rule-set combinators producing daily scanner/buy/sell signals.

Scanner and buy rule sets are conjunctions; the sell rule set is a
disjunction. An empty scanner passes everything, an empty buy or sell
rule set never fires.
"""
from __future__ import annotations

from stratlab.core.config import ExitRule, ExitRuleType, RuleSet
from stratlab.core.types import PriceBar, Trade
from stratlab.rules.conditions import evaluate


def passes_scanner(
    rule_set: RuleSet,
    bar: PriceBar,
    previous_bar: PriceBar | None = None,
) -> bool:
    if rule_set.is_empty:
        return True
    return all(evaluate(c, bar, previous_bar) for c in rule_set.conditions)


def should_buy(
    rule_set: RuleSet,
    bar: PriceBar,
    previous_bar: PriceBar | None = None,
) -> bool:
    if rule_set.is_empty:
        return False
    return all(evaluate(c, bar, previous_bar) for c in rule_set.conditions)


def _exit_triggered(rule: ExitRule, bar: PriceBar, position: Trade) -> bool:
    change_pct = position.return_pct(bar.close)
    if rule.type is ExitRuleType.STOP_LOSS:
        return change_pct <= -rule.value
    return change_pct >= rule.value


def should_sell(
    rule_set: RuleSet,
    bar: PriceBar,
    previous_bar: PriceBar | None = None,
    position: Trade | None = None,
) -> bool:
    if rule_set.is_empty or position is None or not position.is_open:
        return False
    for condition in rule_set.conditions:
        if isinstance(condition, ExitRule):
            if _exit_triggered(condition, bar, position):
                return True
        elif evaluate(condition, bar, previous_bar):
            return True
    return False
