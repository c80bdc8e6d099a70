"""Single-condition evaluation against a daily bar."""
from __future__ import annotations

import operator
from typing import Callable

from stratlab.core.config import Condition, Indicator, IndicatorRule, Operator
from stratlab.core.types import PriceBar

_COMPARATORS: dict[Operator, Callable[[float, float], bool]] = {
    Operator.GT: operator.gt,
    Operator.LT: operator.lt,
    Operator.GE: operator.ge,
    Operator.LE: operator.le,
    Operator.EQ: operator.eq,
}


def indicator_value(
    indicator: str,
    bar: PriceBar,
    previous_bar: PriceBar | None = None,
) -> float | None:
    """Resolve an indicator for ``bar``; None when it cannot be computed."""
    try:
        kind = Indicator(indicator)
    except ValueError:
        return None

    if kind is Indicator.PRICE:
        return bar.close
    if kind is Indicator.VOLUME:
        return bar.volume
    # PRICE_CHANGE needs the previous trading day's bar for the same symbol
    if previous_bar is None or previous_bar.close == 0:
        return None
    return (bar.close - previous_bar.close) / previous_bar.close * 100


def evaluate(
    condition: Condition,
    bar: PriceBar,
    previous_bar: PriceBar | None = None,
) -> bool:
    """Return True when ``condition`` holds for ``bar``.

    Only indicator rules are evaluated here. Exit rules need an open
    position and are handled by the sell matcher; every other shape,
    unknown indicator or unknown operator evaluates to False.
    """
    if not isinstance(condition, IndicatorRule):
        return False

    try:
        compare = _COMPARATORS[Operator(condition.operator)]
    except ValueError:
        return False

    actual = indicator_value(condition.indicator, bar, previous_bar)
    if actual is None:
        return False
    return compare(actual, condition.value)
