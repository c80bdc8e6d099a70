"""Simulated long-only portfolio owned by a single simulation run."""
from __future__ import annotations

import logging
import math
from collections.abc import Mapping

from stratlab.core.exceptions import RiskLimitError
from stratlab.core.types import PriceBar, Trade

logger = logging.getLogger(__name__)

# floor(value / price) * price can overshoot value by float rounding
_CASH_TOLERANCE = 1e-9


def position_quantity(position_value: float, price: float) -> int:
    """Whole shares purchasable for ``position_value`` at ``price``."""
    if price <= 0:
        return 0
    return math.floor(position_value / price)


class Portfolio:
    """Cash, open positions and the closed-trade ledger.

    Positions move one way: open -> ledger. The ledger is append-only and a
    trade is never present in both collections.
    """

    def __init__(self, initial_capital: float, max_positions: int) -> None:
        self._initial_capital = initial_capital
        self._max_positions = max_positions
        self._cash = initial_capital
        self._positions: list[Trade] = []
        self._ledger: list[Trade] = []

    @property
    def cash(self) -> float:
        return self._cash

    @property
    def initial_capital(self) -> float:
        return self._initial_capital

    @property
    def max_positions(self) -> int:
        return self._max_positions

    @property
    def open_positions(self) -> tuple[Trade, ...]:
        return tuple(self._positions)

    @property
    def ledger(self) -> tuple[Trade, ...]:
        return tuple(self._ledger)

    @property
    def has_capacity(self) -> bool:
        return len(self._positions) < self._max_positions

    def open(self, symbol: str, bar: PriceBar, quantity: int) -> Trade:
        """Buy ``quantity`` shares of ``symbol`` at the bar close."""
        if quantity < 1:
            raise RiskLimitError("min_quantity", f"{symbol}: quantity {quantity} < 1")
        if not self.has_capacity:
            raise RiskLimitError(
                "max_positions", f"{symbol}: {len(self._positions)} positions already open"
            )
        cost = bar.close * quantity
        if cost > self._cash + _CASH_TOLERANCE:
            raise RiskLimitError(
                "available_cash", f"{symbol}: cost {cost:.2f} exceeds cash {self._cash:.2f}"
            )

        trade = Trade(
            symbol=symbol,
            entry_date=bar.date,
            entry_price=bar.close,
            quantity=quantity,
        )
        self._cash -= cost
        self._positions.append(trade)
        logger.debug(
            "Opened %s x%d @ %.2f on %s (cash=%.2f)",
            symbol, quantity, bar.close, bar.date, self._cash,
        )
        return trade

    def close(self, position: Trade, bar: PriceBar) -> Trade:
        """Sell the whole position at the bar close and move it to the ledger."""
        index = next((i for i, p in enumerate(self._positions) if p is position), None)
        if index is None:
            raise ValueError(f"{position.symbol} position is not open in this portfolio")

        position.close(bar.date, bar.close)
        self._cash += bar.close * position.quantity
        del self._positions[index]
        self._ledger.append(position)
        logger.debug(
            "Closed %s x%d @ %.2f on %s pnl=%.2f (%.2f%%)",
            position.symbol, position.quantity, bar.close, bar.date,
            position.pnl, position.pnl_percentage,
        )
        return position

    def finalize(self, last_bars: Mapping[str, PriceBar]) -> list[Trade]:
        """Force-close every remaining position at its symbol's last bar."""
        closed: list[Trade] = []
        for position in list(self._positions):
            closed.append(self.close(position, last_bars[position.symbol]))
        return closed

    def market_value(self, prices: Mapping[str, float]) -> float:
        """Value of open positions; a symbol without a price contributes 0."""
        return sum(
            p.quantity * prices[p.symbol] for p in self._positions if p.symbol in prices
        )

    def equity(self, prices: Mapping[str, float]) -> float:
        return self._cash + self.market_value(prices)
