"""Core value types shared by the rule engine, portfolio and driver."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


@dataclass(frozen=True, slots=True)
class PriceBar:
    """One daily OHLCV bar. Series are ordered ascending by date."""

    date: date
    open: float
    high: float
    low: float
    close: float
    volume: float


class TradeStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


@dataclass(slots=True)
class Trade:
    """A simulated long position.

    Created open when a buy fires and mutated in place when it is closed.
    A closed trade is never reopened.
    """

    symbol: str
    entry_date: date
    entry_price: float
    quantity: int
    exit_date: date | None = None
    exit_price: float | None = None
    pnl: float | None = None
    pnl_percentage: float | None = None
    status: TradeStatus = TradeStatus.OPEN

    @property
    def is_open(self) -> bool:
        return self.status == TradeStatus.OPEN

    def return_pct(self, price: float) -> float:
        """Percentage move from the entry price to ``price``."""
        return (price - self.entry_price) / self.entry_price * 100

    def close(self, exit_date: date, exit_price: float) -> None:
        if not self.is_open:
            raise ValueError(f"Trade {self.symbol}@{self.entry_date} is already closed")
        self.exit_date = exit_date
        self.exit_price = exit_price
        self.pnl = (exit_price - self.entry_price) * self.quantity
        self.pnl_percentage = self.return_pct(exit_price)
        self.status = TradeStatus.CLOSED


@dataclass(frozen=True, slots=True)
class EquityPoint:
    date: date
    equity: float


@dataclass(frozen=True, slots=True)
class DrawdownPoint:
    date: date
    drawdown: float
