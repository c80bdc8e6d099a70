"""Day-by-day strategy simulation over multiple symbols.

For every trading day in the union of all symbols' calendars:

1. close transition - open positions whose sell rule set fires are sold at
   the day's close;
2. open transition - symbols are scanned in configured order and bought
   while slots and cash allow;
3. equity snapshot - cash plus open positions marked at the day's close.

The order is fixed: proceeds from today's sells are available to today's
buys. After the last day every remaining position is closed at its own
series' last bar, so the ledger handed to the metrics step is fully closed.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

from stratlab.core.config import StrategyConfig, parse_strategy
from stratlab.core.results import SimulationResults
from stratlab.core.types import EquityPoint, PriceBar
from stratlab.data.provider import PriceSeriesProvider, fetch_series
from stratlab.portfolio.performance import calculate_metrics
from stratlab.portfolio.portfolio import Portfolio, position_quantity
from stratlab.rules.matcher import passes_scanner, should_buy, should_sell

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _MarketData:
    """Per-symbol bars indexed by date, plus the global trading calendar."""

    by_symbol: dict[str, dict[date, PriceBar]]
    last_bars: dict[str, PriceBar]
    trading_days: list[date]

    @classmethod
    def build(cls, series: Mapping[str, list[PriceBar]]) -> _MarketData:
        by_symbol = {sym: {bar.date: bar for bar in bars} for sym, bars in series.items()}
        last_bars = {sym: bars[-1] for sym, bars in series.items() if bars}
        days = sorted({d for bars in by_symbol.values() for d in bars})
        return cls(by_symbol=by_symbol, last_bars=last_bars, trading_days=days)

    def bar(self, symbol: str, day: date | None) -> PriceBar | None:
        if day is None:
            return None
        return self.by_symbol.get(symbol, {}).get(day)

    def closes(self, day: date) -> dict[str, float]:
        return {
            sym: bars[day].close for sym, bars in self.by_symbol.items() if day in bars
        }


class SimulationEngine:
    """Runs one strategy to completion against a price series provider.

    The engine holds no per-run state: each ``run`` call builds its own
    Portfolio, so one engine can serve concurrent runs.
    """

    def __init__(self, provider: PriceSeriesProvider, fetch_workers: int = 4) -> None:
        self._provider = provider
        self._fetch_workers = fetch_workers

    def run(self, strategy: StrategyConfig | Mapping[str, Any]) -> SimulationResults:
        """Simulate ``strategy`` and return its results.

        Raises:
            ConfigError: If the strategy document is invalid (before any fetch).
            DataError: If the provider fails for any symbol.
        """
        strategy = parse_strategy(strategy)
        sim = strategy.simulation_config
        t0 = time.monotonic()
        logger.info(
            "Simulating '%s': %s..%s, %d symbols, capital=%.2f, max_positions=%d, size=%.2f%%",
            strategy.name, sim.start_date, sim.end_date, len(sim.symbols),
            sim.initial_capital, sim.max_positions, sim.position_size,
        )

        series = fetch_series(
            self._provider, sim.symbols, sim.start_date, sim.end_date, self._fetch_workers
        )
        market = _MarketData.build(series)
        portfolio = Portfolio(sim.initial_capital, sim.max_positions)
        equity_curve: list[EquityPoint] = []

        previous_day: date | None = None
        for day in market.trading_days:
            self._close_transition(strategy, market, portfolio, day, previous_day)
            self._open_transition(strategy, market, portfolio, day, previous_day)
            equity_curve.append(EquityPoint(date=day, equity=portfolio.equity(market.closes(day))))
            previous_day = day

        forced = portfolio.finalize(market.last_bars)
        if forced:
            logger.info("Force-closed %d open positions at end of data", len(forced))

        results = calculate_metrics(portfolio.ledger, equity_curve, sim.initial_capital)
        logger.info(
            "Finished '%s': %d days, %d trades, pnl=%.2f (%.2f%%), max_dd=%.2f%% in %.2fs",
            strategy.name, len(market.trading_days), results.metrics.total_trades,
            results.total_pnl, results.total_pnl_percentage,
            results.metrics.max_drawdown, time.monotonic() - t0,
        )
        return results

    @staticmethod
    def _close_transition(
        strategy: StrategyConfig,
        market: _MarketData,
        portfolio: Portfolio,
        day: date,
        previous_day: date | None,
    ) -> None:
        for position in portfolio.open_positions:
            bar = market.bar(position.symbol, day)
            if bar is None:
                continue
            prev = market.bar(position.symbol, previous_day)
            if should_sell(strategy.sell_config, bar, prev, position):
                portfolio.close(position, bar)

    @staticmethod
    def _open_transition(
        strategy: StrategyConfig,
        market: _MarketData,
        portfolio: Portfolio,
        day: date,
        previous_day: date | None,
    ) -> None:
        sim = strategy.simulation_config
        # Every trade targets the same value: a percent of initial capital
        position_value = sim.position_size / 100 * sim.initial_capital

        for symbol in sim.symbols:
            if not portfolio.has_capacity:
                break
            bar = market.bar(symbol, day)
            if bar is None:
                continue
            prev = market.bar(symbol, previous_day)
            if not passes_scanner(strategy.scanner_config, bar, prev):
                continue
            if not should_buy(strategy.buy_config, bar, prev):
                continue
            if portfolio.cash < position_value:
                logger.debug(
                    "Skip %s on %s: cash %.2f < position value %.2f",
                    symbol, day, portfolio.cash, position_value,
                )
                continue
            quantity = position_quantity(position_value, bar.close)
            if quantity < 1:
                logger.debug("Skip %s on %s: price %.2f too high for one share", symbol, day, bar.close)
                continue
            portfolio.open(symbol, bar, quantity)
