"""Simulation result containers and their JSON wire representation."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from stratlab.core.types import DrawdownPoint, EquityPoint, Trade


@dataclass(frozen=True, slots=True)
class PerformanceMetrics:
    """Summary statistics of a completed run.

    Attributes:
        max_drawdown: Largest peak-to-trough retracement, in percent.
        average_trade: Mean ``pnl_percentage`` over closed trades.
        profit_factor: Gross profit / gross loss; ``inf`` when there were
            winners but no losers, 0.0 when there were neither.
        sharpe_ratio: Not computed; reserved for callers that add it.
    """

    max_drawdown: float
    average_trade: float
    profit_factor: float
    total_trades: int
    winning_trades: int
    losing_trades: int
    sharpe_ratio: float | None = None


@dataclass(frozen=True, slots=True)
class SimulationResults:
    total_pnl: float
    total_pnl_percentage: float
    win_rate: float
    trades: tuple[Trade, ...]
    equity_curve: tuple[EquityPoint, ...]
    drawdowns: tuple[DrawdownPoint, ...]
    metrics: PerformanceMetrics

    @property
    def final_equity(self) -> float | None:
        return self.equity_curve[-1].equity if self.equity_curve else None


def _finite_or_none(value: float) -> float | None:
    return value if math.isfinite(value) else None


def _iso(value) -> str | None:
    return value.isoformat() if value is not None else None


def _trade_to_dict(trade: Trade) -> dict[str, Any]:
    return {
        "symbol": trade.symbol,
        "entryDate": _iso(trade.entry_date),
        "entryPrice": trade.entry_price,
        "exitDate": _iso(trade.exit_date),
        "exitPrice": trade.exit_price,
        "quantity": trade.quantity,
        "pnl": trade.pnl,
        "pnlPercentage": trade.pnl_percentage,
        "status": trade.status.value,
    }


def results_to_dict(results: SimulationResults) -> dict[str, Any]:
    """Serialize results using the strategy document's camelCase field names."""
    metrics = results.metrics
    metrics_payload: dict[str, Any] = {
        "maxDrawdown": metrics.max_drawdown,
        "averageTrade": metrics.average_trade,
        "profitFactor": _finite_or_none(metrics.profit_factor),
        "totalTrades": metrics.total_trades,
        "winningTrades": metrics.winning_trades,
        "losingTrades": metrics.losing_trades,
    }
    if metrics.sharpe_ratio is not None:
        metrics_payload["sharpeRatio"] = metrics.sharpe_ratio

    return {
        "totalPnl": results.total_pnl,
        "totalPnlPercentage": results.total_pnl_percentage,
        "winRate": results.win_rate,
        "trades": [_trade_to_dict(t) for t in results.trades],
        "equityCurve": [
            {"date": p.date.isoformat(), "equity": p.equity} for p in results.equity_curve
        ],
        "drawdowns": [
            {"date": p.date.isoformat(), "drawdown": p.drawdown} for p in results.drawdowns
        ],
        "metrics": metrics_payload,
    }
