from __future__ import annotations

from collections.abc import Sequence

from stratlab.core.results import PerformanceMetrics, SimulationResults
from stratlab.core.types import DrawdownPoint, EquityPoint, Trade


def drawdown_series(
    equity_curve: Sequence[EquityPoint], initial_equity: float
) -> list[DrawdownPoint]:
    """Percentage retracement from the running peak, one point per equity point.

    The peak starts at ``initial_equity`` so a run that only ever loses
    still reports its drawdown from the starting capital.
    """
    peak = initial_equity
    points: list[DrawdownPoint] = []
    for point in equity_curve:
        if point.equity > peak:
            peak = point.equity
        dd = (peak - point.equity) / peak * 100 if peak > 0 else 0.0
        points.append(DrawdownPoint(date=point.date, drawdown=dd))
    return points


def profit_factor(trades: Sequence[Trade]) -> float:
    pnls = [t.pnl or 0.0 for t in trades]
    gross_profit = sum(p for p in pnls if p > 0)
    gross_loss = abs(sum(p for p in pnls if p < 0))
    if gross_loss > 0:
        return gross_profit / gross_loss
    return float("inf") if gross_profit > 0 else 0.0


def calculate_metrics(
    trades: Sequence[Trade],
    equity_curve: Sequence[EquityPoint],
    initial_equity: float,
) -> SimulationResults:
    final_equity = equity_curve[-1].equity if equity_curve else initial_equity
    total_pnl = final_equity - initial_equity

    total_trades = len(trades)
    winning_trades = sum(1 for t in trades if (t.pnl or 0.0) > 0)
    win_rate = winning_trades / total_trades * 100 if total_trades else 0.0
    average_trade = (
        sum(t.pnl_percentage or 0.0 for t in trades) / total_trades if total_trades else 0.0
    )

    drawdowns = drawdown_series(equity_curve, initial_equity)
    max_dd = max([d.drawdown for d in drawdowns] + [0.0])

    return SimulationResults(
        total_pnl=total_pnl,
        total_pnl_percentage=total_pnl / initial_equity * 100,
        win_rate=win_rate,
        trades=tuple(trades),
        equity_curve=tuple(equity_curve),
        drawdowns=tuple(drawdowns),
        metrics=PerformanceMetrics(
            max_drawdown=max_dd,
            average_trade=average_trade,
            profit_factor=profit_factor(trades),
            total_trades=total_trades,
            winning_trades=winning_trades,
            losing_trades=total_trades - winning_trades,
        ),
    )
