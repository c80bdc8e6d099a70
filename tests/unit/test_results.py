"""Unit tests for results serialization."""
import json
from datetime import date

from stratlab.core.results import PerformanceMetrics, SimulationResults, results_to_dict
from stratlab.core.types import DrawdownPoint, EquityPoint, Trade


def _make_results(profit_factor: float = 2.0, sharpe_ratio: float | None = None) -> SimulationResults:
    trade = Trade(symbol="AAPL", entry_date=date(2024, 1, 2), entry_price=100.0, quantity=10)
    trade.close(date(2024, 1, 4), 110.0)
    return SimulationResults(
        total_pnl=100.0,
        total_pnl_percentage=1.0,
        win_rate=100.0,
        trades=(trade,),
        equity_curve=(
            EquityPoint(date(2024, 1, 2), 10_000.0),
            EquityPoint(date(2024, 1, 3), 10_100.0),
        ),
        drawdowns=(
            DrawdownPoint(date(2024, 1, 2), 0.0),
            DrawdownPoint(date(2024, 1, 3), 0.0),
        ),
        metrics=PerformanceMetrics(
            max_drawdown=0.0,
            average_trade=10.0,
            profit_factor=profit_factor,
            total_trades=1,
            winning_trades=1,
            losing_trades=0,
            sharpe_ratio=sharpe_ratio,
        ),
    )


class TestResultsToDict:
    def test_top_level_keys(self):
        payload = results_to_dict(_make_results())
        assert set(payload) == {
            "totalPnl", "totalPnlPercentage", "winRate", "trades",
            "equityCurve", "drawdowns", "metrics",
        }

    def test_trade_payload(self):
        trade = results_to_dict(_make_results())["trades"][0]
        assert trade == {
            "symbol": "AAPL",
            "entryDate": "2024-01-02",
            "entryPrice": 100.0,
            "exitDate": "2024-01-04",
            "exitPrice": 110.0,
            "quantity": 10,
            "pnl": 100.0,
            "pnlPercentage": 10.0,
            "status": "closed",
        }

    def test_series_use_iso_dates(self):
        payload = results_to_dict(_make_results())
        assert payload["equityCurve"][1] == {"date": "2024-01-03", "equity": 10_100.0}
        assert payload["drawdowns"][0] == {"date": "2024-01-02", "drawdown": 0.0}

    def test_infinite_profit_factor_becomes_null(self):
        payload = results_to_dict(_make_results(profit_factor=float("inf")))
        assert payload["metrics"]["profitFactor"] is None
        # Strict JSON must accept the payload
        json.dumps(payload, allow_nan=False)

    def test_sharpe_ratio_omitted_when_unset(self):
        assert "sharpeRatio" not in results_to_dict(_make_results())["metrics"]

    def test_sharpe_ratio_included_when_set(self):
        metrics = results_to_dict(_make_results(sharpe_ratio=1.25))["metrics"]
        assert metrics["sharpeRatio"] == 1.25

    def test_final_equity(self):
        assert _make_results().final_equity == 10_100.0
