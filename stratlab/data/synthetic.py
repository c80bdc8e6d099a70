"""Seeded random-walk price generator for demos and tests.

Each request draws from its own ``random.Random`` seeded with
``(seed, symbol, start)``, so the same request always yields the same
series regardless of call order or thread.
"""
from __future__ import annotations

import random
from datetime import date, timedelta

from stratlab.core.types import PriceBar
from stratlab.data.provider import PriceSeriesProvider

_BASE_PRICES: dict[str, float] = {
    "AAPL": 150.0,
    "MSFT": 300.0,
    "GOOGL": 2500.0,
    "AMZN": 3300.0,
    "META": 300.0,
    "TSLA": 800.0,
    "NVDA": 700.0,
    "JPM": 160.0,
    "V": 230.0,
    "WMT": 140.0,
}
_DEFAULT_BASE_PRICE = 100.0

# Slight upward drift: daily move is uniform in [-1.92%, +2.08%] of price
_DRIFT_CENTER = 0.48
_DAILY_RANGE = 0.04
_WICK_PCT = 0.01
_MIN_VOLUME = 1_000_000
_MAX_VOLUME = 9_999_999


class SyntheticPriceProvider(PriceSeriesProvider):
    def __init__(self, seed: int = 0) -> None:
        self._seed = seed

    def available_symbols(self) -> list[str]:
        return list(_BASE_PRICES)

    def get_series(self, symbol: str, start: date, end: date) -> list[PriceBar]:
        rng = random.Random(f"{self._seed}:{symbol}:{start.isoformat()}")
        price = _BASE_PRICES.get(symbol, _DEFAULT_BASE_PRICE)

        bars: list[PriceBar] = []
        day = start
        while day <= end:
            if day.weekday() < 5:
                open_price = price
                close_price = open_price + (rng.random() - _DRIFT_CENTER) * _DAILY_RANGE * price
                high = max(open_price, close_price) + rng.random() * _WICK_PCT * open_price
                low = min(open_price, close_price) - rng.random() * _WICK_PCT * open_price
                bars.append(
                    PriceBar(
                        date=day,
                        open=round(open_price, 2),
                        high=round(high, 2),
                        low=round(low, 2),
                        close=round(close_price, 2),
                        volume=rng.randint(_MIN_VOLUME, _MAX_VOLUME),
                    )
                )
                price = close_price
            day += timedelta(days=1)
        return bars
