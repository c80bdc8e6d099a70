"""CSV-backed price provider: one ``<SYMBOL>.csv`` file per symbol."""
from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

import pandas as pd

from stratlab.core.exceptions import DataError
from stratlab.core.types import PriceBar
from stratlab.data.provider import PriceSeriesProvider

logger = logging.getLogger(__name__)

_REQUIRED_COLUMNS = ("date", "open", "high", "low", "close", "volume")


class CsvPriceProvider(PriceSeriesProvider):
    """Reads daily OHLCV history from a directory of CSV files.

    Column names are matched case-insensitively. Rows falling on weekends
    are dropped and duplicate dates keep their last occurrence.
    """

    def __init__(self, data_dir: str | Path) -> None:
        self._data_dir = Path(data_dir)

    def _path_for(self, symbol: str) -> Path:
        return self._data_dir / f"{symbol}.csv"

    def available_symbols(self) -> list[str]:
        if not self._data_dir.is_dir():
            return []
        return sorted(p.stem for p in self._data_dir.glob("*.csv"))

    def _load_frame(self, symbol: str) -> pd.DataFrame:
        path = self._path_for(symbol)
        if not path.exists():
            raise DataError(symbol, f"no price file at {path}")

        try:
            df = pd.read_csv(path)
        except (OSError, ValueError) as exc:
            raise DataError(symbol, f"unreadable price file {path}: {exc}") from exc

        df.columns = [str(c).strip().lower() for c in df.columns]
        missing = [c for c in _REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise DataError(symbol, f"missing columns {missing} in {path}")

        df["date"] = pd.to_datetime(df["date"]).dt.normalize()
        return (
            df.drop_duplicates(subset="date", keep="last")
            .sort_values("date")
            .reset_index(drop=True)
        )

    def get_series(self, symbol: str, start: date, end: date) -> list[PriceBar]:
        df = self._load_frame(symbol)
        mask = (
            (df["date"] >= pd.Timestamp(start))
            & (df["date"] <= pd.Timestamp(end))
            & (df["date"].dt.dayofweek < 5)
        )
        window = df.loc[mask]
        logger.debug("Loaded %d rows for %s from %s", len(window), symbol, self._data_dir)

        return [
            PriceBar(
                date=row.date.date(),
                open=float(row.open),
                high=float(row.high),
                low=float(row.low),
                close=float(row.close),
                volume=float(row.volume),
            )
            for row in window.itertuples(index=False)
        ]
