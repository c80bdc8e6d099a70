"""Price series provider interface and the per-run fetch fan-out.

Fetching is the only part of a simulation that may run concurrently:
symbols are independent, so their series are requested in parallel and
collected into a dict keyed by symbol. The day loop that consumes them is
strictly sequential.
"""
from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import date

from stratlab.core.exceptions import DataError
from stratlab.core.types import PriceBar

logger = logging.getLogger(__name__)


class PriceSeriesProvider(ABC):
    @abstractmethod
    def get_series(self, symbol: str, start: date, end: date) -> list[PriceBar]:
        """Daily bars for ``symbol`` in ``[start, end]``, weekdays only, ascending."""

    @abstractmethod
    def available_symbols(self) -> list[str]: ...


def _fetch_one(
    provider: PriceSeriesProvider, symbol: str, start: date, end: date
) -> list[PriceBar]:
    try:
        bars = provider.get_series(symbol, start, end)
    except DataError:
        raise
    except Exception as exc:
        raise DataError(symbol, str(exc)) from exc
    if not bars:
        logger.warning("No price data for %s between %s and %s", symbol, start, end)
    return list(bars)


def fetch_series(
    provider: PriceSeriesProvider,
    symbols: Sequence[str],
    start: date,
    end: date,
    max_workers: int = 4,
) -> dict[str, list[PriceBar]]:
    """Fetch every symbol's series concurrently.

    The first provider failure is raised as a DataError; no retries are
    attempted here.

    Returns:
        Mapping of symbol -> bars, in the order of ``symbols``.
    """
    t0 = time.monotonic()
    workers = max(1, min(max_workers, len(symbols)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="price-fetch") as pool:
        futures = {
            symbol: pool.submit(_fetch_one, provider, symbol, start, end)
            for symbol in symbols
        }
        result = {symbol: future.result() for symbol, future in futures.items()}

    logger.info(
        "Fetched %d bars for %d symbols in %.2fs",
        sum(len(bars) for bars in result.values()),
        len(result),
        time.monotonic() - t0,
    )
    return result
