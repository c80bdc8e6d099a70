from __future__ import annotations

from stratlab.core.config import ProviderConfig
from stratlab.data.csv_store import CsvPriceProvider
from stratlab.data.provider import PriceSeriesProvider
from stratlab.data.synthetic import SyntheticPriceProvider


def build_provider(config: ProviderConfig) -> PriceSeriesProvider:
    if config.type == "csv":
        return CsvPriceProvider(config.data_dir)
    return SyntheticPriceProvider(seed=config.seed)
