"""Command-line entry point.

Usage:
    stratlab --strategy configs/example_strategy.yaml --output results.json
    stratlab --list-symbols
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from stratlab.backtest.engine import SimulationEngine
from stratlab.core.config import Settings, StrategyConfig, load_settings, load_strategy
from stratlab.core.exceptions import ConfigError, StratLabError
from stratlab.core.logger import setup_logging
from stratlab.core.results import SimulationResults, results_to_dict
from stratlab.data.factory import build_provider

logger = logging.getLogger(__name__)

_DEFAULT_SETTINGS = Path("configs/settings.yaml")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stratlab",
        description="Simulate a rule-based trading strategy over daily price history.",
    )
    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument("--strategy", type=Path, help="Strategy document (YAML or JSON)")
    action.add_argument(
        "--list-symbols", action="store_true", help="Print the symbols the provider knows"
    )
    parser.add_argument(
        "--settings", type=Path, default=None,
        help=f"Settings file (default: {_DEFAULT_SETTINGS} if present)",
    )
    parser.add_argument("--output", type=Path, default=None, help="Write results JSON here")
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default=None,
        help="Override the configured log level",
    )
    return parser


def _load_settings(path: Path | None) -> Settings:
    if path is not None:
        return load_settings(path)
    if _DEFAULT_SETTINGS.exists():
        return load_settings(_DEFAULT_SETTINGS)
    return Settings()


def _print_summary(strategy: StrategyConfig, results: SimulationResults) -> None:
    sim = strategy.simulation_config
    metrics = results.metrics
    profit_factor = (
        "inf" if metrics.profit_factor == float("inf") else f"{metrics.profit_factor:.2f}"
    )
    print("=" * 60)
    print(f"  {strategy.name}")
    print("=" * 60)
    print(f"  Period        : {sim.start_date} to {sim.end_date}")
    print(f"  Symbols       : {', '.join(sim.symbols)}")
    print(f"  Initial       : ${sim.initial_capital:,.2f}")
    if results.final_equity is not None:
        print(f"  Final equity  : ${results.final_equity:,.2f}")
    print(f"  Total P&L     : ${results.total_pnl:,.2f} ({results.total_pnl_percentage:+.2f}%)")
    print(f"  Trades        : {metrics.total_trades} "
          f"({metrics.winning_trades} won / {metrics.losing_trades} lost)")
    print(f"  Win rate      : {results.win_rate:.2f}%")
    print(f"  Avg trade     : {metrics.average_trade:+.2f}%")
    print(f"  Profit factor : {profit_factor}")
    print(f"  Max drawdown  : {metrics.max_drawdown:.2f}%")
    print("=" * 60)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = _load_settings(args.settings)
    except (ConfigError, FileNotFoundError) as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return EXIT_CONFIG

    setup_logging(
        "stratlab",
        level=args.log_level or settings.system.log_level,
        log_dir=settings.system.log_dir,
    )
    provider = build_provider(settings.provider)

    if args.list_symbols:
        for symbol in provider.available_symbols():
            print(symbol)
        return EXIT_OK

    try:
        strategy = load_strategy(args.strategy)
        engine = SimulationEngine(provider, fetch_workers=settings.provider.fetch_workers)
        results = engine.run(strategy)
    except (ConfigError, FileNotFoundError) as exc:
        logger.error("Invalid strategy %s: %s", args.strategy, exc)
        return EXIT_CONFIG
    except StratLabError as exc:
        logger.error("Simulation failed: %s", exc)
        return EXIT_FAILURE

    _print_summary(strategy, results)

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(results_to_dict(results), f, indent=2)
        logger.info("Results written to %s", args.output)

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
