"""
portfolio-rebalance: read a multi-account portfolio, rebalance it toward its
targets and print the resulting trades.
"""

import argparse
import sys
import uuid
from typing import List, Optional

from allocation_engine import Rebalancer
from portfolio_base import RebalanceInput, RebalancerError, Strategy
from portfolio_io import (
    build_accounts,
    build_holdings,
    build_symbols,
    format_holdings_markdown,
    format_trades_csv,
    format_trades_markdown,
    read_input,
    write_trades_csv,
)
from rebalance_config import AppConfig, load_config
from rebalancer_cli.context import RunInfo, clear_current_run, get_current_run, set_current_run
from rebalancer_cli.logger import AppLogger, configure_root_logger

app_logger = AppLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portfolio-rebalance",
        description="Rebalance a multi-account portfolio into whole-share trades",
    )
    parser.add_argument("input", nargs="?", default=None,
                        help="Portfolio file (JSON, universal CSV or Schwab export); stdin when omitted")
    parser.add_argument("--strategy", choices=[s.value for s in Strategy], default=None,
                        help="Allocation strategy, overrides the input's #options")
    parser.add_argument("--config", default=None, help="YAML configuration file")
    parser.add_argument("--format", choices=["markdown", "csv"], default=None,
                        help="Output format (default from config)")
    parser.add_argument("--output", default=None, help="Also write the trades CSV to this path")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default=None,
                        help="Override the configured log level")
    return parser


def resolve_strategy(cli_strategy: Optional[str], data: RebalanceInput, config: AppConfig) -> Strategy:
    """Command line flag first, then the input's own option, then the configured default."""
    if cli_strategy:
        return Strategy(cli_strategy)
    if data.strategy:
        return data.strategy
    return config.engine.default_strategy


def _load_app_config(path: Optional[str]) -> AppConfig:
    return load_config(path) if path else AppConfig()


def _render(result, holdings, output_format: str) -> str:
    if output_format == "csv":
        return format_trades_csv(result.trades)

    sections = [
        format_holdings_markdown(holdings),
        format_trades_markdown(result.trades, holdings, result.strategy),
    ]
    sections.extend(f"**Warning:** {warning}" for warning in result.warnings)
    return "\n\n".join(sections) + "\n"


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = _load_app_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.log_level:
        config.logging.level = args.log_level
    configure_root_logger(config.logging)

    set_current_run(RunInfo(run_id=str(uuid.uuid4()), source=args.input or "stdin"))
    try:
        data = read_input(args.input)
        strategy = resolve_strategy(args.strategy, data, config)
        get_current_run().strategy = strategy.value

        symbols = build_symbols(data)
        accounts = build_accounts(data)
        holdings = build_holdings(data, symbols)
        app_logger.log_info(
            f"Loaded {len(holdings)} holdings, {len(symbols)} symbols, {len(accounts)} accounts"
        )

        result = Rebalancer(config.engine).rebalance(symbols, accounts, holdings, strategy)

        output_format = args.format or config.export.default_format
        sys.stdout.write(_render(result, holdings, output_format))

        if args.output:
            path = write_trades_csv(result.trades, args.output)
            app_logger.log_info(f"Wrote {len(result.trades)} trades to {path}")

        return 0
    except (RebalancerError, FileNotFoundError, ValueError) as e:
        app_logger.log_error(f"Rebalance failed: {e}")
        return 1
    finally:
        clear_current_run()


if __name__ == "__main__":
    sys.exit(main())
