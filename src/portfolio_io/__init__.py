from .builder import build_symbols, build_accounts, build_holdings
from .portfolio_csv import (
    parse_portfolio_csv,
    to_portfolio_csv,
    parse_weight_map,
    serialize_weight_map,
)
from .schwab import (
    CASH_SYMBOL,
    SchwabPosition,
    parse_schwab_csv,
    parse_schwab_export,
    schwab_to_rebalance_input,
    infer_account_metadata,
)
from .reader import detect_format, detect_csv_source, load_rebalance_input, read_input
from .exporter import (
    format_usd,
    format_trades_csv,
    write_trades_csv,
    format_trades_markdown,
    format_holdings_markdown,
)

__all__ = [
    "build_symbols",
    "build_accounts",
    "build_holdings",
    "parse_portfolio_csv",
    "to_portfolio_csv",
    "parse_weight_map",
    "serialize_weight_map",
    "CASH_SYMBOL",
    "SchwabPosition",
    "parse_schwab_csv",
    "parse_schwab_export",
    "schwab_to_rebalance_input",
    "infer_account_metadata",
    "detect_format",
    "detect_csv_source",
    "load_rebalance_input",
    "read_input",
    "format_usd",
    "format_trades_csv",
    "write_trades_csv",
    "format_trades_markdown",
    "format_holdings_markdown",
]
