"""Trade and holdings export: CSV files and markdown summaries."""

import csv
import io
from pathlib import Path
from typing import Dict, List, Union

from portfolio_base import Holding, Strategy, Trade

TRADE_CSV_COLUMNS = ["account", "symbol", "type", "shares", "amount"]

STRATEGY_LABELS = {
    Strategy.CONSOLIDATE: "Consolidate",
    Strategy.MIN_TRADES: "Minimize Trades",
}


def format_usd(amount: float) -> str:
    return f"${amount:,.2f}"


def _format_shares(shares: float) -> str:
    """At most two fraction digits, trailing zeros dropped: 10.50 -> 10.5"""
    text = f"{shares:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _format_plain(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def _write_trade_rows(stream, trades: List[Trade]) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(TRADE_CSV_COLUMNS)
    for trade in trades:
        writer.writerow([
            trade.account,
            trade.symbol,
            trade.type,
            _format_shares(trade.shares),
            f"{trade.amount:.2f}",
        ])


def format_trades_csv(trades: List[Trade]) -> str:
    buffer = io.StringIO()
    _write_trade_rows(buffer, trades)
    return buffer.getvalue()


def write_trades_csv(trades: List[Trade], path: Union[str, Path]) -> Path:
    """
    Write trades to a CSV file.

    Args:
        trades: Trades to export
        path: Output file path, parent directories are created

    Returns:
        The path written
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with open(file_path, "w", newline="", encoding="utf-8") as csvfile:
        _write_trade_rows(csvfile, trades)

    return file_path


def _plural(count: int) -> str:
    return f"{count} trade{'' if count == 1 else 's'}"


def format_trades_markdown(trades: List[Trade], holdings: List[Holding],
                           strategy: Union[Strategy, str]) -> str:
    """
    Render trades as a markdown table grouped by account, sells before buys
    and larger amounts first, followed by a buy/sell summary line.
    """
    total_value = sum(h.amount for h in holdings)
    label = STRATEGY_LABELS.get(Strategy(strategy), "Consolidate")
    header = f"**Total Portfolio:** {format_usd(total_value)} | **Strategy:** {label}"

    if not trades:
        return f"## Portfolio Rebalance\n\n{header}\n\nNo trades needed - portfolio is already balanced."

    ordered = sorted(trades, key=lambda t: (t.account, t.type != "sell", -t.amount))

    lines = [
        "## Portfolio Rebalance",
        "",
        header,
        "",
        "| Account | Symbol | Action | Shares | Amount |",
        "|---------|--------|--------|-------:|-------:|",
    ]
    for trade in ordered:
        lines.append(
            f"| {trade.account} | {trade.symbol} | {trade.type.upper()} | "
            f"{_format_shares(trade.shares)} | {format_usd(trade.amount)} |"
        )

    sells = [t for t in trades if t.type == "sell"]
    buys = [t for t in trades if t.type == "buy"]
    sell_summary = (f"{_plural(len(sells))} ({_format_shares(sum(t.shares for t in sells))} shares, "
                    f"{format_usd(sum(t.amount for t in sells))})")
    buy_summary = (f"{_plural(len(buys))} ({_format_shares(sum(t.shares for t in buys))} shares, "
                   f"{format_usd(sum(t.amount for t in buys))})")

    lines.append("")
    lines.append(f"**Sells:** {sell_summary} | **Buys:** {buy_summary}")
    return "\n".join(lines)


def format_holdings_markdown(holdings: List[Holding]) -> str:
    """Current holdings per account, largest positions first, with % of portfolio."""
    total_value = sum(h.amount for h in holdings)

    by_account: Dict[str, List[Holding]] = {}
    for holding in holdings:
        by_account.setdefault(holding.account, []).append(holding)

    lines = [
        "## Current Holdings",
        "",
        f"**Total Portfolio:** {format_usd(total_value)}",
        "",
        "| Account | Symbol | Shares | Amount | % of Portfolio |",
        "|---------|--------|-------:|-------:|---------------:|",
    ]
    for account, items in by_account.items():
        for item in sorted(items, key=lambda h: h.amount, reverse=True):
            pct = item.amount / total_value * 100 if total_value else 0.0
            lines.append(
                f"| {account} | {item.symbol} | {_format_plain(item.shares)} | "
                f"{format_usd(item.amount)} | {pct:.1f}% |"
            )
    return "\n".join(lines)
