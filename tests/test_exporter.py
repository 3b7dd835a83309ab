"""
Unit tests for trade and holdings export.

Tests cover:
- Trade CSV text and files
- Markdown trade report ordering and summary
- Markdown holdings summary
"""

import csv

from portfolio_base import Strategy, Trade
from portfolio_io import (
    format_holdings_markdown,
    format_trades_csv,
    format_trades_markdown,
    format_usd,
    write_trades_csv,
)

from conftest import make_holding

TRADES = [
    Trade(account="roth", symbol="VTI", type="buy", shares=50, amount=5000),
    Trade(account="roth", symbol="VXUS", type="sell", shares=30, amount=3000),
    Trade(account="taxable", symbol="BND", type="buy", shares=20, amount=2000),
]

HOLDINGS = [
    make_holding("roth", "VTI", 100, 100),
    make_holding("roth", "VXUS", 80, 100),
    make_holding("taxable", "BND", 20, 100),
]


class TestTradesCsv:
    """Tests for the trade CSV format."""

    def test_header_rows_and_trailing_newline(self):
        text = format_trades_csv([
            Trade(account="roth", symbol="VTI", type="buy", shares=5, amount=500),
            Trade(account="taxable", symbol="CASH", type="sell", shares=10.5, amount=10.5),
        ])

        assert text == (
            "account,symbol,type,shares,amount\n"
            "roth,VTI,buy,5,500.00\n"
            "taxable,CASH,sell,10.5,10.50\n"
        )

    def test_no_trades_gives_header_only(self):
        assert format_trades_csv([]) == "account,symbol,type,shares,amount\n"

    def test_account_names_with_commas_are_quoted(self):
        text = format_trades_csv([Trade(account="Smith, Joint", symbol="VTI", type="buy", shares=1, amount=250)])

        assert '"Smith, Joint",VTI,buy,1,250.00' in text

    def test_write_creates_parent_directories(self, tmp_path):
        path = tmp_path / "out" / "trades.csv"

        written = write_trades_csv(TRADES, path)

        assert written == path
        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert [(r["symbol"], r["type"], r["shares"], r["amount"]) for r in rows] == [
            ("VTI", "buy", "50", "5000.00"),
            ("VXUS", "sell", "30", "3000.00"),
            ("BND", "buy", "20", "2000.00"),
        ]


class TestTradesMarkdown:
    """Tests for the markdown trade report."""

    def test_report_contents(self):
        result = format_trades_markdown(TRADES, HOLDINGS, Strategy.MIN_TRADES)

        assert result.startswith("## Portfolio Rebalance")
        assert "**Total Portfolio:** $20,000.00 | **Strategy:** Minimize Trades" in result
        assert "| Account | Symbol | Action | Shares | Amount |" in result
        assert "| roth | VTI | BUY | 50 | $5,000.00 |" in result
        assert "**Sells:** 1 trade (30 shares, $3,000.00) | **Buys:** 2 trades (70 shares, $7,000.00)" in result

    def test_no_trades_message(self):
        result = format_trades_markdown([], HOLDINGS[:1], "consolidate")

        assert result == (
            "## Portfolio Rebalance\n\n"
            "**Total Portfolio:** $10,000.00 | **Strategy:** Consolidate\n\n"
            "No trades needed - portfolio is already balanced."
        )

    def test_sells_come_before_buys_within_an_account(self):
        result = format_trades_markdown(TRADES, HOLDINGS, Strategy.CONSOLIDATE)

        assert result.index("| roth | VXUS | SELL") < result.index("| roth | VTI | BUY")
        assert result.index("| roth | VTI | BUY") < result.index("| taxable | BND | BUY")

    def test_larger_amounts_first_within_same_action(self):
        trades = [
            Trade(account="roth", symbol="SMALL", type="buy", shares=1, amount=100),
            Trade(account="roth", symbol="BIG", type="buy", shares=1, amount=900),
        ]

        result = format_trades_markdown(trades, HOLDINGS, Strategy.CONSOLIDATE)

        assert result.index("BIG") < result.index("SMALL")


class TestHoldingsMarkdown:
    """Tests for the markdown holdings summary."""

    def test_summary_with_percentages(self):
        holdings = [
            make_holding("roth", "VXUS", 50, 100),
            make_holding("roth", "VTI", 100, 100),
            make_holding("taxable", "BND", 50, 100),
        ]

        result = format_holdings_markdown(holdings)

        assert result.startswith("## Current Holdings")
        assert "**Total Portfolio:** $20,000.00" in result
        assert "| roth | VTI | 100 | $10,000.00 | 50.0% |" in result
        assert "| roth | VXUS | 50 | $5,000.00 | 25.0% |" in result
        assert result.index("| roth | VTI") < result.index("| roth | VXUS")

    def test_fractional_shares_are_shown(self):
        result = format_holdings_markdown([make_holding("roth", "VTI", 10.5, 100)])

        assert "| roth | VTI | 10.5 | $1,050.00 | 100.0% |" in result

    def test_empty_holdings(self):
        result = format_holdings_markdown([])

        assert "**Total Portfolio:** $0.00" in result


def test_format_usd():
    assert format_usd(1234567.891) == "$1,234,567.89"
