"""
Pytest configuration and fixtures for the rebalancer tests.

This module provides:
- Factory helpers for holdings and symbols
- Per-account and per-symbol total helpers
- Root logger isolation for tests that configure logging
"""

import logging
from typing import Dict, List, Optional

import pytest

from portfolio_base import Account, Holding, Symbol
from rebalancer_cli.logger import StructuredFormatter


# =============================================================================
# FACTORY HELPERS
# =============================================================================


def make_holding(account: str, symbol: str, shares: float, price: float,
                 target_amount: Optional[float] = None,
                 target_shares: Optional[int] = None) -> Holding:
    """Holding whose amount is shares * price."""
    return Holding(
        account=account,
        symbol=symbol,
        shares=shares,
        price=price,
        amount=shares * price,
        target_amount=target_amount,
        target_shares=target_shares,
    )


def make_symbols(*specs) -> List[Symbol]:
    """make_symbols(("VTI", 100, 60), ("VXUS", 100, 40))"""
    return [Symbol(name=name, price=price, target_percent=percent) for name, price, percent in specs]


def make_accounts(*names: str) -> List[Account]:
    return [Account(name=name) for name in names]


# =============================================================================
# TOTAL HELPERS
# =============================================================================


def account_target_total(result: List[Holding], account: str) -> float:
    return sum(h.target_amount or 0 for h in result if h.account == account)


def symbol_target_total(result: List[Holding], symbol: str) -> float:
    return sum(h.target_amount or 0 for h in result if h.symbol == symbol)


def account_originals(holdings: List[Holding]) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for holding in holdings:
        totals[holding.account] = totals.get(holding.account, 0.0) + holding.amount
    return totals


def whole_share_total(result: List[Holding], account: str) -> float:
    return sum(
        (h.target_shares if h.target_shares is not None else h.shares) * h.price
        for h in result if h.account == account
    )


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def three_account_portfolio():
    """Four symbols across three accounts, $32,100 in total."""
    symbols = make_symbols(
        ("VTI", 250, 40),
        ("VXUS", 60, 25),
        ("BND", 80, 20),
        ("BNDX", 55, 15),
    )
    accounts = make_accounts("roth", "trad_ira", "taxable")
    holdings = [
        make_holding("roth", "VTI", 20, 250),
        make_holding("roth", "VXUS", 50, 60),
        make_holding("trad_ira", "BND", 100, 80),
        make_holding("trad_ira", "VTI", 8, 250),
        make_holding("taxable", "VTI", 40, 250),
        make_holding("taxable", "VXUS", 50, 60),
        make_holding("taxable", "BNDX", 20, 55),
    ]
    return symbols, accounts, holdings


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Remove handlers installed by configure_root_logger and restore the level."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, StructuredFormatter):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
