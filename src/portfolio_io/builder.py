"""Derive engine domain objects from imported portfolio data."""

from typing import List

from portfolio_base import Account, Holding, RebalanceInput, Symbol


def build_symbols(data: RebalanceInput) -> List[Symbol]:
    """
    Build one Symbol per name seen in holdings or targets.

    Every imported symbol is part of the rebalance universe: symbols without
    a target get 0%, so their holdings are sold. Unknown prices default to 1.0.
    """
    names = dict.fromkeys(h.symbol for h in data.holdings)
    targets = data.targets or {}
    for name in targets:
        names.setdefault(name)

    metadata = {s.name: s for s in data.symbols or []}

    symbols = []
    for name in names:
        meta = metadata.get(name)
        symbols.append(Symbol(
            name=name,
            price=meta.price if meta and meta.price is not None else 1.0,
            target_percent=targets.get(name, 0),
            countries=dict(meta.countries) if meta else {},
            assets=dict(meta.assets) if meta else {},
            beta=meta.beta if meta and meta.beta is not None else 1.0,
        ))
    return symbols


def build_accounts(data: RebalanceInput) -> List[Account]:
    """Build one Account per account name in holdings, enriched with metadata."""
    names = dict.fromkeys(h.account for h in data.holdings)
    metadata = {a.name: a for a in data.accounts or []}

    accounts = []
    for name in names:
        meta = metadata.get(name)
        accounts.append(Account(
            name=name,
            tax_status=meta.tax_status if meta else None,
            provider=meta.provider if meta else None,
            owner=meta.owner if meta else None,
        ))
    return accounts


def build_holdings(data: RebalanceInput, symbols: List[Symbol]) -> List[Holding]:
    """Price each raw holding and compute its current dollar amount."""
    price_map = {s.name: s.price for s in symbols}

    holdings = []
    for row in data.holdings:
        price = price_map.get(row.symbol, 1.0)
        holdings.append(Holding(
            account=row.account,
            symbol=row.symbol,
            shares=row.shares,
            price=price,
            amount=row.shares * price,
        ))
    return holdings
