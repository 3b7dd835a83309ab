"""Schwab "Positions" export parsing."""

import csv
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from portfolio_base import AccountInfo, HoldingInput, RebalanceInput, SymbolInfo

CASH_SYMBOL = 'CASH'
SCHWAB_CASH_ROW = 'Cash & Cash Investments'

_ACCOUNT_SUFFIX = re.compile(r'\s+\.\.\.\d+$')
_ACCOUNT_HEADER = re.compile(r'\.\.\.\d+')


@dataclass
class SchwabPosition:
    account: str
    symbol: str
    description: str
    quantity: Optional[float]
    price: float
    market_value: float
    security_type: str


def parse_dollar_amount(text: str) -> float:
    """Parse '$10,389.47' or '-$9.31'; blanks and '--' are 0."""
    if not text or text == '--':
        return 0.0
    negative = text.startswith('-') or ('-' in text and not text.startswith('$'))
    cleaned = re.sub(r'[$,\-]', '', text)
    try:
        value = float(cleaned)
    except ValueError:
        return 0.0
    return -value if negative else value


def parse_quantity(text: str) -> Optional[float]:
    if not text or text == '--':
        return None
    try:
        return float(text.replace(',', ''))
    except ValueError:
        return None


def clean_account_name(raw: str) -> str:
    """Drop the masked account number: 'Sam_Roth ...123' -> 'Sam_Roth'."""
    return _ACCOUNT_SUFFIX.sub('', raw).strip()


def infer_account_metadata(account_name: str) -> AccountInfo:
    """Guess owner and tax status from a Schwab account nickname."""
    lower = account_name.lower()

    underscore = account_name.find('_')
    owner = account_name[:underscore].lower() if underscore > 0 else None

    tax_status = None
    if 'roth' in lower:
        tax_status = 'roth'
    elif 'trad' in lower or '401k' in lower:
        tax_status = 'traditional'
    elif 'cash' in lower or 'individual' in lower or 'brokerage' in lower:
        tax_status = 'taxable'

    return AccountInfo(name=account_name, tax_status=tax_status, provider='schwab', owner=owner)


def _column_map(headers: List[str]) -> Dict[str, int]:
    columns: Dict[str, int] = {}
    for index, header in enumerate(headers):
        name = header.lower()
        if name == 'symbol':
            columns['symbol'] = index
        elif name == 'description':
            columns['description'] = index
        elif name.startswith('qty'):
            columns['quantity'] = index
        elif name == 'price':
            columns['price'] = index
        elif name.startswith('mkt val') or name == 'market value':
            columns['market_value'] = index
        elif name.startswith('security type'):
            columns['security_type'] = index
    return columns


def _field(fields: List[str], columns: Dict[str, int], name: str, default: str) -> str:
    index = columns.get(name)
    if index is None or index >= len(fields):
        return default
    return fields[index]


def parse_schwab_csv(text: str) -> List[SchwabPosition]:
    """Extract positions from every account block of a Schwab export."""
    positions: List[SchwabPosition] = []
    current_account = ''
    columns: Dict[str, int] = {}

    for index, raw in enumerate(text.lstrip('\ufeff').splitlines()):
        line = raw.strip()
        if not line:
            continue

        # Title/timestamp line
        if index == 0 and line.startswith('"Positions'):
            continue

        if not line.startswith('"') and _ACCOUNT_HEADER.search(line):
            current_account = clean_account_name(line)
            columns = {}
            continue

        if line.startswith('"Symbol"'):
            columns = _column_map(next(csv.reader([line])))
            continue

        if not current_account or 'symbol' not in columns:
            continue

        fields = next(csv.reader([line]))
        symbol = _field(fields, columns, 'symbol', '')
        if not symbol or symbol == 'Account Total':
            continue

        is_cash = symbol == SCHWAB_CASH_ROW
        positions.append(SchwabPosition(
            account=current_account,
            symbol=CASH_SYMBOL if is_cash else symbol,
            description='Cash' if is_cash else _field(fields, columns, 'description', ''),
            quantity=parse_quantity(_field(fields, columns, 'quantity', '--')),
            price=1.0 if is_cash else parse_dollar_amount(_field(fields, columns, 'price', '--')),
            market_value=parse_dollar_amount(_field(fields, columns, 'market_value', '0')),
            security_type=_field(fields, columns, 'security_type', ''),
        ))

    return positions


def schwab_to_rebalance_input(positions: List[SchwabPosition],
                              existing: Optional[RebalanceInput] = None) -> RebalanceInput:
    """
    Turn Schwab positions into engine input, keeping metadata, targets and
    options from a previously imported portfolio. Cash is held as CASH shares
    priced at 1.0.
    """
    holdings = [
        HoldingInput(
            account=p.account,
            symbol=p.symbol,
            shares=p.market_value if p.symbol == CASH_SYMBOL else (p.quantity or 0.0),
        )
        for p in positions
    ]

    existing_accounts = {a.name: a for a in (existing.accounts or [])} if existing else {}
    accounts = [
        existing_accounts.get(name) or infer_account_metadata(name)
        for name in dict.fromkeys(p.account for p in positions)
    ]

    prices: Dict[str, float] = {}
    for p in positions:
        if p.price > 0:
            prices[p.symbol] = p.price

    existing_symbols = {s.name: s for s in (existing.symbols or [])} if existing else {}
    symbols = []
    for name in dict.fromkeys(p.symbol for p in positions):
        previous = existing_symbols.get(name)
        price = prices.get(name)
        if previous:
            symbols.append(previous.model_copy(update={'price': price if price is not None else previous.price}))
        else:
            symbols.append(SymbolInfo(name=name, price=price))

    return RebalanceInput(
        holdings=holdings,
        symbols=symbols,
        accounts=accounts,
        targets=existing.targets if existing else None,
        strategy=existing.strategy if existing else None,
        row_dimension=existing.row_dimension if existing else None,
        col_dimension=existing.col_dimension if existing else None,
    )


def parse_schwab_export(text: str, existing: Optional[RebalanceInput] = None) -> RebalanceInput:
    return schwab_to_rebalance_input(parse_schwab_csv(text), existing)
