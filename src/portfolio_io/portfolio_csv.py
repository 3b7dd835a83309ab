"""
Universal multi-section portfolio CSV.

    #holdings
    account,symbol,shares
    Fidelity 401k,VTI,100

    #symbols
    name,price,countries,assets,beta
    VTI,250.00,us:1.0,equity:1.0,1.0

    #accounts
    name,tax_status,provider,owner
    Fidelity 401k,tax_deferred,fidelity,sam

    #targets
    symbol,percent
    VTI,60

    #options
    strategy,min_trades
    rowDimension,symbol
    colDimension,account

Only #holdings is required. Every section except #options starts with a
header row.
"""

import csv
import io
from typing import Dict, List, Optional

from portfolio_base import (
    AccountInfo,
    HoldingInput,
    PortfolioImportError,
    RebalanceInput,
    Strategy,
    SymbolInfo,
)


def _split(line: str) -> List[str]:
    return [field.strip() for field in next(csv.reader([line]))]


def _parse_number(value: str, section: str, line: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise PortfolioImportError(f"Invalid number '{value}' in #{section} row: {line}") from None


def _parse_optional_number(value: str, section: str, line: str) -> Optional[float]:
    return _parse_number(value, section, line) if value else None


def _format_number(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def parse_weight_map(text: str) -> Dict[str, float]:
    """Parse 'us:0.6|intl:0.4' into a weight mapping, skipping malformed pairs."""
    result: Dict[str, float] = {}
    if not text:
        return result
    for pair in text.split('|'):
        key, _, value = pair.partition(':')
        if key.strip() and value.strip():
            try:
                result[key.strip()] = float(value)
            except ValueError:
                continue
    return result


def serialize_weight_map(weights: Dict[str, float]) -> str:
    return '|'.join(f"{key}:{_format_number(value)}" for key, value in weights.items())


def _split_sections(text: str) -> Dict[str, List[str]]:
    sections: Dict[str, List[str]] = {}
    current = ''
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        if line.startswith('#'):
            current = line[1:].strip().lower()
            sections[current] = []
        elif current:
            sections[current].append(line)
    return sections


def parse_portfolio_csv(text: str) -> RebalanceInput:
    """
    Parse the universal portfolio CSV.

    Raises:
        PortfolioImportError: If #holdings is missing or a row is malformed
    """
    sections = _split_sections(text)

    holdings_lines = sections.get('holdings', [])
    if len(holdings_lines) < 2:
        raise PortfolioImportError('Missing #holdings section with header + data rows')

    holdings = []
    for line in holdings_lines[1:]:
        fields = _split(line)
        if len(fields) < 3:
            raise PortfolioImportError(f"Expected account,symbol,shares in #holdings row: {line}")
        holdings.append(HoldingInput(
            account=fields[0],
            symbol=fields[1],
            shares=_parse_number(fields[2], 'holdings', line),
        ))

    symbols = None
    symbols_lines = sections.get('symbols', [])
    if len(symbols_lines) >= 2:
        symbols = []
        for line in symbols_lines[1:]:
            fields = _split(line) + [''] * 5
            symbols.append(SymbolInfo(
                name=fields[0],
                price=_parse_optional_number(fields[1], 'symbols', line),
                countries=parse_weight_map(fields[2]),
                assets=parse_weight_map(fields[3]),
                beta=_parse_optional_number(fields[4], 'symbols', line),
            ))

    accounts = None
    accounts_lines = sections.get('accounts', [])
    if len(accounts_lines) >= 2:
        accounts = []
        for line in accounts_lines[1:]:
            fields = _split(line) + [''] * 4
            accounts.append(AccountInfo(
                name=fields[0],
                tax_status=fields[1] or None,
                provider=fields[2] or None,
                owner=fields[3] or None,
            ))

    targets = None
    targets_lines = sections.get('targets', [])
    if len(targets_lines) >= 2:
        targets = {}
        for line in targets_lines[1:]:
            fields = _split(line)
            if len(fields) < 2:
                raise PortfolioImportError(f"Expected symbol,percent in #targets row: {line}")
            targets[fields[0]] = _parse_number(fields[1], 'targets', line)

    strategy = None
    row_dimension = None
    col_dimension = None
    for line in sections.get('options', []):
        fields = _split(line) + ['']
        key, value = fields[0], fields[1]
        if key == 'strategy':
            try:
                strategy = Strategy(value)
            except ValueError:
                raise PortfolioImportError(f"Unknown strategy '{value}' in #options") from None
        elif key == 'rowDimension':
            row_dimension = value
        elif key == 'colDimension':
            col_dimension = value

    return RebalanceInput(
        holdings=holdings,
        symbols=symbols,
        accounts=accounts,
        targets=targets,
        strategy=strategy,
        row_dimension=row_dimension,
        col_dimension=col_dimension,
    )


def to_portfolio_csv(data: RebalanceInput) -> str:
    """Serialize a RebalanceInput back into the universal CSV format."""
    sections = [(
        'holdings',
        ['account', 'symbol', 'shares'],
        [[h.account, h.symbol, _format_number(h.shares)] for h in data.holdings],
    )]

    if data.symbols:
        sections.append((
            'symbols',
            ['name', 'price', 'countries', 'assets', 'beta'],
            [[
                s.name,
                _format_number(s.price) if s.price is not None else '',
                serialize_weight_map(s.countries),
                serialize_weight_map(s.assets),
                _format_number(s.beta) if s.beta is not None else '',
            ] for s in data.symbols],
        ))

    if data.accounts:
        sections.append((
            'accounts',
            ['name', 'tax_status', 'provider', 'owner'],
            [[a.name, a.tax_status or '', a.provider or '', a.owner or ''] for a in data.accounts],
        ))

    if data.targets:
        sections.append((
            'targets',
            ['symbol', 'percent'],
            [[symbol, _format_number(percent)] for symbol, percent in data.targets.items()],
        ))

    options = []
    if data.strategy:
        options.append(['strategy', data.strategy.value])
    if data.row_dimension:
        options.append(['rowDimension', data.row_dimension])
    if data.col_dimension:
        options.append(['colDimension', data.col_dimension])
    if options:
        sections.append(('options', None, options))

    # Fields with commas or quotes are quoted, matching _split
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    for index, (name, header, rows) in enumerate(sections):
        if index:
            buffer.write('\n')
        buffer.write(f'#{name}\n')
        if header:
            writer.writerow(header)
        writer.writerows(rows)
    return buffer.getvalue()
