"""Read portfolio input from a file or stdin and dispatch on its format."""

import json
import sys
from pathlib import Path
from typing import Literal, Optional

from pydantic import ValidationError

from portfolio_base import PortfolioImportError, RebalanceInput
from .portfolio_csv import parse_portfolio_csv
from .schwab import parse_schwab_export


def detect_format(text: str) -> Literal['csv', 'json']:
    trimmed = text.lstrip().lstrip('\ufeff')
    if trimmed.startswith('{') or trimmed.startswith('['):
        return 'json'
    return 'csv'


def detect_csv_source(text: str) -> Literal['schwab', 'universal']:
    if text.lstrip().lstrip('\ufeff').startswith('"Positions'):
        return 'schwab'
    return 'universal'


def _parse_json(text: str) -> RebalanceInput:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise PortfolioImportError(f"Invalid JSON input: {e}") from e

    if not isinstance(raw, dict):
        raise PortfolioImportError("JSON input must be an object with a 'holdings' list")

    # Accept the camelCase keys used by the CSV #options section
    for camel, snake in (('rowDimension', 'row_dimension'), ('colDimension', 'col_dimension')):
        if camel in raw:
            raw.setdefault(snake, raw.pop(camel))

    try:
        return RebalanceInput(**raw)
    except ValidationError as e:
        raise PortfolioImportError(f"Invalid portfolio input: {e}") from e


def load_rebalance_input(text: str) -> RebalanceInput:
    """Parse JSON, Schwab export or universal CSV text into engine input."""
    # A leading byte order mark is not content
    text = text.lstrip('\ufeff')
    if detect_format(text) == 'json':
        return _parse_json(text)
    if detect_csv_source(text) == 'schwab':
        return parse_schwab_export(text)
    return parse_portfolio_csv(text)


def read_input(path: Optional[str | Path] = None) -> RebalanceInput:
    """
    Read portfolio input from path, or from stdin when path is None.

    Raises:
        FileNotFoundError: If path doesn't exist
        PortfolioImportError: If the content cannot be parsed
    """
    if path is None:
        text = sys.stdin.read()
    else:
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Input file not found: {file_path}")
        text = file_path.read_text(encoding='utf-8-sig')

    return load_rebalance_input(text)
