"""Target percentage validation"""

from typing import List
from portfolio_base import Symbol


def calculate_target_percent_sum(symbols: List[Symbol]) -> float:
    """Sum of target percentages, counting symbols without a target as 0"""
    return sum(symbol.target_percent or 0 for symbol in symbols)


def is_target_percent_valid(symbols: List[Symbol], tolerance: float = 0.01) -> bool:
    """Check that target percentages sum to 100 within tolerance"""
    return abs(calculate_target_percent_sum(symbols) - 100) < tolerance
