from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Dict, List, Optional, Tuple
import logging
from portfolio_base import Account, Holding, Symbol
from rebalance_config import EngineConfig

# (symbol, account)
AllocationKey = Tuple[str, str]

class AllocationStrategy(ABC):
    """
    Base class for strategies that turn target percentages into dollar
    allocations per (symbol, account) while keeping every account's total fixed.
    """

    name: str = ''

    def __init__(self, config: Optional[EngineConfig] = None, logger: Optional[logging.Logger] = None):
        self.config = config or EngineConfig()
        self.logger = logger or logging.getLogger(self.__class__.__module__)

    @abstractmethod
    def allocate(self, symbols: List[Symbol], accounts: List[Account],
                 holdings: List[Holding]) -> List[Holding]:
        """
        Return one row per (targeted symbol, account) plus one liquidation row
        per holding whose symbol has no target, each with target_amount set.
        """
        pass

    @staticmethod
    def _total_value(holdings: List[Holding]) -> float:
        return sum(h.amount for h in holdings)

    @staticmethod
    def _account_totals(holdings: List[Holding]) -> Dict[str, float]:
        """Current value per account, in order of first appearance"""
        totals: Dict[str, float] = {}
        for holding in holdings:
            totals[holding.account] = totals.get(holding.account, 0.0) + holding.amount
        return totals

    def _build_result(self, symbols: List[Symbol], holdings: List[Holding],
                      account_names: List[str], allocations: Dict[AllocationKey, float]) -> List[Holding]:
        """Assemble output rows account by account from the allocation map"""
        holding_map = {(h.symbol, h.account): h for h in holdings}
        symbol_map = {s.name: s for s in symbols}
        holdings_by_account: Dict[str, List[Holding]] = defaultdict(list)
        for holding in holdings:
            holdings_by_account[holding.account].append(holding)

        result = []
        for account in account_names:
            for symbol in symbols:
                if symbol.target_percent is None:
                    continue
                existing = holding_map.get((symbol.name, account))
                result.append(Holding(
                    symbol=symbol.name,
                    account=account,
                    shares=existing.shares if existing else 0,
                    price=symbol.price,
                    amount=existing.amount if existing else 0,
                    target_amount=allocations.get((symbol.name, account), 0.0)
                ))

            # Holdings outside the rebalance universe are sold off entirely
            for holding in holdings_by_account[account]:
                symbol = symbol_map.get(holding.symbol)
                if symbol is None or symbol.target_percent is None:
                    result.append(holding.model_copy(update={'target_amount': 0.0, 'target_shares': None}))

        return result
