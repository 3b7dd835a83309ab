"""Consolidate strategy: hold each symbol in as few accounts as possible"""

from typing import Dict, List
from portfolio_base import Account, Holding, Symbol, Strategy
from .base import AllocationStrategy, AllocationKey

class ConsolidateStrategy(AllocationStrategy):
    """
    Greedy largest-first matching. Symbols are placed in descending order of
    dollar need, each into the accounts with the most remaining capacity, so a
    symbol spills into a second account only when the first one is full.
    """

    name = Strategy.CONSOLIDATE.value

    def allocate(self, symbols: List[Symbol], accounts: List[Account],
                 holdings: List[Holding]) -> List[Holding]:
        total_value = self._total_value(holdings)
        account_totals = self._account_totals(holdings)
        account_names = list(account_totals)
        capacity = dict(account_totals)

        symbol_needs: Dict[str, float] = {}
        for symbol in symbols:
            if symbol.target_percent and symbol.target_percent > 0:
                symbol_needs[symbol.name] = total_value * (symbol.target_percent / 100)

        allocations: Dict[AllocationKey, float] = {}

        # Largest need first decides which accounts host which symbols
        for symbol_name, total_needed in sorted(symbol_needs.items(), key=lambda item: item[1], reverse=True):
            remaining = total_needed

            accounts_by_capacity = sorted(
                (name for name in account_names if capacity[name] > 0),
                key=lambda name: capacity[name],
                reverse=True
            )

            for account_name in accounts_by_capacity:
                if remaining <= 0:
                    break

                can_allocate = min(remaining, capacity[account_name])
                if can_allocate > 0:
                    allocations[(symbol_name, account_name)] = can_allocate
                    capacity[account_name] -= can_allocate
                    remaining -= can_allocate

            if remaining > self.config.epsilon:
                self.logger.warning(
                    f"Consolidate: ${remaining:,.2f} of {symbol_name} target "
                    f"${total_needed:,.2f} could not be placed, no account capacity left"
                )

        self.logger.debug(
            f"Consolidate: allocated {len(symbol_needs)} symbols across "
            f"{len(account_names)} accounts (total ${total_value:,.2f})"
        )

        return self._build_result(symbols, holdings, account_names, allocations)
