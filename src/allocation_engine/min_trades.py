"""Minimize-trades strategy: nudge existing positions by the smallest amount needed"""

from collections import defaultdict
from typing import Dict, List
from portfolio_base import Account, Holding, Symbol, Strategy
from .base import AllocationStrategy, AllocationKey


class _AllocationLedger:
    """Working allocations for a single allocate() call, with per-account running totals"""

    def __init__(self, account_totals: Dict[str, float], min_capacity: float):
        self.account_totals = account_totals
        self.min_capacity = min_capacity
        self.allocations: Dict[AllocationKey, float] = {}
        self.used: Dict[str, float] = defaultdict(float)

    def get(self, key: AllocationKey) -> float:
        return self.allocations.get(key, 0.0)

    def set(self, key: AllocationKey, amount: float):
        previous = self.allocations.get(key, 0.0)
        self.allocations[key] = amount
        self.used[key[1]] += amount - previous

    def capacity(self, account_name: str) -> float:
        return self.account_totals.get(account_name, 0.0) - self.used[account_name]

    def accounts_by_capacity(self) -> List[str]:
        """Accounts with usable capacity, largest first"""
        candidates = [name for name in self.account_totals if self.capacity(name) > self.min_capacity]
        return sorted(candidates, key=self.capacity, reverse=True)

    def symbol_total(self, symbol_name: str) -> float:
        return sum(amount for (symbol, _), amount in self.allocations.items() if symbol == symbol_name)


class MinimizeTradesStrategy(AllocationStrategy):
    """
    Starts from the current positions and only touches symbols whose drift
    exceeds the noise threshold. Overweight symbols are trimmed first so the
    freed capacity is available to the symbols that need to grow.

    The per-account reconciliation pass is a heuristic; account totals match
    the originals to within a cent or so, not exactly.
    """

    name = Strategy.MIN_TRADES.value

    def allocate(self, symbols: List[Symbol], accounts: List[Account],
                 holdings: List[Holding]) -> List[Holding]:
        total_value = self._total_value(holdings)
        account_totals = self._account_totals(holdings)
        account_names = list(account_totals)
        ledger = _AllocationLedger(account_totals, self.config.min_capacity)

        price_map = {s.name: s.price for s in symbols}
        symbol_targets: Dict[str, float] = {}
        for symbol in symbols:
            if symbol.target_percent is not None:
                symbol_targets[symbol.name] = total_value * (symbol.target_percent / 100)

        for holding in holdings:
            if holding.symbol in symbol_targets:
                ledger.set((holding.symbol, holding.account), holding.amount)

        holdings_by_symbol: Dict[str, List[Holding]] = defaultdict(list)
        for holding in holdings:
            holdings_by_symbol[holding.symbol].append(holding)

        symbol_deltas = []
        for symbol_name, target_amount in symbol_targets.items():
            current_total = sum(h.amount for h in holdings_by_symbol[symbol_name])
            symbol_deltas.append((symbol_name, target_amount, target_amount - current_total))

        # Most overweight first frees capacity before growing symbols need it
        for symbol_name, target_amount, _ in sorted(symbol_deltas, key=lambda item: item[2]):
            noise_threshold = max(price_map.get(symbol_name, 1.0),
                                  total_value * self.config.noise_threshold_fraction)
            self._rebalance_symbol(ledger, symbol_name, target_amount,
                                   holdings_by_symbol[symbol_name], noise_threshold)

        self._reconcile_accounts(ledger)
        self._allocate_new_symbols(ledger, symbol_targets)

        return self._build_result(symbols, holdings, account_names, ledger.allocations)

    def _rebalance_symbol(self, ledger: _AllocationLedger, symbol_name: str, target_amount: float,
                          symbol_holdings: List[Holding], noise_threshold: float):
        """Move one symbol toward its target, or leave it alone if the drift is noise"""
        positions = sorted((h for h in symbol_holdings if h.amount > 0), key=lambda h: h.amount)
        current_total = sum(h.amount for h in positions)
        delta = target_amount - current_total

        # Below one share, or below percent-input rounding noise
        if abs(delta) < noise_threshold:
            self.logger.debug(
                f"Min trades: skipping {symbol_name}, delta ${delta:,.2f} "
                f"below threshold ${noise_threshold:,.2f}"
            )
            return

        if delta < 0:
            self._sell(ledger, symbol_name, positions, abs(delta))
        else:
            self._buy(ledger, symbol_name, positions, delta)

    def _sell(self, ledger: _AllocationLedger, symbol_name: str, positions: List[Holding], amount: float):
        """Trim the smallest positions first so the largest stay untouched"""
        remaining = amount
        for holding in positions:
            if remaining <= 0:
                break

            to_remove = min(remaining, holding.amount)
            ledger.set((symbol_name, holding.account), holding.amount - to_remove)
            remaining -= to_remove

    def _buy(self, ledger: _AllocationLedger, symbol_name: str, positions: List[Holding], amount: float):
        """Grow existing holders largest first, then spill into other accounts"""
        min_capacity = self.config.min_capacity
        remaining = amount

        for holding in sorted(positions, key=lambda h: h.amount, reverse=True):
            if remaining <= 0:
                break

            available = ledger.capacity(holding.account)
            if available > min_capacity:
                can_add = min(remaining, available)
                ledger.set((symbol_name, holding.account), holding.amount + can_add)
                remaining -= can_add

        if remaining > min_capacity:
            for account_name in ledger.accounts_by_capacity():
                if remaining <= 0:
                    break

                key = (symbol_name, account_name)
                available = ledger.capacity(account_name)
                if available > min_capacity:
                    can_add = min(remaining, available)
                    ledger.set(key, ledger.get(key) + can_add)
                    remaining -= can_add

        if remaining > self.config.epsilon:
            self.logger.debug(f"Min trades: ${remaining:,.2f} of {symbol_name} buy left for reconciliation")

    def _reconcile_accounts(self, ledger: _AllocationLedger):
        """Spread any account drift across its positions in proportion to their size"""
        for account_name, account_total in ledger.account_totals.items():
            delta = account_total - ledger.used[account_name]
            if abs(delta) < self.config.min_capacity:
                continue

            positions = [(key, amount) for key, amount in ledger.allocations.items()
                         if key[1] == account_name and amount > 0]
            if not positions:
                continue

            position_total = sum(amount for _, amount in positions)
            self.logger.debug(f"Min trades: reconciling {account_name} by ${delta:,.2f}")

            for key, amount in positions:
                adjustment = delta * (amount / position_total)
                ledger.set(key, max(0.0, amount + adjustment))

    def _allocate_new_symbols(self, ledger: _AllocationLedger, symbol_targets: Dict[str, float]):
        """Place symbols that ended up with no allocation anywhere"""
        for symbol_name, target_amount in symbol_targets.items():
            if ledger.symbol_total(symbol_name) >= self.config.min_capacity:
                continue

            remaining = target_amount
            for account_name in ledger.accounts_by_capacity():
                if remaining <= 0:
                    break

                can_allocate = min(remaining, ledger.capacity(account_name))
                ledger.set((symbol_name, account_name), can_allocate)
                remaining -= can_allocate
