"""Whole-share conversion using the largest-remainder method"""

from collections import defaultdict
from typing import Dict, List, Optional
import logging
import math
from portfolio_base import Holding
from rebalance_config import EngineConfig
from .rounding import round_half_up

class WholeShareConverter:
    """Convert dollar target amounts into integer share counts"""

    def __init__(self, config: Optional[EngineConfig] = None, logger: Optional[logging.Logger] = None):
        self.config = config or EngineConfig()
        self.logger = logger or logging.getLogger(__name__)

    def convert(self, holdings: List[Holding]) -> List[Holding]:
        """
        Return a copy of holdings with target_shares set and target_amount
        recomputed as target_shares * price.

        Shares are apportioned per symbol so the symbol total matches the
        rounded ideal total, then any account pushed over its original value by
        independent per-symbol round-ups is repaired one share at a time.
        Holdings without a target_amount keep their current share count.
        """
        result = [h.model_copy() for h in holdings]
        floors = [0] * len(holdings)

        groups: Dict[str, List[int]] = defaultdict(list)
        for index, holding in enumerate(holdings):
            groups[holding.symbol].append(index)

        for symbol, indexes in groups.items():
            self._apportion_symbol(holdings, indexes, result, floors)

        self._repair_account_budgets(holdings, result, floors)

        return result

    def _ideal_shares(self, holding: Holding, price: float) -> float:
        if holding.target_amount is None or price <= 0:
            return max(0.0, holding.shares)
        return max(0.0, holding.target_amount / price)

    def _apportion_symbol(self, holdings: List[Holding], indexes: List[int],
                          result: List[Holding], floors: List[int]):
        """Floor every ideal share count, then hand leftover shares to the largest remainders"""
        price = holdings[indexes[0]].price

        ideals = [self._ideal_shares(holdings[i], price) for i in indexes]
        floored = [math.floor(ideal) for ideal in ideals]
        remainders = [ideal - floor for ideal, floor in zip(ideals, floored)]

        extra_shares = round_half_up(sum(ideals)) - sum(floored)

        # sorted() is stable, so equal remainders favour the earlier row
        by_remainder = sorted(range(len(indexes)), key=lambda j: remainders[j], reverse=True)
        shares = list(floored)
        for j in by_remainder[:extra_shares]:
            shares[j] += 1

        for j, index in enumerate(indexes):
            result[index].target_shares = shares[j]
            result[index].target_amount = shares[j] * price
            floors[index] = floored[j]

    def _repair_account_budgets(self, holdings: List[Holding], result: List[Holding], floors: List[int]):
        """Take back round-up shares from accounts that now exceed their original value"""
        epsilon = self.config.epsilon

        budgets: Dict[str, float] = {}
        pre_rounding: Dict[str, float] = {}
        for holding in holdings:
            budgets[holding.account] = budgets.get(holding.account, 0.0) + holding.amount
            target = holding.target_amount if holding.target_amount is not None else holding.amount
            pre_rounding[holding.account] = pre_rounding.get(holding.account, 0.0) + target

        for account, budget in budgets.items():
            if pre_rounding[account] > budget + epsilon:
                self.logger.warning(
                    f"Account {account} target ${pre_rounding[account]:,.2f} exceeds its value "
                    f"${budget:,.2f} before rounding, leaving it unrepaired"
                )

        # One decrement may not be enough when several symbols round up in one account
        changed = True
        while changed:
            changed = False
            account_targets: Dict[str, float] = defaultdict(float)
            for holding in result:
                shares = holding.target_shares if holding.target_shares is not None else holding.shares
                account_targets[holding.account] += shares * holding.price

            for account, budget in budgets.items():
                if pre_rounding[account] > budget + epsilon:
                    continue
                if account_targets[account] <= budget + epsilon:
                    continue

                index = self._pick_decrement(result, floors, account)
                if index is None:
                    continue

                holding = result[index]
                holding.target_shares -= 1
                holding.target_amount = holding.target_shares * holding.price
                changed = True
                self.logger.debug(
                    f"Budget repair: {account} {holding.symbol} reduced to {holding.target_shares} shares "
                    f"(account ${account_targets[account]:,.2f} > ${budget:,.2f})"
                )

    def _pick_decrement(self, result: List[Holding], floors: List[int], account: str) -> Optional[int]:
        """Prefer a rounded-up holding, then the lowest price, to leave the least cash idle"""
        best_index = None
        best_price = math.inf
        best_rounded_up = False

        for index, holding in enumerate(result):
            if holding.account != account or holding.target_shares is None or holding.target_shares <= 0:
                continue

            rounded_up = holding.target_shares > floors[index]
            if rounded_up and not best_rounded_up:
                best_index = index
                best_price = holding.price
                best_rounded_up = True
            elif rounded_up == best_rounded_up and holding.price < best_price:
                best_index = index
                best_price = holding.price

        return best_index
