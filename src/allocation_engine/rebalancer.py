"""Rebalance pipeline: allocate, convert to whole shares, generate trades"""

from typing import Dict, List, Optional, Type, Union
import logging
from portfolio_base import (
    Account,
    Holding,
    Symbol,
    Strategy,
    InvalidTargetsError,
    UnknownStrategyError,
)
from rebalance_config import EngineConfig
from .base import AllocationStrategy
from .consolidate import ConsolidateStrategy
from .min_trades import MinimizeTradesStrategy
from .models import RebalanceResult
from .targets import calculate_target_percent_sum, is_target_percent_valid
from .trade_generator import TradeGenerator
from .whole_shares import WholeShareConverter

STRATEGIES: Dict[Strategy, Type[AllocationStrategy]] = {
    Strategy.CONSOLIDATE: ConsolidateStrategy,
    Strategy.MIN_TRADES: MinimizeTradesStrategy,
}

class Rebalancer:
    """Run a full rebalance for a multi-account portfolio"""

    def __init__(self, config: Optional[EngineConfig] = None, logger: Optional[logging.Logger] = None):
        self.config = config or EngineConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.converter = WholeShareConverter(self.config, self.logger)
        self.trade_generator = TradeGenerator(self.logger)

    def get_strategy(self, strategy: Union[Strategy, str]) -> AllocationStrategy:
        """Instantiate the strategy registered under the given name"""
        return STRATEGIES[self._resolve_strategy(strategy)](self.config, self.logger)

    @staticmethod
    def _resolve_strategy(strategy: Union[Strategy, str]) -> Strategy:
        try:
            return Strategy(strategy)
        except ValueError:
            valid = ", ".join(s.value for s in Strategy)
            raise UnknownStrategyError(f"Unknown strategy '{strategy}'. Valid strategies: {valid}") from None

    def allocate(self, strategy: Union[Strategy, str], symbols: List[Symbol],
                 accounts: List[Account], holdings: List[Holding]) -> List[Holding]:
        return self.get_strategy(strategy).allocate(symbols, accounts, holdings)

    def rebalance(self, symbols: List[Symbol], accounts: List[Account], holdings: List[Holding],
                  strategy: Union[Strategy, str, None] = None) -> RebalanceResult:
        """
        Allocate with the chosen strategy, round to whole shares and diff into
        trades. Returns RebalanceResult containing holdings, trades and warnings
        """
        strategy = self._resolve_strategy(strategy) if strategy is not None else self.config.default_strategy
        warnings = self._check_targets(symbols)

        total_value = sum(h.amount for h in holdings)
        self.logger.info(
            f"Rebalancing {len(holdings)} holdings across {len({h.account for h in holdings})} accounts "
            f"(${total_value:,.2f}) with {strategy.value} strategy"
        )

        allocated = self.allocate(strategy, symbols, accounts, holdings)
        converted = self.converter.convert(allocated)
        trades = self.trade_generator.generate(converted)

        uninvested = total_value - sum(h.target_amount or 0 for h in converted)
        if uninvested > self.config.epsilon:
            self.logger.info(f"Whole-share rounding leaves ${uninvested:,.2f} uninvested")

        buys = sum(1 for t in trades if t.type == 'buy')
        self.logger.info(f"Rebalance produced {len(trades)} trades ({len(trades) - buys} sells, {buys} buys)")

        return RebalanceResult(
            strategy=strategy,
            total_value=total_value,
            holdings=converted,
            trades=trades,
            warnings=warnings
        )

    def _check_targets(self, symbols: List[Symbol]) -> List[str]:
        """Validate target percentages; warn, or raise in strict mode"""
        if is_target_percent_valid(symbols, self.config.target_percent_tolerance):
            return []

        total = calculate_target_percent_sum(symbols)
        message = f"Target percentages sum to {total:.2f}%, not 100%"
        if self.config.strict_targets:
            self.logger.error(message)
            raise InvalidTargetsError(message)

        self.logger.warning(message)
        return [message]
