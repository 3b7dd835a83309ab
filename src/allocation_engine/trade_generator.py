"""Trade generation from whole-share targets"""

from typing import List, Optional
import logging
from portfolio_base import Holding, Trade
from .rounding import round_half_up, round_cents

class TradeGenerator:
    """Diff current shares against target shares"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def generate(self, holdings: List[Holding]) -> List[Trade]:
        """
        One trade per holding whose target_shares differs from its shares.
        Holdings with no target_shares are left out, which means "no change
        intended" rather than "sell to zero".
        """
        trades = []

        for holding in holdings:
            if holding.target_shares is None:
                continue

            delta_shares = round_half_up(holding.target_shares - holding.shares)
            if delta_shares == 0:
                continue

            shares = abs(delta_shares)
            trades.append(Trade(
                account=holding.account,
                symbol=holding.symbol,
                type='buy' if delta_shares > 0 else 'sell',
                shares=shares,
                amount=round_cents(shares * holding.price)
            ))

        self.logger.debug(f"Generated {len(trades)} trades from {len(holdings)} holdings")
        return trades
