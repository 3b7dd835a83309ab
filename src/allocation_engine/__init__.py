from .base import AllocationStrategy
from .consolidate import ConsolidateStrategy
from .min_trades import MinimizeTradesStrategy
from .whole_shares import WholeShareConverter
from .trade_generator import TradeGenerator
from .targets import calculate_target_percent_sum, is_target_percent_valid
from .rebalancer import Rebalancer, STRATEGIES
from .models import RebalanceResult

__version__ = "1.0.0"

__all__ = [
    "AllocationStrategy",
    "ConsolidateStrategy",
    "MinimizeTradesStrategy",
    "WholeShareConverter",
    "TradeGenerator",
    "calculate_target_percent_sum",
    "is_target_percent_valid",
    "Rebalancer",
    "STRATEGIES",
    "RebalanceResult",
    "__version__",
]
