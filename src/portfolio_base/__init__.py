from .models import (
    # Core domain models
    Symbol,
    Account,
    Holding,
    Trade,
    Strategy,
    # Import contract models
    HoldingInput,
    SymbolInfo,
    AccountInfo,
    RebalanceInput,
)
from .exceptions import (
    RebalancerError,
    PortfolioImportError,
    InvalidTargetsError,
    UnknownStrategyError,
)

__version__ = "1.0.0"

__all__ = [
    "Symbol",
    "Account",
    "Holding",
    "Trade",
    "Strategy",
    "HoldingInput",
    "SymbolInfo",
    "AccountInfo",
    "RebalanceInput",
    "RebalancerError",
    "PortfolioImportError",
    "InvalidTargetsError",
    "UnknownStrategyError",
    "__version__",
]
