class RebalancerError(Exception):
    """Base class for rebalancer errors"""
    pass

class PortfolioImportError(RebalancerError):
    """Raised when portfolio input cannot be parsed"""
    pass

class InvalidTargetsError(RebalancerError):
    """Raised when target percentages do not sum to 100 in strict mode"""
    pass

class UnknownStrategyError(RebalancerError):
    """Raised when an allocation strategy name is not registered"""
    pass
