from typing import List
from pydantic import BaseModel, Field
from portfolio_base import Holding, Strategy, Trade

class RebalanceResult(BaseModel):
    """Result of a rebalance run with warnings"""
    strategy: Strategy
    total_value: float
    holdings: List[Holding]
    trades: List[Trade]
    warnings: List[str] = Field(default_factory=list)
