from enum import Enum
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field

# Core domain models
class Symbol(BaseModel):
    """Tradable instrument with an optional allocation target"""
    name: str
    price: float = 1.0  # 1.0 = treat as cash equivalent when unknown
    target_percent: Optional[float] = None  # None = outside the rebalance universe
    countries: Dict[str, float] = Field(default_factory=dict)
    assets: Dict[str, float] = Field(default_factory=dict)
    beta: Optional[float] = None

class Account(BaseModel):
    """Custody/tax bucket whose total value is preserved by a rebalance"""
    name: str
    tax_status: Optional[str] = None
    provider: Optional[str] = None
    owner: Optional[str] = None

class Holding(BaseModel):
    """Position of one symbol in one account"""
    account: str
    symbol: str
    shares: float
    price: float
    amount: float
    target_amount: Optional[float] = None
    target_shares: Optional[int] = None

class Trade(BaseModel):
    """Buy or sell instruction for one holding"""
    account: str
    symbol: str
    type: Literal['buy', 'sell']
    shares: float
    amount: float

class Strategy(str, Enum):
    """Allocation strategies supported by the engine"""
    CONSOLIDATE = "consolidate"
    MIN_TRADES = "min_trades"

# Import contract models
class HoldingInput(BaseModel):
    """Raw holding row as produced by an importer"""
    account: str
    symbol: str
    shares: float

class SymbolInfo(BaseModel):
    """Raw symbol metadata; price may be unknown"""
    name: str
    price: Optional[float] = None
    countries: Dict[str, float] = Field(default_factory=dict)
    assets: Dict[str, float] = Field(default_factory=dict)
    beta: Optional[float] = None

class AccountInfo(BaseModel):
    """Raw account metadata"""
    name: str
    tax_status: Optional[str] = None
    provider: Optional[str] = None
    owner: Optional[str] = None

class RebalanceInput(BaseModel):
    """Everything an importer hands to the engine"""
    holdings: List[HoldingInput]
    targets: Optional[Dict[str, float]] = None
    symbols: Optional[List[SymbolInfo]] = None
    accounts: Optional[List[AccountInfo]] = None
    strategy: Optional[Strategy] = None
    row_dimension: Optional[str] = None  # display hint, unused by the engine
    col_dimension: Optional[str] = None  # display hint, unused by the engine
