"""
papersim: in-memory derivatives margin account for paper trading.
"""
from .config import AccountConfig
from .account import SimulatedAccount, Position, TradeRecord
from .data import MarketPriceCache
from .domain import FillAck, AccountSnapshot, PositionSnapshot, LONG, SHORT

__all__ = [
    "AccountConfig",
    "SimulatedAccount",
    "Position",
    "TradeRecord",
    "MarketPriceCache",
    "FillAck",
    "AccountSnapshot",
    "PositionSnapshot",
    "LONG",
    "SHORT",
]
