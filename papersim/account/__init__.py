"""
Account Layer: Position management and margin accounting.
"""
from .position import Position
from .account import SimulatedAccount, TradeRecord

__all__ = [
    "Position",
    "SimulatedAccount",
    "TradeRecord",
]
