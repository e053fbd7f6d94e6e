"""
Domain Layer: Position sides and result records.
"""
from .sides import LONG, SHORT, SIDES, PositionSide, normalize_side, position_key
from .records import FillAck, AccountSnapshot, PositionSnapshot

__all__ = [
    "LONG",
    "SHORT",
    "SIDES",
    "PositionSide",
    "normalize_side",
    "position_key",
    "FillAck",
    "AccountSnapshot",
    "PositionSnapshot",
]
