"""
Position side constants and helpers.
"""
from typing import Literal, Tuple

PositionSide = Literal['long', 'short']

LONG: PositionSide = 'long'
SHORT: PositionSide = 'short'
SIDES: Tuple[PositionSide, PositionSide] = (LONG, SHORT)

# Positions are keyed by (symbol, side): hedge mode allows one of each per symbol
PositionKey = Tuple[str, str]


def normalize_side(position_side: str) -> str:
    """
    Normalize an exchange-style side string.
    'LONG'/'long' -> 'long', 'SHORT'/'short' -> 'short',
    anything else is lower-cased as-is.
    """
    upper = position_side.upper()
    if upper == 'LONG':
        return LONG
    if upper == 'SHORT':
        return SHORT
    return position_side.lower()


def position_key(symbol: str, side: str) -> PositionKey:
    return (symbol, side)
