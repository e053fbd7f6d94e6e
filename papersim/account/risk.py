"""
Risk math - pure functions over position fields and a mark price.

Liquidation price is a single-position isolated-margin approximation:
it ignores fees, funding and cross-margin pooling, even for positions
tagged as cross.
"""
from typing import Tuple

from ..domain.sides import LONG, SHORT


def unrealized_pnl(side: str, entry: float, mark: float, quantity: float) -> float:
    """
    PnL of an open position at the mark price.
    Long = (mark - entry) * qty, short = (entry - mark) * qty, unknown side = 0.
    """
    if side == LONG:
        return (mark - entry) * quantity
    if side == SHORT:
        return (entry - mark) * quantity
    return 0.0


def liquidation_price(side: str, entry: float, leverage: float) -> float:
    """
    Price at which the position's margin is fully eroded.
    Returns 0 (unknown) for non-positive leverage or an unknown side.
    """
    if leverage <= 0:
        return 0.0
    if side == LONG:
        return entry * (1 - 1 / leverage)
    if side == SHORT:
        return entry * (1 + 1 / leverage)
    return 0.0


def notional(price: float, signed_quantity: float) -> float:
    """Notional = |price * quantity|."""
    return price * abs(signed_quantity)


def position_cost(entry: float, signed_quantity: float) -> float:
    return entry * abs(signed_quantity)


def maintenance_margin(margin_used: float, leverage: float) -> float:
    return margin_used / max(leverage, 1)


def margin_ratio(margin_used: float, wallet_balance: float) -> float:
    """Margin over the current wallet balance (drifts as other positions realize PnL)."""
    if wallet_balance == 0:
        return 0.0
    return margin_used / wallet_balance


def open_requirements(
    price: float,
    quantity: float,
    leverage: int,
    fee_rate: float
) -> Tuple[float, float, float]:
    """
    Funds needed to open a position.
    Returns: (notional, margin_required, fee)
    """
    value = price * quantity
    return value, value / leverage, value * fee_rate


def realized_pnl(side: str, entry: float, exit_price: float, quantity: float) -> float:
    """PnL realized by closing `quantity` at `exit_price`."""
    return unrealized_pnl(side, entry, exit_price, quantity)
