"""
Position class - one open leveraged exposure on a symbol/side.
"""
import copy
from typing import Tuple

from ..domain.sides import SHORT
from . import risk


class Position:
    """
    Represents an open long or short position.
    Owned by the account; callers only ever see copies.
    """

    def __init__(
        self,
        symbol: str,
        side: str,
        quantity: float,
        entry_price: float,
        leverage: int,
        margin_used: float,
        is_cross_margin: bool = True,
        stop_loss: float = 0.0,
        take_profit: float = 0.0,
    ):
        """
        Args:
            symbol: Instrument identifier
            side: 'long' or 'short'
            quantity: Size in base units (always positive)
            entry_price: Fill price at open, never averaged
            leverage: Leverage used for display figures
            margin_used: Margin reserved at open
            is_cross_margin: Cross/isolated tag, metadata only
            stop_loss: Advisory trigger price, 0 if unset
            take_profit: Advisory trigger price, 0 if unset
        """
        self.symbol = symbol
        self.side = side
        self.quantity = quantity
        self.entry_price = entry_price
        self.leverage = leverage
        self.margin_used = margin_used
        self.is_cross_margin = is_cross_margin
        self.stop_loss = stop_loss
        self.take_profit = take_profit

    def __repr__(self) -> str:
        return (
            f"Position({self.symbol}, {self.side.upper()} {self.quantity} @ {self.entry_price:.4f}, "
            f"{self.leverage}x, margin={self.margin_used:.4f})"
        )

    @property
    def key(self) -> Tuple[str, str]:
        return (self.symbol, self.side)

    @property
    def signed_quantity(self) -> float:
        """Quantity with shorts reported negative."""
        return -self.quantity if self.side == SHORT else self.quantity

    @property
    def margin_type(self) -> str:
        return "cross" if self.is_cross_margin else "isolated"

    def copy(self) -> "Position":
        return copy.copy(self)

    def unrealized_pnl(self, mark_price: float) -> float:
        return risk.unrealized_pnl(self.side, self.entry_price, mark_price, self.quantity)

    def notional_value(self, mark_price: float) -> float:
        return risk.notional(mark_price, self.quantity)

    def liquidation_price(self) -> float:
        return risk.liquidation_price(self.side, self.entry_price, max(self.leverage, 1))

    def reduce(self, close_qty: float, exit_price: float) -> Tuple[float, float]:
        """
        Reduce the position by `close_qty` (partial or full close).
        Entry price is left untouched.

        Returns: (margin released, realized PnL before fees)
        """
        proportion = close_qty / self.quantity
        margin_release = self.margin_used * proportion
        pnl = risk.realized_pnl(self.side, self.entry_price, exit_price, close_qty)

        self.quantity -= close_qty
        self.margin_used -= margin_release

        return margin_release, pnl
