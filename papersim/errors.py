"""
Exceptions raised by the simulated account.

Every error is raised before any balance or position is touched, so a caller
can always retry with corrected input.
"""
from typing import Optional


class AccountError(Exception):
    """Base class for all simulated-account failures."""


class InvalidOrderError(AccountError, ValueError):
    """Rejected input: non-positive quantity, leverage or close amount."""


class MarketDataError(AccountError, LookupError):
    """No usable price for the symbol."""

    def __init__(self, symbol: str, message: Optional[str] = None):
        self.symbol = symbol
        super().__init__(message or f"no market data for {symbol}")


class PositionConflictError(AccountError):
    """Request conflicts with the current position or balance state."""


class PositionExistsError(PositionConflictError):
    def __init__(self, symbol: str, side: str):
        self.symbol = symbol
        self.side = side
        super().__init__(f"{symbol} already has an open {side} position")


class PositionNotFoundError(PositionConflictError):
    def __init__(self, symbol: str, side: str):
        self.symbol = symbol
        self.side = side
        super().__init__(f"no open {side} position for {symbol}")


class InsufficientBalanceError(PositionConflictError):
    def __init__(self, required: float, available: float):
        self.required = required
        self.available = available
        super().__init__(
            f"insufficient available balance: need {required:.4f}, available {available:.4f}"
        )
