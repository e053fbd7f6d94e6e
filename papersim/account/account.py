"""
SimulatedAccount - paper-trading margin account with hedge-mode positions.
"""
import math
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, Dict, Iterator, List, Optional, Tuple

import pandas as pd
from loguru import logger

from ..config import AccountConfig, DEFAULT_FEE_RATE
from ..data.price_feed import PriceFeed, resolve_price
from ..domain.records import AccountSnapshot, FillAck, PositionSnapshot
from ..domain.sides import LONG, SHORT, SIDES, PositionKey, normalize_side, position_key
from ..errors import (
    InsufficientBalanceError,
    InvalidOrderError,
    MarketDataError,
    PositionExistsError,
    PositionNotFoundError,
)
from . import risk
from .position import Position


def _whole_leverage(leverage: float) -> int:
    """Leverage as an int; NaN, infinite or fractional values are rejected."""
    if not math.isfinite(leverage) or leverage != int(leverage):
        raise InvalidOrderError(f"leverage must be a whole number, got {leverage}")
    return int(leverage)


@dataclass
class TradeRecord:
    """Record of a single simulated fill."""
    order_id: int
    symbol: str
    side: str  # 'long' or 'short'
    action: str  # 'OPEN' or 'CLOSE'
    quantity: float
    price: float
    amount: float  # quantity * price
    commission: float = 0.0
    realized_pnl: float = 0.0  # PnL realized from this fill (closing fills only)
    timestamp: datetime = field(default_factory=datetime.now)


class SimulatedAccount:
    """
    In-memory derivatives margin account.
    Handles balances, position lifecycle, fees and margin; prices come
    from an external PriceFeed.

    All mutations run under one lock, price lookup included. Queries copy
    state under the lock and do price lookups and risk math outside it.
    """

    def __init__(
        self,
        price_feed: PriceFeed,
        initial_balance: float = 10000.0,
        fee_rate: float = DEFAULT_FEE_RATE,
        is_cross_margin: bool = True,
        quantity_precision: int = 4,
        trade_log_maxlen: Optional[int] = None,
    ):
        self.price_feed = price_feed
        self.initial_balance = initial_balance
        self.fee_rate = fee_rate
        self.quantity_precision = quantity_precision

        self._lock = threading.Lock()
        self._wallet_balance = initial_balance
        self._available_balance = initial_balance
        self._is_cross_margin = is_cross_margin

        self._positions: Dict[PositionKey, Position] = {}
        self._order_counter = 0
        # Oldest fills are dropped once maxlen is reached
        self._trade_log: Deque[TradeRecord] = deque(maxlen=trade_log_maxlen)

    @classmethod
    def from_config(cls, config: AccountConfig, price_feed: PriceFeed) -> "SimulatedAccount":
        return cls(
            price_feed=price_feed,
            initial_balance=config.initial_balance,
            fee_rate=config.fee_rate,
            is_cross_margin=config.is_cross_margin,
            quantity_precision=config.quantity_precision,
            trade_log_maxlen=config.trade_log_maxlen,
        )

    def __repr__(self) -> str:
        with self._lock:
            return (
                f"SimulatedAccount(wallet={self._wallet_balance:.2f}, "
                f"available={self._available_balance:.2f}, positions={len(self._positions)})"
            )

    @property
    def wallet_balance(self) -> float:
        with self._lock:
            return self._wallet_balance

    @property
    def available_balance(self) -> float:
        with self._lock:
            return self._available_balance

    @property
    def is_cross_margin(self) -> bool:
        with self._lock:
            return self._is_cross_margin

    @property
    def trade_log(self) -> List[TradeRecord]:
        with self._lock:
            return list(self._trade_log)

    def clear_trade_log(self) -> None:
        with self._lock:
            self._trade_log.clear()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _next_order_id(self) -> int:
        # Caller holds the lock
        self._order_counter += 1
        return self._order_counter

    def _symbol_positions(self, symbol: str) -> Iterator[Position]:
        # Caller holds the lock
        for side in SIDES:
            position = self._positions.get(position_key(symbol, side))
            if position is not None:
                yield position

    def open(self, symbol: str, quantity: float, leverage: int, side: str) -> FillAck:
        """
        Open a new position at the current market price.

        Margin (notional / leverage) plus the opening fee is taken from the
        available balance; only the fee leaves the wallet balance.
        A symbol/side can be opened only once: there is no averaging in.
        """
        if not math.isfinite(quantity) or quantity <= 0:
            raise InvalidOrderError("quantity must be positive")
        leverage = _whole_leverage(leverage)
        if leverage <= 0:
            leverage = 1
        side = normalize_side(side)
        if side not in SIDES:
            raise InvalidOrderError(f"unknown position side: {side}")

        key = position_key(symbol, side)

        with self._lock:
            price = resolve_price(self.price_feed, symbol)
            value, margin_required, fee = risk.open_requirements(
                price, quantity, leverage, self.fee_rate
            )

            if key in self._positions:
                logger.warning(f"Rejected open: {symbol} already has an open {side} position")
                raise PositionExistsError(symbol, side)

            total_deduction = margin_required + fee
            if self._available_balance < total_deduction:
                logger.warning(
                    f"Rejected open {side} {quantity} {symbol}: need {total_deduction:.4f}, "
                    f"available {self._available_balance:.4f}"
                )
                raise InsufficientBalanceError(total_deduction, self._available_balance)

            self._available_balance -= total_deduction
            self._wallet_balance -= fee

            self._positions[key] = Position(
                symbol=symbol,
                side=side,
                quantity=quantity,
                entry_price=price,
                leverage=leverage,
                margin_used=margin_required,
                is_cross_margin=self._is_cross_margin,
            )

            order_id = self._next_order_id()
            self._trade_log.append(TradeRecord(
                order_id=order_id,
                symbol=symbol,
                side=side,
                action="OPEN",
                quantity=quantity,
                price=price,
                amount=value,
                commission=fee,
            ))

        logger.info(
            f"Opened {side.upper()} {quantity} {symbol} @ {price:.4f} {leverage}x "
            f"(margin={margin_required:.4f}, fee={fee:.4f}, order #{order_id})"
        )
        return FillAck(order_id=order_id, symbol=symbol, avg_price=price)

    def open_long(self, symbol: str, quantity: float, leverage: int) -> FillAck:
        return self.open(symbol, quantity, leverage, LONG)

    def open_short(self, symbol: str, quantity: float, leverage: int) -> FillAck:
        return self.open(symbol, quantity, leverage, SHORT)

    def close(self, symbol: str, quantity: float, side: str) -> FillAck:
        """
        Close all or part of a position at the current market price.

        A quantity strictly between 0 and the position size closes that much;
        anything else (zero, negative, oversized) closes the whole position.
        Margin is released in proportion to the closed quantity.
        """
        side = normalize_side(side)
        key = position_key(symbol, side)

        with self._lock:
            position = self._positions.get(key)
            if position is None:
                logger.warning(f"Rejected close: no open {side} position for {symbol}")
                raise PositionNotFoundError(symbol, side)

            close_qty = position.quantity
            if 0 < quantity < position.quantity:
                close_qty = quantity
            if close_qty <= 0:
                raise InvalidOrderError("close quantity must be positive")

            price = resolve_price(self.price_feed, symbol)
            fee = price * close_qty * self.fee_rate
            is_full_close = close_qty == position.quantity

            margin_release, pnl = position.reduce(close_qty, price)

            self._available_balance += margin_release + pnl - fee
            self._wallet_balance += pnl - fee

            if is_full_close:
                del self._positions[key]

            order_id = self._next_order_id()
            self._trade_log.append(TradeRecord(
                order_id=order_id,
                symbol=symbol,
                side=side,
                action="CLOSE",
                quantity=close_qty,
                price=price,
                amount=price * close_qty,
                commission=fee,
                realized_pnl=pnl,
            ))

        logger.info(
            f"Closed {side.upper()} {close_qty} {symbol} @ {price:.4f} "
            f"(pnl={pnl:.4f}, fee={fee:.4f}, {'full' if is_full_close else 'partial'}, order #{order_id})"
        )
        return FillAck(order_id=order_id, symbol=symbol, avg_price=price)

    def close_long(self, symbol: str, quantity: float) -> FillAck:
        return self.close(symbol, quantity, LONG)

    def close_short(self, symbol: str, quantity: float) -> FillAck:
        return self.close(symbol, quantity, SHORT)

    def set_leverage(self, symbol: str, leverage: int) -> None:
        """
        Set leverage on any open positions for the symbol.
        Already reserved margin is not recomputed.
        """
        leverage = _whole_leverage(leverage)
        if leverage <= 0:
            raise InvalidOrderError("leverage must be positive")

        with self._lock:
            for position in self._symbol_positions(symbol):
                position.leverage = leverage
        logger.debug(f"Leverage for {symbol} set to {leverage}x")

    def set_margin_mode(self, symbol: str, is_cross: bool) -> None:
        """Switch the cross/isolated default and retag the symbol's positions. No funds move."""
        with self._lock:
            self._is_cross_margin = is_cross
            for position in self._symbol_positions(symbol):
                position.is_cross_margin = is_cross
        logger.debug(f"Margin mode for {symbol} set to {'cross' if is_cross else 'isolated'}")

    def set_stop_loss(self, symbol: str, side: str, quantity: float, stop_price: float) -> None:
        """
        Record a stop-loss price. The account never triggers it.
        `quantity` is accepted for API symmetry; the stop covers the whole position.
        """
        key = position_key(symbol, normalize_side(side))
        with self._lock:
            position = self._positions.get(key)
            if position is not None:
                position.stop_loss = stop_price

    def set_take_profit(self, symbol: str, side: str, quantity: float, take_profit_price: float) -> None:
        """Record a take-profit price. Same rules as set_stop_loss."""
        key = position_key(symbol, normalize_side(side))
        with self._lock:
            position = self._positions.get(key)
            if position is not None:
                position.take_profit = take_profit_price

    def cancel_stop_loss_orders(self, symbol: str) -> None:
        with self._lock:
            for position in self._symbol_positions(symbol):
                position.stop_loss = 0.0

    def cancel_take_profit_orders(self, symbol: str) -> None:
        with self._lock:
            for position in self._symbol_positions(symbol):
                position.take_profit = 0.0

    def cancel_stop_orders(self, symbol: str) -> None:
        """Clear both stop-loss and take-profit on the symbol's positions."""
        with self._lock:
            for position in self._symbol_positions(symbol):
                position.stop_loss = 0.0
                position.take_profit = 0.0

    def cancel_all_orders(self, symbol: str) -> None:
        self.cancel_stop_orders(symbol)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _snapshot(self) -> Tuple[List[Position], float, float]:
        """Copy positions and balances under the lock."""
        with self._lock:
            positions = [p.copy() for p in self._positions.values()]
            return positions, self._wallet_balance, self._available_balance

    def _mark_price(self, symbol: str) -> Optional[float]:
        try:
            return resolve_price(self.price_feed, symbol)
        except MarketDataError as exc:
            logger.debug(f"Skipping {symbol}: {exc}")
            return None

    def balance(self) -> AccountSnapshot:
        """
        Wallet and available balance plus total unrealized PnL.
        Symbols without a price contribute nothing to unrealized PnL.
        """
        positions, wallet, available = self._snapshot()

        total_unrealized = 0.0
        for position in positions:
            price = self._mark_price(position.symbol)
            if price is None:
                continue
            total_unrealized += position.unrealized_pnl(price)

        return AccountSnapshot(
            wallet_balance=wallet,
            available_balance=available,
            total_unrealized_pnl=total_unrealized,
        )

    def positions(self) -> List[PositionSnapshot]:
        """
        Projections of all open positions with derived risk figures.
        Positions without a price are omitted.
        """
        positions, wallet, available = self._snapshot()
        result: List[PositionSnapshot] = []

        for position in positions:
            price = self._mark_price(position.symbol)
            if price is None:
                continue

            margin_used = position.margin_used
            signed_qty = position.signed_quantity

            result.append(PositionSnapshot(
                symbol=position.symbol,
                side=position.side,
                position_amt=signed_qty,
                entry_price=position.entry_price,
                mark_price=price,
                leverage=position.leverage,
                unrealized_profit=position.unrealized_pnl(price),
                liquidation_price=position.liquidation_price(),
                margin_type=position.margin_type,
                isolated_margin=margin_used,
                notional_value=position.notional_value(price),
                maintenance_margin=risk.maintenance_margin(margin_used, position.leverage),
                margin_ratio=risk.margin_ratio(margin_used, wallet),
                position_cost=risk.position_cost(position.entry_price, signed_qty),
                stop_loss=position.stop_loss,
                take_profit=position.take_profit,
                available_balance=available,
                cross_wallet_balance=wallet if position.is_cross_margin else margin_used,
            ))

        return result

    def get_position(self, symbol: str, side: str) -> Optional[Position]:
        """Get a copy of the position for a symbol/side."""
        with self._lock:
            position = self._positions.get(position_key(symbol, normalize_side(side)))
            return position.copy() if position is not None else None

    def has_position(self, symbol: str, side: str) -> bool:
        with self._lock:
            return position_key(symbol, normalize_side(side)) in self._positions

    def get_holding_symbols(self) -> List[str]:
        """Get list of symbols with at least one open position."""
        with self._lock:
            return sorted({symbol for symbol, _ in self._positions})

    def market_price(self, symbol: str) -> float:
        return resolve_price(self.price_feed, symbol)

    def format_quantity(self, symbol: str, quantity: float) -> str:
        """Format quantity with fixed precision, the same for every symbol."""
        return f"{quantity:.{self.quantity_precision}f}"

    def positions_frame(self) -> pd.DataFrame:
        """Get position projections as DataFrame."""
        snapshots = self.positions()
        if not snapshots:
            return pd.DataFrame()
        return pd.DataFrame([s.to_dict() for s in snapshots])

    def get_trade_summary(self) -> pd.DataFrame:
        """Get trade log as DataFrame."""
        trades = self.trade_log
        if not trades:
            return pd.DataFrame()

        records = [
            {
                "order_id": t.order_id,
                "timestamp": t.timestamp,
                "symbol": t.symbol,
                "side": t.side,
                "action": t.action,
                "quantity": t.quantity,
                "price": t.price,
                "amount": t.amount,
                "commission": t.commission,
                "realized_pnl": t.realized_pnl,
            }
            for t in trades
        ]
        return pd.DataFrame(records)
