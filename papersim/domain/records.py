"""
Result records returned to callers: fill acknowledgments and query snapshots.
"""
from dataclasses import dataclass
from typing import Any, Dict

FILLED = "FILLED"


@dataclass(frozen=True)
class FillAck:
    """Synthetic fill acknowledgment for a simulated market order."""
    order_id: int
    symbol: str
    avg_price: float
    status: str = FILLED

    def __repr__(self) -> str:
        return f"FillAck(#{self.order_id}, {self.symbol}, {self.status} @ {self.avg_price:.4f})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orderId": self.order_id,
            "symbol": self.symbol,
            "status": self.status,
            "avgPrice": self.avg_price,
        }


@dataclass(frozen=True)
class AccountSnapshot:
    """Balances at the time of the query, plus live unrealized PnL."""
    wallet_balance: float
    available_balance: float
    total_unrealized_pnl: float

    def __repr__(self) -> str:
        return (
            f"AccountSnapshot(wallet={self.wallet_balance:.4f}, "
            f"available={self.available_balance:.4f}, upnl={self.total_unrealized_pnl:.4f})"
        )

    @property
    def equity(self) -> float:
        """Wallet balance including unrealized PnL."""
        return self.wallet_balance + self.total_unrealized_pnl

    def to_dict(self) -> Dict[str, Any]:
        """
        Exchange-style mapping. Balances are repeated under every key name
        that downstream consumers look them up by.
        """
        return {
            "totalWalletBalance": self.wallet_balance,
            "wallet_balance": self.wallet_balance,
            "balance": self.wallet_balance,
            "availableBalance": self.available_balance,
            "available_margin": self.available_balance,
            "totalUnrealizedProfit": self.total_unrealized_pnl,
        }


@dataclass(frozen=True)
class PositionSnapshot:
    """Read-only projection of one position with derived risk figures."""
    symbol: str
    side: str
    position_amt: float       # Signed: short quantities are negative
    entry_price: float
    mark_price: float
    leverage: int
    unrealized_profit: float
    liquidation_price: float
    margin_type: str          # 'cross' or 'isolated'
    isolated_margin: float
    notional_value: float
    maintenance_margin: float
    margin_ratio: float
    position_cost: float
    stop_loss: float
    take_profit: float
    available_balance: float
    cross_wallet_balance: float

    def __repr__(self) -> str:
        return (
            f"PositionSnapshot({self.symbol}, {self.side.upper()} {abs(self.position_amt)} "
            f"@ {self.entry_price:.4f}, mark={self.mark_price:.4f}, upnl={self.unrealized_profit:.4f})"
        )

    @property
    def quantity(self) -> float:
        return abs(self.position_amt)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "side": self.side,
            "positionSide": self.side.upper(),
            "positionAmt": self.position_amt,
            "entryPrice": self.entry_price,
            "leverage": float(self.leverage),
            "markPrice": self.mark_price,
            "unRealizedProfit": self.unrealized_profit,
            "liquidationPrice": self.liquidation_price,
            "marginType": self.margin_type,
            "isolatedMargin": self.isolated_margin,
            "notionalValue": self.notional_value,
            "updateTime": 0,
            "unrealizedProfit": self.unrealized_profit,
            "positionMargin": self.isolated_margin,
            "initialMargin": self.isolated_margin,
            "maintMargin": self.maintenance_margin,
            "marginRatio": self.margin_ratio,
            "positionCost": self.position_cost,
            "stopLoss": self.stop_loss,
            "takeProfit": self.take_profit,
            "isolatedWallet": self.isolated_margin,
            "maxNotionalValue": 0.0,
            "availableBalance": self.available_balance,
            "crossWalletBalance": self.cross_wallet_balance,
        }
