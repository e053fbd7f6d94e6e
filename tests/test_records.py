"""
Tests for result records, side helpers and configuration.
"""
import pytest

from papersim.config import AccountConfig
from papersim.domain.records import AccountSnapshot, FillAck, PositionSnapshot
from papersim.domain.sides import normalize_side, position_key


class TestSides:
    """Tests for side helpers."""

    @pytest.mark.parametrize("raw, expected", [
        ("LONG", "long"),
        ("long", "long"),
        ("Short", "short"),
        ("BOTH", "both"),
    ])
    def test_normalize_side(self, raw, expected):
        assert normalize_side(raw) == expected

    def test_position_key(self):
        assert position_key("BTCUSDT", "long") == ("BTCUSDT", "long")
        assert position_key("BTC", "USDT_long") != position_key("BTC_USDT", "long")


class TestRecords:
    """Tests for exchange-style serialization."""

    def test_fill_ack(self):
        ack = FillAck(order_id=7, symbol="BTCUSDT", avg_price=101.5)
        assert ack.to_dict() == {
            "orderId": 7,
            "symbol": "BTCUSDT",
            "status": "FILLED",
            "avgPrice": 101.5,
        }

    def test_account_snapshot_aliases(self):
        snap = AccountSnapshot(wallet_balance=999.96, available_balance=989.96, total_unrealized_pnl=5.0)
        data = snap.to_dict()

        assert data["totalWalletBalance"] == data["wallet_balance"] == data["balance"] == 999.96
        assert data["availableBalance"] == data["available_margin"] == 989.96
        assert data["totalUnrealizedProfit"] == 5.0
        assert snap.equity == pytest.approx(1004.96)

    def test_position_snapshot_aliases(self):
        snap = PositionSnapshot(
            symbol="ETHUSDT",
            side="short",
            position_amt=-2.0,
            entry_price=50.0,
            mark_price=45.0,
            leverage=5,
            unrealized_profit=10.0,
            liquidation_price=60.0,
            margin_type="isolated",
            isolated_margin=20.0,
            notional_value=90.0,
            maintenance_margin=4.0,
            margin_ratio=0.02,
            position_cost=100.0,
            stop_loss=0.0,
            take_profit=40.0,
            available_balance=979.96,
            cross_wallet_balance=20.0,
        )
        data = snap.to_dict()

        assert snap.quantity == 2.0
        assert data["positionSide"] == "SHORT"
        assert data["positionAmt"] == -2.0
        assert data["leverage"] == 5.0
        assert data["unRealizedProfit"] == data["unrealizedProfit"] == 10.0
        assert data["isolatedMargin"] == data["positionMargin"] == data["initialMargin"] == 20.0
        assert data["maintMargin"] == 4.0
        assert data["crossWalletBalance"] == 20.0
        assert data["updateTime"] == 0


class TestAccountConfig:
    """Tests for AccountConfig."""

    def test_defaults(self):
        config = AccountConfig()
        assert config.fee_rate == 0.0004
        assert config.is_cross_margin
        assert config.quantity_precision == 4

    def test_trade_log_maxlen_from_dict(self):
        config = AccountConfig.from_dict({"trade_log_maxlen": 100})
        assert config.trade_log_maxlen == 100

    def test_from_dict_ignores_unknown_keys(self):
        config = AccountConfig.from_dict({"initial_balance": 1000.0, "exchange": "binance"})
        assert config.initial_balance == 1000.0
        assert config.to_dict()["fee_rate"] == 0.0004

    @pytest.mark.parametrize("kwargs", [
        {"initial_balance": 0},
        {"fee_rate": -0.1},
        {"fee_rate": 1.0},
        {"quantity_precision": -1},
        {"trade_log_maxlen": 0},
    ])
    def test_validation(self, kwargs):
        with pytest.raises(ValueError):
            AccountConfig(**kwargs)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
