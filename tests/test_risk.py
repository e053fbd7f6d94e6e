"""
Tests for risk math and the Position entity.
"""
import pytest

from papersim.account import risk
from papersim.account.position import Position


class TestRiskMath:
    """Tests for pure risk functions."""

    def test_unrealized_pnl_long(self):
        assert risk.unrealized_pnl("long", 100.0, 110.0, 2.0) == 20.0
        assert risk.unrealized_pnl("long", 100.0, 90.0, 2.0) == -20.0

    def test_unrealized_pnl_short(self):
        assert risk.unrealized_pnl("short", 100.0, 90.0, 2.0) == 20.0
        assert risk.unrealized_pnl("short", 100.0, 110.0, 2.0) == -20.0

    def test_unrealized_pnl_unknown_side(self):
        assert risk.unrealized_pnl("both", 100.0, 110.0, 2.0) == 0.0

    def test_liquidation_price(self):
        assert risk.liquidation_price("long", 100.0, 10) == pytest.approx(90.0)
        assert risk.liquidation_price("short", 100.0, 10) == pytest.approx(110.0)

    def test_liquidation_price_unknown(self):
        assert risk.liquidation_price("long", 100.0, 0) == 0.0
        assert risk.liquidation_price("short", 100.0, -5) == 0.0
        assert risk.liquidation_price("both", 100.0, 10) == 0.0

    def test_derived_figures(self):
        assert risk.notional(110.0, -2.0) == 220.0
        assert risk.position_cost(100.0, -2.0) == 200.0
        assert risk.maintenance_margin(10.0, 10) == 1.0
        assert risk.maintenance_margin(10.0, 0) == 10.0
        assert risk.margin_ratio(10.0, 1000.0) == 0.01
        assert risk.margin_ratio(10.0, 0.0) == 0.0

    def test_open_requirements(self):
        value, margin, fee = risk.open_requirements(100.0, 1.0, 10, 0.0004)
        assert value == 100.0
        assert margin == pytest.approx(10.0)
        assert fee == pytest.approx(0.04)


class TestPosition:
    """Tests for Position."""

    @pytest.fixture
    def long_position(self):
        return Position(
            symbol="BTCUSDT",
            side="long",
            quantity=2.0,
            entry_price=100.0,
            leverage=10,
            margin_used=20.0,
        )

    def test_create_position(self, long_position):
        assert long_position.key == ("BTCUSDT", "long")
        assert long_position.signed_quantity == 2.0
        assert long_position.margin_type == "cross"
        assert long_position.stop_loss == 0.0

    def test_short_signed_quantity(self):
        pos = Position("ETHUSDT", "short", 3.0, 50.0, 5, 30.0, is_cross_margin=False)
        assert pos.signed_quantity == -3.0
        assert pos.margin_type == "isolated"
        assert pos.liquidation_price() == pytest.approx(60.0)

    def test_partial_reduce(self, long_position):
        margin_release, pnl = long_position.reduce(0.5, 110.0)
        assert margin_release == pytest.approx(5.0)
        assert pnl == pytest.approx(5.0)
        assert long_position.quantity == pytest.approx(1.5)
        assert long_position.margin_used == pytest.approx(15.0)
        assert long_position.entry_price == 100.0

    def test_full_reduce(self, long_position):
        margin_release, pnl = long_position.reduce(2.0, 90.0)
        assert margin_release == 20.0
        assert pnl == pytest.approx(-20.0)
        assert long_position.quantity == 0.0

    def test_notional_value(self, long_position):
        assert long_position.notional_value(110.0) == pytest.approx(220.0)

    def test_copy_is_detached(self, long_position):
        clone = long_position.copy()
        clone.quantity = 99.0
        assert long_position.quantity == 2.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
