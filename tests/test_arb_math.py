"""Settlement projection and pair evaluation math."""

import pytest

from CORE.arb_math import MS_PER_HOUR, ArbMath

H = MS_PER_HOUR
T0 = 1_700_000_000_000


class TestSettlementsCount:
    def test_next_after_target_is_zero(self):
        assert ArbMath.calc_settlements_count(next_settlement_ms=T0 + 1, interval_hours=8, target_ms=T0) == 0

    def test_next_equal_target_is_one(self):
        assert ArbMath.calc_settlements_count(next_settlement_ms=T0, interval_hours=8, target_ms=T0) == 1

    def test_just_before_second_settlement(self):
        n = ArbMath.calc_settlements_count(next_settlement_ms=T0, interval_hours=8, target_ms=T0 + 8 * H - 1)
        assert n == 1

    def test_exact_multiple_of_interval(self):
        assert ArbMath.calc_settlements_count(next_settlement_ms=T0, interval_hours=8, target_ms=T0 + 8 * H) == 2

    def test_hourly_leg_over_eight_hours(self):
        assert ArbMath.calc_settlements_count(next_settlement_ms=T0, interval_hours=1, target_ms=T0 + 8 * H) == 9

    def test_fractional_interval(self):
        # 0.5h interval, 2h later => 1 + 4
        assert ArbMath.calc_settlements_count(next_settlement_ms=T0, interval_hours=0.5, target_ms=T0 + 2 * H) == 5


class TestAccumulatedRate:
    def test_multiplies_rate(self):
        assert ArbMath.calc_accumulated_rate(funding_rate=0.001, settlements=3) == pytest.approx(0.003)

    def test_zero_settlements_is_zero_even_for_negative_rate(self):
        assert ArbMath.calc_accumulated_rate(funding_rate=-0.01, settlements=0) == 0.0


class TestPairEvaluation:
    def test_price_spread_relative_to_high_leg(self):
        assert ArbMath.calc_price_spread(low_price=101.0, high_price=100.0) == pytest.approx(0.01)

    def test_negative_spread_when_low_leg_is_cheaper(self):
        assert ArbMath.calc_price_spread(low_price=99.0, high_price=100.0) == pytest.approx(-0.01)

    def test_net_profit(self):
        net = ArbMath.calc_net_profit(high_accumulated=0.01, low_accumulated=-0.002, price_spread=0.001)
        assert net == pytest.approx(0.011)


def test_twenty_hours_on_eight_hour_leg():
    assert ArbMath.calc_settlements_count(next_settlement_ms=T0, interval_hours=8, target_ms=T0 + 20 * H) == 3
