"""Tests for the global trade filter."""

from datetime import date

import pytest
from factories import MONDAY, NEXT_MONDAY, TUESDAY, make_trade, pnl_trade
from pydantic import ValidationError

from tradejournal.services.filters import TradeFilter, active_filter_count, apply_filters
from tradejournal.services.metrics.types import TradeDirection, TradeStatus


def ids(trades):
    return [t.id for t in trades]


@pytest.fixture
def trades():
    return [
        pnl_trade(50, MONDAY, at="09:30", playbook_id="1", tags=("3",), rules_followed=("r1", "r2")),
        pnl_trade(-20, TUESDAY, at="11:00", direction=TradeDirection.SHORT, exit_price=120.0, tags=("3", "4")),
        pnl_trade(5, NEXT_MONDAY, at="14:15", minutes=90, playbook_id="2", rules_followed=("r1",)),
    ]


class TestDefaults:
    def test_none_keeps_everything(self, trades):
        assert apply_filters(trades, None) == trades

    def test_empty_filter_keeps_everything(self, trades):
        f = TradeFilter()
        assert apply_filters(trades, f) == trades
        assert active_filter_count(f) == 0


class TestDateRange:
    def test_inclusive_bounds(self, trades):
        f = TradeFilter(start_date=date(2024, 1, 9), end_date=date(2024, 1, 15))
        assert ids(apply_filters(trades, f)) == ids(trades[1:])

    def test_date_range_is_not_a_category(self, trades):
        f = TradeFilter(start_date=date(2024, 1, 9), exclude_mode=True)
        assert active_filter_count(f) == 0
        assert ids(apply_filters(trades, f)) == ids(trades[1:])


class TestCategories:
    def test_status(self, trades):
        f = TradeFilter(status=[TradeStatus.WIN])
        assert ids(apply_filters(trades, f)) == [trades[0].id, trades[2].id]

    def test_direction(self, trades):
        f = TradeFilter(direction=["Short"])
        assert ids(apply_filters(trades, f)) == [trades[1].id]

    def test_strategy_ids_accept_ints(self, trades):
        f = TradeFilter(strategy_ids=[2])
        assert f.strategy_ids == ["2"]
        assert ids(apply_filters(trades, f)) == [trades[2].id]

    def test_tags_and_requires_all(self, trades):
        f = TradeFilter(tag_ids=["3", "4"])
        assert ids(apply_filters(trades, f)) == [trades[1].id]

    def test_tags_or_requires_any(self, trades):
        f = TradeFilter(tag_ids=["3", "4"], filter_logic="OR")
        assert ids(apply_filters(trades, f)) == [trades[0].id, trades[1].id]

    def test_rules_need_include_flag(self, trades):
        assert active_filter_count(TradeFilter(rule_ids=["r2"])) == 0
        f = TradeFilter(rule_ids=["r2"], include_rules=True)
        assert ids(apply_filters(trades, f)) == [trades[0].id]

    def test_days_of_week_count_from_sunday(self, trades):
        f = TradeFilter(days_of_week=[1])  # Monday
        assert ids(apply_filters(trades, f)) == [trades[0].id, trades[2].id]

    def test_invalid_day_rejected(self):
        with pytest.raises(ValidationError):
            TradeFilter(days_of_week=[7])


class TestTimeWindows:
    def test_entry_window(self, trades):
        f = TradeFilter(start_time="09:00", end_time="11:00")
        assert ids(apply_filters(trades, f)) == [trades[0].id, trades[1].id]

    def test_exit_window(self, trades):
        f = TradeFilter(exit_start_time="15:00")
        assert ids(apply_filters(trades, f)) == [trades[2].id]

    def test_open_trade_has_no_exit_clock(self):
        f = TradeFilter(exit_end_time="23:59")
        assert apply_filters([make_trade(exit_price=None, exit_date=None)], f) == []

    def test_bad_clock_rejected(self):
        with pytest.raises(ValidationError):
            TradeFilter(start_time="9am")


class TestRanges:
    def test_pnl_uses_commission(self, trades):
        f = TradeFilter(min_pnl=5)
        assert ids(apply_filters(trades, f)) == [trades[0].id, trades[2].id]
        assert ids(apply_filters(trades, f, commission_per_unit=1.0)) == [trades[0].id]

    def test_duration_is_floored_minutes(self):
        trade = make_trade(exit_date=f"{MONDAY}T10:00:30")  # 30.5 minutes
        assert apply_filters([trade], TradeFilter(max_duration=30)) == [trade]
        assert apply_filters([trade], TradeFilter(min_duration=31)) == []

    def test_volume(self):
        small, big = make_trade(quantity=1), make_trade(quantity=5)
        assert apply_filters([small, big], TradeFilter(min_volume=2)) == [big]

    def test_rr_without_stop_counts_as_zero(self):
        no_stop = make_trade()
        with_stop = make_trade(initial_stop_loss=95)  # +2R
        assert apply_filters([no_stop, with_stop], TradeFilter(min_rr=1)) == [with_stop]
        assert apply_filters([no_stop, with_stop], TradeFilter(max_rr=0)) == [no_stop]

    def test_stop_size_excludes_trades_without_stop(self):
        no_stop = make_trade()
        tight = make_trade(initial_stop_loss=98)
        wide = make_trade(initial_stop_loss=90)
        assert apply_filters([no_stop, tight, wide], TradeFilter(max_sl_size=5)) == [tight]

    def test_actual_risk_points_and_percent(self):
        calm = make_trade(initial_stop_loss=96, lowest_price_reached=99)  # 1 pt, 25%
        hot = make_trade(initial_stop_loss=96, lowest_price_reached=97)  # 3 pts, 75%
        assert apply_filters([calm, hot], TradeFilter(min_actual_risk=2)) == [hot]
        assert apply_filters([calm, hot], TradeFilter(max_actual_risk_pct=50)) == [calm]


class TestCombination:
    def test_and_or(self, trades):
        and_f = TradeFilter(status=[TradeStatus.LOSS], direction=[TradeDirection.LONG])
        or_f = TradeFilter(status=[TradeStatus.LOSS], direction=[TradeDirection.LONG], filter_logic="OR")
        assert apply_filters(trades, and_f) == []
        assert ids(apply_filters(trades, or_f)) == ids(trades)

    def test_exclude_mode_inverts(self, trades):
        f = TradeFilter(direction=[TradeDirection.SHORT], exclude_mode=True)
        assert ids(apply_filters(trades, f)) == [trades[0].id, trades[2].id]

    def test_active_filter_count(self):
        f = TradeFilter(
            status=[TradeStatus.WIN],
            direction=[TradeDirection.LONG],
            min_pnl=0,
            start_time="09:00",
            end_time="10:00",
        )
        assert active_filter_count(f) == 4
