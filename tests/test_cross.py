"""Tests for bucket x dimension cross-tabulation."""

from factories import MONDAY, TUESDAY, make_trade, pnl_trade

from tradejournal.services.metrics.buckets import aggregate_by_bucket
from tradejournal.services.metrics.cross import (
    STATUS_COLUMNS,
    CrossDimension,
    cross_tabulate,
    dimension_columns,
)
from tradejournal.services.metrics.types import TradeDirection, TradeStatus


def cross(trades, dimension, **kwargs):
    rows = aggregate_by_bucket(trades, "day")
    return cross_tabulate(rows, trades, "day", dimension, **kwargs)


def cell(table, row_key, col):
    row = next(r for r in table.matrix if r.row_key == row_key)
    return row.cells[col]


class TestColumns:
    def test_status_and_side(self):
        assert dimension_columns("status") == STATUS_COLUMNS
        assert dimension_columns(CrossDimension.SIDE) == ["Long", "Short"]

    def test_strategy_columns_are_names(self):
        assert dimension_columns("strategy", strategies={"1": "ORB", "2": "Fade"}) == ["ORB", "Fade"]

    def test_no_lookup_no_columns(self):
        table = cross([pnl_trade(10)], "tag")
        assert table.cols == []
        assert all(row.cells == {} for row in table.matrix)


class TestSide:
    def test_cells(self):
        trades = [
            pnl_trade(50, MONDAY),
            pnl_trade(-20, MONDAY, at="10:00", direction=TradeDirection.SHORT, exit_price=120.0),
        ]
        table = cross(trades, "side")

        long_cell = cell(table, "Monday", "Long")
        assert long_cell.pnl == 50.0
        assert long_cell.count == 1
        assert long_cell.win_rate == 100.0

        short_cell = cell(table, "Monday", "Short")
        assert short_cell.pnl == -20.0
        assert short_cell.win_rate == 0.0

    def test_empty_cells_are_none(self):
        table = cross([pnl_trade(50, MONDAY)], "side")
        assert cell(table, "Monday", "Short") is None
        assert cell(table, "Tuesday", "Long") is None
        assert table.to_dict()["matrix"][1]["cells"]["Long"] is None

    def test_rows_follow_bucket_rows(self):
        table = cross([], "side")
        assert [r.row_key for r in table.matrix] == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


class TestStatus:
    def test_small_outcomes_fold_into_parent_column(self):
        trades = [
            pnl_trade(50, status=TradeStatus.WIN),
            pnl_trade(5, at="10:00", status=TradeStatus.SMALL_WIN),
            pnl_trade(-3, at="11:00", status=TradeStatus.SMALL_LOSS),
            pnl_trade(0, at="12:00", status=TradeStatus.BREAK_EVEN),
        ]
        table = cross(trades, "status")
        assert cell(table, "Monday", "Win").count == 2
        assert cell(table, "Monday", "Win").pnl == 55.0
        assert cell(table, "Monday", "Loss").count == 1
        assert cell(table, "Monday", "Break Even").count == 1

    def test_open_trades_are_ignored(self):
        trades = [make_trade(exit_price=None, exit_date=None)]
        assert cell(cross(trades, "status"), "Monday", "Win") is None


class TestLookupDimensions:
    def test_strategy(self):
        strategies = {"1": "ORB", "2": "Fade"}
        trades = [
            pnl_trade(40, MONDAY, playbook_id="1"),
            pnl_trade(-10, MONDAY, at="10:00", playbook_id="1"),
            pnl_trade(15, TUESDAY, playbook_id="2"),
            pnl_trade(99, TUESDAY, at="10:00"),  # unassigned
        ]
        table = cross(trades, "strategy", strategies=strategies)
        assert table.cols == ["ORB", "Fade"]
        orb = cell(table, "Monday", "ORB")
        assert orb.pnl == 30.0
        assert orb.win_rate == 50.0
        assert cell(table, "Monday", "Fade") is None
        assert cell(table, "Tuesday", "Fade").pnl == 15.0

    def test_trade_counts_in_every_tag_column(self):
        tags = {"3": "A+ setup", "4": "FOMO"}
        trades = [pnl_trade(25, tags=("3", "4")), pnl_trade(-5, at="10:00", tags=("4",))]
        table = cross(trades, "tag", tags=tags)
        assert cell(table, "Monday", "A+ setup").count == 1
        fomo = cell(table, "Monday", "FOMO")
        assert fomo.count == 2
        assert fomo.pnl == 20.0

    def test_commission_applies(self):
        trades = [pnl_trade(10, playbook_id="1")]
        table = cross(trades, "strategy", strategies={"1": "ORB"}, commission_per_unit=1.0)
        assert cell(table, "Monday", "ORB").pnl == 9.0
