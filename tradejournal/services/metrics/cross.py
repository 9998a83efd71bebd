"""Bucket x dimension matrices (e.g. weekday x strategy)."""

from collections.abc import Callable, Mapping, Sequence
from enum import Enum

from tradejournal.services.metrics.aggregates import closed_trades, net_pnl, win_rate
from tradejournal.services.metrics.buckets import BucketType, bucket_key
from tradejournal.services.metrics.types import (
    AggregateRow,
    CrossCell,
    CrossRow,
    CrossTable,
    TradeDirection,
    TradeRecord,
)


class CrossDimension(str, Enum):
    STRATEGY = "strategy"
    TAG = "tag"
    STATUS = "status"
    SIDE = "side"


# "Win" also covers "Small Win", "Loss" covers "Small Loss"
STATUS_COLUMNS = ["Win", "Loss", "Break Even"]
SIDE_COLUMNS = [d.value for d in TradeDirection]


def dimension_columns(
    dimension: CrossDimension | str,
    strategies: Mapping[str, str] | None = None,
    tags: Mapping[str, str] | None = None,
) -> list[str]:
    """Full column label set. Strategy and tag columns are names, in lookup order."""
    dimension = CrossDimension(dimension)
    if dimension == CrossDimension.STRATEGY:
        return list((strategies or {}).values())
    if dimension == CrossDimension.TAG:
        return list((tags or {}).values())
    if dimension == CrossDimension.STATUS:
        return list(STATUS_COLUMNS)
    return list(SIDE_COLUMNS)


def _column_matcher(
    dimension: CrossDimension,
    strategies: Mapping[str, str],
    tags: Mapping[str, str],
) -> Callable[[TradeRecord, str], bool]:
    if dimension == CrossDimension.STRATEGY:
        return lambda t, col: t.playbook_id is not None and strategies.get(t.playbook_id) == col
    if dimension == CrossDimension.TAG:
        return lambda t, col: any(tags.get(tag_id) == col for tag_id in t.tags)
    if dimension == CrossDimension.STATUS:
        return lambda t, col: col in t.status.value
    return lambda t, col: t.direction.value == col


def cross_tabulate(
    rows: Sequence[AggregateRow],
    trades: Sequence[TradeRecord],
    bucket_type: BucketType | str,
    dimension: CrossDimension | str,
    commission_per_unit: float = 0.0,
    strategies: Mapping[str, str] | None = None,
    tags: Mapping[str, str] | None = None,
) -> CrossTable:
    """Build the (row bucket x column) matrix.

    `rows` are the bucket rows from aggregate_by_bucket; `strategies` and
    `tags` map ids to display names. A cell with no matching closed trades
    is None, never a zero-valued cell.
    """
    dimension = CrossDimension(dimension)
    strategies = strategies or {}
    tags = tags or {}
    cols = dimension_columns(dimension, strategies, tags)
    matches = _column_matcher(dimension, strategies, tags)
    closed = closed_trades(trades)

    matrix = []
    for row in rows:
        row_trades = [t for t in closed if bucket_key(t, bucket_type) == row.label]
        cross_row = CrossRow(row_key=row.label)
        for col in cols:
            cell_trades = [t for t in row_trades if matches(t, col)]
            if cell_trades:
                cross_row.cells[col] = CrossCell(
                    pnl=net_pnl(cell_trades, commission_per_unit),
                    win_rate=win_rate(cell_trades, commission_per_unit),
                    count=len(cell_trades),
                )
            else:
                cross_row.cells[col] = None
        matrix.append(cross_row)

    return CrossTable(matrix=matrix, cols=cols)
