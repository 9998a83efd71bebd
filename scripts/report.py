"""CLI for time-bucketed journal reports.

Usage:
    python scripts/report.py --group day
    python scripts/report.py --group time --cross side
    python scripts/report.py --group month --cross strategy --json
    python scripts/report.py --group duration --csv reports/duration.csv
"""

import argparse
import asyncio
import json
import logging
import sys

import pandas as pd

from tradejournal.config import settings
from tradejournal.database import async_session, engine
from tradejournal.services.journal_store import JournalStore
from tradejournal.services.metrics.aggregates import closed_trades
from tradejournal.services.metrics.buckets import BucketType, aggregate_by_bucket
from tradejournal.services.metrics.cross import CrossDimension, cross_tabulate
from tradejournal.services.metrics.types import AggregateRow, CrossTable

logger = logging.getLogger(__name__)

_COLUMNS = {
    "label": "Bucket",
    "count": "Trades",
    "net_pnl": "Net P&L",
    "win_rate": "Win %",
    "profit_factor": "PF",
    "avg_win": "Avg Win",
    "avg_loss": "Avg Loss",
    "avg_r": "Avg R",
    "max_drawdown": "Max DD",
    "avg_drawdown": "Avg DD",
    "avg_win_loss_rr": "W/L RR",
    "avg_actual_risk_pct": "Risk %",
}


def rows_frame(rows: list[AggregateRow]) -> pd.DataFrame:
    """Bucket rows as a display DataFrame, one row per bucket label."""
    df = pd.DataFrame([r.to_dict() for r in rows])
    return df[list(_COLUMNS)].rename(columns=_COLUMNS).set_index("Bucket")


def cross_frame(table: CrossTable) -> pd.DataFrame:
    """Cross matrix as "P&L (n)" strings; empty cells are "-"."""
    data = {
        row.row_key: {
            col: f"{cell.pnl:,.2f} ({cell.count})" if cell else "-"
            for col, cell in row.cells.items()
        }
        for row in table.matrix
    }
    return pd.DataFrame.from_dict(data, orient="index", columns=table.cols)


def format_report(group: BucketType, rows: list[AggregateRow], cross: CrossTable | None) -> str:
    """Format the breakdown as a readable console report."""
    sep = "=" * 100
    lines = [sep, f"  Trade Journal Report: by {group.value}", sep]

    total = sum(r.count for r in rows)
    net = sum(r.net_pnl for r in rows)
    lines.append(f"  Closed trades: {total}   Net P&L: ${net:,.2f}")
    lines.append("-" * 100)

    with pd.option_context("display.width", 200, "display.max_columns", 50, "display.float_format", "{:,.2f}".format):
        lines.append(rows_frame(rows).to_string())
        if cross is not None:
            lines.append("")
            lines.append("  CROSS ANALYSIS (P&L, trade count)")
            if cross.cols:
                lines.append(cross_frame(cross).to_string())
            else:
                lines.append("  (no columns defined for this dimension)")

    lines.append(sep)
    return "\n".join(lines)


async def run_report(args: argparse.Namespace) -> None:
    group = BucketType(args.group)

    async with async_session() as session:
        store = JournalStore(session)
        user = await store.get_settings()
        trades = closed_trades(await store.list_trades())
        strategies = await store.strategy_names()
        tags = await store.tag_names()
    await engine.dispose()

    logger.info("Loaded %d closed trades from %s", len(trades), settings.database_url)

    commission = user.commission_per_unit
    rows = aggregate_by_bucket(trades, group, commission)
    cross = None
    if args.cross:
        cross = cross_tabulate(rows, trades, group, args.cross, commission, strategies=strategies, tags=tags)

    if args.json:
        payload = {"group_type": group.value, "rows": [r.to_dict() for r in rows]}
        if cross is not None:
            payload["cross"] = cross.to_dict()
        print(json.dumps(payload, indent=2))
    elif args.csv:
        rows_frame(rows).to_csv(args.csv)
        print(f"Wrote {len(rows)} rows to {args.csv}")
    else:
        print(format_report(group, rows, cross))


def main() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    )

    parser = argparse.ArgumentParser(
        description="Trade journal report: performance by time bucket"
    )
    parser.add_argument(
        "--group", default="day",
        choices=[b.value for b in BucketType],
        help="Bucket trades by weekday, month, entry hour, or holding time (default: day)",
    )
    parser.add_argument(
        "--cross",
        choices=[d.value for d in CrossDimension],
        help="Also cross-tabulate buckets against this dimension",
    )
    out = parser.add_mutually_exclusive_group()
    out.add_argument("--json", action="store_true", help="Output JSON instead of a formatted report")
    out.add_argument("--csv", metavar="PATH", help="Write bucket rows to a CSV file")
    args = parser.parse_args()

    try:
        asyncio.run(run_report(args))
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
