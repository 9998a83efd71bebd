"""Report API routes: dashboard overview, time-bucket breakdown, performance summary.

Every report is computed from scratch on each request, over the closed
trades that pass the optional filter, under the user's commission setting.
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from tradejournal.database import get_db
from tradejournal.services.filters import TradeFilter, active_filter_count, apply_filters
from tradejournal.services.journal_store import JournalStore
from tradejournal.services.metrics.aggregates import closed_trades
from tradejournal.services.metrics.buckets import BucketType, aggregate_by_bucket
from tradejournal.services.metrics.cross import CrossDimension, cross_tabulate
from tradejournal.services.metrics.daily import performance_summary
from tradejournal.services.metrics.overview import build_overview
from tradejournal.services.metrics.types import TradeRecord

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/reports", tags=["reports"])


class ReportRequest(BaseModel):
    filters: TradeFilter | None = None


class BreakdownRequest(ReportRequest):
    group_type: BucketType = BucketType.DAY
    cross_type: CrossDimension = CrossDimension.STRATEGY


async def _load(store: JournalStore, filters: TradeFilter | None) -> tuple[list[TradeRecord], float, float]:
    """Filtered closed trades plus (commission_per_unit, max_drawdown goal)."""
    user = await store.get_settings()
    trades = await store.list_trades()
    kept = closed_trades(apply_filters(trades, filters, user.commission_per_unit))
    logger.debug(
        "Report over %d of %d trades (%d filter categories)",
        len(kept),
        len(trades),
        active_filter_count(filters) if filters else 0,
    )
    return kept, user.commission_per_unit, user.max_drawdown


@router.post("/overview")
async def overview(req: ReportRequest | None = None, db: AsyncSession = Depends(get_db)):
    """Headline stats, streaks, score and the daily equity curve."""
    trades, commission, goal = await _load(JournalStore(db), req.filters if req else None)
    return build_overview(trades, commission, goal).to_dict()


@router.post("/breakdown")
async def breakdown(req: BreakdownRequest | None = None, db: AsyncSession = Depends(get_db)):
    """Per-bucket rows (padded) and the bucket x dimension matrix."""
    req = req or BreakdownRequest()
    store = JournalStore(db)
    trades, commission, _ = await _load(store, req.filters)

    rows = aggregate_by_bucket(trades, req.group_type, commission)
    cross = cross_tabulate(
        rows,
        trades,
        req.group_type,
        req.cross_type,
        commission,
        strategies=await store.strategy_names(),
        tags=await store.tag_names(),
    )
    return {
        "group_type": req.group_type.value,
        "cross_type": req.cross_type.value,
        "rows": [r.to_dict() for r in rows],
        "cross": cross.to_dict(),
    }


@router.post("/performance")
async def performance(req: ReportRequest | None = None, db: AsyncSession = Depends(get_db)):
    """Trade-level and day-level performance summary."""
    trades, commission, _ = await _load(JournalStore(db), req.filters if req else None)
    return performance_summary(trades, commission).to_dict()
