"""Trade API routes: log, edit and delete trades; per-trade metrics."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, model_validator
from sqlalchemy.ext.asyncio import AsyncSession

from tradejournal.api.auth import require_api_key
from tradejournal.database import get_db
from tradejournal.models import Trade
from tradejournal.services.journal_store import JournalStore, RecordNotFoundError, to_record
from tradejournal.services.metrics.calculations import (
    calculate_net_mae,
    calculate_net_mfe,
    calculate_pnl,
    calculate_r_multiple,
    get_trade_metrics,
)
from tradejournal.services.metrics.types import TradeDirection, TradeStatus

router = APIRouter(prefix="/api/trades", tags=["trades"])


class TradeRequest(BaseModel):
    """Request body for logging or editing a trade."""

    symbol: str = Field(..., min_length=1, max_length=20)
    direction: TradeDirection
    status: TradeStatus
    entry_date: datetime
    exit_date: datetime | None = None
    quantity: float = Field(..., gt=0)
    entry_price: float = Field(..., gt=0)
    exit_price: float | None = Field(None, gt=0, description="Leave empty while the trade is open")
    best_exit_price: float | None = Field(None, gt=0)
    commission: float = Field(0.0, ge=0)
    initial_stop_loss: float | None = Field(None, gt=0)
    take_profit_target: float | None = Field(None, gt=0)
    highest_price_reached: float | None = Field(None, gt=0)
    lowest_price_reached: float | None = Field(None, gt=0)
    playbook_id: int | None = None
    rules_followed: list[str] = Field(default_factory=list)
    tags: list[int] = Field(default_factory=list)
    notes: str | None = Field(None, max_length=10000)
    screenshot_url: str | None = Field(None, max_length=500)

    @model_validator(mode="after")
    def _exit_after_entry(self) -> "TradeRequest":
        if self.exit_date is None:
            return self
        if (self.exit_date.tzinfo is None) != (self.entry_date.tzinfo is None):
            raise ValueError("entry_date and exit_date must both carry a UTC offset, or neither")
        if self.exit_date < self.entry_date:
            raise ValueError("exit_date must not be before entry_date")
        return self

    def to_columns(self) -> dict:
        data = self.model_dump()
        data["direction"] = self.direction.value
        data["status"] = self.status.value
        data["symbol"] = self.symbol.upper()
        return data


def serialize_trade(row: Trade, commission_per_unit: float) -> dict:
    """Stored fields plus the figures computed under the current commission setting."""
    record = to_record(row)
    return {
        "id": row.id,
        "symbol": row.symbol,
        "direction": row.direction,
        "status": row.status,
        "entry_date": row.entry_date.isoformat(),
        "exit_date": row.exit_date.isoformat() if row.exit_date else None,
        "quantity": row.quantity,
        "entry_price": row.entry_price,
        "exit_price": row.exit_price,
        "best_exit_price": row.best_exit_price,
        "commission": row.commission,
        "initial_stop_loss": row.initial_stop_loss,
        "take_profit_target": row.take_profit_target,
        "highest_price_reached": row.highest_price_reached,
        "lowest_price_reached": row.lowest_price_reached,
        "playbook_id": row.playbook_id,
        "rules_followed": row.rules_followed or [],
        "tags": row.tags or [],
        "notes": row.notes,
        "screenshot_url": row.screenshot_url,
        "net_pnl": calculate_pnl(record, commission_per_unit),
        "r_multiple": calculate_r_multiple(record, commission_per_unit),
        "mfe": calculate_net_mfe(record, commission_per_unit),
        "mae": calculate_net_mae(record, commission_per_unit),
    }


@router.get("/")
async def list_trades(
    limit: int | None = Query(None, ge=1, le=10000),
    db: AsyncSession = Depends(get_db),
):
    """List trades, newest first, with computed P&L, R, MFE and MAE."""
    store = JournalStore(db)
    user = await store.get_settings()
    rows = await store.list_trade_rows(limit=limit)
    return {"trades": [serialize_trade(r, user.commission_per_unit) for r in rows]}


@router.post("/", status_code=201, dependencies=[Depends(require_api_key)])
async def add_trade(req: TradeRequest, db: AsyncSession = Depends(get_db)):
    store = JournalStore(db)
    row = await store.add_trade(req.to_columns())
    user = await store.get_settings()
    return serialize_trade(row, user.commission_per_unit)


@router.put("/{trade_id}", dependencies=[Depends(require_api_key)])
async def update_trade(trade_id: int, req: TradeRequest, db: AsyncSession = Depends(get_db)):
    store = JournalStore(db)
    try:
        row = await store.update_trade(trade_id, req.to_columns())
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    user = await store.get_settings()
    return serialize_trade(row, user.commission_per_unit)


@router.delete("/{trade_id}", dependencies=[Depends(require_api_key)])
async def delete_trade(trade_id: int, db: AsyncSession = Depends(get_db)):
    try:
        await JournalStore(db).delete_trade(trade_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "deleted", "id": trade_id}


@router.get("/{trade_id}/metrics")
async def trade_metrics(trade_id: int, db: AsyncSession = Depends(get_db)):
    """Initial vs actual risk and best-case outcome for one trade."""
    store = JournalStore(db)
    try:
        row = await store.get_trade(trade_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    user = await store.get_settings()
    record = to_record(row)
    return {
        "id": row.id,
        "net_pnl": calculate_pnl(record, user.commission_per_unit),
        "r_multiple": calculate_r_multiple(record, user.commission_per_unit),
        **get_trade_metrics(record, user.commission_per_unit).to_dict(),
    }
