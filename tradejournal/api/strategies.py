"""Strategy (playbook) API routes."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from tradejournal.api.auth import require_api_key
from tradejournal.database import get_db
from tradejournal.services.journal_store import JournalStore, RecordNotFoundError

router = APIRouter(prefix="/api/strategies", tags=["strategies"])


class RuleItem(BaseModel):
    id: str
    text: str = Field(..., max_length=200)


class RuleGroup(BaseModel):
    id: str
    name: str = Field(..., max_length=100)
    items: list[RuleItem] = Field(default_factory=list)


class StrategyRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=2000)
    rules: list[RuleGroup] = Field(default_factory=list)
    color: str | None = Field(None, max_length=20)


@router.get("/")
async def list_strategies(db: AsyncSession = Depends(get_db)):
    return {"strategies": await JournalStore(db).list_strategies()}


@router.post("/", status_code=201, dependencies=[Depends(require_api_key)])
async def add_strategy(req: StrategyRequest, db: AsyncSession = Depends(get_db)):
    return await JournalStore(db).add_strategy(req.model_dump())


@router.put("/{strategy_id}", dependencies=[Depends(require_api_key)])
async def update_strategy(strategy_id: int, req: StrategyRequest, db: AsyncSession = Depends(get_db)):
    try:
        return await JournalStore(db).update_strategy(strategy_id, req.model_dump())
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{strategy_id}", dependencies=[Depends(require_api_key)])
async def delete_strategy(strategy_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a strategy. Its trades are kept and become unassigned."""
    try:
        await JournalStore(db).delete_strategy(strategy_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "deleted", "id": strategy_id}
