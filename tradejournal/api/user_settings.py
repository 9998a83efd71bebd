"""User settings routes: commission override and drawdown goal."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from tradejournal.api.auth import require_api_key
from tradejournal.database import get_db
from tradejournal.models import UserSettings
from tradejournal.services.journal_store import JournalStore

router = APIRouter(prefix="/api/settings", tags=["settings"])


class SettingsRequest(BaseModel):
    """Partial update; omitted fields keep their current value."""

    commission_per_unit: float | None = Field(None, ge=0, description="0 = use each trade's own commission")
    max_drawdown: float | None = Field(None, ge=0, description="Drawdown goal used by the score")


def _settings_dict(row: UserSettings) -> dict:
    return {
        "commission_per_unit": row.commission_per_unit,
        "max_drawdown": row.max_drawdown,
        "updated_at": row.updated_at.isoformat(),
    }


@router.get("/")
async def get_settings(db: AsyncSession = Depends(get_db)):
    return _settings_dict(await JournalStore(db).get_settings())


@router.put("/", dependencies=[Depends(require_api_key)])
async def update_settings(req: SettingsRequest, db: AsyncSession = Depends(get_db)):
    row = await JournalStore(db).update_settings(req.commission_per_unit, req.max_drawdown)
    return _settings_dict(row)
