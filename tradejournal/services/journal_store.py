"""Journal persistence: trades, strategies, tags and user settings.

The database is the source of truth. Reports never read rows directly; they
receive the immutable TradeRecord snapshots produced by `list_trades()`.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from tradejournal.config import settings
from tradejournal.models import Strategy, Tag, TagCategory, Trade, UserSettings
from tradejournal.services.metrics.types import TradeDirection, TradeRecord, TradeStatus

logger = logging.getLogger(__name__)

SETTINGS_ROW_ID = 1


class RecordNotFoundError(LookupError):
    """Raised when an id does not exist in the journal."""

    def __init__(self, kind: str, record_id: int) -> None:
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


def to_record(row: Trade) -> TradeRecord:
    """Snapshot an ORM trade for the metrics engine."""
    return TradeRecord(
        id=str(row.id),
        symbol=row.symbol,
        direction=TradeDirection(row.direction),
        status=TradeStatus(row.status),
        quantity=row.quantity,
        entry_price=row.entry_price,
        entry_date=row.entry_date.isoformat(),
        exit_price=row.exit_price,
        exit_date=row.exit_date.isoformat() if row.exit_date else None,
        initial_stop_loss=row.initial_stop_loss,
        take_profit_target=row.take_profit_target,
        highest_price_reached=row.highest_price_reached,
        lowest_price_reached=row.lowest_price_reached,
        best_exit_price=row.best_exit_price,
        commission=row.commission or 0.0,
        playbook_id=str(row.playbook_id) if row.playbook_id is not None else None,
        tags=tuple(str(t) for t in row.tags or ()),
        rules_followed=tuple(str(r) for r in row.rules_followed or ()),
    )


def _strategy_dict(s: Strategy) -> dict:
    return {
        "id": s.id,
        "name": s.name,
        "description": s.description,
        "rules": s.rules or [],
        "color": s.color,
    }


class JournalStore:
    """Async CRUD over one session. Every write commits immediately."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # ---------- trades ----------

    async def list_trade_rows(self, limit: int | None = None) -> list[Trade]:
        """Trades, newest entry first."""
        stmt = select(Trade).order_by(Trade.entry_date.desc(), Trade.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_trades(self) -> list[TradeRecord]:
        return [to_record(row) for row in await self.list_trade_rows()]

    async def get_trade(self, trade_id: int) -> Trade:
        row = await self._session.get(Trade, trade_id)
        if row is None:
            raise RecordNotFoundError("Trade", trade_id)
        return row

    async def add_trade(self, data: dict) -> Trade:
        row = Trade(**data)
        self._session.add(row)
        await self._session.commit()
        await self._session.refresh(row)
        logger.info("Trade %d added: %s %s x%s", row.id, row.direction, row.symbol, row.quantity)
        return row

    async def update_trade(self, trade_id: int, data: dict) -> Trade:
        row = await self.get_trade(trade_id)
        for key, value in data.items():
            setattr(row, key, value)
        await self._session.commit()
        await self._session.refresh(row)
        logger.info("Trade %d updated", trade_id)
        return row

    async def delete_trade(self, trade_id: int) -> None:
        row = await self.get_trade(trade_id)
        await self._session.delete(row)
        await self._session.commit()
        logger.info("Trade %d deleted", trade_id)

    # ---------- strategies ----------

    async def list_strategies(self) -> list[dict]:
        result = await self._session.execute(select(Strategy).order_by(Strategy.id))
        return [_strategy_dict(s) for s in result.scalars().all()]

    async def strategy_names(self) -> dict[str, str]:
        """Strategy id -> name, for cross-tabulation columns."""
        return {str(s["id"]): s["name"] for s in await self.list_strategies()}

    async def add_strategy(self, data: dict) -> dict:
        row = Strategy(**data)
        self._session.add(row)
        await self._session.commit()
        await self._session.refresh(row)
        logger.info("Strategy %d added: %s", row.id, row.name)
        return _strategy_dict(row)

    async def update_strategy(self, strategy_id: int, data: dict) -> dict:
        row = await self._session.get(Strategy, strategy_id)
        if row is None:
            raise RecordNotFoundError("Strategy", strategy_id)
        for key, value in data.items():
            setattr(row, key, value)
        await self._session.commit()
        logger.info("Strategy %d updated", strategy_id)
        return _strategy_dict(row)

    async def delete_strategy(self, strategy_id: int) -> None:
        row = await self._session.get(Strategy, strategy_id)
        if row is None:
            raise RecordNotFoundError("Strategy", strategy_id)
        # Detach trades explicitly: SQLite ignores ON DELETE unless foreign keys are enabled
        trades = await self._session.execute(select(Trade).where(Trade.playbook_id == strategy_id))
        for trade in trades.scalars():
            trade.playbook_id = None
        await self._session.delete(row)
        await self._session.commit()
        logger.info("Strategy %d deleted", strategy_id)

    # ---------- tags ----------

    async def list_tag_categories(self) -> list[dict]:
        result = await self._session.execute(select(TagCategory).order_by(TagCategory.id))
        return [{"id": c.id, "name": c.name, "color": c.color} for c in result.scalars().all()]

    async def add_tag_category(self, name: str, color: str) -> dict:
        row = TagCategory(name=name, color=color)
        self._session.add(row)
        await self._session.commit()
        await self._session.refresh(row)
        logger.info("Tag category %d added: %s", row.id, name)
        return {"id": row.id, "name": row.name, "color": row.color}

    async def delete_tag_category(self, category_id: int) -> None:
        """Delete a category together with all of its tags."""
        row = await self._session.get(TagCategory, category_id)
        if row is None:
            raise RecordNotFoundError("Tag category", category_id)
        await self._session.execute(delete(Tag).where(Tag.category_id == category_id))
        await self._session.delete(row)
        await self._session.commit()
        logger.info("Tag category %d deleted", category_id)

    async def list_tags(self) -> list[dict]:
        result = await self._session.execute(select(Tag).order_by(Tag.id))
        return [
            {"id": t.id, "name": t.name, "category_id": t.category_id}
            for t in result.scalars().all()
        ]

    async def tag_names(self) -> dict[str, str]:
        """Tag id -> name, for cross-tabulation columns."""
        return {str(t["id"]): t["name"] for t in await self.list_tags()}

    async def add_tag(self, name: str, category_id: int) -> dict:
        if await self._session.get(TagCategory, category_id) is None:
            raise RecordNotFoundError("Tag category", category_id)
        row = Tag(name=name, category_id=category_id)
        self._session.add(row)
        await self._session.commit()
        await self._session.refresh(row)
        logger.info("Tag %d added: %s", row.id, name)
        return {"id": row.id, "name": row.name, "category_id": row.category_id}

    async def delete_tag(self, tag_id: int) -> None:
        row = await self._session.get(Tag, tag_id)
        if row is None:
            raise RecordNotFoundError("Tag", tag_id)
        await self._session.delete(row)
        await self._session.commit()
        logger.info("Tag %d deleted", tag_id)

    # ---------- user settings ----------

    async def get_settings(self) -> UserSettings:
        """The stored settings row, or an unsaved row of config defaults. Reads never write."""
        row = await self._session.get(UserSettings, SETTINGS_ROW_ID)
        if row is None:
            row = UserSettings(
                id=SETTINGS_ROW_ID,
                commission_per_unit=settings.default_commission_per_unit,
                max_drawdown=settings.default_max_drawdown_goal,
                updated_at=datetime.now(timezone.utc),
            )
        return row

    async def update_settings(
        self, commission_per_unit: float | None = None, max_drawdown: float | None = None
    ) -> UserSettings:
        row = await self.get_settings()
        if commission_per_unit is not None:
            row.commission_per_unit = commission_per_unit
        if max_drawdown is not None:
            row.max_drawdown = max_drawdown
        row.updated_at = datetime.now(timezone.utc)
        self._session.add(row)
        await self._session.commit()
        logger.info(
            "Settings updated: commission_per_unit=%s max_drawdown=%s",
            row.commission_per_unit,
            row.max_drawdown,
        )
        return row
