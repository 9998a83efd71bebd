"""Tests for journal persistence against an in-memory SQLite database."""

from datetime import datetime

import pytest
from sqlalchemy import select

from tradejournal.config import settings
from tradejournal.models import UserSettings
from tradejournal.services.journal_store import JournalStore, RecordNotFoundError
from tradejournal.services.metrics.types import TradeDirection, TradeStatus


def trade_columns(**kwargs) -> dict:
    defaults = {
        "symbol": "ES",
        "direction": "Long",
        "status": "Win",
        "entry_date": datetime(2024, 1, 8, 9, 30),
        "exit_date": datetime(2024, 1, 8, 10, 0),
        "quantity": 1.0,
        "entry_price": 100.0,
        "exit_price": 110.0,
        "commission": 0.0,
    }
    defaults.update(kwargs)
    return defaults


class TestTrades:
    @pytest.mark.asyncio
    async def test_add_and_list_records(self, session):
        store = JournalStore(session)
        row = await store.add_trade(trade_columns(playbook_id=None, tags=[3, 4], rules_followed=["r1"]))

        records = await store.list_trades()
        assert len(records) == 1
        record = records[0]
        assert record.id == str(row.id)
        assert record.direction == TradeDirection.LONG
        assert record.status == TradeStatus.WIN
        assert record.tags == ("3", "4")
        assert record.rules_followed == ("r1",)
        assert record.entry_time == datetime(2024, 1, 8, 9, 30)
        assert record.duration_minutes == 30

    @pytest.mark.asyncio
    async def test_newest_first_with_limit(self, session):
        store = JournalStore(session)
        await store.add_trade(trade_columns(entry_date=datetime(2024, 1, 8, 9, 30)))
        await store.add_trade(trade_columns(entry_date=datetime(2024, 1, 10, 9, 30), symbol="NQ"))
        await store.add_trade(trade_columns(entry_date=datetime(2024, 1, 9, 9, 30), symbol="MES"))

        rows = await store.list_trade_rows()
        assert [r.symbol for r in rows] == ["NQ", "MES", "ES"]
        assert len(await store.list_trade_rows(limit=2)) == 2

    @pytest.mark.asyncio
    async def test_open_trade_record(self, session):
        store = JournalStore(session)
        await store.add_trade(trade_columns(exit_price=None, exit_date=None, status="Break Even"))
        record = (await store.list_trades())[0]
        assert record.is_closed is False
        assert record.exit_date is None

    @pytest.mark.asyncio
    async def test_update(self, session):
        store = JournalStore(session)
        row = await store.add_trade(trade_columns())
        updated = await store.update_trade(row.id, {"exit_price": 95.0, "status": "Loss"})
        assert updated.exit_price == 95.0
        assert (await store.list_trades())[0].status == TradeStatus.LOSS

    @pytest.mark.asyncio
    async def test_delete(self, session):
        store = JournalStore(session)
        row = await store.add_trade(trade_columns())
        await store.delete_trade(row.id)
        assert await store.list_trades() == []

    @pytest.mark.asyncio
    async def test_missing_trade(self, session):
        store = JournalStore(session)
        with pytest.raises(RecordNotFoundError, match="Trade 42 not found"):
            await store.get_trade(42)
        with pytest.raises(RecordNotFoundError):
            await store.update_trade(42, {"exit_price": 1.0})
        with pytest.raises(RecordNotFoundError):
            await store.delete_trade(42)


class TestStrategies:
    @pytest.mark.asyncio
    async def test_names_for_cross_tabulation(self, session):
        store = JournalStore(session)
        orb = await store.add_strategy({"name": "ORB", "rules": []})
        fade = await store.add_strategy({"name": "Fade", "rules": []})
        assert await store.strategy_names() == {str(orb["id"]): "ORB", str(fade["id"]): "Fade"}

    @pytest.mark.asyncio
    async def test_update(self, session):
        store = JournalStore(session)
        s = await store.add_strategy({"name": "ORB", "rules": []})
        updated = await store.update_strategy(s["id"], {"name": "Opening range", "color": "#ff0000"})
        assert updated["name"] == "Opening range"
        assert updated["color"] == "#ff0000"

    @pytest.mark.asyncio
    async def test_delete_unassigns_trades(self, session):
        store = JournalStore(session)
        s = await store.add_strategy({"name": "ORB", "rules": []})
        row = await store.add_trade(trade_columns(playbook_id=s["id"]))

        await store.delete_strategy(s["id"])

        assert await store.list_strategies() == []
        assert (await store.get_trade(row.id)).playbook_id is None

    @pytest.mark.asyncio
    async def test_missing_strategy(self, session):
        with pytest.raises(RecordNotFoundError):
            await JournalStore(session).delete_strategy(7)


class TestTags:
    @pytest.mark.asyncio
    async def test_category_delete_removes_its_tags(self, session):
        store = JournalStore(session)
        mood = await store.add_tag_category("Mood", "#ff0000")
        setup = await store.add_tag_category("Setup", "#00ff00")
        await store.add_tag("FOMO", mood["id"])
        keep = await store.add_tag("Breakout", setup["id"])

        await store.delete_tag_category(mood["id"])

        assert [c["name"] for c in await store.list_tag_categories()] == ["Setup"]
        assert await store.tag_names() == {str(keep["id"]): "Breakout"}

    @pytest.mark.asyncio
    async def test_tag_needs_existing_category(self, session):
        with pytest.raises(RecordNotFoundError, match="Tag category 9"):
            await JournalStore(session).add_tag("FOMO", 9)

    @pytest.mark.asyncio
    async def test_delete_tag(self, session):
        store = JournalStore(session)
        cat = await store.add_tag_category("Mood", "#ff0000")
        tag = await store.add_tag("FOMO", cat["id"])
        await store.delete_tag(tag["id"])
        assert await store.list_tags() == []
        with pytest.raises(RecordNotFoundError):
            await store.delete_tag(tag["id"])


class TestSettings:
    @pytest.mark.asyncio
    async def test_reading_defaults_does_not_persist(self, session):
        store = JournalStore(session)
        await store.get_settings()
        await store.get_settings()
        stored = (await session.execute(select(UserSettings))).scalars().all()
        assert stored == []

    @pytest.mark.asyncio
    async def test_update_persists_the_row(self, session_factory):
        async with session_factory() as s:
            await JournalStore(s).update_settings(commission_per_unit=0.75)
        async with session_factory() as s:
            row = await s.get(UserSettings, 1)
        assert row is not None
        assert row.commission_per_unit == 0.75

    @pytest.mark.asyncio
    async def test_seeded_from_config(self, session, monkeypatch):
        monkeypatch.setattr(settings, "default_commission_per_unit", 1.25)
        monkeypatch.setattr(settings, "default_max_drawdown_goal", 500.0)
        row = await JournalStore(session).get_settings()
        assert row.commission_per_unit == 1.25
        assert row.max_drawdown == 500.0

    @pytest.mark.asyncio
    async def test_partial_update(self, session, monkeypatch):
        monkeypatch.setattr(settings, "default_commission_per_unit", 0.0)
        monkeypatch.setattr(settings, "default_max_drawdown_goal", 0.0)
        store = JournalStore(session)
        await store.update_settings(max_drawdown=300.0)
        row = await store.update_settings(commission_per_unit=0.5)
        assert row.commission_per_unit == 0.5
        assert row.max_drawdown == 300.0
