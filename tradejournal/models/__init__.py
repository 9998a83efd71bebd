"""SQLAlchemy models for the trade journal."""

from tradejournal.models.strategy import Strategy
from tradejournal.models.tag import Tag, TagCategory
from tradejournal.models.trade import Trade
from tradejournal.models.user_settings import UserSettings

__all__ = ["Strategy", "Tag", "TagCategory", "Trade", "UserSettings"]
