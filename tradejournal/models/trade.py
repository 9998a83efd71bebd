"""Journal trade model."""

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tradejournal.database import Base


class Trade(Base):
    """One logged round-trip trade. Prices are instrument points, not cents."""

    __tablename__ = "trades"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    symbol: Mapped[str] = mapped_column(String(20), nullable=False)
    direction: Mapped[str] = mapped_column(String(5), nullable=False)  # Long, Short
    status: Mapped[str] = mapped_column(String(12), nullable=False)  # Win ... Loss

    entry_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    exit_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    entry_price: Mapped[float] = mapped_column(Float, nullable=False)
    exit_price: Mapped[float | None] = mapped_column(Float, nullable=True)  # None while open
    best_exit_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    commission: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    initial_stop_loss: Mapped[float | None] = mapped_column(Float, nullable=True)
    take_profit_target: Mapped[float | None] = mapped_column(Float, nullable=True)
    highest_price_reached: Mapped[float | None] = mapped_column(Float, nullable=True)
    lowest_price_reached: Mapped[float | None] = mapped_column(Float, nullable=True)

    playbook_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("strategies.id", ondelete="SET NULL"), nullable=True
    )
    rules_followed: Mapped[list] = mapped_column(JSON, nullable=False, default=list)  # rule item ids
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)  # tag ids
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    screenshot_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
