"""Per-journal user settings. Single row, id = 1."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Integer
from sqlalchemy.orm import Mapped, mapped_column

from tradejournal.database import Base


class UserSettings(Base):
    """Commission override and drawdown goal used by every report."""

    __tablename__ = "user_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    commission_per_unit: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)  # 0 = use trade's own
    max_drawdown: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)  # display-only goal
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
