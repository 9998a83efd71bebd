"""Strategy (playbook) model."""

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tradejournal.database import Base


class Strategy(Base):
    """A named playbook that trades are filed under.

    `rules` holds groups of checklist items:
    [{"id": "g1", "name": "Entry criteria", "items": [{"id": "r1", "text": "Gap > 2%"}]}]
    """

    __tablename__ = "strategies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    rules: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    color: Mapped[str | None] = mapped_column(String(20), nullable=True)
