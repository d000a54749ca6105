"""
ORM models.

One append-only table: every successful weather lookup adds a row with the
city that was queried. Rows are never updated or deleted, and the same city
may appear any number of times.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


class HistoryRecord(Base):
    __tablename__ = "historial_ciudades"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    # Stored as received; NULL when the caller omitted it
    ciudad: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
