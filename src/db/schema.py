"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBMatch(Base):
    __tablename__ = "matches"
    host: Mapped[str] = mapped_column(primary_key=True)
    opponent: Mapped[str] = mapped_column(primary_key=True)
    board_fen: Mapped[str]
    side_to_move: Mapped[str]
    status: Mapped[str]
    winner: Mapped[Optional[str]]
    # list of {"original": [x, y], "new": [x, y], "promotion": str | None}
    moves: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
