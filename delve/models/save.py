"""
project: Delve
module: save.py
License: MIT

Database model for saved sessions.

Notes:
- A save is one JSON document (entity store + game state) stored as text,
  keyed by a slot name. Saving over an existing slot replaces its payload.
- Explored tiles inside the payload are compressed (see ``delve.utils.tile_compress``).
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

DEFAULT_SLOT = "default"
SAVE_FORMAT_VERSION = 1


def _utcnow():
    return datetime.now(timezone.utc)


class DelveError(Exception):
    """Base class for recoverable engine errors."""


class SaveNotFoundError(DelveError):
    """No save exists for the requested slot."""

    def __init__(self, slot: str):
        super().__init__(f"no saved game in slot {slot!r}")
        self.slot = slot


class SavedGame(Base):
    """One persisted session.

    Attributes:
        id: Primary key.
        slot: Unique save slot name.
        dungeon_level: Depth at save time (listing convenience only).
        player_level: Character level at save time.
        payload: JSON text of ``{"version", "objects", "game"}``.
    """

    __tablename__ = "saved_game"

    id = Column(Integer, primary_key=True)
    slot = Column(String(64), unique=True, nullable=False, default=DEFAULT_SLOT)
    dungeon_level = Column(Integer, nullable=False, default=1)
    player_level = Column(Integer, nullable=False, default=1)
    payload = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=_utcnow)
    updated_at = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self) -> str:
        return f"<SavedGame slot={self.slot} depth={self.dungeon_level}>"


__all__ = ["Base", "DEFAULT_SLOT", "DelveError", "SAVE_FORMAT_VERSION", "SaveNotFoundError", "SavedGame"]
