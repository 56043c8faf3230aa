"""Persistence of whole sessions to a SQL database.

Layout: one ``SavedGame`` row per slot whose ``payload`` is the JSON document

    {"version": 1, "objects": [<entity>, ...], "game": {<GameState>}}

with the player first in ``objects``. Loading rebuilds an ``EntityStore`` and
``GameState`` that compare equal to what was saved.

Errors:
  * missing slot -> ``SaveNotFoundError`` (recoverable, shown by the menu)
  * unreadable or corrupt payload -> ``DelveError``
  * database / filesystem failures on write are logged and re-raised
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Tuple

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from delve.logging_utils import get_logger
from delve.models.game import GameState
from delve.models.save import DEFAULT_SLOT, SAVE_FORMAT_VERSION, Base, DelveError, SavedGame, SaveNotFoundError
from delve.models.store import EntityStore

log = get_logger("save")
logger = logging.getLogger(__name__)


def make_engine(database_url: str) -> Engine:
    """Create an engine and make sure the schema exists."""
    engine_opts: Dict[str, Any] = {}
    if database_url.startswith("sqlite"):
        engine_opts["connect_args"] = {"timeout": 10, "check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every session sees a fresh empty DB.
            engine_opts["poolclass"] = StaticPool
    engine = create_engine(database_url, **engine_opts)
    Base.metadata.create_all(engine)
    return engine


def _session(engine: Engine):
    return sessionmaker(bind=engine, expire_on_commit=False)()


def encode_payload(store: EntityStore, game: GameState) -> str:
    return json.dumps({"version": SAVE_FORMAT_VERSION, "objects": store.to_list(), "game": game.to_dict()})


def decode_payload(raw: str) -> Tuple[EntityStore, GameState]:
    try:
        data = json.loads(raw)
        version = data.get("version")
    except (ValueError, TypeError, AttributeError) as exc:
        raise DelveError(f"unreadable save payload: {exc}") from exc
    if version != SAVE_FORMAT_VERSION:
        raise DelveError(f"unsupported save format version: {version!r}")
    try:
        return EntityStore.from_list(data["objects"]), GameState.from_dict(data["game"])
    except (ValueError, KeyError, TypeError, IndexError, AttributeError, AssertionError) as exc:
        raise DelveError(f"corrupt save payload: {exc!r}") from exc


def save_game(engine: Engine, store: EntityStore, game: GameState, slot: str = DEFAULT_SLOT) -> SavedGame:
    payload = encode_payload(store, game)
    session = _session(engine)
    try:
        row = session.query(SavedGame).filter_by(slot=slot).one_or_none()
        if row is None:
            row = SavedGame(slot=slot, payload=payload)
            session.add(row)
        row.payload = payload
        row.dungeon_level = game.dungeon_level
        row.player_level = store.player.level
        session.commit()
    except (SQLAlchemyError, OSError):
        session.rollback()
        logger.exception("Failed to write save slot=%s", slot)
        raise
    finally:
        session.close()
    log.info(event="saved", slot=slot, dungeon_level=game.dungeon_level, size=len(payload))
    return row


def load_game(engine: Engine, slot: str = DEFAULT_SLOT) -> Tuple[EntityStore, GameState]:
    session = _session(engine)
    try:
        row = session.query(SavedGame).filter_by(slot=slot).one_or_none()
    finally:
        session.close()
    if row is None:
        raise SaveNotFoundError(slot)
    store, game = decode_payload(row.payload)
    log.info(event="loaded", slot=slot, dungeon_level=game.dungeon_level)
    return store, game


def list_saves(engine: Engine) -> List[SavedGame]:
    session = _session(engine)
    try:
        return session.query(SavedGame).order_by(SavedGame.updated_at.desc()).all()
    finally:
        session.close()


def delete_save(engine: Engine, slot: str = DEFAULT_SLOT) -> bool:
    session = _session(engine)
    try:
        deleted = session.query(SavedGame).filter_by(slot=slot).delete()
        session.commit()
    finally:
        session.close()
    return bool(deleted)


def has_save(engine: Engine, slot: str = DEFAULT_SLOT) -> bool:
    session = _session(engine)
    try:
        return session.query(SavedGame).filter_by(slot=slot).count() > 0
    finally:
        session.close()


__all__ = [
    "decode_payload",
    "delete_save",
    "encode_payload",
    "has_save",
    "list_saves",
    "load_game",
    "make_engine",
    "save_game",
]
