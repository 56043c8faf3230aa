import json

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from delve.models import colors
from delve.models.entities import BasicAi, ConfusedAi
from delve.models.save import DelveError, SavedGame, SaveNotFoundError
from delve.models.store import PLAYER
from delve.services import save_service
from tests.factories import add_item, add_monster, add_stairs, give_item, make_open_game


def _busy_game():
    store, game = make_open_game(px=4, py=6)
    orc = add_monster(store, "orc", 8, 8)
    store[orc].ai = ConfusedAi(previous_ai=ConfusedAi(previous_ai=BasicAi(), num_turns=2), num_turns=5)
    add_monster(store, "troll", 12, 3)
    add_item(store, "fireball", 2, 2)
    add_stairs(store, 15, 15)
    give_item(game, "sword", equipped=True)
    give_item(game, "heal")
    for x in range(10, 19):
        game.map.tiles[x][14].explored = True
    game.log.add("hello", colors.RED)
    game.log.add("again")
    game.dungeon_level = 3
    store[PLAYER].level = 2
    store[PLAYER].fighter.xp = 123
    return store, game


def test_round_trip_restores_everything(engine):
    store, game = _busy_game()
    save_service.save_game(engine, store, game)

    loaded_store, loaded_game = save_service.load_game(engine)

    assert loaded_store == store
    assert loaded_game.map == game.map
    assert loaded_game.log == game.log
    assert loaded_game.inventory == game.inventory
    assert loaded_game.dungeon_level == 3
    assert loaded_game.map.explored_coords() == [(x, 14) for x in range(10, 19)]
    assert loaded_store[1].ai.previous_ai.num_turns == 2


def test_payload_layout():
    store, game = _busy_game()
    data = json.loads(save_service.encode_payload(store, game))
    assert data["version"] == 1
    assert data["objects"][0]["name"] == "player"
    assert set(data["game"]) == {"map", "log", "inventory", "dungeon_level"}
    # explored set is stored compressed
    assert data["game"]["map"]["explored"].startswith("D:")


def test_missing_slot_raises(engine):
    with pytest.raises(SaveNotFoundError) as exc:
        save_service.load_game(engine, "nowhere")
    assert exc.value.slot == "nowhere"
    assert isinstance(exc.value, DelveError)


def test_saving_again_replaces_slot(engine):
    store, game = make_open_game()
    save_service.save_game(engine, store, game, "alpha")
    game.dungeon_level = 7
    save_service.save_game(engine, store, game, "alpha")
    save_service.save_game(engine, store, game, "beta")

    rows = save_service.list_saves(engine)
    assert sorted(r.slot for r in rows) == ["alpha", "beta"]
    assert save_service.load_game(engine, "alpha")[1].dungeon_level == 7
    alpha = next(r for r in rows if r.slot == "alpha")
    assert alpha.dungeon_level == 7 and alpha.player_level == 1


def test_delete_and_has_save(engine):
    store, game = make_open_game()
    assert not save_service.has_save(engine)
    save_service.save_game(engine, store, game)
    assert save_service.has_save(engine)
    assert save_service.delete_save(engine)
    assert not save_service.delete_save(engine)
    assert not save_service.has_save(engine)


def test_unknown_version_is_rejected(engine):
    store, game = make_open_game()
    payload = json.loads(save_service.encode_payload(store, game))
    payload["version"] = 99
    session = save_service._session(engine)
    session.add(SavedGame(slot="old", payload=json.dumps(payload)))
    session.commit()
    session.close()
    with pytest.raises(DelveError):
        save_service.load_game(engine, "old")


def test_file_database_persists_between_engines(tmp_path):
    url = f"sqlite:///{(tmp_path / 'saves.db').as_posix()}"
    store, game = make_open_game()
    first = save_service.make_engine(url)
    save_service.save_game(first, store, game)
    first.dispose()

    second = save_service.make_engine(url)
    try:
        loaded, _ = save_service.load_game(second)
    finally:
        second.dispose()
    assert loaded == store


def _store_raw_payload(engine, slot, raw):
    session = save_service._session(engine)
    session.add(SavedGame(slot=slot, payload=raw))
    session.commit()
    session.close()


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        "[1, 2]",
        json.dumps({"version": 1, "objects": [], "game": {}}),
        json.dumps({"version": 1, "game": {}}),
    ],
)
def test_corrupt_payload_is_rejected(engine, raw):
    _store_raw_payload(engine, "broken", raw)
    with pytest.raises(DelveError):
        save_service.load_game(engine, "broken")


def test_failed_commit_propagates_and_leaves_no_row(engine, monkeypatch):
    store, game = make_open_game()

    def fail_commit(self):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(Session, "commit", fail_commit)
    with pytest.raises(SQLAlchemyError):
        save_service.save_game(engine, store, game)
    monkeypatch.undo()

    assert save_service.list_saves(engine) == []
    assert not save_service.has_save(engine)
