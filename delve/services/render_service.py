"""Build the read-only frame snapshot handed to the frontend."""

from __future__ import annotations

from delve.interfaces import RenderView
from delve.models.game import GameState
from delve.models.store import EntityStore

from . import combat_service


def build_view(store: EntityStore, game: GameState) -> RenderView:
    player = store.player
    fighter = player.fighter
    # Non-blocking entities first so monsters and the player draw on top.
    entities = tuple(sorted(store, key=lambda e: e.blocks))
    return RenderView(
        map=game.map,
        entities=entities,
        messages=tuple(game.log.newest_first()),
        hp=fighter.hp if fighter else 0,
        max_hp=combat_service.max_hp(player, game),
        xp=fighter.xp if fighter else 0,
        player_level=player.level,
        dungeon_level=game.dungeon_level,
    )


def render(store: EntityStore, game: GameState, frontend, fov_recompute: bool = False) -> None:
    frontend.render(build_view(store, game), fov_recompute)


__all__ = ["build_view", "render"]
