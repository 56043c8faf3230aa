"""Target selection for ranged items.

``target_tile`` and ``target_monster`` block on the frontend's pointer until the
player picks a valid target or backs out; the world keeps being redrawn while
waiting so the map stays on screen under any prompt.
"""

from __future__ import annotations

from typing import Optional, Tuple

from delve.logging_utils import get_logger
from delve.models.game import GameState
from delve.models.store import PLAYER, EntityStore

from . import render_service

log = get_logger("targeting")


def closest_monster(store: EntityStore, oracle, max_range: int) -> Optional[int]:
    """Index of the nearest visible monster within ``max_range``."""
    player = store[PLAYER]
    closest: Optional[int] = None
    closest_dist = max_range + 1.0
    for index, entity in enumerate(store):
        if index == PLAYER or entity.fighter is None or entity.ai is None:
            continue
        if not oracle.is_in_fov(entity.x, entity.y):
            continue
        dist = player.distance_to(entity)
        if dist < closest_dist:
            closest = index
            closest_dist = dist
    return closest


def target_tile(
    store: EntityStore,
    game: GameState,
    frontend,
    max_range: Optional[float] = None,
) -> Optional[Tuple[int, int]]:
    """Wait for a left click on a visible in-range tile; None when cancelled."""
    player = store[PLAYER]
    while True:
        render_service.render(store, game, frontend, False)
        event = frontend.poll_pointer()
        if event.rbutton_pressed or event.cancel or event.closed or frontend.closed:
            log.debug(event="target_cancelled")
            return None
        if not event.lbutton_pressed:
            continue
        x, y = event.x, event.y
        in_fov = game.map.in_bounds(x, y) and frontend.visibility.is_in_fov(x, y)
        in_range = max_range is None or player.distance(x, y) <= max_range
        if in_fov and in_range:
            return (x, y)


def target_monster(
    store: EntityStore,
    game: GameState,
    frontend,
    max_range: Optional[float] = None,
) -> Optional[int]:
    """Repeat tile targeting until a monster's tile is clicked."""
    while True:
        picked = target_tile(store, game, frontend, max_range)
        if picked is None:
            return None
        for index, entity in enumerate(store):
            if index != PLAYER and entity.fighter is not None and entity.pos() == picked:
                return index


__all__ = ["closest_monster", "target_monster", "target_tile"]
