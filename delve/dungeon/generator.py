"""Dungeon level generation.

High-level phases (single pass over ``max_rooms`` attempts):
    * Roll a random rectangle fully inside the map.
    * Skip it if it touches any accepted room (inclusive overlap test).
    * Carve it, then either move the player into it (first room) or join it to the
      previous accepted room with an L-shaped tunnel.
    * Populate it with monsters and items from the depth-scaled tables.
After the loop a down staircase goes at the center of the last accepted room.

Public contract consumed elsewhere:
    generate_level(store, level, config=None, rng=None) -> LevelOutputs
    make_map(store, level, config=None, rng=None) -> GameMap

The store is truncated to the player before generation; the player keeps index 0.
"""

from __future__ import annotations

import random
from typing import Any, Dict, List, NamedTuple, Optional

from delve.logging_utils import get_logger
from delve.models.catalog import make_item, make_monster, make_stairs
from delve.models.store import PLAYER, EntityStore

from . import spawn_tables
from .config import DungeonConfig
from .rooms import Rect, carve_room, overlaps_any, random_room
from .tiles import GameMap
from .tunnels import carve_tunnel_between

log = get_logger("dungeon")


class LevelOutputs(NamedTuple):
    map: GameMap
    rooms: List[Rect]
    metrics: Dict[str, Any]


def place_objects(room: Rect, game_map: GameMap, store: EntityStore, level: int, rng=None) -> Dict[str, int]:
    """Spawn monsters and items inside ``room``; returns per-kind counts."""
    rng = rng or random
    counts = {"monsters": 0, "items": 0}

    max_monsters = spawn_tables.from_dungeon_level(spawn_tables.MAX_MONSTERS, level)
    monster_weights = spawn_tables.monster_weights(level)
    for _ in range(rng.randint(0, max_monsters)):
        x = rng.randint(room.x1 + 1, room.x2 - 1)
        y = rng.randint(room.y1 + 1, room.y2 - 1)
        if store.is_blocked(x, y, game_map):
            continue
        slug = spawn_tables.weighted_choice(monster_weights, rng)
        if slug is None:
            continue
        store.append(make_monster(slug, x, y))
        counts["monsters"] += 1

    max_items = spawn_tables.from_dungeon_level(spawn_tables.MAX_ITEMS, level)
    item_weights = spawn_tables.item_weights(level)
    for _ in range(rng.randint(0, max_items)):
        x = rng.randint(room.x1 + 1, room.x2 - 1)
        y = rng.randint(room.y1 + 1, room.y2 - 1)
        if store.is_blocked(x, y, game_map):
            continue
        slug = spawn_tables.weighted_choice(item_weights, rng)
        if slug is None:
            continue
        store.append(make_item(slug, x, y))
        counts["items"] += 1
    return counts


def generate_level(
    store: EntityStore,
    level: int,
    config: Optional[DungeonConfig] = None,
    rng: Optional[random.Random] = None,
) -> LevelOutputs:
    config = config or DungeonConfig()
    if rng is None:
        rng = random.Random(config.seed) if config.seed is not None else random
    assert len(store) > 0 and store[PLAYER].is_player, "entity store must hold the player at index 0"
    store.truncate_to_player()
    player = store[PLAYER]

    game_map = GameMap(config.width, config.height)
    rooms: List[Rect] = []
    metrics = {"rooms_attempted": config.max_rooms, "rooms_placed": 0, "rooms_rejected": 0, "monsters": 0, "items": 0}

    for _ in range(config.max_rooms):
        new_room = random_room(config, rng)
        if overlaps_any(new_room, rooms):
            metrics["rooms_rejected"] += 1
            continue
        carve_room(game_map, new_room)
        new_x, new_y = new_room.center
        if not rooms:
            player.set_pos(new_x, new_y)
        else:
            carve_tunnel_between(game_map, rooms[-1].center, (new_x, new_y), rng)
        counts = place_objects(new_room, game_map, store, level, rng)
        metrics["monsters"] += counts["monsters"]
        metrics["items"] += counts["items"]
        rooms.append(new_room)

    if not rooms:
        raise RuntimeError("dungeon generation produced no rooms")
    metrics["rooms_placed"] = len(rooms)
    last_x, last_y = rooms[-1].center
    store.append(make_stairs(last_x, last_y))

    assert store[PLAYER] is player
    log.info(event="level_generated", depth=level, **metrics)
    return LevelOutputs(game_map, rooms, metrics)


def make_map(
    store: EntityStore,
    level: int,
    config: Optional[DungeonConfig] = None,
    rng: Optional[random.Random] = None,
) -> GameMap:
    return generate_level(store, level, config, rng).map


__all__ = ["LevelOutputs", "generate_level", "make_map", "place_objects"]
