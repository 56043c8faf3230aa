"""Dungeon generation invariant tests.

These tests are intentionally lightweight and focus on structural integrity
rather than exhaustive statistical properties.

Invariants covered:
1. Accepted rooms never intersect (inclusive test) and stay inside the map.
2. The player stands on the first room's center, the stairs on the last one's.
3. Every spawned entity sits on floor inside some room; no two blockers share a tile.
4. Every room center is reachable from the player over floor tiles.
5. Regeneration keeps the player at index 0 and drops everything else.
"""

from __future__ import annotations

import random
from collections import deque

import pytest

from delve.dungeon import DungeonConfig, Rect, generate_level, make_map
from delve.models.catalog import STAIRS_NAME, make_monster, make_player
from delve.models.store import PLAYER, EntityStore


def gen(seed: int = 12345, level: int = 1):
    store = EntityStore([make_player()])
    outputs = generate_level(store, level, DungeonConfig(seed=seed), random.Random(seed))
    return store, outputs


def _reachable(game_map, start):
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nx, ny = x + dx, y + dy
            if (nx, ny) in seen or game_map.is_blocked(nx, ny):
                continue
            seen.add((nx, ny))
            queue.append((nx, ny))
    return seen


@pytest.mark.parametrize("seed", [1, 7, 42, 1234, 99999])
def test_rooms_do_not_intersect(seed):
    _, out = gen(seed)
    assert out.rooms, "generation must accept at least one room"
    for i, a in enumerate(out.rooms):
        assert 0 <= a.x1 and a.x2 <= out.map.width - 1
        assert 0 <= a.y1 and a.y2 <= out.map.height - 1
        for b in out.rooms[i + 1 :]:
            assert not a.intersects(b), f"rooms {a} and {b} overlap"


def test_player_and_stairs_placement():
    store, out = gen(2024)
    assert store[PLAYER].pos() == out.rooms[0].center
    stairs = [e for e in store if e.name == STAIRS_NAME]
    assert len(stairs) == 1
    assert stairs[0].pos() == out.rooms[-1].center
    assert stairs[0].always_visible and not stairs[0].blocks


@pytest.mark.parametrize("seed", [3, 17, 555])
def test_spawns_on_room_floor(seed):
    store, out = gen(seed, level=6)
    interiors = set()
    for room in out.rooms:
        interiors.update(room.cells())
    blockers = set()
    for entity in store:
        assert not out.map.is_blocked(entity.x, entity.y), f"{entity.name} spawned in rock at {entity.pos()}"
        assert entity.pos() in interiors
        if entity.blocks:
            assert entity.pos() not in blockers, f"two blockers share {entity.pos()}"
            blockers.add(entity.pos())


@pytest.mark.parametrize("seed", [11, 12, 13, 14])
def test_all_rooms_reachable(seed):
    store, out = gen(seed)
    reach = _reachable(out.map, store[PLAYER].pos())
    for room in out.rooms:
        assert room.center in reach, f"room at {room.center} unreachable"


def test_same_seed_same_level():
    store_a, out_a = gen(4242)
    store_b, out_b = gen(4242)
    assert out_a.map == out_b.map
    assert store_a == store_b


def test_regeneration_truncates_to_player():
    store, _ = gen(5)
    marker = make_monster("orc", 1, 1)
    marker.name = "marker"
    store.append(marker)
    player = store[PLAYER]
    player.fighter.hp = 33
    make_map(store, 2, DungeonConfig(), random.Random(6))
    assert store[PLAYER] is player
    assert player.fighter.hp == 33
    assert all(e.name != "marker" for e in store)


def test_generate_requires_player_first():
    store = EntityStore([make_monster("orc", 1, 1)])
    with pytest.raises(AssertionError):
        generate_level(store, 1, DungeonConfig(), random.Random(1))


def test_rect_intersection_is_inclusive():
    a = Rect.from_size(0, 0, 6, 6)
    touching = Rect.from_size(6, 0, 6, 6)
    apart = Rect.from_size(7, 0, 6, 6)
    assert a.intersects(touching)
    assert not a.intersects(apart)


def test_metrics_reported():
    _, out = gen(77)
    m = out.metrics
    assert m["rooms_placed"] == len(out.rooms)
    assert m["rooms_placed"] + m["rooms_rejected"] == m["rooms_attempted"] == 30
