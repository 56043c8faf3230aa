import random

import pytest

from delve.dungeon import spawn_tables
from delve.dungeon.spawn_tables import from_dungeon_level, item_weights, monster_weights, weighted_choice


@pytest.mark.parametrize(
    "level,expected",
    [(0, 0), (1, 0), (2, 0), (3, 15), (4, 15), (5, 30), (6, 30), (7, 60), (50, 60)],
)
def test_troll_chance_by_level(level, expected):
    assert from_dungeon_level(spawn_tables.TROLL_CHANCE, level) == expected


def test_max_monsters_and_items_scale():
    assert [from_dungeon_level(spawn_tables.MAX_MONSTERS, lvl) for lvl in (1, 3, 4, 5, 6, 9)] == [2, 2, 3, 3, 5, 5]
    assert [from_dungeon_level(spawn_tables.MAX_ITEMS, lvl) for lvl in (1, 3, 4, 8)] == [1, 1, 2, 2]


def test_shallow_levels_only_offer_basics():
    assert monster_weights(1) == {"orc": 80, "troll": 0}
    weights = item_weights(1)
    assert weights["heal"] == 35
    assert all(weights[k] == 0 for k in ("lightning", "fireball", "confuse", "sword", "shield"))
    assert item_weights(8) == {"heal": 35, "lightning": 25, "fireball": 25, "confuse": 10, "sword": 5, "shield": 15}


def test_weighted_choice_never_picks_zero_weight():
    rng = random.Random(3)
    picks = {weighted_choice({"orc": 80, "troll": 0}, rng) for _ in range(200)}
    assert picks == {"orc"}


def test_weighted_choice_bounds(monkeypatch):
    weights = {"a": 1, "b": 3}
    rng = random.Random()
    monkeypatch.setattr(rng, "randint", lambda lo, hi: lo)
    assert weighted_choice(weights, rng) == "a"
    monkeypatch.setattr(rng, "randint", lambda lo, hi: hi)
    assert weighted_choice(weights, rng) == "b"


def test_weighted_choice_all_zero():
    assert weighted_choice({"a": 0, "b": 0}, random.Random(1)) is None
