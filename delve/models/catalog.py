"""Catalog of everything the generator can place.

Species and item definitions are plain data; ``make_monster`` / ``make_item``
turn a catalog key into a fresh ``Entity`` at a position. Spawn weights live in
``delve.dungeon.spawn_tables`` so depth scaling stays next to the generator.
"""

from __future__ import annotations

from typing import Dict

from . import colors
from .entities import BasicAi, DeathCallback, Entity, Equipment, Fighter, ItemKind, Slot

PLAYER_NAME = "player"
STAIRS_NAME = "stairs"
CORPSE_GLYPH = "%"

# slug -> stats (mirrors a monster catalog row)
MONSTERS: Dict[str, Dict] = {
    "orc": {
        "name": "orc",
        "glyph": "o",
        "color": colors.DESATURATED_GREEN,
        "hp": 20,
        "defense": 0,
        "power": 4,
        "xp": 35,
    },
    "troll": {
        "name": "troll",
        "glyph": "T",
        "color": colors.DARKER_GREEN,
        "hp": 30,
        "defense": 2,
        "power": 8,
        "xp": 100,
    },
}

# slug -> item definition; "equipment" present only for wearables
ITEMS: Dict[str, Dict] = {
    "heal": {"name": "healing potion", "glyph": "!", "color": colors.VIOLET, "item": ItemKind.HEAL},
    "lightning": {
        "name": "scroll of lightning bolt",
        "glyph": "#",
        "color": colors.LIGHT_YELLOW,
        "item": ItemKind.LIGHTNING,
    },
    "fireball": {
        "name": "scroll of fireball",
        "glyph": "#",
        "color": colors.LIGHT_YELLOW,
        "item": ItemKind.FIREBALL,
    },
    "confuse": {
        "name": "scroll of confusion",
        "glyph": "#",
        "color": colors.LIGHT_YELLOW,
        "item": ItemKind.CONFUSE,
    },
    "sword": {
        "name": "sword",
        "glyph": "/",
        "color": colors.SKY,
        "item": ItemKind.SWORD,
        "equipment": {"slot": Slot.RIGHT_HAND, "power_bonus": 3},
    },
    "shield": {
        "name": "shield",
        "glyph": "[",
        "color": colors.DARKER_ORANGE,
        "item": ItemKind.SHIELD,
        "equipment": {"slot": Slot.LEFT_HAND, "defense_bonus": 1},
    },
    # Starting gear only; never rolled by the spawn tables.
    "dagger": {
        "name": "dagger",
        "glyph": "-",
        "color": colors.SKY,
        "item": ItemKind.SWORD,
        "equipment": {"slot": Slot.LEFT_HAND, "power_bonus": 2},
    },
}


def make_player(x: int = 0, y: int = 0) -> Entity:
    player = Entity(x, y, "@", PLAYER_NAME, colors.WHITE, blocks=True)
    player.alive = True
    player.fighter = Fighter(
        hp=100,
        base_max_hp=100,
        base_defense=1,
        base_power=2,
        xp=0,
        on_death=DeathCallback.PLAYER,
    )
    return player


def make_monster(slug: str, x: int, y: int) -> Entity:
    row = MONSTERS[slug]
    monster = Entity(x, y, row["glyph"], row["name"], row["color"], blocks=True)
    monster.alive = True
    monster.fighter = Fighter(
        hp=row["hp"],
        base_max_hp=row["hp"],
        base_defense=row["defense"],
        base_power=row["power"],
        xp=row["xp"],
        on_death=DeathCallback.MONSTER,
    )
    monster.ai = BasicAi()
    return monster


def make_item(slug: str, x: int, y: int) -> Entity:
    row = ITEMS[slug]
    item = Entity(x, y, row["glyph"], row["name"], row["color"], blocks=False)
    item.item = row["item"]
    item.always_visible = True
    if "equipment" in row:
        item.equipment = Equipment(equipped=False, **row["equipment"])
    return item


def make_stairs(x: int, y: int) -> Entity:
    stairs = Entity(x, y, "<", STAIRS_NAME, colors.WHITE, blocks=False)
    stairs.always_visible = True
    return stairs


__all__ = [
    "CORPSE_GLYPH",
    "ITEMS",
    "MONSTERS",
    "PLAYER_NAME",
    "STAIRS_NAME",
    "make_item",
    "make_monster",
    "make_player",
    "make_stairs",
]
