"""Depth-scaled spawn tables.

A depth-scaled value is a list of ``(level, value)`` transitions sorted by
level. ``from_dungeon_level`` returns the value of the deepest transition the
current level has reached, or 0 above the first one.

Table weights are themselves depth-scaled where noted (trolls and every item
but the healing potion), so deeper levels shift the mix rather than only the
counts.
"""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence, Tuple

Transition = Tuple[int, int]

MAX_MONSTERS: List[Transition] = [(1, 2), (4, 3), (6, 5)]
MAX_ITEMS: List[Transition] = [(1, 1), (4, 2)]

TROLL_CHANCE: List[Transition] = [(3, 15), (5, 30), (7, 60)]

ITEM_CHANCES: Dict[str, List[Transition]] = {
    "lightning": [(4, 25)],
    "fireball": [(6, 25)],
    "confuse": [(2, 10)],
    "sword": [(4, 5)],
    "shield": [(8, 15)],
}
HEAL_CHANCE = 35
ORC_CHANCE = 80


def from_dungeon_level(table: Sequence[Transition], level: int) -> int:
    """Value of the highest transition whose level is <= ``level`` (0 if none)."""
    for threshold, value in reversed(table):
        if level >= threshold:
            return value
    return 0


def monster_weights(level: int) -> Dict[str, int]:
    return {"orc": ORC_CHANCE, "troll": from_dungeon_level(TROLL_CHANCE, level)}


def item_weights(level: int) -> Dict[str, int]:
    weights = {"heal": HEAL_CHANCE}
    for slug, table in ITEM_CHANCES.items():
        weights[slug] = from_dungeon_level(table, level)
    return weights


def weighted_choice(weights: Dict[str, int], rng=None) -> Optional[str]:
    """Pick a key with probability proportional to its weight.

    Zero-weight keys are never chosen. Returns None when every weight is zero.
    """
    rng = rng or random
    total = sum(w for w in weights.values() if w > 0)
    if total <= 0:
        return None
    pivot = rng.randint(1, total)
    acc = 0
    for key, w in weights.items():
        if w <= 0:
            continue
        acc += w
        if pivot <= acc:
            return key
    return None


__all__ = [
    "HEAL_CHANCE",
    "ITEM_CHANCES",
    "MAX_ITEMS",
    "MAX_MONSTERS",
    "ORC_CHANCE",
    "TROLL_CHANCE",
    "from_dungeon_level",
    "item_weights",
    "monster_weights",
    "weighted_choice",
]
