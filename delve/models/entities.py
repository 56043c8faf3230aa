"""
project: Delve
module: entities.py
License: MIT

Entity record shared by everything that lives on the map.

There is one ``Entity`` dataclass. What an entity *is* comes from which
capability fields are populated:

    player   fighter
    monster  fighter + ai
    item     item (+ equipment for wearables)
    stairs   none

Notes:
- ``Ai`` is either ``BasicAi`` or ``ConfusedAi``; a confused state owns the AI it
  resumes into once its counter runs out, so the type is recursive.
- Every record round-trips through ``to_dict``/``from_dict`` for saving.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .colors import Color, WHITE, as_color


class Slot(str, Enum):
    LEFT_HAND = "left hand"
    RIGHT_HAND = "right hand"
    HEAD = "head"


class ItemKind(str, Enum):
    HEAL = "heal"
    LIGHTNING = "lightning"
    CONFUSE = "confuse"
    FIREBALL = "fireball"
    SWORD = "sword"
    SHIELD = "shield"


class DeathCallback(str, Enum):
    PLAYER = "player"
    MONSTER = "monster"


@dataclass
class Fighter:
    hp: int
    base_max_hp: int
    base_defense: int
    base_power: int
    xp: int
    on_death: DeathCallback

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hp": self.hp,
            "base_max_hp": self.base_max_hp,
            "base_defense": self.base_defense,
            "base_power": self.base_power,
            "xp": self.xp,
            "on_death": self.on_death.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Fighter":
        return cls(
            hp=int(data["hp"]),
            base_max_hp=int(data["base_max_hp"]),
            base_defense=int(data["base_defense"]),
            base_power=int(data["base_power"]),
            xp=int(data["xp"]),
            on_death=DeathCallback(data["on_death"]),
        )


@dataclass
class Equipment:
    slot: Slot
    equipped: bool = False
    power_bonus: int = 0
    defense_bonus: int = 0
    max_hp_bonus: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slot": self.slot.value,
            "equipped": self.equipped,
            "power_bonus": self.power_bonus,
            "defense_bonus": self.defense_bonus,
            "max_hp_bonus": self.max_hp_bonus,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Equipment":
        return cls(
            slot=Slot(data["slot"]),
            equipped=bool(data.get("equipped", False)),
            power_bonus=int(data.get("power_bonus", 0)),
            defense_bonus=int(data.get("defense_bonus", 0)),
            max_hp_bonus=int(data.get("max_hp_bonus", 0)),
        )


@dataclass
class BasicAi:
    def to_dict(self) -> Dict[str, Any]:
        return {"type": "basic"}


@dataclass
class ConfusedAi:
    previous_ai: "Ai"
    num_turns: int

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "confused", "num_turns": self.num_turns, "previous_ai": self.previous_ai.to_dict()}


Ai = Union[BasicAi, ConfusedAi]


def ai_from_dict(data: Dict[str, Any]) -> Ai:
    kind = data.get("type")
    if kind == "basic":
        return BasicAi()
    if kind == "confused":
        return ConfusedAi(previous_ai=ai_from_dict(data["previous_ai"]), num_turns=int(data["num_turns"]))
    raise ValueError(f"unknown ai type: {kind!r}")


@dataclass
class Entity:
    x: int
    y: int
    glyph: str
    name: str
    color: Color = WHITE
    blocks: bool = False
    alive: bool = False
    always_visible: bool = False
    level: int = 1
    fighter: Optional[Fighter] = None
    ai: Optional[Ai] = None
    item: Optional[ItemKind] = None
    equipment: Optional[Equipment] = None

    def pos(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def set_pos(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def distance_to(self, other: "Entity") -> float:
        return self.distance(other.x, other.y)

    def distance(self, x: int, y: int) -> float:
        return math.sqrt((x - self.x) ** 2 + (y - self.y) ** 2)

    @property
    def is_player(self) -> bool:
        # The player is the only entity whose death uses the PLAYER procedure.
        return self.fighter is not None and self.fighter.on_death is DeathCallback.PLAYER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "glyph": self.glyph,
            "name": self.name,
            "color": list(self.color),
            "blocks": self.blocks,
            "alive": self.alive,
            "always_visible": self.always_visible,
            "level": self.level,
            "fighter": self.fighter.to_dict() if self.fighter else None,
            "ai": self.ai.to_dict() if self.ai else None,
            "item": self.item.value if self.item else None,
            "equipment": self.equipment.to_dict() if self.equipment else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entity":
        return cls(
            x=int(data["x"]),
            y=int(data["y"]),
            glyph=data["glyph"],
            name=data["name"],
            color=as_color(data["color"]),
            blocks=bool(data["blocks"]),
            alive=bool(data["alive"]),
            always_visible=bool(data["always_visible"]),
            level=int(data.get("level", 1)),
            fighter=Fighter.from_dict(data["fighter"]) if data.get("fighter") else None,
            ai=ai_from_dict(data["ai"]) if data.get("ai") else None,
            item=ItemKind(data["item"]) if data.get("item") else None,
            equipment=Equipment.from_dict(data["equipment"]) if data.get("equipment") else None,
        )


__all__ = [
    "Ai",
    "BasicAi",
    "ConfusedAi",
    "DeathCallback",
    "Entity",
    "Equipment",
    "Fighter",
    "ItemKind",
    "Slot",
    "ai_from_dict",
]
