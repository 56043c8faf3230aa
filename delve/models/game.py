"""Aggregate world state for one session (everything except the entity store)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from delve.dungeon.tiles import GameMap

from .entities import Entity
from .messages import MessageLog

INVENTORY_CAPACITY = 26


@dataclass
class GameState:
    """Map, message log, carried items and current depth.

    Attributes:
        map: Current level; replaced on every descent.
        log: Append-only message log.
        inventory: Items carried by the player (at most ``INVENTORY_CAPACITY``).
        dungeon_level: 1-based depth.
    """

    map: GameMap
    log: MessageLog = field(default_factory=MessageLog)
    inventory: List[Entity] = field(default_factory=list)
    dungeon_level: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "map": self.map.to_dict(),
            "log": self.log.to_list(),
            "inventory": [item.to_dict() for item in self.inventory],
            "dungeon_level": self.dungeon_level,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameState":
        return cls(
            map=GameMap.from_dict(data["map"]),
            log=MessageLog.from_list(data.get("log") or []),
            inventory=[Entity.from_dict(row) for row in data.get("inventory") or []],
            dungeon_level=int(data["dungeon_level"]),
        )


__all__ = ["GameState", "INVENTORY_CAPACITY"]
