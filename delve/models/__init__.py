# Model package init
from .entities import (  # noqa: F401 re-export
    Ai,
    BasicAi,
    ConfusedAi,
    DeathCallback,
    Entity,
    Equipment,
    Fighter,
    ItemKind,
    Slot,
)
from .game import INVENTORY_CAPACITY, GameState  # noqa: F401
from .messages import MessageLog  # noqa: F401
from .store import PLAYER, EntityStore  # noqa: F401

__all__ = [
    "Ai",
    "BasicAi",
    "ConfusedAi",
    "DeathCallback",
    "Entity",
    "EntityStore",
    "Equipment",
    "Fighter",
    "GameState",
    "INVENTORY_CAPACITY",
    "ItemKind",
    "MessageLog",
    "PLAYER",
    "Slot",
]
