"""Public dungeon package interface."""

from .config import DungeonConfig
from .generator import LevelOutputs, generate_level, make_map
from .rooms import Rect
from .tiles import GameMap, Tile

__all__ = [
    "DungeonConfig",
    "GameMap",
    "LevelOutputs",
    "Rect",
    "Tile",
    "generate_level",
    "make_map",
]
