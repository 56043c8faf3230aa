from dataclasses import dataclass
from typing import Optional


@dataclass
class DungeonConfig:
    width: int = 80
    height: int = 43
    room_min_size: int = 6
    room_max_size: int = 10
    max_rooms: int = 30
    seed: Optional[int] = None


__all__ = ["DungeonConfig"]
