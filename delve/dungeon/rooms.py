import random
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .config import DungeonConfig


@dataclass
class Rect:
    """Room bounding box. ``x2``/``y2`` are the far wall, so the carved interior
    is ``x1+1 .. x2-1`` by ``y1+1 .. y2-1``."""

    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_size(cls, x: int, y: int, w: int, h: int) -> "Rect":
        return cls(x, y, x + w, y + h)

    @property
    def center(self) -> Tuple[int, int]:
        return ((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)

    def intersects(self, other: "Rect") -> bool:
        # Inclusive: rooms sharing a wall line count as overlapping
        return self.x1 <= other.x2 and self.x2 >= other.x1 and self.y1 <= other.y2 and self.y2 >= other.y1

    def cells(self) -> Iterator[Tuple[int, int]]:
        """Interior (carved) cells."""
        for ix in range(self.x1 + 1, self.x2):
            for iy in range(self.y1 + 1, self.y2):
                yield ix, iy


def random_room(config: DungeonConfig, rng=None) -> Rect:
    """Roll one candidate room fully inside the map."""
    if rng is None:
        rng = random
    w = rng.randint(config.room_min_size, config.room_max_size)
    h = rng.randint(config.room_min_size, config.room_max_size)
    x = rng.randint(0, config.width - w - 1)
    y = rng.randint(0, config.height - h - 1)
    return Rect.from_size(x, y, w, h)


def overlaps_any(room: Rect, existing: List[Rect]) -> Optional[Rect]:
    for other in existing:
        if room.intersects(other):
            return other
    return None


def carve_room(game_map, room: Rect) -> None:
    for ix, iy in room.cells():
        game_map.carve(ix, iy)


__all__ = ["Rect", "random_room", "overlaps_any", "carve_room"]
