"""Map and tile model.

``GameMap.tiles`` is column-major (``tiles[x][y]``) to match the coordinate
order used everywhere else in the engine. Only ``Tile.explored`` changes after
generation; the visibility pass sets it and nothing ever clears it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Tuple

from delve.utils.tile_compress import compress_tiles, coords_to_raw, decompress_tiles, raw_to_coords

# Terrain characters used by the save format: (blocked, block_sight) -> char
_TERRAIN_CHARS = {
    (True, True): "#",
    (False, False): ".",
    (True, False): "+",
    (False, True): '"',
}
_CHAR_TERRAIN = {v: k for k, v in _TERRAIN_CHARS.items()}


@dataclass
class Tile:
    blocked: bool
    block_sight: bool
    explored: bool = False

    @classmethod
    def empty(cls) -> "Tile":
        return cls(blocked=False, block_sight=False)

    @classmethod
    def wall(cls) -> "Tile":
        return cls(blocked=True, block_sight=True)


class GameMap:
    """Fixed-size grid of tiles, initially solid rock."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.tiles: List[List[Tile]] = [[Tile.wall() for _ in range(height)] for _ in range(width)]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_blocked(self, x: int, y: int) -> bool:
        """Terrain-only check; out-of-bounds counts as blocked."""
        if not self.in_bounds(x, y):
            return True
        return self.tiles[x][y].blocked

    def carve(self, x: int, y: int) -> None:
        self.tiles[x][y] = Tile.empty()

    def cells(self) -> Iterator[Tuple[int, int, Tile]]:
        for x in range(self.width):
            for y in range(self.height):
                yield x, y, self.tiles[x][y]

    def explored_coords(self) -> List[Tuple[int, int]]:
        return [(x, y) for x, y, t in self.cells() if t.explored]

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        rows = []
        for y in range(self.height):
            rows.append("".join(_TERRAIN_CHARS[(self.tiles[x][y].blocked, self.tiles[x][y].block_sight)] for x in range(self.width)))
        return {
            "width": self.width,
            "height": self.height,
            "terrain": rows,
            "explored": compress_tiles(coords_to_raw(self.explored_coords())),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameMap":
        game_map = cls(int(data["width"]), int(data["height"]))
        rows = data["terrain"]
        if len(rows) != game_map.height:
            raise ValueError(f"terrain has {len(rows)} rows, expected {game_map.height}")
        for y, row in enumerate(rows):
            if len(row) != game_map.width:
                raise ValueError(f"terrain row {y} has {len(row)} columns, expected {game_map.width}")
            for x, ch in enumerate(row):
                blocked, block_sight = _CHAR_TERRAIN[ch]
                game_map.tiles[x][y] = Tile(blocked=blocked, block_sight=block_sight)
        for x, y in raw_to_coords(decompress_tiles(data.get("explored") or "")):
            game_map.tiles[x][y].explored = True
        return game_map

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameMap):
            return NotImplemented
        return self.width == other.width and self.height == other.height and self.tiles == other.tiles

    def __repr__(self) -> str:
        return f"<GameMap {self.width}x{self.height}>"


__all__ = ["Tile", "GameMap"]
