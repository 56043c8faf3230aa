"""Field-of-view oracle backed by ``tcod.map.compute_fov``.

Transparency is a numpy bool array indexed ``[x, y]`` rebuilt from the game map
on ``reset``; the last computed visibility array is kept for ``is_in_fov``.
"""

from __future__ import annotations

import numpy as np
import tcod.constants
from tcod.map import compute_fov

from delve.dungeon.tiles import GameMap

ALGORITHMS = {
    "basic": tcod.constants.FOV_BASIC,
    "diamond": tcod.constants.FOV_DIAMOND,
    "shadow": tcod.constants.FOV_SHADOW,
    "permissive": tcod.constants.FOV_PERMISSIVE_8,
    "restrictive": tcod.constants.FOV_RESTRICTIVE,
    "symmetric_shadowcast": tcod.constants.FOV_SYMMETRIC_SHADOWCAST,
}


class TcodVisibility:
    def __init__(self, game_map: GameMap | None = None):
        self.transparent = np.zeros((0, 0), dtype=bool)
        self.visible = np.zeros((0, 0), dtype=bool)
        if game_map is not None:
            self.reset(game_map)

    def reset(self, game_map: GameMap) -> None:
        transparent = np.zeros((game_map.width, game_map.height), dtype=bool)
        for x, y, tile in game_map.cells():
            transparent[x, y] = not tile.block_sight
        self.transparent = transparent
        self.visible = np.zeros_like(transparent)

    def compute_fov(self, x: int, y: int, radius: int, light_walls: bool, algorithm: str) -> None:
        if algorithm not in ALGORITHMS:
            raise ValueError(f"unknown fov algorithm: {algorithm!r}")
        self.visible = compute_fov(
            self.transparent,
            (x, y),
            radius=radius,
            light_walls=light_walls,
            algorithm=ALGORITHMS[algorithm],
        )

    def is_in_fov(self, x: int, y: int) -> bool:
        width, height = self.visible.shape
        if not (0 <= x < width and 0 <= y < height):
            return False
        return bool(self.visible[x, y])


__all__ = ["ALGORITHMS", "TcodVisibility"]
