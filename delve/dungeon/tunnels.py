import random
from typing import Tuple


def create_h_tunnel(game_map, x1: int, x2: int, y: int) -> None:
    for x in range(min(x1, x2), max(x1, x2) + 1):
        game_map.carve(x, y)


def create_v_tunnel(game_map, y1: int, y2: int, x: int) -> None:
    for y in range(min(y1, y2), max(y1, y2) + 1):
        game_map.carve(x, y)


def carve_tunnel_between(game_map, a: Tuple[int, int], b: Tuple[int, int], rng=None) -> bool:
    """L-shaped corridor from room center ``a`` to room center ``b``.

    The leg order (horizontal-then-vertical or vertical-then-horizontal) is a
    coin flip per connection. Returns True when the horizontal leg went first.
    """
    if rng is None:
        rng = random
    (prev_x, prev_y) = a
    (new_x, new_y) = b
    horizontal_first = rng.random() < 0.5
    if horizontal_first:
        create_h_tunnel(game_map, prev_x, new_x, prev_y)
        create_v_tunnel(game_map, prev_y, new_y, new_x)
    else:
        create_v_tunnel(game_map, prev_y, new_y, prev_x)
        create_h_tunnel(game_map, prev_x, new_x, new_y)
    return horizontal_first


__all__ = ["create_h_tunnel", "create_v_tunnel", "carve_tunnel_between"]
