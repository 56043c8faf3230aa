"""Monster decision making, one evaluation per monster per turn.

The AI state is taken off the monster for the duration of its turn and the
state returned by the behaviour is stored back afterwards, so a confused
monster can hand control back to the AI it was wrapping.
"""

from __future__ import annotations

import math
import random
from typing import Optional

from delve.logging_utils import get_logger
from delve.models import colors
from delve.models.entities import Ai, BasicAi, ConfusedAi
from delve.models.game import GameState
from delve.models.store import PLAYER, EntityStore

from . import combat_service

log = get_logger("ai")


def _round_half_away(value: float) -> int:
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def move_by(store: EntityStore, index: int, dx: int, dy: int, game_map) -> bool:
    """Shift entity ``index`` by (dx, dy) unless the target cell is blocked."""
    entity = store[index]
    x, y = entity.x + dx, entity.y + dy
    if store.is_blocked(x, y, game_map):
        return False
    entity.set_pos(x, y)
    return True


def move_towards(store: EntityStore, index: int, target_x: int, target_y: int, game_map) -> bool:
    """Take one step along the normalised vector towards the target."""
    entity = store[index]
    dx = target_x - entity.x
    dy = target_y - entity.y
    distance = math.sqrt(dx ** 2 + dy ** 2)
    if distance == 0:
        return False
    step_x = _round_half_away(dx / distance)
    step_y = _round_half_away(dy / distance)
    return move_by(store, index, step_x, step_y, game_map)


def ai_basic(monster_id: int, store: EntityStore, game: GameState, oracle) -> Ai:
    monster = store[monster_id]
    if oracle.is_in_fov(monster.x, monster.y):
        player = store[PLAYER]
        if monster.distance_to(player) >= 2:
            move_towards(store, monster_id, player.x, player.y, game.map)
        elif player.alive and player.fighter is not None and player.fighter.hp > 0:
            attacker, target = store.pair(monster_id, PLAYER)
            combat_service.attack(attacker, target, game)
    return BasicAi()


def ai_confused(monster_id: int, store: EntityStore, game: GameState, previous_ai: Ai, num_turns: int, rng=None) -> Ai:
    rng = rng or random
    if num_turns >= 0:
        move_by(store, monster_id, rng.randint(-1, 1), rng.randint(-1, 1), game.map)
        return ConfusedAi(previous_ai=previous_ai, num_turns=num_turns - 1)
    game.log.add(f"The {store[monster_id].name} is no longer confused!", colors.RED)
    return previous_ai


def ai_take_turn(monster_id: int, store: EntityStore, game: GameState, oracle, rng=None) -> None:
    monster = store[monster_id]
    current: Optional[Ai] = monster.ai
    if current is None:
        return
    monster.ai = None
    if isinstance(current, BasicAi):
        new_ai = ai_basic(monster_id, store, game, oracle)
    elif isinstance(current, ConfusedAi):
        new_ai = ai_confused(monster_id, store, game, current.previous_ai, current.num_turns, rng)
    else:  # pragma: no cover - Ai is a closed union
        raise TypeError(f"unsupported ai state: {current!r}")
    # A monster killed during its own turn keeps no ai.
    if store[monster_id].fighter is not None:
        store[monster_id].ai = new_ai


__all__ = ["ai_basic", "ai_confused", "ai_take_turn", "move_by", "move_towards"]
