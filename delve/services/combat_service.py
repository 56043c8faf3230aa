"""Combat and progression rules.

Responsibilities:
    * Effective stats (base + bonuses from equipment the player is wearing).
    * Melee resolution (``attack``) and damage application (``take_damage``).
    * The two death procedures, selected by the fighter's ``on_death`` tag.
    * Healing and level-up arithmetic, including the blocking stat choice.

Design notes:
    - ``take_damage`` returns the victim's xp when the hit killed it; crediting
      that xp is the caller's job. Melee credits the attacker, spells credit the
      player explicitly.
    - Only the player's inventory is consulted for equipment bonuses; monsters
      never receive any.
"""

from __future__ import annotations

from typing import List, Optional

from delve.logging_utils import get_logger
from delve.models import colors
from delve.models.catalog import CORPSE_GLYPH
from delve.models.entities import DeathCallback, Entity, Equipment
from delve.models.game import GameState

log = get_logger("combat")

LEVEL_UP_BASE = 200
LEVEL_UP_FACTOR = 150
LEVEL_SCREEN_WIDTH = 40

# Menu order matters: the chosen index selects the stat.
CONSTITUTION, STRENGTH, AGILITY = 0, 1, 2
CONSTITUTION_BONUS = 20


# ---------------------------------------------------------------------------
# Effective stats
# ---------------------------------------------------------------------------
def get_all_equipped(entity: Entity, game: GameState) -> List[Equipment]:
    if not entity.is_player:
        return []
    return [item.equipment for item in game.inventory if item.equipment is not None and item.equipment.equipped]


def max_hp(entity: Entity, game: GameState) -> int:
    base = entity.fighter.base_max_hp if entity.fighter else 0
    return base + sum(e.max_hp_bonus for e in get_all_equipped(entity, game))


def power(entity: Entity, game: GameState) -> int:
    base = entity.fighter.base_power if entity.fighter else 0
    return base + sum(e.power_bonus for e in get_all_equipped(entity, game))


def defense(entity: Entity, game: GameState) -> int:
    base = entity.fighter.base_defense if entity.fighter else 0
    return base + sum(e.defense_bonus for e in get_all_equipped(entity, game))


# ---------------------------------------------------------------------------
# Death
# ---------------------------------------------------------------------------
def player_death(player: Entity, game: GameState) -> None:
    game.log.add("You died!", colors.DARK_RED)
    player.glyph = CORPSE_GLYPH
    player.color = colors.DARK_RED


def monster_death(monster: Entity, game: GameState) -> None:
    game.log.add(
        f"{monster.name} is dead! You gain {monster.fighter.xp} experience points.",
        colors.ORANGE,
    )
    monster.glyph = CORPSE_GLYPH
    monster.color = colors.DARK_RED
    monster.blocks = False
    monster.fighter = None
    monster.ai = None
    monster.name = f"remains of {monster.name}"


def _on_death(entity: Entity, game: GameState) -> None:
    tag = entity.fighter.on_death
    if tag is DeathCallback.PLAYER:
        player_death(entity, game)
    elif tag is DeathCallback.MONSTER:
        monster_death(entity, game)
    else:  # pragma: no cover - enum is closed
        raise ValueError(f"unknown death callback {tag!r}")


# ---------------------------------------------------------------------------
# Damage & melee
# ---------------------------------------------------------------------------
def take_damage(entity: Entity, damage: int, game: GameState) -> Optional[int]:
    """Apply ``damage`` to ``entity``; return its xp value if this killed it.

    Non-positive amounts change nothing. The death procedure runs at most once:
    an entity that is already dead is never killed again.
    """
    fighter = entity.fighter
    if fighter is None:
        return None
    if damage > 0:
        fighter.hp -= damage
    if fighter.hp <= 0 and entity.alive:
        entity.alive = False
        xp = fighter.xp
        log.info(event="death", name=entity.name, on_death=fighter.on_death.value, xp=xp)
        _on_death(entity, game)
        return xp
    return None


def attack(attacker: Entity, target: Entity, game: GameState) -> int:
    """Melee ``target``; returns the damage dealt (0 when it had no effect)."""
    damage = power(attacker, game) - defense(target, game)
    if damage > 0:
        game.log.add(
            f"{attacker.name} attacks {target.name} for {damage} hit points.",
            colors.DESATURATED_FUCHSIA,
        )
        xp = take_damage(target, damage, game)
        if xp is not None and attacker.fighter is not None:
            attacker.fighter.xp += xp
        log.debug(event="attack", attacker=attacker.name, target=target.name, damage=damage)
        return damage
    game.log.add(
        f"{attacker.name} attacks {target.name} but it has no effect!",
        colors.DESATURATED_FUCHSIA,
    )
    return 0


def heal(entity: Entity, amount: int, game: GameState) -> None:
    """Restore hp, never above the effective maximum."""
    if entity.fighter is None:
        return
    cap = max_hp(entity, game)
    entity.fighter.hp = min(entity.fighter.hp + amount, cap)


# ---------------------------------------------------------------------------
# Progression
# ---------------------------------------------------------------------------
def level_up_xp(level: int) -> int:
    """XP needed to advance from ``level`` to ``level + 1``."""
    return LEVEL_UP_BASE + level * LEVEL_UP_FACTOR


def can_level_up(player: Entity) -> bool:
    return player.fighter is not None and player.fighter.xp >= level_up_xp(player.level)


def level_up_options(player: Entity, game: GameState) -> List[str]:
    fighter = player.fighter
    return [
        f"Constitution (+{CONSTITUTION_BONUS} HP, from {fighter.base_max_hp})",
        f"Strength (+1 attack, from {fighter.base_power})",
        f"Agility (+1 defense, from {fighter.base_defense})",
    ]


def apply_level_up(player: Entity, choice: int, game: GameState) -> None:
    """Spend one level threshold of xp and apply exactly one stat increase.

    Surplus xp carries over; it is not reset to zero.
    """
    if choice not in (CONSTITUTION, STRENGTH, AGILITY):
        raise ValueError(f"invalid level-up choice: {choice}")
    fighter = player.fighter
    threshold = level_up_xp(player.level)
    assert fighter.xp >= threshold, "level up requested without enough experience"
    fighter.xp -= threshold
    player.level += 1
    if choice == CONSTITUTION:
        fighter.base_max_hp += CONSTITUTION_BONUS
        fighter.hp += CONSTITUTION_BONUS
    elif choice == STRENGTH:
        fighter.base_power += 1
    else:
        fighter.base_defense += 1
    log.info(event="level_up", new_level=player.level, choice=choice, xp_left=fighter.xp)


def check_level_up(player: Entity, game: GameState, frontend) -> bool:
    """Level the player up if enough xp has accumulated.

    Blocks on ``frontend.menu`` until a stat is picked; there is no way to
    cancel short of closing the frontend. Returns True when a level was gained.
    """
    if not can_level_up(player):
        return False
    game.log.add(
        f"Your battle skills grow stronger! You reached level {player.level + 1}!",
        colors.YELLOW,
    )
    choice = None
    while choice is None:
        if frontend.closed:
            return False
        choice = frontend.menu(
            "Level up! Choose a stat to raise:\n",
            level_up_options(player, game),
            LEVEL_SCREEN_WIDTH,
        )
        if choice not in (CONSTITUTION, STRENGTH, AGILITY):
            choice = None
    apply_level_up(player, choice, game)
    return True


__all__ = [
    "AGILITY",
    "CONSTITUTION",
    "LEVEL_UP_BASE",
    "LEVEL_UP_FACTOR",
    "STRENGTH",
    "apply_level_up",
    "attack",
    "can_level_up",
    "check_level_up",
    "defense",
    "get_all_equipped",
    "heal",
    "level_up_options",
    "level_up_xp",
    "max_hp",
    "monster_death",
    "player_death",
    "power",
    "take_damage",
]
