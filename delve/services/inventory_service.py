"""Inventory, equipment and consumable items.

Conventions:
  * Inventory positions are plain list indices into ``game.inventory``.
  * Every user-facing outcome (success, refusal, cancellation) is reported via
    the message log; nothing here raises for bad player input.
  * ``use_item`` dispatches on the item tag and applies the ``UseResult``:
    USED_UP removes the item, CANCELLED logs "Cancelled", USED_AND_KEPT leaves
    the inventory alone.

At most one equipped item per slot is an invariant, enforced with an assertion
after every equip.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from delve.logging_utils import get_logger
from delve.models import colors
from delve.models.entities import BasicAi, ConfusedAi, Entity, ItemKind, Slot
from delve.models.game import INVENTORY_CAPACITY, GameState
from delve.models.store import PLAYER, EntityStore

from . import combat_service, targeting

log = get_logger("inventory")

HEAL_AMOUNT = 40
LIGHTNING_DAMAGE = 40
LIGHTNING_RANGE = 5
CONFUSE_RANGE = 8
CONFUSE_NUM_TURNS = 10
FIREBALL_RADIUS = 3
FIREBALL_DAMAGE = 25


class UseResult(str, Enum):
    USED_UP = "used_up"
    USED_AND_KEPT = "used_and_kept"
    CANCELLED = "cancelled"


# ---------------------------------------------------------------------------
# Equipment
# ---------------------------------------------------------------------------
def get_equipped_in_slot(slot: Slot, game: GameState) -> Optional[int]:
    for index, item in enumerate(game.inventory):
        if item.equipment is not None and item.equipment.equipped and item.equipment.slot == slot:
            return index
    return None


def _assert_slot_exclusive(slot: Slot, game: GameState) -> None:
    worn = [i for i in game.inventory if i.equipment and i.equipment.equipped and i.equipment.slot == slot]
    assert len(worn) <= 1, f"more than one item equipped in {slot.value}"


def equip(item: Entity, game: GameState) -> bool:
    if item.item is None:
        game.log.add(f"Can't equip {item.name} because it's not an Item.", colors.RED)
        return False
    if item.equipment is None:
        game.log.add(f"Can't equip {item.name} because it's not an Equipment.", colors.RED)
        return False
    if item.equipment.equipped:
        return False
    item.equipment.equipped = True
    game.log.add(f"Equipped {item.name} on {item.equipment.slot.value}.", colors.LIGHT_GREEN)
    _assert_slot_exclusive(item.equipment.slot, game)
    return True


def dequip(item: Entity, game: GameState) -> bool:
    if item.item is None:
        game.log.add(f"Can't dequip {item.name} because it's not an Item.", colors.RED)
        return False
    if item.equipment is None:
        game.log.add(f"Can't dequip {item.name} because it's not an Equipment.", colors.RED)
        return False
    if not item.equipment.equipped:
        return False
    item.equipment.equipped = False
    game.log.add(f"Dequipped {item.name} from {item.equipment.slot.value}.", colors.LIGHT_YELLOW)
    return True


def toggle_equipment(inventory_id: int, store: EntityStore, game: GameState, frontend=None) -> UseResult:
    item = game.inventory[inventory_id]
    if item.equipment is None:
        return UseResult.CANCELLED
    if item.equipment.equipped:
        dequip(item, game)
    else:
        current = get_equipped_in_slot(item.equipment.slot, game)
        if current is not None:
            dequip(game.inventory[current], game)
        equip(item, game)
    return UseResult.USED_AND_KEPT


# ---------------------------------------------------------------------------
# Pick up / drop
# ---------------------------------------------------------------------------
def pick_item_up(object_id: int, store: EntityStore, game: GameState) -> bool:
    """Move the item at store index ``object_id`` into the inventory.

    Wearables are equipped straight away when their slot is free.
    """
    if len(game.inventory) >= INVENTORY_CAPACITY:
        game.log.add(f"Your inventory is full, cannot pick up {store[object_id].name}.", colors.RED)
        return False
    item = store.remove(object_id)
    game.log.add(f"You picked up a {item.name}!", colors.GREEN)
    game.inventory.append(item)
    if item.equipment is not None and get_equipped_in_slot(item.equipment.slot, game) is None:
        equip(item, game)
    log.debug(event="pick_up", item=item.name, inventory=len(game.inventory))
    return True


def drop_item(inventory_id: int, store: EntityStore, game: GameState) -> Entity:
    item = game.inventory.pop(inventory_id)
    if item.equipment is not None and item.equipment.equipped:
        dequip(item, game)
    player = store[PLAYER]
    item.set_pos(player.x, player.y)
    store.append(item)
    game.log.add(f"You dropped a {item.name}.", colors.YELLOW)
    log.debug(event="drop", item=item.name, inventory=len(game.inventory))
    return item


# ---------------------------------------------------------------------------
# Consumables
# ---------------------------------------------------------------------------
def cast_heal(inventory_id: int, store: EntityStore, game: GameState, frontend=None) -> UseResult:
    player = store[PLAYER]
    if player.fighter is None:
        return UseResult.CANCELLED
    if player.fighter.hp == combat_service.max_hp(player, game):
        game.log.add("You are already at full health.", colors.RED)
        return UseResult.CANCELLED
    game.log.add("Your wounds start to feel better!", colors.LIGHT_VIOLET)
    combat_service.heal(player, HEAL_AMOUNT, game)
    return UseResult.USED_UP


def cast_lightning(inventory_id: int, store: EntityStore, game: GameState, frontend=None) -> UseResult:
    monster_id = targeting.closest_monster(store, frontend.visibility, LIGHTNING_RANGE)
    if monster_id is None:
        game.log.add("No enemy is close enough to strike.", colors.RED)
        return UseResult.CANCELLED
    monster = store[monster_id]
    game.log.add(
        f"A lightning bolt strikes the {monster.name} with a loud thunder! "
        f"The damage is {LIGHTNING_DAMAGE} hit points.",
        colors.LIGHT_BLUE,
    )
    xp = combat_service.take_damage(monster, LIGHTNING_DAMAGE, game)
    if xp is not None:
        store[PLAYER].fighter.xp += xp
    return UseResult.USED_UP


def cast_confuse(inventory_id: int, store: EntityStore, game: GameState, frontend=None) -> UseResult:
    game.log.add("Left-click an enemy to confuse it, or right-click to cancel.", colors.LIGHT_CYAN)
    monster_id = targeting.target_monster(store, game, frontend, CONFUSE_RANGE)
    if monster_id is None:
        game.log.add("No enemy is close enough to strike.", colors.RED)
        return UseResult.CANCELLED
    monster = store[monster_id]
    # An already confused monster gets wrapped again; the turns do not stack.
    previous = monster.ai if monster.ai is not None else BasicAi()
    monster.ai = ConfusedAi(previous_ai=previous, num_turns=CONFUSE_NUM_TURNS)
    game.log.add(
        f"The eyes of {monster.name} look vacant, as it starts to stumble around!",
        colors.LIGHT_GREEN,
    )
    return UseResult.USED_UP


def cast_fireball(inventory_id: int, store: EntityStore, game: GameState, frontend=None) -> UseResult:
    game.log.add("Left-click a target tile for the fireball, or right-click to cancel.", colors.LIGHT_CYAN)
    picked = targeting.target_tile(store, game, frontend, None)
    if picked is None:
        return UseResult.CANCELLED
    x, y = picked
    game.log.add(f"The fireball explodes, burning everything within {FIREBALL_RADIUS} tiles!", colors.ORANGE)
    xp_to_gain = 0
    for index, entity in enumerate(store):
        if entity.fighter is None or entity.distance(x, y) > FIREBALL_RADIUS:
            continue
        game.log.add(f"The {entity.name} gets burned for {FIREBALL_DAMAGE} hit points.", colors.ORANGE)
        xp = combat_service.take_damage(entity, FIREBALL_DAMAGE, game)
        if xp is not None and index != PLAYER:
            xp_to_gain += xp
    store[PLAYER].fighter.xp += xp_to_gain
    return UseResult.USED_UP


_ON_USE = {
    ItemKind.HEAL: cast_heal,
    ItemKind.LIGHTNING: cast_lightning,
    ItemKind.CONFUSE: cast_confuse,
    ItemKind.FIREBALL: cast_fireball,
    ItemKind.SWORD: toggle_equipment,
    ItemKind.SHIELD: toggle_equipment,
}


def use_item(inventory_id: int, store: EntityStore, game: GameState, frontend=None) -> Optional[UseResult]:
    item = game.inventory[inventory_id]
    if item.item is None:
        game.log.add(f"The {item.name} cannot be used.", colors.WHITE)
        return None
    on_use = _ON_USE[item.item]
    result = on_use(inventory_id, store, game, frontend)
    if result is UseResult.USED_UP:
        game.inventory.pop(inventory_id)
    elif result is UseResult.CANCELLED:
        game.log.add("Cancelled", colors.WHITE)
    log.info(event="use_item", item=item.name, result=result.value)
    return result


__all__ = [
    "CONFUSE_NUM_TURNS",
    "CONFUSE_RANGE",
    "FIREBALL_DAMAGE",
    "FIREBALL_RADIUS",
    "HEAL_AMOUNT",
    "LIGHTNING_DAMAGE",
    "LIGHTNING_RANGE",
    "UseResult",
    "cast_confuse",
    "cast_fireball",
    "cast_heal",
    "cast_lightning",
    "drop_item",
    "dequip",
    "equip",
    "get_equipped_in_slot",
    "pick_item_up",
    "toggle_equipment",
    "use_item",
]
