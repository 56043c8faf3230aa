"""Turn orchestration and session lifecycle.

One ``step`` is one iteration of the game loop:

    poll command -> recompute FOV if the player moved -> render ->
    resolve level-up -> clear old glyphs -> interpret command ->
    (if a turn was taken and the player lives) every AI acts once, in store order

``play_game`` repeats steps until the player exits (which saves) or the
frontend closes. ``main_menu`` wraps it with new/continue/quit.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from delve.dungeon.config import DungeonConfig
from delve.dungeon.generator import make_map
from delve.interfaces import FOV_ALGO, FOV_LIGHT_WALLS, TORCH_RADIUS, Command, CommandKind
from delve.logging_utils import get_logger
from delve.models import colors
from delve.models.catalog import STAIRS_NAME, make_item, make_player
from delve.models.game import GameState
from delve.models.messages import MessageLog
from delve.models.save import DEFAULT_SLOT, DelveError, SaveNotFoundError
from delve.models.store import PLAYER, EntityStore

from . import combat_service, inventory_service, monster_ai, render_service, save_service

log = get_logger("turn")

INVENTORY_WIDTH = 50
CHARACTER_SCREEN_WIDTH = 30
MAIN_MENU_WIDTH = 24
MAIN_MENU_TITLE = "TOMBS OF THE ANCIENT KINGS\nBy Yours Truly\n"
MAIN_MENU_OPTIONS = ["Play a new game", "Continue last game", "Quit"]


class PlayerAction(str, Enum):
    TOOK_TURN = "took_turn"
    DIDNT_TAKE_TURN = "didnt_take_turn"
    EXIT = "exit"


@dataclass
class Session:
    """Everything one running game needs between steps."""

    store: EntityStore
    game: GameState
    frontend: object
    config: DungeonConfig = field(default_factory=DungeonConfig)
    rng: random.Random = field(default_factory=random.Random)
    # None forces a FOV recompute on the next step.
    previous_pos: Optional[Tuple[int, int]] = None

    @property
    def player(self):
        return self.store[PLAYER]


# ---------------------------------------------------------------------------
# Field of view
# ---------------------------------------------------------------------------
def initialise_fov(session: Session) -> None:
    session.frontend.visibility.reset(session.game.map)
    session.previous_pos = None


def recompute_fov(store: EntityStore, game: GameState, oracle) -> int:
    """Recompute FOV around the player and mark visible tiles explored.

    Returns how many tiles became explored.
    """
    player = store[PLAYER]
    oracle.compute_fov(player.x, player.y, TORCH_RADIUS, FOV_LIGHT_WALLS, FOV_ALGO)
    newly = 0
    for x, y, tile in game.map.cells():
        if not tile.explored and oracle.is_in_fov(x, y):
            tile.explored = True
            newly += 1
    return newly


# ---------------------------------------------------------------------------
# Player actions
# ---------------------------------------------------------------------------
def player_move_or_attack(dx: int, dy: int, store: EntityStore, game: GameState) -> None:
    player = store[PLAYER]
    x, y = player.x + dx, player.y + dy
    target_id = store.fighter_at(x, y)
    if target_id is not None:
        attacker, target = store.pair(PLAYER, target_id)
        combat_service.attack(attacker, target, game)
    else:
        monster_ai.move_by(store, PLAYER, dx, dy, game.map)


def inventory_menu(game: GameState, header: str, frontend) -> Optional[int]:
    if not game.inventory:
        frontend.menu(header, ["Inventory is empty."], INVENTORY_WIDTH)
        return None
    options = []
    for item in game.inventory:
        text = item.name
        if item.equipment is not None and item.equipment.equipped:
            text = f"{text} (on {item.equipment.slot.value})"
        options.append(text)
    choice = frontend.menu(header, options, INVENTORY_WIDTH)
    if choice is None or not 0 <= choice < len(game.inventory):
        return None
    return choice


def next_level(session: Session) -> None:
    """Rest, then generate the next depth and move the player into it."""
    store, game = session.store, session.game
    player = store[PLAYER]
    game.log.add("You take a moment to rest, and recover your strength.", colors.VIOLET)
    combat_service.heal(player, combat_service.max_hp(player, game) // 2, game)
    game.log.add(
        "After a rare moment of peace, you descend deeper into the heart of the dungeon...",
        colors.RED,
    )
    game.dungeon_level += 1
    game.map = make_map(store, game.dungeon_level, session.config, session.rng)
    initialise_fov(session)
    log.info(event="descend", dungeon_level=game.dungeon_level)


def character_info(store: EntityStore, game: GameState) -> str:
    player = store[PLAYER]
    fighter = player.fighter
    return (
        "Character information\n\n"
        f"Level: {player.level}\n"
        f"Experience: {fighter.xp}\n"
        f"Experience to level up: {combat_service.level_up_xp(player.level)}\n\n"
        f"Maximum HP: {combat_service.max_hp(player, game)}\n"
        f"Attack: {combat_service.power(player, game)}\n"
        f"Defense: {combat_service.defense(player, game)}"
    )


def handle_command(command: Optional[Command], session: Session) -> PlayerAction:
    """Interpret one command. Only moving, attacking and waiting take a turn."""
    if command is None:
        return PlayerAction.DIDNT_TAKE_TURN
    store, game, frontend = session.store, session.game, session.frontend
    player = store[PLAYER]
    kind = command.kind

    if kind is CommandKind.FULLSCREEN:
        frontend.toggle_fullscreen()
        return PlayerAction.DIDNT_TAKE_TURN
    if kind is CommandKind.EXIT:
        return PlayerAction.EXIT
    if not player.alive:
        return PlayerAction.DIDNT_TAKE_TURN

    if kind is CommandKind.MOVE:
        player_move_or_attack(command.dx, command.dy, store, game)
        return PlayerAction.TOOK_TURN
    if kind is CommandKind.WAIT:
        return PlayerAction.TOOK_TURN
    if kind is CommandKind.PICK_UP:
        for index, entity in enumerate(store):
            if index != PLAYER and entity.item is not None and entity.pos() == player.pos():
                inventory_service.pick_item_up(index, store, game)
                break
        return PlayerAction.DIDNT_TAKE_TURN
    if kind is CommandKind.INVENTORY:
        chosen = inventory_menu(
            game, "Press the key next to an item to use it, or any other to cancel.\n", frontend
        )
        if chosen is not None:
            inventory_service.use_item(chosen, store, game, frontend)
        return PlayerAction.DIDNT_TAKE_TURN
    if kind is CommandKind.DROP:
        chosen = inventory_menu(
            game, "Press the key next to an item to drop it, or any other to cancel.\n", frontend
        )
        if chosen is not None:
            inventory_service.drop_item(chosen, store, game)
        return PlayerAction.DIDNT_TAKE_TURN
    if kind is CommandKind.DESCEND:
        if store.named_at(STAIRS_NAME, player.x, player.y) is not None:
            next_level(session)
        else:
            game.log.add("There are no stairs here.", colors.WHITE)
        return PlayerAction.DIDNT_TAKE_TURN
    if kind is CommandKind.CHARACTER:
        frontend.msgbox(character_info(store, game), CHARACTER_SCREEN_WIDTH)
        return PlayerAction.DIDNT_TAKE_TURN
    raise ValueError(f"unhandled command kind: {kind!r}")


def run_monsters(session: Session) -> int:
    """Give every entity with an AI one evaluation; returns how many acted."""
    acted = 0
    oracle = session.frontend.visibility
    for index in session.store.indices():
        if session.store[index].ai is not None:
            monster_ai.ai_take_turn(index, session.store, session.game, oracle, session.rng)
            acted += 1
    return acted


def step(session: Session) -> PlayerAction:
    store, game, frontend = session.store, session.game, session.frontend
    player = store[PLAYER]

    command = frontend.poll_command()
    fov_recompute = session.previous_pos != player.pos()
    if fov_recompute:
        recompute_fov(store, game, frontend.visibility)
    render_service.render(store, game, frontend, fov_recompute)

    combat_service.check_level_up(player, game, frontend)

    frontend.clear(tuple(store))
    session.previous_pos = player.pos()
    action = handle_command(command, session)
    if action is PlayerAction.TOOK_TURN and player.alive:
        run_monsters(session)
    return action


def play_game(session: Session, engine=None, slot: str = DEFAULT_SLOT) -> PlayerAction:
    """Run steps until exit (saving first when an engine is given) or window close."""
    while not session.frontend.closed:
        action = step(session)
        if action is PlayerAction.EXIT:
            if engine is not None:
                save_service.save_game(engine, session.store, session.game, slot)
            return action
    return PlayerAction.DIDNT_TAKE_TURN


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------
def new_game(config: Optional[DungeonConfig] = None, rng: Optional[random.Random] = None) -> Tuple[EntityStore, GameState]:
    """Fresh player on a fresh level 1 with the starting dagger equipped."""
    config = config or DungeonConfig()
    if rng is None:
        rng = random.Random(config.seed)
    store = EntityStore([make_player()])
    game = GameState(map=make_map(store, 1, config, rng), log=MessageLog(), inventory=[], dungeon_level=1)
    dagger = make_item("dagger", 0, 0)
    dagger.equipment.equipped = True
    game.inventory.append(dagger)
    game.log.add("Welcome stranger! Prepare to perish in the Tombs of the Ancient Kings.", colors.RED)
    log.info(event="new_game", seed=config.seed, entities=len(store))
    return store, game


def start_session(
    store: EntityStore,
    game: GameState,
    frontend,
    config: Optional[DungeonConfig] = None,
    rng: Optional[random.Random] = None,
) -> Session:
    config = config or DungeonConfig()
    session = Session(store=store, game=game, frontend=frontend, config=config, rng=rng or random.Random(config.seed))
    initialise_fov(session)
    return session


def main_menu(
    frontend,
    engine,
    config: Optional[DungeonConfig] = None,
    rng: Optional[random.Random] = None,
    slot: str = DEFAULT_SLOT,
) -> List[PlayerAction]:
    """Show the title menu until Quit; returns the outcome of every session played."""
    config = config or DungeonConfig()
    rng = rng or random.Random(config.seed)
    outcomes: List[PlayerAction] = []
    while not frontend.closed:
        choice = frontend.menu(MAIN_MENU_TITLE, MAIN_MENU_OPTIONS, MAIN_MENU_WIDTH)
        if choice == 0:
            store, game = new_game(config, rng)
        elif choice == 1:
            try:
                store, game = save_service.load_game(engine, slot)
            except SaveNotFoundError:
                frontend.msgbox("\nNo saved game to load.\n", MAIN_MENU_WIDTH)
                continue
            except DelveError as exc:
                log.warn(event="load_failed", slot=slot, error=str(exc))
                frontend.msgbox("\nThe saved game could not be loaded.\n", MAIN_MENU_WIDTH)
                continue
        elif choice == 2:
            break
        else:
            continue
        session = start_session(store, game, frontend, config, rng)
        outcomes.append(play_game(session, engine, slot))
    return outcomes


__all__ = [
    "PlayerAction",
    "Session",
    "character_info",
    "handle_command",
    "initialise_fov",
    "inventory_menu",
    "main_menu",
    "new_game",
    "next_level",
    "play_game",
    "player_move_or_attack",
    "recompute_fov",
    "run_monsters",
    "start_session",
    "step",
]
