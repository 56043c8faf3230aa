"""Contracts between the engine and the collaborators it does not implement.

The engine consumes two things it never constructs:

* a ``VisibilityOracle`` that computes the player's field of view, and
* a ``Frontend`` handle that draws, polls input and shows menus. The frontend
  owns the oracle (``frontend.visibility``) so the whole bundle is passed into
  the turn loop as one object.

Input arrives already translated into ``Command`` values (key bindings are the
frontend's business) and, during targeting, as ``PointerEvent`` values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Sequence, Tuple

from delve.dungeon.tiles import GameMap
from delve.models.colors import Color
from delve.models.entities import Entity

TORCH_RADIUS = 10
FOV_LIGHT_WALLS = True
FOV_ALGO = "basic"


class CommandKind(str, Enum):
    MOVE = "move"
    WAIT = "wait"
    PICK_UP = "pick_up"
    INVENTORY = "inventory"
    DROP = "drop"
    DESCEND = "descend"
    CHARACTER = "character"
    FULLSCREEN = "fullscreen"
    EXIT = "exit"


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    dx: int = 0
    dy: int = 0

    @classmethod
    def move(cls, dx: int, dy: int) -> "Command":
        if (dx, dy) == (0, 0) or abs(dx) > 1 or abs(dy) > 1:
            raise ValueError(f"not one of the 8 directions: {(dx, dy)}")
        return cls(CommandKind.MOVE, dx, dy)


@dataclass(frozen=True)
class PointerEvent:
    """Mouse state for one targeting poll. ``cancel`` is the cancel key."""

    x: int = -1
    y: int = -1
    lbutton_pressed: bool = False
    rbutton_pressed: bool = False
    cancel: bool = False
    closed: bool = False


@dataclass(frozen=True)
class RenderView:
    """Read-only snapshot handed to the frontend each frame."""

    map: GameMap
    entities: Tuple[Entity, ...]
    messages: Tuple[Tuple[str, Color], ...]
    hp: int
    max_hp: int
    xp: int
    player_level: int
    dungeon_level: int


class VisibilityOracle(Protocol):
    def reset(self, game_map: GameMap) -> None:
        """Rebuild transparency from ``game_map``; called whenever the level changes."""

    def compute_fov(self, x: int, y: int, radius: int, light_walls: bool, algorithm: str) -> None:
        ...

    def is_in_fov(self, x: int, y: int) -> bool:
        ...


class Frontend(Protocol):
    visibility: VisibilityOracle

    @property
    def closed(self) -> bool:
        ...

    def poll_command(self) -> Optional[Command]:
        ...

    def poll_pointer(self) -> PointerEvent:
        ...

    def render(self, view: RenderView, fov_recompute: bool) -> None:
        ...

    def clear(self, entities: Sequence[Entity]) -> None:
        ...

    def menu(self, header: str, options: Sequence[str], width: int) -> Optional[int]:
        ...

    def msgbox(self, text: str, width: int) -> None:
        ...

    def toggle_fullscreen(self) -> None:
        ...


__all__ = [
    "Command",
    "CommandKind",
    "FOV_ALGO",
    "FOV_LIGHT_WALLS",
    "Frontend",
    "PointerEvent",
    "RenderView",
    "TORCH_RADIUS",
    "VisibilityOracle",
]
