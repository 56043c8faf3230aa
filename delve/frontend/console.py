"""Line-based terminal frontend.

Draws the visible map, status panel and message log as coloured text (colorama)
and reads one command per line. Targeting prompts read ``x y`` coordinates in
place of mouse clicks; ``c`` cancels.

Key bindings (one per line):
    h j k l y u b n / 1-9 numpad digits   move or attack
    . or 5                                wait
    g or ,                                pick up
    i / d                                 use / drop from inventory
    <                                     descend stairs
    c                                     character information
    f                                     toggle fullscreen
    q                                     save and quit
"""

from __future__ import annotations

import sys
import textwrap
from typing import Dict, List, Optional, Sequence, TextIO, Tuple

from colorama import Fore, Style

from delve.interfaces import Command, CommandKind, PointerEvent, RenderView
from delve.models.colors import Color

from .fov import TcodVisibility

MOVE_KEYS: Dict[str, Tuple[int, int]] = {
    "h": (-1, 0),
    "j": (0, 1),
    "k": (0, -1),
    "l": (1, 0),
    "y": (-1, -1),
    "u": (1, -1),
    "b": (-1, 1),
    "n": (1, 1),
    "1": (-1, 1),
    "2": (0, 1),
    "3": (1, 1),
    "4": (-1, 0),
    "6": (1, 0),
    "7": (-1, -1),
    "8": (0, -1),
    "9": (1, -1),
}

ACTION_KEYS: Dict[str, CommandKind] = {
    ".": CommandKind.WAIT,
    "5": CommandKind.WAIT,
    "g": CommandKind.PICK_UP,
    ",": CommandKind.PICK_UP,
    "i": CommandKind.INVENTORY,
    "d": CommandKind.DROP,
    "<": CommandKind.DESCEND,
    "c": CommandKind.CHARACTER,
    "f": CommandKind.FULLSCREEN,
    "q": CommandKind.EXIT,
}

# Nearest ANSI colour for an RGB triple.
_PALETTE: List[Tuple[Color, str]] = [
    ((0, 0, 0), Fore.BLACK),
    ((191, 0, 0), Fore.RED),
    ((0, 191, 0), Fore.GREEN),
    ((191, 191, 0), Fore.YELLOW),
    ((0, 0, 191), Fore.BLUE),
    ((191, 0, 191), Fore.MAGENTA),
    ((0, 191, 191), Fore.CYAN),
    ((191, 191, 191), Fore.WHITE),
    ((255, 63, 63), Fore.LIGHTRED_EX),
    ((63, 255, 63), Fore.LIGHTGREEN_EX),
    ((255, 255, 63), Fore.LIGHTYELLOW_EX),
    ((63, 63, 255), Fore.LIGHTBLUE_EX),
    ((255, 63, 255), Fore.LIGHTMAGENTA_EX),
    ((63, 255, 255), Fore.LIGHTCYAN_EX),
    ((255, 255, 255), Fore.LIGHTWHITE_EX),
]

MAX_MENU_OPTIONS = 26
MESSAGE_LINES = 7


def ansi_for(color: Color) -> str:
    r, g, b = color
    best = min(_PALETTE, key=lambda item: (item[0][0] - r) ** 2 + (item[0][1] - g) ** 2 + (item[0][2] - b) ** 2)
    return best[1]


def parse_command(line: str) -> Optional[Command]:
    key = line.strip()
    if not key:
        return None
    if key in MOVE_KEYS:
        dx, dy = MOVE_KEYS[key]
        return Command.move(dx, dy)
    kind = ACTION_KEYS.get(key.lower() if key.isalpha() else key)
    if kind is None:
        return None
    return Command(kind)


def parse_pointer(line: str) -> PointerEvent:
    text = line.strip().lower()
    if text in ("c", "cancel", "esc", "escape"):
        return PointerEvent(cancel=True)
    parts = text.replace(",", " ").split()
    if len(parts) != 2:
        return PointerEvent()
    try:
        x, y = int(parts[0]), int(parts[1])
    except ValueError:
        return PointerEvent()
    return PointerEvent(x=x, y=y, lbutton_pressed=True)


class ConsoleFrontend:
    """Frontend drawing to a text stream and reading commands from another."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None, color: bool = True):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.color = color
        self.visibility = TcodVisibility()
        self.fullscreen = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def _readline(self, prompt: str) -> Optional[str]:
        self.stdout.write(prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if line == "":
            self._closed = True
            return None
        return line

    def poll_command(self) -> Optional[Command]:
        line = self._readline("> ")
        if line is None:
            return None
        return parse_command(line)

    def poll_pointer(self) -> PointerEvent:
        line = self._readline("target x y (c to cancel)> ")
        if line is None:
            return PointerEvent(closed=True)
        return parse_pointer(line)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    def _paint(self, text: str, color: Color) -> str:
        if not self.color:
            return text
        return f"{ansi_for(color)}{text}{Style.RESET_ALL}"

    def render(self, view: RenderView, fov_recompute: bool) -> None:
        game_map = view.map
        glyphs: Dict[Tuple[int, int], Tuple[str, Color]] = {}
        # Later entries win; the view lists non-blocking entities first.
        for entity in view.entities:
            visible = self.visibility.is_in_fov(entity.x, entity.y)
            remembered = entity.always_visible and game_map.in_bounds(entity.x, entity.y) and game_map.tiles[entity.x][entity.y].explored
            if visible or remembered:
                glyphs[(entity.x, entity.y)] = (entity.glyph, entity.color)

        out = []
        for y in range(game_map.height):
            row = []
            for x in range(game_map.width):
                if (x, y) in glyphs:
                    glyph, color = glyphs[(x, y)]
                    row.append(self._paint(glyph, color))
                    continue
                tile = game_map.tiles[x][y]
                if not tile.explored:
                    row.append(" ")
                    continue
                ch = "#" if tile.block_sight else "."
                if self.visibility.is_in_fov(x, y):
                    row.append(self._paint(ch, (255, 255, 255)))
                elif self.color:
                    row.append(f"{Style.DIM}{ch}{Style.RESET_ALL}")
                else:
                    row.append(ch)
            out.append("".join(row))

        out.append(f"HP: {view.hp}/{view.max_hp}  XP: {view.xp}  Level: {view.player_level}  Dungeon level: {view.dungeon_level}")
        recent = list(view.messages)[:MESSAGE_LINES]
        for text, color in reversed(recent):
            out.append(self._paint(text, color))
        self.stdout.write("\n".join(out) + "\n")
        self.stdout.flush()

    def clear(self, entities) -> None:
        # Every frame is drawn from scratch; there is nothing to erase.
        return None

    def menu(self, header: str, options: Sequence[str], width: int) -> Optional[int]:
        assert len(options) <= MAX_MENU_OPTIONS, "Cannot have a menu with more than 26 options."
        lines = []
        for paragraph in header.rstrip("\n").split("\n") if header else []:
            lines.append(textwrap.fill(paragraph, width) if paragraph else "")
        for index, text in enumerate(options):
            lines.append(f"({chr(ord('a') + index)}) {text}")
        self.stdout.write("\n".join(lines) + "\n")
        line = self._readline("? ")
        if line is None:
            return None
        key = line.strip().lower()
        if len(key) != 1 or not key.isalpha():
            return None
        index = ord(key) - ord("a")
        if 0 <= index < len(options):
            return index
        return None

    def msgbox(self, text: str, width: int = 50) -> None:
        self.menu(text, [], width)

    def toggle_fullscreen(self) -> None:
        self.fullscreen = not self.fullscreen
        self.stdout.write(f"[fullscreen {'on' if self.fullscreen else 'off'}]\n")


__all__ = ["ConsoleFrontend", "ansi_for", "parse_command", "parse_pointer"]
