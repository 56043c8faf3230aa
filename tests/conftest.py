import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from delve.interfaces import PointerEvent  # noqa: E402
from delve.services import save_service  # noqa: E402
from tests.factories import make_open_game  # noqa: E402


class StubOracle:
    """Visibility oracle with a fixed answer.

    ``visible=None`` means every in-bounds cell is visible; otherwise only the
    listed coordinates are.
    """

    def __init__(self, visible=None):
        self.visible = None if visible is None else set(visible)
        self.computed = []
        self.resets = 0

    def reset(self, game_map):
        self.resets += 1

    def compute_fov(self, x, y, radius, light_walls, algorithm):
        self.computed.append((x, y, radius, light_walls, algorithm))

    def is_in_fov(self, x, y):
        if self.visible is None:
            return x >= 0 and y >= 0
        return (x, y) in self.visible


class ScriptedFrontend:
    """Frontend that replays queued input and records everything it is asked to show.

    When a queue runs dry the frontend reports itself closed, which ends any
    loop waiting on it.
    """

    def __init__(self, commands=(), pointers=(), choices=(), visibility=None):
        self.visibility = visibility or StubOracle()
        self.commands = list(commands)
        self.pointers = list(pointers)
        self.choices = list(choices)
        self.menus = []
        self.msgboxes = []
        self.renders = []
        self.clears = 0
        self.fullscreen_toggles = 0
        self._closed = False

    @property
    def closed(self):
        return self._closed

    def poll_command(self):
        if not self.commands:
            self._closed = True
            return None
        return self.commands.pop(0)

    def poll_pointer(self):
        if not self.pointers:
            self._closed = True
            return PointerEvent(closed=True)
        return self.pointers.pop(0)

    def render(self, view, fov_recompute):
        self.renders.append((view, fov_recompute))

    def clear(self, entities):
        self.clears += 1

    def menu(self, header, options, width):
        self.menus.append((header, list(options), width))
        if not self.choices:
            self._closed = True
            return None
        return self.choices.pop(0)

    def msgbox(self, text, width=50):
        self.msgboxes.append(text)

    def toggle_fullscreen(self):
        self.fullscreen_toggles += 1


@pytest.fixture()
def oracle():
    return StubOracle()


@pytest.fixture()
def frontend():
    return ScriptedFrontend()


@pytest.fixture()
def open_game():
    """(store, game) on a 20x20 open room with the player at (5, 5) and nothing else."""
    return make_open_game()


@pytest.fixture()
def engine():
    eng = save_service.make_engine("sqlite://")
    try:
        yield eng
    finally:
        eng.dispose()
