import io

import pytest

from delve.frontend.console import ConsoleFrontend, ansi_for, parse_command, parse_pointer
from delve.frontend.fov import TcodVisibility
from delve.interfaces import Command, CommandKind, PointerEvent
from delve.services import render_service
from tests.factories import add_monster, make_open_game, open_map


def make_frontend(text=""):
    out = io.StringIO()
    return ConsoleFrontend(stdin=io.StringIO(text), stdout=out, color=False), out


@pytest.mark.parametrize(
    "line,expected",
    [
        ("l\n", Command.move(1, 0)),
        ("y", Command.move(-1, -1)),
        ("2", Command.move(0, 1)),
        ("5", Command(CommandKind.WAIT)),
        (".", Command(CommandKind.WAIT)),
        (",", Command(CommandKind.PICK_UP)),
        ("<", Command(CommandKind.DESCEND)),
        ("Q", Command(CommandKind.EXIT)),
        ("", None),
        ("zz", None),
    ],
)
def test_parse_command(line, expected):
    assert parse_command(line) == expected


def test_parse_pointer():
    assert parse_pointer("3 4") == PointerEvent(x=3, y=4, lbutton_pressed=True)
    assert parse_pointer("3,4\n") == PointerEvent(x=3, y=4, lbutton_pressed=True)
    assert parse_pointer("esc").cancel
    assert not parse_pointer("three four").lbutton_pressed
    assert not parse_pointer("1 2 3").lbutton_pressed


def test_ansi_picks_nearest_palette_entry():
    assert ansi_for((250, 250, 250)) == ansi_for((255, 255, 255))
    assert ansi_for((0, 0, 0)) != ansi_for((255, 255, 255))


def test_menu_maps_letters_to_indices():
    fe, out = make_frontend("b\n")
    assert fe.menu("Pick one:\n", ["first", "second"], 30) == 1
    text = out.getvalue()
    assert "(a) first" in text and "(b) second" in text


def test_menu_out_of_range_or_eof():
    fe, _ = make_frontend("z\n")
    assert fe.menu("", ["only"], 30) is None
    assert not fe.closed
    assert fe.menu("", ["only"], 30) is None
    assert fe.closed


def test_menu_rejects_too_many_options():
    fe, _ = make_frontend("a\n")
    with pytest.raises(AssertionError):
        fe.menu("", [str(i) for i in range(27)], 30)


def test_eof_closes_polls():
    fe, _ = make_frontend("")
    assert fe.poll_command() is None
    assert fe.closed
    assert fe.poll_pointer().closed


def test_render_draws_only_explored_and_visible(open_game):
    store, game = open_game
    add_monster(store, "orc", 12, 5)
    fe, out = make_frontend()
    fe.visibility.reset(game.map)
    fe.visibility.compute_fov(5, 5, 3, True, "basic")
    for x in range(3, 9):
        game.map.tiles[x][5].explored = True
    game.log.add("Hello there")

    render_service.render(store, game, fe, True)

    lines = out.getvalue().splitlines()
    assert lines[5][5] == "@"
    assert lines[5][6] == "."
    assert lines[5][12] == " "  # unexplored and out of sight: orc hidden
    assert "HP: 100/100" in out.getvalue()
    assert lines[-1] == "Hello there"


def test_tcod_visibility_respects_walls_and_radius():
    game_map = open_map(20, 20)
    for y in range(1, 19):
        game_map.tiles[10][y].blocked = True
        game_map.tiles[10][y].block_sight = True
    oracle = TcodVisibility(game_map)
    oracle.compute_fov(5, 5, 10, True, "basic")
    assert oracle.is_in_fov(5, 5)
    assert oracle.is_in_fov(9, 5)
    assert oracle.is_in_fov(10, 5)  # lit wall
    assert not oracle.is_in_fov(12, 5)
    assert not oracle.is_in_fov(-1, 5)
    with pytest.raises(ValueError):
        oracle.compute_fov(5, 5, 10, True, "telepathy")
