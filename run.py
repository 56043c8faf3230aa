"""Delve CLI entry point.

Provides subcommands for playing in the terminal, previewing generated levels
and inspecting save slots. Accepts configuration via flags and environment
variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import logging
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
_COLOR_ENABLED = sys.stdout.isatty()


def parse_args(argv: list[str]) -> argparse.Namespace:
    from delve import __version__

    description = """
    Delve: a turn-based dungeon crawler

    Play in the terminal, preview generated levels or list save slots.
    Configuration can be provided via CLI flags or environment variables.
    If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          DELVE_INSTANCE_DIR   Directory for saves and logs (default: ./instance)
          DELVE_DATABASE_URL   SQLAlchemy database URI (default: sqlite:///instance/delve.db)
          DELVE_SEED           Integer seed for dungeon generation
          DELVE_LOG_LEVEL      debug | info | warn | error
          DELVE_LOG_JSON       1 to emit engine events as JSON lines

        Examples:
          # Title menu (new game / continue / quit)
          python run.py play

          # Skip the menu and start a fresh, reproducible game
          python run.py new --seed 42

          # Preview level 6 of a seeded dungeon
          python run.py map --seed 42 --level 6

          # Use a different save database
          python run.py --db sqlite:///instance/dev.db continue
        """
    )

    parser = argparse.ArgumentParser(
        prog="Delve",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--env-file", dest="env_file", help="Path to a .env file to load before processing flags")
    parser.add_argument("--db", dest="db_uri", default=None, help="SQLAlchemy database URI for saves")
    parser.add_argument("--slot", default="default", help="Save slot name (default: default)")
    parser.add_argument("--no-color", dest="no_color", action="store_true", help="Disable ANSI colours")
    parser.add_argument("--version", action="version", version=f"Delve {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    play_parser = subparsers.add_parser("play", help="Show the title menu and play")
    play_parser.add_argument("--seed", type=int, default=None, help="Dungeon seed (default: env DELVE_SEED or random)")

    new_parser = subparsers.add_parser("new", help="Start a new game immediately")
    new_parser.add_argument("--seed", type=int, default=None, help="Dungeon seed (default: env DELVE_SEED or random)")

    subparsers.add_parser("continue", help="Resume the saved game in --slot")

    map_parser = subparsers.add_parser("map", help="Print a generated level without playing it")
    map_parser.add_argument("--seed", type=int, default=None, help="Dungeon seed")
    map_parser.add_argument("--level", type=int, default=1, help="Dungeon level to generate (default: 1)")

    subparsers.add_parser("saves", help="List save slots")

    if not argv:
        argv = ["play"]
    return parser.parse_args(argv)


def _banner(mode: str, db_url: str, seed) -> str:
    color = _COLOR_ENABLED

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if color else text

    def value(val) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if color else str(val)

    title = f"{Fore.CYAN}{Style.BRIGHT}Delve{Style.RESET_ALL}" if color else "Delve"
    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if color else "=" * 40
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Mode:'):12} {value(mode.upper())}",
        f"  {label('Database:'):12} {value(db_url)}",
        f"  {label('Seed:'):12} {value(seed if seed is not None else 'random')}",
        divider,
        "",
    ]
    return "\n".join(lines)


def render_full_map(store, game_map) -> str:
    """ASCII dump of a whole level with every entity, ignoring visibility."""
    glyphs = {}
    for entity in sorted(store, key=lambda e: e.blocks):
        glyphs[(entity.x, entity.y)] = entity.glyph
    rows = []
    for y in range(game_map.height):
        row = []
        for x in range(game_map.width):
            if (x, y) in glyphs:
                row.append(glyphs[(x, y)])
            else:
                row.append("#" if game_map.tiles[x][y].block_sight else ".")
        rows.append("".join(row))
    return "\n".join(rows)


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file, override=True)
    else:
        load_dotenv()

    # Imported after .env so module-level settings see the loaded variables
    import random

    from delve.config import load_settings
    from delve.dungeon import DungeonConfig, generate_level
    from delve.logging_utils import configure_logging, log, set_level
    from delve.models.catalog import make_player
    from delve.models.save import SaveNotFoundError
    from delve.models.store import EntityStore
    from delve.services import save_service, turn_service

    settings = load_settings()
    set_level(settings.log_level)
    db_url = args.db_uri or settings.resolved_database_url
    seed = getattr(args, "seed", None)
    if seed is None:
        seed = settings.seed
    mode = (args.command or "play").lower()

    configure_logging(settings.instance_dir, level=logging.DEBUG if settings.log_level == "debug" else logging.INFO)

    def handle_sigint(sig, frame):
        print("\n[INFO] Leaving the dungeon without saving...")
        sys.exit(130)

    signal.signal(signal.SIGINT, handle_sigint)

    if mode == "map":
        config = DungeonConfig(seed=seed)
        store = EntityStore([make_player()])
        outputs = generate_level(store, args.level, config, random.Random(seed))
        print(render_full_map(store, outputs.map))
        print(
            f"level={args.level} rooms={outputs.metrics['rooms_placed']} "
            f"monsters={outputs.metrics['monsters']} items={outputs.metrics['items']}"
        )
        return 0

    os.makedirs(settings.instance_dir, exist_ok=True)
    engine = save_service.make_engine(db_url)

    if mode == "saves":
        rows = save_service.list_saves(engine)
        if not rows:
            print("No saved games.")
        for row in rows:
            print(f"{row.slot:16} depth={row.dungeon_level:<3} level={row.player_level:<3} updated={row.updated_at:%Y-%m-%d %H:%M}")
        return 0

    from delve.frontend.console import ConsoleFrontend

    print(_banner(mode, db_url, seed))
    log.info(event="startup", mode=mode, db=db_url, seed=seed)
    frontend = ConsoleFrontend(color=_COLOR_ENABLED and not args.no_color)
    config = DungeonConfig(seed=seed)
    rng = random.Random(seed)

    if mode == "play":
        turn_service.main_menu(frontend, engine, config, rng, args.slot)
        return 0
    if mode == "new":
        store, game = turn_service.new_game(config, rng)
    elif mode == "continue":
        try:
            store, game = save_service.load_game(engine, args.slot)
        except SaveNotFoundError:
            print("No saved game to load.")
            return 1
    else:  # pragma: no cover - argparse restricts choices
        print(f"Unknown command: {mode}")
        return 2
    session = turn_service.start_session(store, game, frontend, config, rng)
    turn_service.play_game(session, engine, args.slot)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
