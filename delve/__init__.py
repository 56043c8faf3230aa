"""
project: Delve
module: __init__.py
License: MIT

Turn-based dungeon-crawler rules engine.

The package is split the same way the game is played:
    * ``delve.dungeon``  - map/tile model and procedural level generation.
    * ``delve.models``   - entity records, the entity store, message log, game state.
    * ``delve.services`` - combat, monster AI, inventory, targeting, saving and the turn loop.
    * ``delve.frontend`` - a reference console frontend (drawing, input, field of view).

The engine never constructs or owns a frontend; callers pass one in. Environment
variables are read from a local ``.env`` file when present so ``DELVE_DATABASE_URL``
and friends can be supplied without exporting shell variables during development.
"""

from dotenv import load_dotenv

load_dotenv()

__version__ = "0.4.0"

__all__ = ["__version__"]
