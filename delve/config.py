"""Runtime settings sourced from environment variables.

Gameplay tunables that never change between runs live next to the code that
uses them (``delve.dungeon.config``, ``delve.services.*``). This module only
covers values that differ per machine or per run: where saves go, how noisy the
logs are and an optional fixed seed for reproducible dungeons.

Environment variables:
    DELVE_INSTANCE_DIR   Directory for the save database and log file (default: ./instance)
    DELVE_DATABASE_URL   SQLAlchemy URL for saves (default: sqlite:///<instance>/delve.db)
    DELVE_SEED           Integer seed for the dungeon RNG (default: unset -> random)
    DELVE_LOG_LEVEL      debug | info | warn | error (structured logger threshold)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class Settings:
    instance_dir: str = "instance"
    database_url: Optional[str] = None
    seed: Optional[int] = None
    log_level: str = "info"

    @property
    def resolved_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        db_path = Path(self.instance_dir) / "delve.db"
        # POSIX path for SQLAlchemy URL compatibility across OS
        return f"sqlite:///{db_path.as_posix()}"


def _parse_seed(raw: Optional[str]) -> Optional[int]:
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def load_settings() -> Settings:
    """Build a :class:`Settings` from the current environment."""
    return Settings(
        instance_dir=os.getenv("DELVE_INSTANCE_DIR", "instance"),
        database_url=os.getenv("DELVE_DATABASE_URL") or None,
        seed=_parse_seed(os.getenv("DELVE_SEED")),
        log_level=os.getenv("DELVE_LOG_LEVEL", "info"),
    )


__all__ = ["Settings", "load_settings"]
