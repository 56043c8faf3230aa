import logging
import random
from logging.handlers import RotatingFileHandler

import pytest

from delve import config as config_mod
from delve import logging_utils
from delve.dungeon import DungeonConfig
from delve.models.store import PLAYER
from delve.services import combat_service, turn_service


@pytest.fixture()
def restore_root_handlers():
    root = logging.getLogger()
    saved, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in saved:
        root.addHandler(h)
    root.setLevel(level)


def test_configure_logging_is_idempotent(tmp_path, restore_root_handlers):
    instance = tmp_path / "instance"
    # Run logging config twice to ensure idempotence (handler replace path)
    path = logging_utils.configure_logging(str(instance))
    logging_utils.configure_logging(str(instance))

    root = logging.getLogger()
    assert sum(isinstance(h, RotatingFileHandler) for h in root.handlers) == 1
    logging.getLogger("delve.test").info("written to file")
    for h in root.handlers:
        h.flush()
    assert path == str(instance / "delve.log")
    assert "written to file" in (instance / "delve.log").read_text()


def test_event_format_key_value(monkeypatch):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    line = logging_utils.format_event(
        "info", {"event": "attack", "attacker": "cave orc", "damage": 3, "skipped": None}
    )
    assert line.startswith("severity=info ts=")
    assert "event=attack" in line
    assert "attacker=cave_orc" in line
    assert "damage=3" in line
    assert "skipped" not in line


def test_event_fields_may_use_any_name(monkeypatch):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    line = logging_utils.format_event("info", {"level": 3, "severity": "high", "ts": 1})
    assert "level=3" in line
    assert "field_severity=high" in line
    assert "field_ts=1" in line
    assert line.count("severity=info") == 1


def test_event_format_json(monkeypatch):
    monkeypatch.setattr(logging_utils, "JSON_MODE", True)
    line = logging_utils.format_event("warn", {"event": "load_failed", "slot": "default", "level": 2})
    assert '"event":"load_failed"' in line and '"severity":"warn"' in line
    assert '"level":2' in line


def test_level_threshold(monkeypatch, capsys):
    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.CURRENT_LEVEL)
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    log = logging_utils.get_logger("unit")
    assert logging_utils.get_logger("unit") is log

    logging_utils.set_level("error")
    log.info(event="hidden")
    logging_utils.set_level("debug")
    log.debug(event="shown")
    logging_utils.set_level("nonsense")  # ignored
    log.debug(event="still_shown")

    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "logger=unit event=shown" in err
    assert "still_shown" in err


def test_generation_and_level_up_log_at_debug(monkeypatch, capsys):
    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.SEVERITIES["debug"])
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)

    store, game = turn_service.new_game(DungeonConfig(seed=1), random.Random(1))
    player = store[PLAYER]
    player.fighter.xp = combat_service.level_up_xp(1)
    combat_service.apply_level_up(player, combat_service.STRENGTH, game)

    err = capsys.readouterr().err
    assert "event=level_generated depth=1" in err
    assert "event=level_up new_level=2" in err


def test_load_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("DELVE_INSTANCE_DIR", str(tmp_path))
    monkeypatch.delenv("DELVE_DATABASE_URL", raising=False)
    monkeypatch.setenv("DELVE_SEED", "42")
    monkeypatch.setenv("DELVE_LOG_LEVEL", "debug")
    settings = config_mod.load_settings()
    assert settings.seed == 42
    assert settings.log_level == "debug"
    assert settings.resolved_database_url == f"sqlite:///{(tmp_path / 'delve.db').as_posix()}"


def test_bad_seed_and_explicit_database(monkeypatch):
    monkeypatch.setenv("DELVE_SEED", "not-a-number")
    monkeypatch.setenv("DELVE_DATABASE_URL", "sqlite://")
    settings = config_mod.load_settings()
    assert settings.seed is None
    assert settings.resolved_database_url == "sqlite://"
