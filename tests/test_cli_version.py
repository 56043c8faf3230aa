import importlib
import logging
import sys

import pytest

# run.py is imported as a module; parse_args and main are exercised directly
# with the instance directory redirected so nothing touches ./instance.


@pytest.fixture()
def run_module(monkeypatch, tmp_path):
    from delve import logging_utils

    # main() applies DELVE_LOG_LEVEL to the module-wide threshold
    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.CURRENT_LEVEL)
    monkeypatch.setenv("DELVE_INSTANCE_DIR", str(tmp_path / "instance"))
    monkeypatch.delenv("DELVE_DATABASE_URL", raising=False)
    monkeypatch.delenv("DELVE_SEED", raising=False)
    monkeypatch.delenv("DELVE_LOG_LEVEL", raising=False)
    if "run" in sys.modules:
        del sys.modules["run"]
    mod = importlib.import_module("run")
    root = logging.getLogger()
    saved = list(root.handlers)
    yield mod
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in saved:
        root.addHandler(h)


def test_version_flag_outputs_version(run_module, capsys):
    from delve import __version__

    # argparse handles --version and exits by raising SystemExit
    with pytest.raises(SystemExit) as exc:
        run_module.parse_args(["--version"])
    assert exc.value.code == 0
    captured = capsys.readouterr().out
    assert __version__ in captured
    assert "Delve" in captured


def test_default_command_is_play(run_module):
    ns = run_module.parse_args([])
    assert ns.command == "play"
    assert ns.slot == "default"


def test_map_mode_prints_level(run_module, capsys, tmp_path):
    assert run_module.main(["map", "--seed", "7", "--level", "3"]) == 0
    out = capsys.readouterr().out
    lines = out.splitlines()
    assert len(lines) == 43 + 1
    assert all(len(row) == 80 for row in lines[:43])
    assert "@" in out and "<" in out
    assert lines[-1].startswith("level=3 rooms=")
    assert (tmp_path / "instance" / "delve.log").exists()


def test_map_mode_is_deterministic(run_module, capsys):
    run_module.main(["map", "--seed", "11"])
    first = capsys.readouterr().out
    run_module.main(["map", "--seed", "11"])
    assert capsys.readouterr().out == first


def test_saves_mode_with_empty_database(run_module, capsys):
    assert run_module.main(["--db", "sqlite://", "saves"]) == 0
    assert "No saved games." in capsys.readouterr().out


def test_continue_without_save_fails(run_module, capsys):
    assert run_module.main(["--db", "sqlite://", "--no-color", "continue"]) == 1
    assert "No saved game to load." in capsys.readouterr().out


def test_env_file_argument(run_module, tmp_path, capsys, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("DELVE_SEED=5\n")
    # registered so the value loaded from the file is undone afterwards
    monkeypatch.setenv("DELVE_SEED", "")
    run_module.main(["--env-file", str(env_file), "map"])
    with_env = capsys.readouterr().out
    run_module.main(["map", "--seed", "5"])
    assert capsys.readouterr().out == with_env


def test_main_sets_event_threshold_and_generation_logs(run_module, capsys, monkeypatch):
    from delve import logging_utils

    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    assert run_module.main(["map", "--seed", "2"]) == 0
    # default settings switch events to info; generation must still log cleanly
    assert logging_utils.CURRENT_LEVEL == logging_utils.SEVERITIES["info"]
    assert "event=level_generated depth=1" in capsys.readouterr().err
