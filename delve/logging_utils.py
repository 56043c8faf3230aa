"""Event logging for the engine, plus stdlib file logging for the CLI.

Engine services log *events*: one line per thing that happened, made of
``key=value`` fields::

    from delve.logging_utils import get_logger
    log = get_logger("combat")
    log.info(event="attack", attacker="orc", target="player", damage=3)

    -> severity=info ts=1700000000 logger=combat event=attack attacker=orc target=player damage=3

Any keyword is accepted as a field, including ``level`` (dungeon depth and
character level are ordinary game data). The header keys ``severity`` and
``ts`` are written by the logger; an event field with one of those names is
emitted as ``field_<name>`` instead. ``DELVE_LOG_JSON=1`` writes one JSON
object per line.

``configure_logging(instance_dir)`` wires the stdlib root logger to a rotating
file in the instance directory; the CLI calls it once at startup and the save
layer logs through ordinary ``logging.getLogger(__name__)`` loggers.

Event lines go to stderr so they never interleave with a console frontend
drawing on stdout.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import time
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Mapping

SEVERITIES = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = SEVERITIES.get(os.getenv("DELVE_LOG_LEVEL", "warn"), 30)
JSON_MODE = os.getenv("DELVE_LOG_JSON", "0") in ("1", "true", "TRUE", "yes", "on")

_HEADER_KEYS = ("severity", "ts")


def set_level(name: str) -> None:
    """Change the event threshold at runtime; unknown names are ignored."""
    global CURRENT_LEVEL
    CURRENT_LEVEL = SEVERITIES.get(name, CURRENT_LEVEL)


def _record(severity: str, fields: Mapping[str, Any], /) -> Dict[str, Any]:
    record: Dict[str, Any] = {"severity": severity, "ts": int(time.time())}
    for key, value in fields.items():
        if value is None:
            continue
        record[f"field_{key}" if key in _HEADER_KEYS else key] = value
    return record


def _text_value(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value).replace(" ", "_")
    return str(value)


def format_event(severity: str, fields: Mapping[str, Any], /) -> str:
    """Render one event line; ``None`` values are dropped."""
    record = _record(severity, fields)
    if JSON_MODE:
        return json.dumps(record, separators=(",", ":"), default=str)
    return " ".join(f"{key}={_text_value(value)}" for key, value in record.items())


class EventLogger:
    def __init__(self, name: str):
        self.name = name

    def enabled(self, severity: str) -> bool:
        return SEVERITIES[severity] >= CURRENT_LEVEL

    def emit(self, severity: str, fields: Mapping[str, Any]) -> None:
        if not self.enabled(severity):
            return
        print(format_event(severity, {"logger": self.name, **fields}), file=sys.stderr)

    def debug(self, **fields: Any) -> None:
        self.emit("debug", fields)

    def info(self, **fields: Any) -> None:
        self.emit("info", fields)

    def warn(self, **fields: Any) -> None:
        self.emit("warn", fields)

    def error(self, **fields: Any) -> None:
        self.emit("error", fields)


_LOGGERS: Dict[str, EventLogger] = {}


def get_logger(name: str) -> EventLogger:
    if name not in _LOGGERS:
        _LOGGERS[name] = EventLogger(name)
    return _LOGGERS[name]


def configure_logging(instance_dir: str, level: int = logging.INFO, console: bool = False) -> str:
    """Configure stdlib logging to a rotating file in ``instance_dir``.

    Returns the log file path. Safe to call more than once: previously installed
    root handlers are replaced rather than duplicated.
    """
    os.makedirs(instance_dir, exist_ok=True)
    log_path = os.path.join(instance_dir, "delve.log")

    root = logging.getLogger()
    root.setLevel(level)

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    root.addHandler(file_handler)
    if console:
        stream = logging.StreamHandler(sys.stderr)
        stream.setLevel(level)
        stream.setFormatter(formatter)
        root.addHandler(stream)
    return log_path


log = get_logger("delve")
