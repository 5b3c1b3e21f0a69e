from __future__ import annotations

import logging
import os
import sys
from datetime import date
from pathlib import Path
from typing import Optional

LEVEL_ENV_VAR = "REPOLAUNCHER_LOG_LEVEL"
DEBUG_ENV_VAR = "REPOLAUNCHER_DEBUG"

_CONFIGURED_LOG_PATH: Optional[str] = None
_FILE_HANDLER: Optional[logging.Handler] = None
_CONSOLE_HANDLER: Optional[logging.Handler] = None


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def debug_enabled() -> bool:
    return os.environ.get(DEBUG_ENV_VAR, "").strip().lower() in {"1", "true", "yes", "on"}


def log_file_for(log_dir: Path, day: Optional[date] = None) -> Path:
    day = day or date.today()
    return Path(log_dir) / f"app-{day.isoformat()}.log"


def configure_logging(log_dir: Path, level: Optional[str] = None, console: Optional[bool] = None) -> Path:
    """Send stdlib logging to a daily file under `log_dir`.

    Idempotent per path. Console output is added when `console` is true or
    REPOLAUNCHER_DEBUG is set, in which case the level drops to DEBUG.
    """
    global _CONFIGURED_LOG_PATH, _FILE_HANDLER, _CONSOLE_HANDLER

    console = debug_enabled() if console is None else console
    level_name = level or os.environ.get(LEVEL_ENV_VAR) or ("DEBUG" if console else "INFO")
    numeric_level = _level_from_name(level_name)

    log_path = log_file_for(log_dir)
    resolved = str(log_path.resolve())
    root = logging.getLogger()
    root.setLevel(numeric_level)

    if _CONFIGURED_LOG_PATH != resolved or _FILE_HANDLER is None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        if _FILE_HANDLER is not None:
            root.removeHandler(_FILE_HANDLER)
            _FILE_HANDLER.close()
        handler = logging.FileHandler(resolved, encoding="utf-8")
        handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s [%(name)s]: %(message)s"))
        root.addHandler(handler)
        _FILE_HANDLER = handler
        _CONFIGURED_LOG_PATH = resolved
    _FILE_HANDLER.setLevel(numeric_level)

    if console and _CONSOLE_HANDLER is None:
        stream = logging.StreamHandler(sys.stderr)
        stream.setFormatter(logging.Formatter("%(levelname)s [%(name)s]: %(message)s"))
        root.addHandler(stream)
        _CONSOLE_HANDLER = stream

    return log_path


def reset_logging_for_tests() -> None:
    """Test-only: drop the handlers installed by configure_logging."""
    global _CONFIGURED_LOG_PATH, _FILE_HANDLER, _CONSOLE_HANDLER
    root = logging.getLogger()
    for handler in (_FILE_HANDLER, _CONSOLE_HANDLER):
        if handler is not None:
            root.removeHandler(handler)
            handler.close()
    _CONFIGURED_LOG_PATH = None
    _FILE_HANDLER = None
    _CONSOLE_HANDLER = None
