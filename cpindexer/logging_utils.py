from __future__ import annotations

import os

LEVEL_DEFAULT = "info"
DEBUG_ENV_VAR = "CPINDEXER_DEBUG"


def _normalize_level(level: str | None) -> str:
    if not level:
        return LEVEL_DEFAULT
    return level.strip().lower() or LEVEL_DEFAULT


def debug_enabled() -> bool:
    return os.environ.get(DEBUG_ENV_VAR) == "1"


def log(message: str, level: str = LEVEL_DEFAULT, indent: int = 0) -> None:
    prefix = " " * max(indent, 0)
    normalized = _normalize_level(level)
    print(f"{prefix}[{normalized}] {message}")


def log_info(message: str, indent: int = 0) -> None:
    log(message, "info", indent)


def log_warn(message: str, indent: int = 0) -> None:
    log(message, "warn", indent)


def log_error(message: str, indent: int = 0) -> None:
    log(message, "error", indent)


def log_ok(message: str, indent: int = 0) -> None:
    log(message, "ok", indent)


def log_debug(message: str, indent: int = 0) -> None:
    if debug_enabled():
        log(message, "debug", indent)
