"""Centralized logging configuration using Loguru with Pino-compatible output.

Usage:
    from compdbgen.utils.logging import logger
    logger.info("Message")
    logger.debug("Debug message")  # Only shows if COMPDBGEN_LOG_LEVEL=DEBUG

Environment Variables:
    COMPDBGEN_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
    COMPDBGEN_LOG_JSON: 0|1 (default: 0, human-readable)
    COMPDBGEN_LOG_FILE: path to log file (optional)
"""

import json
import os
import sys

from loguru import logger

# Remove default handler
logger.remove()

# Pino-compatible numeric levels
PINO_LEVELS = {
    "TRACE": 10,
    "DEBUG": 20,
    "INFO": 30,
    "SUCCESS": 30,
    "WARNING": 40,
    "ERROR": 50,
    "CRITICAL": 60,
}

_log_level = os.environ.get("COMPDBGEN_LOG_LEVEL", "INFO").upper()
_json_mode = os.environ.get("COMPDBGEN_LOG_JSON", "0") == "1"
_log_file = os.environ.get("COMPDBGEN_LOG_FILE")


def _to_pino(record) -> dict:
    """Convert a loguru record into a Pino-shaped dict."""
    pino_log = {
        "level": PINO_LEVELS.get(record["level"].name, 30),
        "time": int(record["time"].timestamp() * 1000),
        "msg": record["message"],
        "pid": record["process"].id,
    }

    pino_log.update(record["extra"])

    if record["exception"]:
        pino_log["err"] = {
            "type": record["exception"].type.__name__ if record["exception"].type else "Error",
            "message": str(record["exception"].value) if record["exception"].value else "",
        }
    return pino_log


def pino_compatible_sink(message):
    """Write log records to stdout as Pino-compatible NDJSON.

    {"level":30,"time":1715629847123,"msg":"...","pid":12345}
    """
    # Never call logger.* inside a sink - causes infinite recursion
    sys.stdout.write(json.dumps(_to_pino(message.record), default=str) + "\n")
    sys.stdout.flush()


# Human-readable format (no emojis - Windows CP1252 compatibility)
_human_format = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}:{function}:{line}</cyan> - "
    "<level>{message}</level>"
)

logger.level("DEBUG", color="<blue>")
logger.level("INFO", color="<white>")
logger.level("WARNING", color="<yellow>")
logger.level("ERROR", color="<red>")
logger.level("CRITICAL", color="<red><bold>")

_console_handler_id: int | None = None


def _add_console_handler(level: str) -> int:
    if _json_mode:
        return logger.add(pino_compatible_sink, level=level, colorize=False)
    return logger.add(
        sys.stderr,
        level=level,
        format=_human_format,
        colorize=None,  # Auto-detect: colors if TTY, plain if piped
    )


_console_handler_id = _add_console_handler(_log_level)

# Optional file handler (always NDJSON for machine parsing)
if _log_file:

    def _file_pino_sink(message):
        """Write Pino-format JSON to the configured log file."""
        with open(_log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(_to_pino(message.record), default=str) + "\n")

    logger.add(_file_pino_sink, level="DEBUG")


def set_console_level(level: str) -> None:
    """Replace the console handler with one filtering at ``level``.

    Used by ``--quiet`` to silence progress output while keeping warnings.
    """
    global _console_handler_id

    if _console_handler_id is not None:
        try:
            logger.remove(_console_handler_id)
        except ValueError:
            pass  # Already removed
    _console_handler_id = _add_console_handler(level.upper())


__all__ = [
    "logger",
    "set_console_level",
]
