"""compdbgen utilities package."""

from .constants import (
    CONFIG_FILE_NAME,
    DEFAULT_COMPILER,
    DEFAULT_LOG_ENCODING,
    DEFAULT_OUTPUT_FILE,
    ERROR_LOG_FILE,
)
from .error_handler import handle_exceptions
from .exit_codes import ExitCodes
from .logging import logger

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_COMPILER",
    "DEFAULT_LOG_ENCODING",
    "DEFAULT_OUTPUT_FILE",
    "ERROR_LOG_FILE",
    "handle_exceptions",
    "ExitCodes",
    "logger",
]
