"""Centralized constants for the compdbgen utils package.

Single source of truth for file names and defaults shared across modules.
"""

from pathlib import Path

# ============================================================================
# OUTPUT FILES
# ============================================================================

DEFAULT_OUTPUT_FILE = "compile_commands.json"

# Persistent traceback log written by handle_exceptions
ERROR_LOG_FILE = Path("./compdbgen-error.log")

# ============================================================================
# INPUT DEFAULTS
# ============================================================================

DEFAULT_COMPILER = "cl.exe"
DEFAULT_LOG_ENCODING = "utf-8"

# Per-project config file looked up in the working directory
CONFIG_FILE_NAME = ".compdbgen.json"

# Environment variable prefix for config overrides
ENV_PREFIX = "COMPDBGEN"
