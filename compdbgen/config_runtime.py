"""Runtime configuration for compdbgen - centralized configuration management."""

import copy
import json
import os
from pathlib import Path
from typing import Any

from compdbgen.utils.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_COMPILER,
    DEFAULT_LOG_ENCODING,
    DEFAULT_OUTPUT_FILE,
    ENV_PREFIX,
)
from compdbgen.utils.logging import logger

DEFAULTS = {
    "input": {
        "compiler": DEFAULT_COMPILER,
        "encoding": DEFAULT_LOG_ENCODING,
    },
    "output": {
        "path": DEFAULT_OUTPUT_FILE,
        "indent": 2,
    },
    "indexer": {
        "follow_symlinks": False,
        "skip_dirs": [],
    },
}


def _accepts(default_value: Any, value: Any) -> bool:
    """Whether a config file value may replace ``default_value``.

    bool is an int subclass, so the two are checked explicitly: JSON true is
    not an indent, but 0 and 1 are fine for a flag.
    """
    if isinstance(default_value, bool):
        return isinstance(value, bool) or (type(value) is int and value in (0, 1))
    if isinstance(default_value, int):
        return isinstance(value, int) and not isinstance(value, bool)
    if isinstance(default_value, list):
        return isinstance(value, list) and all(isinstance(v, str) for v in value)
    return isinstance(value, type(default_value))


def _normalize(default_value: Any, value: Any) -> Any:
    if isinstance(default_value, bool):
        return bool(value)
    return value


def _coerce(default_value: Any, value: str) -> Any:
    """Convert an environment string to the type of the default it overrides."""
    if isinstance(default_value, bool):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ValueError(f"not a boolean: {value!r}")
    if isinstance(default_value, int):
        return int(value)
    if isinstance(default_value, list):
        return [v.strip() for v in value.split(",") if v.strip()]
    return value


def load_runtime_config(root: str = ".") -> dict[str, Any]:
    """
    Load runtime configuration from the project config file and environment.

    Config priority (highest to lowest):
    1. Environment variables (COMPDBGEN_<SECTION>_<KEY>)
    2. <root>/.compdbgen.json
    3. Built-in defaults

    Command-line flags are applied by the caller on top of the result.

    Args:
        root: Directory to look for the config file in

    Returns:
        Configuration dictionary with merged values
    """
    cfg = copy.deepcopy(DEFAULTS)

    path = Path(root) / CONFIG_FILE_NAME
    try:
        if path.exists():
            with open(path, encoding="utf-8") as f:
                user = json.load(f)

            if isinstance(user, dict):
                for section in cfg:
                    if section in user and isinstance(user[section], dict):
                        for key, value in user[section].items():
                            if key in cfg[section] and _accepts(cfg[section][key], value):
                                cfg[section][key] = _normalize(cfg[section][key], value)
                            else:
                                logger.warning(
                                    f"Ignoring config key {section}.{key} in {path}: "
                                    f"unknown key or wrong type"
                                )
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load config file from {path}: {e}")
        logger.info("Continuing with default configuration")

    for section in cfg:
        for key in cfg[section]:
            env_var = f"{ENV_PREFIX}_{section.upper()}_{key.upper()}"
            if env_var in os.environ:
                value = os.environ[env_var]
                try:
                    cfg[section][key] = _coerce(cfg[section][key], value)
                except (ValueError, AttributeError) as e:
                    logger.warning(
                        f"Invalid value for environment variable {env_var}: '{value}' - {e}"
                    )
                    logger.info(f"Using default value: {cfg[section][key]}")

    return cfg
