"""Serialize CompileCommand records to compile_commands.json."""

import json
import os
from collections.abc import Iterable
from typing import TextIO

from compdbgen.exceptions import OutputWriteError
from compdbgen.synthesis import CompileCommand
from compdbgen.utils.logging import logger


def open_output(path: str) -> TextIO:
    """Create (or truncate) the output database before any work is done.

    Raises:
        OutputWriteError: If the destination cannot be created
    """
    try:
        return open(path, "w", encoding="utf-8", newline="\n")
    except OSError as e:
        raise OutputWriteError(f"Failed to open {path!r}: {e}", path) from e


def write_compile_commands(
    handle: TextIO, commands: Iterable[CompileCommand], indent: int = 2
) -> int:
    """Write ``commands`` as a pretty-printed JSON array. Returns the record count."""
    records = [command.to_dict() for command in commands]
    try:
        json.dump(records, handle, indent=indent)
        handle.write("\n")
        handle.flush()
    except OSError as e:
        name = getattr(handle, "name", "<output>")
        raise OutputWriteError(f"Failed to write {name!r}: {e}", str(name)) from e
    return len(records)


def discard_output(path: str) -> None:
    """Remove a database left truncated by a failed run.

    A missing file is clearer to downstream tools than an empty, invalid one.
    """
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove incomplete output {path!r}: {e}")
