"""Build log reading, line filtering, sanitizing and tokenizing.

The log format is one compiler invocation per line, arguments separated by
whitespace, compiled file last. Anything beyond that (response files, flag
grammar) is treated as opaque.
"""

from collections.abc import Iterable, Iterator
from typing import TextIO

from compdbgen.exceptions import LogReadError


def open_log(path: str, encoding: str = "utf-8") -> TextIO:
    """Open the build log for reading.

    Undecodable bytes are replaced rather than ending the scan early; a
    mangled character in one line should not hide every line after it.

    Raises:
        LogReadError: If the file cannot be opened
    """
    try:
        return open(path, encoding=encoding, errors="replace")
    except (OSError, LookupError) as e:
        raise LogReadError(f"Failed to open {path!r}: {e}", path) from e


def read_log_lines(handle: TextIO) -> Iterator[tuple[int, str]]:
    """Yield (1-based line number, line without its line ending)."""
    path = getattr(handle, "name", "<log>")
    try:
        for number, line in enumerate(handle, start=1):
            yield number, line.rstrip("\r\n")
    except OSError as e:
        raise LogReadError(f"Failed to read {path!r}: {e}", str(path)) from e


def matches_compiler(line: str, compiler: str) -> bool:
    """Case-insensitive substring match of the compiler executable name.

    A path or flag that merely contains the name also matches; the log
    format gives nothing stricter to go on.
    """
    return compiler.lower() in line.lower()


def filter_lines(
    lines: Iterable[tuple[int, str]], compiler: str
) -> Iterator[tuple[int, str]]:
    """Keep only the numbered lines that mention ``compiler``, in read order."""
    for number, line in lines:
        if matches_compiler(line, compiler):
            yield number, line


def sanitize_line(line: str) -> str:
    """Strip every double quote.

    MSBuild quotes arguments inconsistently (sometimes nested), so quotes are
    dropped wholesale before whitespace splitting. Lossy, never re-quoted.
    """
    return line.replace('"', "")


def tokenize_line(line: str) -> list[str]:
    """Split on runs of whitespace. Blank input gives an empty list."""
    return line.split()
