"""Path helpers shared by the indexer and the synthesizer.

Build logs from MSVC carry Windows paths even when compdbgen runs elsewhere,
so tokens are split with the path flavour they were written in rather than
the host's. pathlib is only trusted for the file name; directories are cut
from the token text so they reach the database exactly as logged.
"""

import re
from pathlib import PurePath, PurePosixPath, PureWindowsPath

_DRIVE_RE = re.compile(r"^[A-Za-z]:")

_NOT_FILE_NAMES = {"", ".", ".."}


def is_windows_token(token: str) -> bool:
    return "\\" in token or bool(_DRIVE_RE.match(token))


def token_path(token: str) -> PurePath:
    """Interpret a command-line token as a path in the flavour it was written in."""
    if is_windows_token(token):
        return PureWindowsPath(token)
    return PurePosixPath(token)


def file_name_of(path: PurePath) -> str:
    """Final path component, or "" when the path does not name a file."""
    name = path.name
    return "" if name in _NOT_FILE_NAMES else name


def parent_of(token: str) -> str:
    """Directory part of ``token`` as written, "" when there is none.

    "/" separates components in both flavours, "\\" only in Windows tokens.
    Redundant separators and "." components are left alone; only separators
    trailing the directory are dropped, and a bare root ("/", "C:\\") is kept.
    """
    windows = is_windows_token(token)
    separators = "/\\" if windows else "/"
    drive = token[:2] if windows and _DRIVE_RE.match(token) else ""

    body = token[len(drive):].rstrip(separators)
    cut = max(body.rfind(sep) for sep in separators)
    if cut < 0:
        # "C:main.cpp" is relative to the drive's current directory
        return drive

    head = body[:cut].rstrip(separators)
    if not head:
        # Root directory: keep the separator that was written
        return drive + body[cut]
    return drive + head


def has_extension(file_name: str) -> bool:
    """True when ``file_name`` has a non-empty extension.

    A leading dot marks a hidden file, not an extension (".bashrc"), and a
    trailing dot leaves the extension empty ("main.").
    """
    dot = file_name.rfind(".")
    return 0 < dot < len(file_name) - 1
