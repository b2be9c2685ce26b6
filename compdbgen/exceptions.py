"""Custom exceptions for compdbgen.

Only fatal, run-aborting conditions are modelled as exceptions. Per-record
problems never raise; they travel to the ErrorSink as Diagnostics.
"""


class CompdbgenError(Exception):
    """Base class for fatal errors that abort a run before the pipeline starts.

    Attributes:
        message: Human-readable error description
        path: The file or directory that caused the failure, if any
    """

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class SourceRootError(CompdbgenError):
    """Raised when the source-tree root is missing or not a directory."""


class LogReadError(CompdbgenError):
    """Raised when the build log cannot be opened for reading."""


class OutputWriteError(CompdbgenError):
    """Raised when the output database cannot be created or written."""
