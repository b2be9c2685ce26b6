"""Centralized exit codes for the compdbgen CLI."""


class ExitCodes:
    """Standard exit codes for compdbgen commands."""

    SUCCESS = 0

    # Only returned with --strict: the database was written but some log
    # lines or directories produced diagnostics.
    DIAGNOSTICS_REPORTED = 1

    FATAL = 2
