"""Non-fatal diagnostics and the ErrorSink that reports them.

Every pipeline stage that can reject input sends a Diagnostic to a shared
queue instead of raising. One ErrorSink thread drains that queue and reports
each message as it arrives. The sink knows how many producers feed it and
stops once each of them has sent its end-of-stream marker.
"""

import queue
import sys
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass

from compdbgen.utils.logging import logger

# Marker a producer puts on a queue when it will send nothing more.
END_OF_STREAM = object()


@dataclass(frozen=True)
class Diagnostic:
    """A rejected input: what went wrong, which stage saw it, and where.

    ``source`` identifies the offending input: a directory path for the
    indexer, ``log:<line number>`` for anything derived from the build log.
    """

    message: str
    stage: str
    source: str = ""

    def __str__(self) -> str:
        if self.source:
            return f"[{self.stage}] {self.source}: {self.message}"
        return f"[{self.stage}] {self.message}"


def log_diagnostic(diagnostic: Diagnostic) -> None:
    """Default reporter: one loguru WARNING per diagnostic."""
    logger.bind(stage=diagnostic.stage, source=diagnostic.source).warning(str(diagnostic))


class ErrorSink:
    """Drain a multi-producer diagnostics queue until every producer is done.

    Args:
        diagnostics: Queue shared by all producers
        producers: Number of END_OF_STREAM markers to wait for
        report: Callable invoked once per Diagnostic, in arrival order
    """

    def __init__(
        self,
        diagnostics: "queue.SimpleQueue",
        producers: int,
        report: Callable[[Diagnostic], None] | None = None,
    ):
        self.diagnostics = diagnostics
        self.producers = producers
        self.report = report or log_diagnostic
        self.counts: Counter[str] = Counter()

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def run(self) -> int:
        """Report diagnostics until all producers have closed. Returns the count."""
        remaining = self.producers
        while remaining > 0:
            item = self.diagnostics.get()
            if item is END_OF_STREAM:
                remaining -= 1
                continue
            self.counts[item.stage] += 1
            self._emit(item)
        return self.total

    def _emit(self, diagnostic: Diagnostic) -> None:
        # A broken reporter must not take the pipeline down with it.
        try:
            self.report(diagnostic)
        except Exception as e:
            sys.stderr.write(f"{diagnostic} (reporter failed: {type(e).__name__}: {e})\n")
