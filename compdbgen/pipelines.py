"""Pipeline orchestration for compdbgen.

Two phases with a hard barrier between them:

1. Index the source tree. The walk runs on the calling thread, a builder
   thread turns the found files into a DirectoryIndex, and a sink thread
   reports unreadable directories. The index is taken from the builder via
   join(), so phase 2 only ever sees a complete index.
2. Stream the log through filter -> sanitize -> tokenize -> synthesize, one
   thread per stage, connected by unbounded queues. The calling thread
   collects the finished records. Diagnostics from any stage go to a single
   ErrorSink thread.

Stages shut down by forwarding END_OF_STREAM once their input is exhausted.
"""

import os
import queue
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from compdbgen.diagnostics import END_OF_STREAM, Diagnostic, ErrorSink
from compdbgen.exceptions import SourceRootError
from compdbgen.indexer.core import DirectoryIndex, DirectoryIndexer, build_directory_index
from compdbgen.logparse import filter_lines, open_log, read_log_lines, sanitize_line, tokenize_line
from compdbgen.synthesis import CompileCommand, SynthesisError, synthesize
from compdbgen.utils.logging import logger
from compdbgen.writer import discard_output, open_output, write_compile_commands

Reporter = Callable[[Diagnostic], None]


class StageThread(threading.Thread):
    """Worker thread that keeps its target's return value or exception for join_result()."""

    def __init__(self, name: str, target: Callable[..., Any], *args: Any):
        super().__init__(name=name, daemon=True)
        self._fn = target
        self._fn_args = args
        self.result: Any = None
        self.error: BaseException | None = None

    def run(self) -> None:
        logger.debug(f"{self.name} thread started")
        try:
            self.result = self._fn(*self._fn_args)
        except BaseException as e:
            self.error = e
        finally:
            logger.debug(f"{self.name} thread finished")

    def join_result(self) -> Any:
        self.join()
        if self.error is not None:
            raise self.error
        return self.result


@dataclass
class PipelineStats:
    """Counters for one run. Each field is written by exactly one stage."""

    lines_read: int = 0
    lines_matched: int = 0
    records: int = 0
    rejected: int = 0
    diagnostics: int = 0
    diagnostics_by_stage: dict[str, int] = field(default_factory=dict)


@dataclass
class IndexResult:
    index: DirectoryIndex
    stats: dict[str, int]
    diagnostics: int


@dataclass
class PipelineResult:
    commands: list[CompileCommand]
    stats: PipelineStats


@dataclass
class RunReport:
    """Everything the CLI needs to summarize a finished run."""

    output_file: str
    index: IndexResult
    pipeline: PipelineResult

    @property
    def total_diagnostics(self) -> int:
        return self.index.diagnostics + self.pipeline.stats.diagnostics


# =============================================================================
# PHASE 1: SOURCE TREE INDEX
# =============================================================================

def check_source_root(root: str) -> None:
    """Raise SourceRootError unless ``root`` is an existing directory."""
    if not os.path.isdir(root):
        raise SourceRootError(f"Provided path is not a directory: {root!r}", root)


def index_source_tree(
    root: str,
    follow_symlinks: bool = False,
    skip_dirs: Iterable[str] = (),
    report: Reporter | None = None,
) -> IndexResult:
    """Walk ``root`` and return the completed, frozen DirectoryIndex."""
    check_source_root(root)

    found: queue.SimpleQueue = queue.SimpleQueue()
    diagnostics: queue.SimpleQueue = queue.SimpleQueue()

    indexer = DirectoryIndexer(root, follow_symlinks=follow_symlinks, skip_dirs=skip_dirs)
    sink = ErrorSink(diagnostics, producers=1, report=report)

    sink_thread = StageThread("index-errors", sink.run)
    builder_thread = StageThread("index-builder", build_directory_index, found)
    sink_thread.start()
    builder_thread.start()

    logger.debug(f"Walking {indexer.root}")
    try:
        indexer.walk(found, diagnostics)
    finally:
        # walk() closes both queues, so these joins always return
        index = builder_thread.join_result()
        sink_thread.join_result()

    return IndexResult(index=index, stats=dict(indexer.stats), diagnostics=sink.total)


# =============================================================================
# PHASE 2: LOG -> RECORDS
# =============================================================================

def _filter_stage(
    lines: Iterable[tuple[int, str]],
    compiler: str,
    out: queue.SimpleQueue,
    stats: PipelineStats,
) -> None:
    def counted():
        for item in lines:
            stats.lines_read += 1
            yield item

    try:
        for item in filter_lines(counted(), compiler):
            stats.lines_matched += 1
            out.put(item)
    finally:
        out.put(END_OF_STREAM)


def _relay_stage(
    source: queue.SimpleQueue,
    out: queue.SimpleQueue,
    transform: Callable[[Any], Any],
) -> None:
    """Apply ``transform`` to each (line number, payload) item until end of stream."""
    try:
        while True:
            item = source.get()
            if item is END_OF_STREAM:
                break
            number, payload = item
            out.put((number, transform(payload)))
    finally:
        out.put(END_OF_STREAM)


def _synthesis_stage(
    source: queue.SimpleQueue,
    out: queue.SimpleQueue,
    diagnostics: queue.SimpleQueue,
    index: DirectoryIndex,
    stats: PipelineStats,
) -> None:
    try:
        while True:
            item = source.get()
            if item is END_OF_STREAM:
                break
            number, tokens = item
            try:
                command = synthesize(tokens, index)
            except SynthesisError as e:
                stats.rejected += 1
                diagnostics.put(Diagnostic(str(e), "synthesizer", f"log:{number}"))
                continue
            out.put(command)
    finally:
        out.put(END_OF_STREAM)
        diagnostics.put(END_OF_STREAM)


def run_pipeline(
    lines: Iterable[tuple[int, str]],
    compiler: str,
    index: DirectoryIndex,
    report: Reporter | None = None,
) -> PipelineResult:
    """Run the streaming phase over numbered log lines.

    Record order follows the log, but callers must not depend on it.
    """
    stats = PipelineStats()

    matched: queue.SimpleQueue = queue.SimpleQueue()
    sanitized: queue.SimpleQueue = queue.SimpleQueue()
    tokenized: queue.SimpleQueue = queue.SimpleQueue()
    records: queue.SimpleQueue = queue.SimpleQueue()
    diagnostics: queue.SimpleQueue = queue.SimpleQueue()

    # Only the synthesizer rejects input in this phase
    sink = ErrorSink(diagnostics, producers=1, report=report)

    threads = [
        StageThread("pipeline-errors", sink.run),
        StageThread("line-filter", _filter_stage, lines, compiler, matched, stats),
        StageThread("sanitizer", _relay_stage, matched, sanitized, sanitize_line),
        StageThread("tokenizer", _relay_stage, sanitized, tokenized, tokenize_line),
        StageThread("synthesizer", _synthesis_stage, tokenized, records, diagnostics, index, stats),
    ]
    for thread in threads:
        thread.start()

    commands: list[CompileCommand] = []
    while True:
        item = records.get()
        if item is END_OF_STREAM:
            break
        commands.append(item)

    # Join everything before surfacing the first failure
    for thread in threads:
        thread.join()
    for thread in threads:
        thread.join_result()

    stats.records = len(commands)
    stats.diagnostics = sink.total
    stats.diagnostics_by_stage = dict(sink.counts)
    return PipelineResult(commands=commands, stats=stats)


# =============================================================================
# END TO END
# =============================================================================

def generate_compile_commands(
    input_file: str,
    output_file: str,
    source_directory: str,
    compiler: str,
    encoding: str = "utf-8",
    indent: int = 2,
    follow_symlinks: bool = False,
    skip_dirs: Iterable[str] = (),
    report: Reporter | None = None,
) -> RunReport:
    """Convert ``input_file`` into a compilation database at ``output_file``.

    Fatal problems (unreadable log, invalid source directory, uncreatable
    output) raise before any pipeline work starts. Everything after that
    only produces diagnostics. If the run still fails part way (the log
    becomes unreadable mid-scan), the truncated output file is removed.
    """
    log_handle = open_log(input_file, encoding)
    try:
        check_source_root(source_directory)
        out_handle = open_output(output_file)
        try:
            logger.info("Generating the lookup tree (this may take some time) ...")
            index_result = index_source_tree(
                source_directory,
                follow_symlinks=follow_symlinks,
                skip_dirs=skip_dirs,
                report=report,
            )
            logger.info(
                f"Indexed {index_result.stats['files']} files in "
                f"{index_result.stats['directories']} directories"
            )

            logger.info(f"Scanning {input_file} for '{compiler}' invocations ...")
            result = run_pipeline(read_log_lines(log_handle), compiler, index_result.index, report)

            logger.info(f"Writing {output_file} ...")
            write_compile_commands(out_handle, result.commands, indent=indent)
        except BaseException:
            out_handle.close()
            discard_output(output_file)
            raise
        finally:
            out_handle.close()
    finally:
        log_handle.close()

    return RunReport(output_file=output_file, index=index_result, pipeline=result)
