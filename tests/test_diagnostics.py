"""Tests for the ErrorSink and Diagnostic reporting."""

import queue
import threading

from compdbgen.diagnostics import END_OF_STREAM, Diagnostic, ErrorSink


def test_diagnostic_str_includes_stage_and_source():
    diagnostic = Diagnostic("Path not found for 'a.c'", "synthesizer", "log:12")
    assert str(diagnostic) == "[synthesizer] log:12: Path not found for 'a.c'"
    assert str(Diagnostic("boom", "indexer")) == "[indexer] boom"


def test_sink_waits_for_every_producer(collected):
    diagnostics = queue.SimpleQueue()
    sink = ErrorSink(diagnostics, producers=3, report=collected)

    def producer(stage, count):
        for i in range(count):
            diagnostics.put(Diagnostic(f"problem {i}", stage))
        diagnostics.put(END_OF_STREAM)

    workers = [
        threading.Thread(target=producer, args=(stage, n))
        for stage, n in (("indexer", 5), ("filter", 0), ("synthesizer", 7))
    ]
    sink_thread = threading.Thread(target=sink.run)
    sink_thread.start()
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()
    sink_thread.join(timeout=5)

    assert not sink_thread.is_alive()
    assert sink.total == 12
    assert sink.counts == {"indexer": 5, "synthesizer": 7}


def test_per_producer_order_preserved(collected):
    diagnostics = queue.SimpleQueue()
    for i in range(10):
        diagnostics.put(Diagnostic(f"m{i}", "synthesizer"))
    diagnostics.put(END_OF_STREAM)

    assert ErrorSink(diagnostics, producers=1, report=collected).run() == 10
    assert [d.message for d in collected.items] == [f"m{i}" for i in range(10)]


def test_failing_reporter_does_not_stop_the_sink(capsys):
    diagnostics = queue.SimpleQueue()
    diagnostics.put(Diagnostic("first", "synthesizer"))
    diagnostics.put(Diagnostic("second", "synthesizer"))
    diagnostics.put(END_OF_STREAM)

    def broken(diagnostic):
        raise RuntimeError("stream closed")

    sink = ErrorSink(diagnostics, producers=1, report=broken)
    assert sink.run() == 2

    err = capsys.readouterr().err
    assert "first" in err and "second" in err
    assert "RuntimeError" in err


def test_default_reporter_logs_through_loguru():
    from compdbgen.utils.logging import logger

    messages = []
    handler_id = logger.add(messages.append, level="WARNING", format="{message}")
    try:
        diagnostics = queue.SimpleQueue()
        diagnostics.put(Diagnostic("Expected file extension in 'noext'", "synthesizer", "log:3"))
        diagnostics.put(END_OF_STREAM)
        ErrorSink(diagnostics, producers=1).run()
    finally:
        logger.remove(handler_id)

    assert len(messages) == 1
    assert "log:3" in messages[0]
    assert messages[0].record["extra"]["stage"] == "synthesizer"
