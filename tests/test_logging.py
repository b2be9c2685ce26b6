"""Tests for the NDJSON log sink."""

import json

from compdbgen.utils.logging import logger, pino_compatible_sink


def test_pino_sink_writes_extra_fields(capsys):
    handler_id = logger.add(pino_compatible_sink, level="WARNING", colorize=False)
    try:
        logger.bind(stage="indexer", source="/src/bad").warning("read_dir error")
    finally:
        logger.remove(handler_id)

    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    record = json.loads(lines[-1])

    assert record["level"] == 40
    assert record["msg"] == "read_dir error"
    assert record["stage"] == "indexer"
    assert record["source"] == "/src/bad"
    assert set(record) == {"level", "time", "msg", "pid", "stage", "source"}
