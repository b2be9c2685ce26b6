"""Integration tests for the compdbgen command line."""

import json

import pytest
from click.testing import CliRunner

from compdbgen import __version__
from compdbgen.cli import cli
from compdbgen.utils.exit_codes import ExitCodes
from compdbgen.utils.logging import set_console_level


@pytest.fixture(autouse=True)
def restore_console_logging():
    """--quiet rebinds the console handler to the runner's stream; put it back."""
    yield
    set_console_level("INFO")


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_generate_help_lists_options():
    result = CliRunner().invoke(cli, ["generate", "--help"])
    assert result.exit_code == 0
    for option in ("--input-file", "--output-file", "--source-directory",
                   "--compiler-executable", "--strict", "--quiet"):
        assert option in result.output


def test_generate_writes_database(make_tree, write_log, tmp_path):
    root = make_tree("app/main.cpp")
    log = write_log(["Build started", 'cl.exe /c /Ox "main.cpp"', "cl.exe /c noext"])
    out = tmp_path / "compile_commands.json"

    result = CliRunner().invoke(cli, [
        "generate", "-i", str(log), "-o", str(out), "-d", str(root),
    ])

    assert result.exit_code == 0, result.output
    assert json.loads(out.read_text()) == [{
        "file": "main.cpp",
        "directory": str(root / "app"),
        "arguments": ["cl.exe", "/c", "/Ox", "main.cpp"],
    }]
    assert "Records written" in result.output


def test_custom_compiler_name(make_tree, write_log, tmp_path):
    root = make_tree("app/main.cpp")
    log = write_log(["clang-cl.exe /c main.cpp", "cl.exe /c /src/other.c"])
    out = tmp_path / "out.json"

    result = CliRunner().invoke(cli, [
        "generate", "-i", str(log), "-o", str(out), "-d", str(root),
        "-c", "CLANG-CL.EXE", "--quiet",
    ])

    assert result.exit_code == 0, result.output
    records = json.loads(out.read_text())
    assert [r["file"] for r in records] == ["main.cpp"]


def test_strict_exits_nonzero_on_diagnostics(make_tree, write_log, tmp_path):
    root = make_tree("a/util.cpp", "b/util.cpp")
    out = tmp_path / "out.json"

    result = CliRunner().invoke(cli, [
        "generate", "-i", str(write_log(["cl.exe util.cpp"])), "-o", str(out),
        "-d", str(root), "--strict", "--quiet",
    ])

    assert result.exit_code == ExitCodes.DIAGNOSTICS_REPORTED
    assert json.loads(out.read_text()) == []


def test_missing_source_directory_is_fatal(write_log, tmp_path):
    result = CliRunner().invoke(cli, [
        "generate", "-i", str(write_log(["cl.exe a.c"])),
        "-o", str(tmp_path / "out.json"), "-d", str(tmp_path / "missing"),
    ])

    assert result.exit_code == ExitCodes.FATAL
    assert "not a directory" in result.output


def test_missing_log_is_fatal(make_tree, tmp_path):
    result = CliRunner().invoke(cli, [
        "generate", "-i", str(tmp_path / "none.log"),
        "-o", str(tmp_path / "out.json"), "-d", str(make_tree()),
    ])

    assert result.exit_code == ExitCodes.FATAL
    assert "Failed to open" in result.output
