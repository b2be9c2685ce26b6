"""Pytest configuration and fixtures."""
from pathlib import Path

import pytest


@pytest.fixture
def make_tree(tmp_path):
    """Create files under a fresh source root.

    Usage: root = make_tree("app/main.cpp", "lib/util.cpp")
    """
    def _make(*relative_paths: str) -> Path:
        root = tmp_path / "src"
        root.mkdir(exist_ok=True)
        for rel in relative_paths:
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("// test\n")
        return root

    return _make


@pytest.fixture
def write_log(tmp_path):
    """Write a build log from a list of lines and return its path."""
    def _write(lines: list[str], name: str = "msbuild.log") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def collected():
    """Reporter that records diagnostics instead of logging them."""
    diagnostics = []

    def _report(diagnostic):
        diagnostics.append(diagnostic)

    _report.items = diagnostics
    return _report
