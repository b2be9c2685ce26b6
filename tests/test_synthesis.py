"""Tests for CompileCommand synthesis and directory resolution."""

import pytest

from compdbgen.indexer import DirectoryIndex, DirectoryIndexBuilder
from compdbgen.synthesis import CompileCommand, SynthesisError, synthesize


def make_index(*pairs):
    builder = DirectoryIndexBuilder()
    for directory, name in pairs:
        builder.add(directory, name)
    return builder.freeze()


class TestSynthesize:

    def test_bare_name_resolved_from_index(self):
        index = make_index(("/src/app", "main.cpp"))
        command = synthesize(["cl.exe", "/c", "/Ox", "main.cpp"], index)

        assert command == CompileCommand(
            file="main.cpp",
            directory="/src/app",
            arguments=("cl.exe", "/c", "/Ox", "main.cpp"),
        )
        assert command.to_dict() == {
            "file": "main.cpp",
            "directory": "/src/app",
            "arguments": ["cl.exe", "/c", "/Ox", "main.cpp"],
        }

    def test_embedded_directory_wins_over_index(self):
        index = make_index(("/elsewhere", "main.cpp"))
        command = synthesize(["cl.exe", "/c", "/Ox", "/src/app/main.cpp"], index)

        assert command.directory == "/src/app"
        assert command.file == "main.cpp"
        assert command.arguments[-1] == "/src/app/main.cpp"

    def test_embedded_directory_used_even_if_nonexistent_and_index_empty(self):
        command = synthesize(["cl.exe", "/no/such/dir/x.c"], DirectoryIndex())
        assert command.directory == "/no/such/dir"

    def test_relative_directory_kept_verbatim(self):
        command = synthesize(["cl.exe", "src/app/main.cpp"], DirectoryIndex())
        assert command.directory == "src/app"

    def test_windows_path_split_on_backslashes(self):
        command = synthesize(["cl.exe", "/c", "C:\\work\\proj\\main.cpp"], DirectoryIndex())
        assert command.file == "main.cpp"
        assert command.directory == "C:\\work\\proj"

    def test_file_at_filesystem_root(self):
        command = synthesize(["cl.exe", "/main.cpp"], DirectoryIndex())
        assert command.directory == "/"

    @pytest.mark.parametrize("token, directory", [
        ("C:/work/proj/main.cpp", "C:/work/proj"),
        ("D:\\work/proj/main.cpp", "D:\\work/proj"),
        ("src//app/./main.cpp", "src//app/."),
        ("C:\\main.cpp", "C:\\"),
        ("\\\\server\\share\\main.cpp", "\\\\server\\share"),
        ("./main.cpp", "."),
        ("src/app//main.cpp", "src/app"),
    ])
    def test_embedded_directory_is_kept_as_written(self, token, directory):
        command = synthesize(["cl.exe", "/c", token], DirectoryIndex())
        assert command.directory == directory
        assert command.file == "main.cpp"
        assert command.arguments[-1] == token

    def test_path_token_stays_in_arguments(self):
        tokens = ["cl.exe", "/nologo", "main.cpp"]
        command = synthesize(tokens, make_index(("/src", "main.cpp")))
        assert list(command.arguments) == tokens


class TestRejections:
    """First failing check wins; each produces one SynthesisError."""

    def test_empty_token_list(self):
        with pytest.raises(SynthesisError, match="empty"):
            synthesize([], DirectoryIndex())

    @pytest.mark.parametrize("last", ["/", "..", "."])
    def test_no_file_name(self, last):
        with pytest.raises(SynthesisError, match="Expected file name"):
            synthesize(["cl.exe", last], DirectoryIndex())

    @pytest.mark.parametrize("last", ["noext", "/src/noext", ".hidden", "main."])
    def test_no_extension(self, last):
        with pytest.raises(SynthesisError, match="Expected file extension"):
            synthesize(["cl.exe", "/c", last], make_index(("/src", "noext.cpp")))

    def test_bare_name_not_in_index(self):
        with pytest.raises(SynthesisError, match="Path not found for 'main.cpp'"):
            synthesize(["cl.exe", "main.cpp"], DirectoryIndex())

    def test_bare_name_ambiguous(self):
        index = make_index(("/src/a", "util.cpp"), ("/src/b", "util.cpp"))
        with pytest.raises(SynthesisError, match="Duplicate entries found for 'util.cpp'"):
            synthesize(["cl.exe", "/c", "util.cpp"], index)

    def test_ambiguous_name_with_directory_still_resolves(self):
        index = make_index(("/src/a", "util.cpp"), ("/src/b", "util.cpp"))
        command = synthesize(["cl.exe", "/src/b/util.cpp"], index)
        assert command.directory == "/src/b"
