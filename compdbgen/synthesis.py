"""Turn token lists into compile_commands.json records.

Each token list produces exactly one of: a CompileCommand, or a Diagnostic
explaining why the line was rejected. Checks run in a fixed order and the
first failure wins.
"""

from dataclasses import dataclass, field
from typing import Any

from compdbgen.indexer.core import DirectoryIndex, EntryState
from compdbgen.utils.paths import file_name_of, has_extension, parent_of, token_path


@dataclass(frozen=True)
class CompileCommand:
    """One entry of a JSON compilation database.

    ``arguments`` is the full token list as it appeared in the log, the
    source file token included.
    """

    file: str
    directory: str
    arguments: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "directory": self.directory,
            "arguments": list(self.arguments),
        }


class SynthesisError(Exception):
    """A token list that cannot become a CompileCommand.

    Never escapes the synthesizer stage; it is converted to a Diagnostic.
    """


def resolve_directory(file_name: str, index: DirectoryIndex) -> str:
    """Find the directory for a bare file name, or raise SynthesisError."""
    entry = index.lookup(file_name)
    if entry.state is EntryState.UNIQUE:
        return entry.directory
    if entry.state is EntryState.AMBIGUOUS:
        raise SynthesisError(
            f"Duplicate entries found for '{file_name}' in {entry.occurrences} directories"
        )
    raise SynthesisError(f"Path not found for '{file_name}'")


def synthesize(tokens: list[str], index: DirectoryIndex) -> CompileCommand:
    """Build a CompileCommand from one tokenized log line.

    A directory written into the last token is used verbatim; the index is
    consulted only when the token is a bare file name.

    Raises:
        SynthesisError: If the tokens do not describe a compilable file or
            its directory cannot be resolved
    """
    if not tokens:
        raise SynthesisError("Token list is empty")

    last = tokens[-1]
    path = token_path(last)

    file_name = file_name_of(path)
    if not file_name:
        raise SynthesisError(f"Expected file name as last token in {tokens!r}")

    if not has_extension(file_name):
        raise SynthesisError(f"Expected file extension in '{last}'")

    directory = parent_of(last)
    if not directory:
        directory = resolve_directory(file_name, index)

    return CompileCommand(file=file_name, directory=directory, arguments=tuple(tokens))
