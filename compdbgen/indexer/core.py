"""Source tree indexing: file name -> containing directory.

Log lines frequently name the compiled file without a directory. The
DirectoryIndex built here lets the synthesizer recover it, but only when the
name is unique across the whole tree. A name seen twice is marked AMBIGUOUS
and never resolved, because either directory could be the right one.
"""

import os
import queue
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from compdbgen.diagnostics import END_OF_STREAM, Diagnostic
from compdbgen.utils.logging import logger
from compdbgen.utils.paths import has_extension

STAGE = "indexer"


class EntryState(Enum):
    """Lookup outcome for a file name."""

    UNSEEN = "unseen"
    UNIQUE = "unique"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class IndexEntry:
    """Result of looking a file name up in the index.

    ``directory`` is set only for UNIQUE entries. ``occurrences`` counts how
    many files with this name were seen, for reporting ambiguity.
    """

    state: EntryState
    directory: str | None = None
    occurrences: int = 0


UNSEEN_ENTRY = IndexEntry(EntryState.UNSEEN)


class DirectoryIndex:
    """Read-only file name -> directory lookup.

    Built once by DirectoryIndexBuilder, then shared between threads without
    locking; nothing mutates it after construction.
    """

    def __init__(self, entries: dict[str, IndexEntry] | None = None):
        self._entries = MappingProxyType(dict(entries or {}))

    def lookup(self, file_name: str) -> IndexEntry:
        return self._entries.get(file_name, UNSEEN_ENTRY)

    def __contains__(self, file_name: object) -> bool:
        return file_name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def ambiguous_names(self) -> list[str]:
        return sorted(
            name for name, entry in self._entries.items()
            if entry.state is EntryState.AMBIGUOUS
        )

    def unique_count(self) -> int:
        return sum(1 for entry in self._entries.values() if entry.state is EntryState.UNIQUE)


class DirectoryIndexBuilder:
    """Accumulates observed files; first sighting wins, a second marks ambiguity."""

    def __init__(self):
        self._entries: dict[str, IndexEntry] = {}
        self.files_seen = 0

    def add(self, directory: str, file_name: str) -> None:
        """Record ``file_name`` found in ``directory``. Names without an extension are ignored."""
        if not has_extension(file_name):
            return
        self.files_seen += 1

        current = self._entries.get(file_name)
        if current is None:
            self._entries[file_name] = IndexEntry(EntryState.UNIQUE, directory, 1)
        else:
            self._entries[file_name] = IndexEntry(
                EntryState.AMBIGUOUS, None, current.occurrences + 1
            )

    def freeze(self) -> DirectoryIndex:
        return DirectoryIndex(self._entries)


def build_directory_index(found: "queue.SimpleQueue") -> DirectoryIndex:
    """Consume (directory, file name) pairs until END_OF_STREAM; return the frozen index."""
    builder = DirectoryIndexBuilder()
    while True:
        item = found.get()
        if item is END_OF_STREAM:
            break
        directory, file_name = item
        builder.add(directory, file_name)

    index = builder.freeze()
    logger.debug(
        f"Index built: {builder.files_seen} files, {len(index)} names, "
        f"{len(index.ambiguous_names())} ambiguous"
    )
    return index


class DirectoryIndexer:
    """Walks a source tree depth-first with an explicit stack.

    Read failures are reported as Diagnostics and the walk continues with
    the remaining directories.
    """

    def __init__(
        self,
        root: str,
        follow_symlinks: bool = False,
        skip_dirs: Iterable[str] = (),
    ):
        """Initialize the indexer.

        Args:
            root: Directory to walk
            follow_symlinks: Descend into symlinked directories
            skip_dirs: Directory names never descended into
        """
        self.root = os.path.abspath(root)
        self.follow_symlinks = follow_symlinks
        self.skip_dirs = frozenset(skip_dirs)

        self.stats = {
            "directories": 0,
            "files": 0,
            "skipped_dirs": 0,
            "read_errors": 0,
        }

    def walk(self, found: "queue.SimpleQueue", diagnostics: "queue.SimpleQueue") -> None:
        """Send (directory, file name) for every regular file beneath the root.

        Always closes ``found`` and signs off from ``diagnostics`` with
        END_OF_STREAM, even if the walk fails unexpectedly.
        """
        try:
            self._walk(found, diagnostics)
        finally:
            found.put(END_OF_STREAM)
            diagnostics.put(END_OF_STREAM)

    def _walk(self, found: "queue.SimpleQueue", diagnostics: "queue.SimpleQueue") -> None:
        visited: set[str] = set()
        if self.follow_symlinks:
            visited.add(os.path.realpath(self.root))

        stack = [self.root]
        while stack:
            directory = stack.pop()
            try:
                scanner = os.scandir(directory)
            except OSError as e:
                self._report(diagnostics, directory, f"read_dir error for '{directory}': {e}")
                continue

            self.stats["directories"] += 1
            with scanner:
                while True:
                    try:
                        entry = next(scanner)
                    except StopIteration:
                        break
                    except OSError as e:
                        self._report(
                            diagnostics, directory, f"Failed to read entry in '{directory}': {e}"
                        )
                        break

                    try:
                        if entry.is_dir(follow_symlinks=self.follow_symlinks):
                            if self._should_descend(entry, visited):
                                stack.append(entry.path)
                            continue
                        if entry.is_file():
                            self.stats["files"] += 1
                            found.put((directory, entry.name))
                    except OSError as e:
                        self._report(
                            diagnostics, directory, f"Failed to read entry in '{directory}': {e}"
                        )

    def _should_descend(self, entry: os.DirEntry, visited: set[str]) -> bool:
        if entry.name in self.skip_dirs:
            self.stats["skipped_dirs"] += 1
            return False
        if self.follow_symlinks:
            real = os.path.realpath(entry.path)
            if real in visited:
                # Symlink cycle or second route to an already indexed directory
                self.stats["skipped_dirs"] += 1
                return False
            visited.add(real)
        return True

    def _report(self, diagnostics: "queue.SimpleQueue", directory: str, message: str) -> None:
        self.stats["read_errors"] += 1
        diagnostics.put(Diagnostic(message, STAGE, directory))
