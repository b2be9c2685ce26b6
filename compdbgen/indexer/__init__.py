"""Source tree indexing package.

Builds the file name -> directory lookup used when a log line names its
source file without a directory.
"""

from .core import (
    DirectoryIndex,
    DirectoryIndexBuilder,
    DirectoryIndexer,
    EntryState,
    IndexEntry,
    build_directory_index,
)

__all__ = [
    "DirectoryIndex",
    "DirectoryIndexBuilder",
    "DirectoryIndexer",
    "EntryState",
    "IndexEntry",
    "build_directory_index",
]
