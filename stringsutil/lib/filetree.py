"""
Enumeration of the regular files in a directory tree, filtered by include and exclude patterns
which are matched against the path of each file relative to the root of the tree.
"""
from __future__ import annotations

import os

from pathlib import Path
from typing import Callable, Iterable, Iterator

from stringsutil.lib.exceptions import ResourceReadError
from stringsutil.lib.pathset import PathSet
from stringsutil.lib.tools import exception_to_string


class FileTree:
    """
    A directory walker. Directories are traversed depth first and the entries of each directory are
    visited in lexicographic order, which makes the order of the output deterministic. Symbolic links
    to directories are not followed.
    """
    def __init__(self, includes: Iterable[str] = (), excludes: Iterable[str] = ()):
        self.pathset = PathSet(includes, excludes)

    def add_includes(self, patterns: Iterable[str]) -> None:
        self.pathset.include(*patterns)

    def add_excludes(self, patterns: Iterable[str]) -> None:
        self.pathset.exclude(*patterns)

    def stream(
        self,
        root: str | os.PathLike,
        *defaults: str,
        onerror: Callable[[ResourceReadError], None] | None = None,
    ) -> Iterator[Path]:
        """
        Generate all regular files below `root` whose relative path matches the patterns of this tree.
        The default patterns are used when no include patterns were added; when none are given, all
        files are included.

        A directory that cannot be listed raises `stringsutil.lib.exceptions.ResourceReadError`. If
        the `onerror` callback is given, the error is passed to it instead and the walk continues
        without the contents of that directory; the callback may still raise the error.
        """
        matches = self.pathset.matches(*(defaults or ('**',)))
        pending = [self._scan(Path(root), '', onerror)]
        while pending:
            try:
                entry, relative = next(pending[-1])
            except StopIteration:
                pending.pop()
                continue
            if entry.is_dir(follow_symlinks=False):
                pending.append(self._scan(Path(entry.path), F'{relative}/', onerror))
            elif entry.is_file() and matches(relative):
                yield Path(entry.path)

    @staticmethod
    def _scan(
        directory: Path,
        prefix: str,
        onerror: Callable[[ResourceReadError], None] | None,
    ) -> Iterator[tuple[os.DirEntry, str]]:
        try:
            with os.scandir(directory) as scan:
                entries = sorted(scan, key=lambda entry: entry.name)
        except OSError as E:
            error = ResourceReadError(str(directory), exception_to_string(E))
            if onerror is None:
                raise error from E
            onerror(error)
            entries = []
        return ((entry, F'{prefix}{entry.name}') for entry in entries)
