"""
The traversal driver and the processors for class files and archives. A `stringsutil.strings.Strings`
object is configured once with include and exclude patterns and then run on files or directories:

    from stringsutil import Strings
    Strings(['**/*.class', '!**/Test*.class']).run('application.war')

Each resource is identified by its first four bytes. Class files are parsed up to the end of the
constant pool and every string constant is written to the output stream, one per line. For each
class file, the line `>> CLASS: <name>` is written to the diagnostic stream first. Archives are
opened and their members are processed in the same way, which includes archives within archives.

The traversal is depth first and uses an explicit stack of open archives rather than recursion, so
the nesting depth of archives is not limited by the Python call stack. By default, the first
failure aborts the run; in lenient mode, failures are logged and the traversal continues with the
next resource.
"""
from __future__ import annotations

import os
import sys

from pathlib import Path
from typing import Iterable, Iterator, TextIO

from stringsutil.lib.archive import Archive
from stringsutil.lib.environment import LogLevel, logger
from stringsutil.lib.exceptions import StringsException
from stringsutil.lib.filetree import FileTree
from stringsutil.lib.id import ResourceKind, classify
from stringsutil.lib.java import JvClassHeader
from stringsutil.lib.pathset import PathSet
from stringsutil.lib.resources import FileResource, Resource
from stringsutil.lib.structures import StreamReader
from stringsutil.lib.tools import exception_to_string

__all__ = ['Strings']


class _Frame:
    """
    An entry of the traversal stack: a sequence of resources that remain to be processed and, except
    for the bottom of the stack, the archive that they belong to.
    """
    __slots__ = 'archive', 'resources'

    def __init__(self, resources: Iterable[Resource], archive: Archive | None = None):
        self.archive = archive
        self.resources = iter(resources)

    def close(self):
        if self.archive is not None:
            self.archive.close()


class Strings:
    """
    Extract string constants from class files, directories and archives.

    The positional argument is a list of path patterns; patterns starting with an exclamation mark
    are exclude patterns and all others are include patterns. The patterns filter the files of a
    directory as well as the members of archives. When `lenient` is set, a resource that cannot be
    processed is logged and skipped instead of aborting the run. Strings are written to `output`,
    which defaults to standard output, and the class names are written to `diagnostics`, which
    defaults to standard error.
    """
    logger = logger('stringsutil')

    def __init__(
        self,
        patterns: Iterable[str] = (),
        lenient: bool = False,
        output: TextIO | None = None,
        diagnostics: TextIO | None = None,
    ):
        self.pathset = PathSet.FromPatterns(patterns)
        self.matches = self.pathset.matches('**')
        self.lenient = lenient
        self.output = output if output is not None else sys.stdout
        self.diagnostics = diagnostics if diagnostics is not None else sys.stderr
        self.failures = 0

    @property
    def log_level(self) -> LogLevel:
        return LogLevel(self.logger.getEffectiveLevel())

    @log_level.setter
    def log_level(self, value: int | LogLevel) -> None:
        self.logger.setLevel(value)

    @classmethod
    def log_fail(cls, *messages) -> bool:
        rv = cls.logger.isEnabledFor(LogLevel.ERROR)
        if rv and messages:
            cls.logger.error(cls._output(*messages))
        return rv

    @classmethod
    def log_warn(cls, *messages) -> bool:
        rv = cls.logger.isEnabledFor(LogLevel.WARNING)
        if rv and messages:
            cls.logger.warning(cls._output(*messages))
        return rv

    @classmethod
    def log_info(cls, *messages) -> bool:
        rv = cls.logger.isEnabledFor(LogLevel.INFO)
        if rv and messages:
            cls.logger.info(cls._output(*messages))
        return rv

    @classmethod
    def log_debug(cls, *messages) -> bool:
        rv = cls.logger.isEnabledFor(LogLevel.DEBUG)
        if rv and messages:
            cls.logger.debug(cls._output(*messages))
        return rv

    @staticmethod
    def _output(*messages) -> str:
        def transform(message):
            if callable(message):
                message = message()
            if isinstance(message, BaseException):
                message = exception_to_string(message)
            return str(message)
        return ' '.join(transform(msg) for msg in messages)

    def files(self, root: str | os.PathLike) -> Iterator[Path]:
        """
        Generate the files that are processed when running on the given root. For a directory, these
        are all regular files in the tree that match the patterns; otherwise, this is only the root.
        A subdirectory that cannot be listed is a failure of that subdirectory.
        """
        root = Path(root)
        if not root.is_dir():
            yield root
            return
        tree = FileTree()
        tree.add_includes(self.pathset.includes)
        tree.add_excludes(self.pathset.excludes)
        yield from tree.stream(root, '**', onerror=lambda error: self._failure(error.path, error))

    def run(self, root: str | os.PathLike) -> None:
        """
        Process a file or a directory.
        """
        self.process_resources(FileResource(path) for path in self.files(root))

    def process_resource(self, resource: Resource) -> None:
        """
        Process a single resource, which can be a class file or an archive; any other resource is
        ignored.
        """
        self.process_resources((resource,))

    def process_resources(self, resources: Iterable[Resource]) -> None:
        """
        Process a sequence of resources in order. Archives are descended into depth first.
        """
        self._traverse(_Frame(resources))

    def process_archive(self, resource: Resource) -> None:
        """
        Process every member of an archive that matches the patterns, including nested archives.
        """
        archive = self._open_archive(resource)
        self._traverse(_Frame(archive.members(self.matches), archive))

    def _traverse(self, frame: _Frame) -> None:
        stack = [frame]
        try:
            while stack:
                frame = stack[-1]
                try:
                    resource = next(frame.resources)
                except StopIteration:
                    stack.pop().close()
                    continue
                try:
                    archive = self._dispatch(resource)
                except StringsException as error:
                    self._failure(resource.path, error)
                    continue
                if archive is not None:
                    stack.append(_Frame(archive.members(self.matches), archive))
        finally:
            while stack:
                stack.pop().close()

    def _failure(self, path: str, error: StringsException) -> None:
        if error.resource is None:
            error.resource = path
        if not self.lenient:
            raise error
        self.failures += 1
        self.log_warn(F'skipping {path}:', error)

    def _dispatch(self, resource: Resource) -> Archive | None:
        kind = classify(resource)
        if kind is ResourceKind.ClassFile:
            self.process_class_file(resource)
        elif kind is ResourceKind.Archive:
            return self._open_archive(resource)
        else:
            self.log_debug(F'skipping {resource.path}: {kind.value}')
        return None

    def _open_archive(self, resource: Resource) -> Archive:
        self.log_info(F'opening archive {resource.path}')
        return Archive.Open(resource)

    def process_class_file(self, resource: Resource) -> None:
        """
        Write the name of the class to the diagnostic stream and all string constants to the output
        stream. The strings are only written once all of them were resolved successfully.
        """
        self.log_debug(F'parsing class file {resource.path}')
        with StreamReader(resource.open()) as reader:
            header = JvClassHeader.Read(reader)
        self.diagnostics.write(F'>> CLASS: {header.this}\n')
        strings = list(header.pool.strings())
        for string in strings:
            self.output.write(string)
            self.output.write('\n')
        self.log_debug(F'found {len(strings)} strings in {header.this}')
