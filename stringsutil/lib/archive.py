"""
The archive container: opens zip-family archives (ZIP, JAR, WAR, EAR, ...) and exposes their members
as `stringsutil.lib.resources.Resource` objects. Archives that are files on disk are read directly
from disk. Archives nested inside other archives are read into memory first, because the zip format
requires random access to the central directory at the end of the archive.
"""
from __future__ import annotations

import io
import zipfile
import zlib

from typing import BinaryIO, Callable, Iterator

from stringsutil.lib.exceptions import ArchiveOpenError, ResourceReadError
from stringsutil.lib.resources import FileResource, Resource
from stringsutil.lib.tools import exception_to_string

_READ_ERRORS = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    zlib.error,
    EOFError,
    NotImplementedError,
    RuntimeError,
    ValueError,
    OSError,
)


class MemberStream(io.RawIOBase):
    """
    A thin wrapper around the decompressing stream of an archive member which translates the various
    exceptions that can occur while decompressing into `stringsutil.lib.exceptions.ResourceReadError`.
    """
    def __init__(self, stream: BinaryIO, path: str):
        super().__init__()
        self._stream = stream
        self._path = path

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        try:
            return self._stream.read(size)
        except ResourceReadError:
            raise
        except _READ_ERRORS as E:
            raise ResourceReadError(self._path, exception_to_string(E)) from E

    def readinto(self, buffer) -> int:
        data = self.read(len(buffer))
        size = len(data)
        buffer[:size] = data
        return size

    def close(self) -> None:
        try:
            self._stream.close()
        finally:
            super().close()


class ArchiveMember(Resource):
    """
    A file inside an archive. The size is taken from the central directory, so it is available without
    decompressing anything, and the stream returned by `open` decompresses on the fly.
    """
    def __init__(self, archive: Archive, info: zipfile.ZipInfo):
        self.archive = archive
        self.info = info
        self.name = info.filename
        self.path = F'{archive.path}!/{info.filename}'

    def size(self) -> int:
        return self.info.file_size

    def open(self) -> BinaryIO:
        try:
            stream = self.archive.zipfile.open(self.info)
        except _READ_ERRORS as E:
            raise ResourceReadError(self.path, exception_to_string(E)) from E
        return MemberStream(stream, self.path)


class Archive:
    """
    An open archive. Use `stringsutil.lib.archive.Archive.Open` to open an archive resource, preferably
    as a context manager; the archive has to remain open while its members are processed.
    """
    def __init__(self, resource: Resource, handle: zipfile.ZipFile):
        self.resource = resource
        self.path = resource.path
        self.zipfile = handle

    @classmethod
    def Open(cls, resource: Resource) -> Archive:
        """
        Open the given resource as an archive. Raises `stringsutil.lib.exceptions.ArchiveOpenError`
        if the container cannot be opened.
        """
        try:
            if isinstance(resource, FileResource):
                handle = zipfile.ZipFile(resource.file)
            else:
                handle = zipfile.ZipFile(io.BytesIO(resource.read()))
        except ResourceReadError as E:
            raise ArchiveOpenError(resource.path, E.reason) from E
        except _READ_ERRORS as E:
            raise ArchiveOpenError(resource.path, exception_to_string(E)) from E
        return cls(resource, handle)

    def __enter__(self):
        return self

    def __exit__(self, *args) -> bool:
        self.close()
        return False

    def close(self) -> None:
        self.zipfile.close()

    def members(self, matches: Callable[[str], bool] | None = None) -> Iterator[ArchiveMember]:
        """
        Generate the file members of this archive in the order of the central directory. If a
        predicate is given, only members whose path matches it are generated. Directory entries
        are always skipped.
        """
        for info in self.zipfile.infolist():
            if info.is_dir():
                continue
            if matches is not None and not matches(info.filename):
                continue
            yield ArchiveMember(self, info)

    def __repr__(self):
        return F'<Archive:{self.path}>'
