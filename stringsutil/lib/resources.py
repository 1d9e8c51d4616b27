"""
A resource is an opaque, read-only source of bytes which can report its size and open a fresh stream
that starts at offset zero. Callers never have to know whether a resource is backed by a file on disk,
by a buffer in memory or by a member of an archive.
"""
from __future__ import annotations

import abc
import io
import os

from pathlib import Path
from typing import BinaryIO

from stringsutil.lib.exceptions import ResourceReadError
from stringsutil.lib.tools import exception_to_string


class Resource(abc.ABC):
    """
    Abstract base class for all resources. The `path` is used to refer to the resource in log
    messages.
    """
    path: str

    @abc.abstractmethod
    def size(self) -> int:
        """
        The total number of bytes in this resource.
        """

    @abc.abstractmethod
    def open(self) -> BinaryIO:
        """
        Open a new binary stream that starts at the beginning of the resource. The caller is
        responsible for closing it.
        """

    def read(self) -> bytes:
        """
        Read the entire resource into memory.
        """
        with self.open() as stream:
            try:
                return stream.read()
            except ResourceReadError:
                raise
            except OSError as E:
                raise ResourceReadError(self.path, exception_to_string(E)) from E

    def __repr__(self):
        return F'<{self.__class__.__name__}:{self.path}>'


class FileResource(Resource):
    """
    A resource that is backed by a file on disk. The size is obtained without reading the file.
    """
    def __init__(self, file: str | os.PathLike):
        self.file = Path(file)
        self.path = str(file)

    def size(self) -> int:
        try:
            return self.file.stat().st_size
        except OSError as E:
            raise ResourceReadError(self.path, exception_to_string(E)) from E

    def open(self) -> BinaryIO:
        try:
            return self.file.open('rb')
        except OSError as E:
            raise ResourceReadError(self.path, exception_to_string(E)) from E


class MemoryResource(Resource):
    """
    A resource whose data is held in memory.
    """
    def __init__(self, data: bytes | bytearray | memoryview, path: str = '<memory>'):
        self.data = bytes(data)
        self.path = path

    def size(self) -> int:
        return len(self.data)

    def open(self) -> BinaryIO:
        return io.BytesIO(self.data)

    def read(self) -> bytes:
        return self.data
