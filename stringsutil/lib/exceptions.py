"""
Exceptions raised by `stringsutil`. Every exception derives from `stringsutil.lib.exceptions.StringsException`
and, in addition, from the builtin exception type that describes the problem best. This way, code
that uses the library can catch either.
"""
from __future__ import annotations


class StringsException(Exception):
    """
    Base class of all exceptions raised by `stringsutil`. When the exception is raised during a
    traversal, the `resource` attribute holds the path of the resource that failed.
    """
    resource: str | None = None


class NotAClassFileError(StringsException, ValueError):
    """
    The resource does not start with the class file magic `CAFEBABE`.
    """
    def __init__(self, header: int | None = None):
        if header is None:
            message = 'Not a valid class file (header is truncated).'
        else:
            message = F'Not a valid class file (expected CAFEBABE header, got {header:08X}).'
        super().__init__(message)
        self.header = header


class MalformedPoolError(StringsException, ValueError):
    """
    The constant pool could not be parsed; either the stream ended prematurely or an invalid tag was
    encountered.
    """


class WrongEntryKindError(StringsException, TypeError):
    """
    A constant pool index refers to an entry of an unexpected kind.
    """
    def __init__(self, index: int, expected: str, actual: str):
        super().__init__(F'Constant pool entry {index} is of type {actual}, expected {expected}.')
        self.index = index
        self.expected = expected
        self.actual = actual


class DanglingReferenceError(StringsException, IndexError):
    """
    A constant pool index is out of range or refers to one of the unusable slots: either index zero or
    the slot following a Long or Double constant.
    """
    def __init__(self, index: int, size: int, reason: str | None = None):
        if reason is None:
            reason = F'is out of range for a pool of size {size}'
        super().__init__(F'Constant pool index {index} {reason}.')
        self.index = index
        self.size = size


class ResourceReadError(StringsException, OSError):
    """
    A resource could not be opened or read.
    """
    def __init__(self, path: str, reason: str):
        super().__init__(F'Unable to read {path}: {reason}')
        self.path = path
        self.reason = reason


class ArchiveOpenError(StringsException, OSError):
    """
    A resource was identified as an archive, but the archive container could not be opened.
    """
    def __init__(self, path: str, reason: str):
        super().__init__(F'Unable to open archive {path}: {reason}')
        self.path = path
        self.reason = reason
