"""
This module contains functions to identify the format of a resource from its first four bytes. Only
class files and zip-family archives (JAR, WAR, EAR, ZIP and friends) are of interest; everything else
is classified as unknown and skipped by the traversal.
"""
from __future__ import annotations

import enum

from stringsutil.lib.java import JAVA_CLASS_MAGIC
from stringsutil.lib.resources import Resource
from stringsutil.lib.structures import EOF, StreamReader

ARCHIVE_MAGIC_PREFIX = 0x504B
"""
The first two bytes of all zip records, the letters `PK`. This covers the local file header as well as
the end of central directory record, which is at the beginning of an empty archive.
"""


class ResourceKind(str, enum.Enum):
    ClassFile = 'class file'
    Archive = 'archive'
    Unknown = 'unknown'
    TooSmall = 'too small'


def header(resource: Resource) -> int | None:
    """
    Read the first four bytes of the resource as a big endian integer. The function returns `None`
    if the resource has fewer than four bytes. The stream is closed right after reading the header.
    """
    if resource.size() < 4:
        return None
    with StreamReader(resource.open()) as reader:
        try:
            return reader.u32()
        except EOF:
            return None


def classify(resource: Resource) -> ResourceKind:
    """
    Classify a resource based on its header.
    """
    magic = header(resource)
    if magic is None:
        return ResourceKind.TooSmall
    if magic == JAVA_CLASS_MAGIC:
        return ResourceKind.ClassFile
    if magic >> 16 == ARCHIVE_MAGIC_PREFIX:
        return ResourceKind.Archive
    return ResourceKind.Unknown
