#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Parsing of the constant pool of the Java Class file format as per:
https://docs.oracle.com/javase/specs/jvms/se14/html/jvms-4.html

Only the beginning of a class file is parsed: The magic, the version, the constant pool, the access
flags and the index of the class itself. This is all that is required to extract string constants,
and it avoids reading (or decompressing) the remainder of the file.
"""
from __future__ import annotations

from enum import IntEnum
from typing import Iterator, NamedTuple, Union

from stringsutil.lib.exceptions import (
    DanglingReferenceError,
    MalformedPoolError,
    NotAClassFileError,
    WrongEntryKindError,
)
from stringsutil.lib.structures import EOF, StreamReader

__all__ = (
    'JAVA_CLASS_MAGIC',
    'JvClassHeader',
    'JvConstant',
    'JvConstantPool',
    'JvConstType',
    'JvPoolCursor',
    'decode_utf8m',
)

JAVA_CLASS_MAGIC = 0xCAFEBABE


class JvConstType(IntEnum):
    Utf8             = 0x01 # noqa
    Int              = 0x03 # noqa
    Float            = 0x04 # noqa
    Long             = 0x05 # noqa
    Double           = 0x06 # noqa
    Class            = 0x07 # noqa
    String           = 0x08 # noqa
    Field            = 0x09 # noqa
    Method           = 0x0A # noqa
    InterfaceMethod  = 0x0B # noqa
    NameAndType      = 0x0C # noqa
    MethodHandle     = 0x0F # noqa
    MethodType       = 0x10 # noqa
    Dynamic          = 0x11 # noqa
    InvokeDynamic    = 0x12 # noqa
    Module           = 0x13 # noqa
    Package          = 0x14 # noqa

    @property
    def width(self) -> int:
        """
        The size of the payload that follows the tag byte. For `Utf8` entries, this is the size of
        the length prefix.
        """
        return _PAYLOAD_WIDTH[self]

    @property
    def slots(self) -> int:
        """
        The number of constant pool indices occupied by an entry of this type.
        """
        return 2 if self in (JvConstType.Long, JvConstType.Double) else 1


_PAYLOAD_WIDTH = {
    JvConstType.Utf8            : 2,  # noqa
    JvConstType.Int             : 4,  # noqa
    JvConstType.Float           : 4,  # noqa
    JvConstType.Long            : 8,  # noqa
    JvConstType.Double          : 8,  # noqa
    JvConstType.Class           : 2,  # noqa
    JvConstType.String          : 2,  # noqa
    JvConstType.Field           : 4,  # noqa
    JvConstType.Method          : 4,  # noqa
    JvConstType.InterfaceMethod : 4,  # noqa
    JvConstType.NameAndType     : 4,  # noqa
    JvConstType.MethodHandle    : 3,  # noqa
    JvConstType.MethodType      : 2,  # noqa
    JvConstType.Dynamic         : 4,  # noqa
    JvConstType.InvokeDynamic   : 4,  # noqa
    JvConstType.Module          : 2,  # noqa
    JvConstType.Package         : 2,  # noqa
}

# entries whose payload is a single index into the constant pool
_SINGLE_REFERENCE = frozenset((
    JvConstType.Class,
    JvConstType.String,
    JvConstType.MethodType,
    JvConstType.Module,
    JvConstType.Package,
))


class JvConstant(NamedTuple):
    """
    An entry of the constant pool. For `Utf8` entries, the value is the decoded string. For entries
    that consist of a single index into the pool, like `String` and `Class`, the value is that index.
    For all other entries, the value is the raw payload.
    """
    tag: JvConstType
    value: Union[str, int, bytes]


class JvPoolCursor(NamedTuple):
    """
    The position of the constant pool reader: `index` is the logical index of the next entry and
    `limit` is the declared pool size. Valid indices are in the range from 1 to `limit - 1`.
    """
    index: int
    limit: int

    @property
    def done(self) -> bool:
        return self.index >= self.limit

    def advance(self, tag: JvConstType) -> JvPoolCursor:
        """
        Return the cursor that follows an entry of the given type; Long and Double constants
        take up two slots.
        """
        return self._replace(index=self.index + tag.slots)


def decode_utf8m(string: bytes) -> str:
    """
    Decode the modified UTF-8 encoding used by class files. Each character is encoded as a sequence
    of one, two or three bytes which encodes a single UTF-16 code unit; the null character is encoded
    as `C0 80` and supplementary characters as a surrogate pair. The decoder accepts the same byte
    sequences as the Java runtime does when it loads a class, which includes overlong encodings.
    Surrogate pairs are joined into one code point; unpaired surrogates are preserved as lone
    surrogates in the decoded string.
    """
    units: list[int] = []
    length = len(string)
    i = 0
    while i < length:
        lead = string[i]
        if lead < 0x80:
            units.append(lead)
            i += 1
            continue
        if lead & 0xE0 == 0xC0:
            size = 2
        elif lead & 0xF0 == 0xE0:
            size = 3
        else:
            raise MalformedPoolError(F'Invalid modified UTF-8 lead byte {lead:02X} at offset {i}.')
        if i + size > length:
            raise MalformedPoolError('Truncated modified UTF-8 sequence.')
        tail = string[i + 1:i + size]
        if any(byte & 0xC0 != 0x80 for byte in tail):
            raise MalformedPoolError(F'Invalid modified UTF-8 continuation byte at offset {i}.')
        if size == 2:
            unit = (lead & 0x1F) << 6 | tail[0] & 0x3F
        else:
            unit = (lead & 0x0F) << 12 | (tail[0] & 0x3F) << 6 | tail[1] & 0x3F
        units.append(unit)
        i += size
    chars = []
    count = len(units)
    k = 0
    while k < count:
        unit = units[k]
        k += 1
        if 0xD800 <= unit < 0xDC00 and k < count and 0xDC00 <= units[k] < 0xE000:
            unit = 0x10000 + ((unit - 0xD800) << 10) + (units[k] - 0xDC00)
            k += 1
        chars.append(chr(unit))
    return ''.join(chars)


class JvConstantPool:
    """
    The constant pool of a class file. Entries are addressed by their logical index, starting at 1.
    Index 0 and the slot that follows each Long and Double constant are unusable.
    """

    def __init__(self, size: int, entries: list[JvConstant | None]):
        self._size = size
        self._entries = entries

    @classmethod
    def Read(cls, reader: StreamReader) -> JvConstantPool:
        """
        Read the constant pool from a stream which is positioned directly after the version fields
        of a class file.
        """
        try:
            size = reader.u16()
        except EOF as eof:
            raise MalformedPoolError('Stream ended before the constant pool size.') from eof
        entries: list[JvConstant | None] = [None] * max(size, 1)
        cursor = JvPoolCursor(1, size)
        while not cursor.done:
            constant = cls._read_constant(reader, cursor.index)
            entries[cursor.index] = constant
            cursor = cursor.advance(constant.tag)
        return cls(size, entries)

    @staticmethod
    def _read_constant(reader: StreamReader, index: int) -> JvConstant:
        try:
            tid = reader.read_byte()
            try:
                tag = JvConstType(tid)
            except ValueError:
                raise MalformedPoolError(
                    F'Encountered invalid type specifier {tid:02X} for constant {index}.') from None
            if tag == JvConstType.Utf8:
                return JvConstant(tag, decode_utf8m(reader.read_length_prefixed(16)))
            if tag in _SINGLE_REFERENCE:
                return JvConstant(tag, reader.u16())
            return JvConstant(tag, reader.read_exactly(tag.width))
        except EOF as eof:
            raise MalformedPoolError(F'Stream ended while reading constant {index}.') from eof

    @property
    def size(self) -> int:
        """
        The declared size of the constant pool; this is one more than the largest valid index.
        """
        return self._size

    def __len__(self):
        return self._size

    def __iter__(self) -> Iterator[tuple[int, JvConstant]]:
        for index, entry in enumerate(self._entries):
            if entry is not None:
                yield index, entry

    def _lookup(self, index: int) -> JvConstant:
        if not 0 < index < self._size:
            raise DanglingReferenceError(index, self._size)
        entry = self._entries[index]
        if entry is None:
            raise DanglingReferenceError(index, self._size, 'refers to the unusable slot after a wide constant')
        return entry

    def _expect(self, index: int, tag: JvConstType) -> JvConstant:
        entry = self._lookup(index)
        if entry.tag != tag:
            raise WrongEntryKindError(index, tag.name, entry.tag.name)
        return entry

    def tag(self, index: int) -> JvConstType | None:
        """
        Return the type of the constant at the given index, or `None` if the index refers to the slot
        that follows a Long or Double constant.
        """
        if not 0 < index < self._size:
            raise DanglingReferenceError(index, self._size)
        entry = self._entries[index]
        return entry and entry.tag

    def utf8(self, index: int) -> str:
        return self._expect(index, JvConstType.Utf8).value

    def string(self, index: int) -> str:
        """
        Resolve the `String` constant at the given index to the text of the `Utf8` entry that it
        refers to.
        """
        return self.utf8(self._expect(index, JvConstType.String).value)

    def class_name(self, index: int) -> str:
        """
        Resolve the `Class` constant at the given index to the binary name of the class.
        """
        return self.utf8(self._expect(index, JvConstType.Class).value)

    def strings(self) -> Iterator[str]:
        """
        Generate the values of all `String` constants in the order of their index.
        """
        for index, entry in self:
            if entry.tag == JvConstType.String:
                yield self.string(index)


class JvClassHeader(NamedTuple):
    """
    The part of a class file that precedes the fields, methods and attributes: The version, the
    constant pool, the access flags and the name of the class itself.
    """
    version: tuple[int, int]
    pool: JvConstantPool
    access: int
    this: str

    @classmethod
    def Read(cls, reader: StreamReader) -> JvClassHeader:
        try:
            magic = reader.u32()
        except EOF as eof:
            raise NotAClassFileError() from eof
        if magic != JAVA_CLASS_MAGIC:
            raise NotAClassFileError(magic)
        try:
            minor = reader.u16()
            major = reader.u16()
        except EOF as eof:
            raise MalformedPoolError('Stream ended while reading the class file version.') from eof
        pool = JvConstantPool.Read(reader)
        try:
            access = reader.u16()
            this = reader.u16()
        except EOF as eof:
            raise MalformedPoolError('Stream ended while reading the class index.') from eof
        return cls((major, minor), pool, access, pool.class_name(this))
