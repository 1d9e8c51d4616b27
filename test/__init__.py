from __future__ import annotations

import io
import logging
import os
import random
import string
import struct
import unittest
import zipfile

from pathlib import Path
from unittest import mock

import stringsutil


__all__ = ['stringsutil', 'TestBase', 'ClassFileBuilder', 'encode_utf8m', 'make_class', 'make_zip']


def encode_utf8m(text: str) -> bytes:
    """
    Encode a string in the modified UTF-8 format that is used by class files.
    """
    output = bytearray()
    for char in text:
        point = ord(char)
        if point == 0:
            output.extend(B'\xC0\x80')
        elif point > 0xFFFF:
            point -= 0x10000
            for surrogate in (0xD800 | point >> 10, 0xDC00 | point & 0x3FF):
                output.extend(chr(surrogate).encode('utf8', 'surrogatepass'))
        else:
            output.extend(char.encode('utf8', 'surrogatepass'))
    return bytes(output)


class ClassFileBuilder:
    """
    Assemble a synthetic class file. Each method that adds a constant returns its pool index.
    """
    def __init__(self, major: int = 52, minor: int = 0):
        self.version = major, minor
        self.entries: list[bytes] = []
        self.next = 1

    def _add(self, tag: int, payload: bytes, slots: int = 1) -> int:
        index = self.next
        self.entries.append(bytes((tag,)) + payload)
        self.next += slots
        return index

    def raw(self, tag: int, payload: bytes = B'', slots: int = 1) -> int:
        return self._add(tag, payload, slots)

    def utf8(self, text: str | bytes) -> int:
        if isinstance(text, str):
            text = encode_utf8m(text)
        return self._add(0x01, struct.pack('>H', len(text)) + text)

    def string(self, text: str) -> int:
        return self.string_ref(self.utf8(text))

    def string_ref(self, index: int) -> int:
        return self._add(0x08, struct.pack('>H', index))

    def klass(self, name: str) -> int:
        return self._add(0x07, struct.pack('>H', self.utf8(name)))

    def integer(self, value: int) -> int:
        return self._add(0x03, struct.pack('>i', value))

    def long(self, value: int) -> int:
        return self._add(0x05, struct.pack('>q', value), 2)

    def double(self, value: float) -> int:
        return self._add(0x06, struct.pack('>d', value), 2)

    def build(self, this: int | None = None, magic: int = 0xCAFEBABE, trailer: bool = True) -> bytes:
        if this is None:
            this = self.klass('Foo')
        major, minor = self.version
        data = bytearray(struct.pack('>IHHH', magic, minor, major, self.next))
        for entry in self.entries:
            data.extend(entry)
        data.extend(struct.pack('>HH', 0x21, this))
        if trailer:
            # super class, interfaces, fields, methods, attributes
            data.extend(struct.pack('>HHHHH', 0, 0, 0, 0, 0))
        return bytes(data)


def make_class(name: str = 'Foo', *strings: str) -> bytes:
    builder = ClassFileBuilder()
    for text in strings:
        builder.string(text)
    return builder.build(builder.klass(name))


def make_zip(members: dict[str, bytes], compression: int = zipfile.ZIP_DEFLATED) -> bytes:
    """
    Create an in-memory zip archive with the given members in the given order. A member name that
    ends with a slash creates a directory entry.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', compression) as archive:
        for name, data in members.items():
            archive.writestr(name, data)
    return buffer.getvalue()


class TestBase(unittest.TestCase):

    def generate_random_buffer(self, size):
        return bytes(random.randrange(0, 0x100) for _ in range(size))

    def generate_random_text(self, size):
        return ''.join(string.ascii_letters[
            random.randrange(0, len(string.ascii_letters))] for _ in range(size))

    def setUp(self):
        random.seed(0xBAADF00D)  # guarantee deterministic 'random' buffers
        logging.disable(logging.CRITICAL)

    def tearDown(self):
        logging.disable(logging.NOTSET)

    def assertContains(self, container, member, msg=None):
        self.assertIn(member, container, msg)

    def unreadable_directories(self, *names: str):
        """
        Patch `os.scandir` so that listing a directory with one of the given names fails.
        """
        scandir = os.scandir

        def failing_scandir(path):
            if Path(path).name in names:
                raise PermissionError(13, 'Permission denied', str(path))
            return scandir(path)

        return mock.patch.object(os, 'scandir', failing_scandir)
