"""
Interfaces and classes to read structured data from binary streams.
"""
from __future__ import annotations

from typing import BinaryIO, Generic, TypeVar

R = TypeVar('R', bound=BinaryIO)


class EOF(EOFError):
    """
    While reading from a `stringsutil.lib.structures.StreamReader`, less bytes were available than
    requested. The exception contains the data from the incomplete read.
    """
    def __init__(self, size: int, rest: bytes = B''):
        super().__init__(F'Unexpected end of stream; attempted to read {size} bytes, but got only {len(rest)}.')
        self.rest = rest
        self.size = size

    def __bytes__(self):
        return bytes(self.rest)


class StreamReader(Generic[R]):
    """
    A reader for structured data on top of an arbitrary binary stream. Contrary to a reader that
    operates on a memory buffer, it never requires the stream to be seekable and it only reads as
    many bytes as are requested; this matters for streams that decompress archive members on the
    fly. All multi-byte integers are unsigned and in big endian byte order, as in class files. The
    reader can be used as a context manager, in which case the underlying stream is closed when the
    context ends.
    """
    __slots__ = 'stream',

    def __init__(self, stream: R):
        self.stream = stream

    def __enter__(self):
        return self

    def __exit__(self, *args) -> bool:
        self.close()
        return False

    def close(self) -> None:
        self.stream.close()

    def read_exactly(self, size: int) -> bytes:
        """
        Read exactly `size` many bytes from the underlying stream. Raises an exception of type
        `stringsutil.lib.structures.EOF` when fewer data is available in the stream than requested.
        The remaining data can be extracted from the exception.
        """
        if size < 0:
            raise ValueError(F'Invalid read size {size}.')
        chunks = []
        remaining = size
        while remaining > 0:
            chunk = self.stream.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        data = B''.join(chunks)
        if remaining > 0:
            raise EOF(size, data)
        return data

    def read_integer(self, size: int) -> int:
        """
        Read an unsigned integer of the given size (in bits) from the stream.
        """
        nbytes, rest = divmod(size, 8)
        if rest > 0:
            raise ValueError(
                F'A {self.__class__.__name__} cannot read {size} bit{"s" * (size > 1)}, only multiples of 8 are possible.')
        return int.from_bytes(self.read_exactly(nbytes), 'big')

    def read_byte(self) -> int:
        return self.read_exactly(1)[0]

    def u16(self) -> int:
        return self.read_integer(16)

    def u32(self) -> int:
        return self.read_integer(32)

    def read_length_prefixed(self, prefix_size: int = 16) -> bytes:
        """
        Read an unsigned integer of `prefix_size` bits and then that many bytes.
        """
        return self.read_exactly(self.read_integer(prefix_size))
