import io

from stringsutil.lib.structures import EOF, StreamReader

from .. import TestBase


class TrickleStream(io.RawIOBase):
    """
    A stream that never returns more than one byte per read, like a slow decompressor.
    """
    def __init__(self, data: bytes):
        super().__init__()
        self.data = data
        self.offset = 0

    def readable(self):
        return True

    def read(self, size=-1):
        chunk = self.data[self.offset:self.offset + min(size, 1)]
        self.offset += len(chunk)
        return chunk


class TestStructures(TestBase):

    def test_integers_are_big_endian(self):
        reader = StreamReader(io.BytesIO(bytes.fromhex('CAFEBABE0034FF')))
        self.assertEqual(reader.u32(), 0xCAFEBABE)
        self.assertEqual(reader.u16(), 0x34)
        self.assertEqual(reader.read_byte(), 0xFF)
        with self.assertRaises(EOF):
            reader.read_byte()

    def test_invalid_integer_size(self):
        reader = StreamReader(io.BytesIO(B'\0\0'))
        with self.assertRaises(ValueError):
            reader.read_integer(12)

    def test_read_exactly_collects_short_reads(self):
        data = self.generate_random_buffer(40)
        reader = StreamReader(TrickleStream(data))
        self.assertEqual(reader.read_exactly(30), data[:30])
        self.assertEqual(reader.read_exactly(10), data[30:])

    def test_eof_contains_partial_data(self):
        reader = StreamReader(io.BytesIO(B'abc'))
        with self.assertRaises(EOF) as context:
            reader.read_exactly(5)
        self.assertEqual(bytes(context.exception), B'abc')
        self.assertEqual(context.exception.size, 5)
        self.assertIsInstance(context.exception, EOFError)

    def test_length_prefixed(self):
        reader = StreamReader(io.BytesIO(B'\x00\x05hello world'))
        self.assertEqual(reader.read_length_prefixed(), B'hello')

    def test_context_manager_closes_stream(self):
        stream = io.BytesIO(B'data')
        with StreamReader(stream) as reader:
            self.assertEqual(reader.read_exactly(4), B'data')
        self.assertTrue(stream.closed)
