from stringsutil.lib.id import ResourceKind, classify, header
from stringsutil.lib.resources import MemoryResource

from .. import TestBase, ClassFileBuilder, make_zip


class TestIdentification(TestBase):

    def classify(self, data: bytes) -> ResourceKind:
        return classify(MemoryResource(data))

    def test_class_file(self):
        self.assertEqual(self.classify(ClassFileBuilder().build()), ResourceKind.ClassFile)

    def test_class_file_magic_only(self):
        self.assertEqual(self.classify(B'\xCA\xFE\xBA\xBE'), ResourceKind.ClassFile)

    def test_class_file_magic_with_garbage(self):
        data = B'\xCA\xFE\xBA\xBE' + self.generate_random_buffer(200)
        self.assertEqual(self.classify(data), ResourceKind.ClassFile)

    def test_archive(self):
        self.assertEqual(self.classify(make_zip({'a.txt': B'a'})), ResourceKind.Archive)

    def test_empty_archive(self):
        self.assertEqual(self.classify(make_zip({})), ResourceKind.Archive)

    def test_archive_prefix_only(self):
        self.assertEqual(self.classify(B'PK\xAA\xBB'), ResourceKind.Archive)

    def test_too_small(self):
        for data in (B'', B'\xCA', B'\xCA\xFE\xBA', B'PK'):
            self.assertEqual(self.classify(data), ResourceKind.TooSmall)

    def test_unknown(self):
        for data in (B'\x7FELF\x02\x01', B'MZ\x90\x00', B'\xCA\xFE\xBA\xBF', B'Pk\x03\x04'):
            self.assertEqual(self.classify(data), ResourceKind.Unknown)

    def test_header(self):
        self.assertEqual(header(MemoryResource(B'\x01\x02\x03\x04\x05')), 0x01020304)
        self.assertIsNone(header(MemoryResource(B'\x01\x02\x03')))
