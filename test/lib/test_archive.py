import tempfile
import zipfile

from pathlib import Path

from stringsutil.lib.archive import Archive
from stringsutil.lib.exceptions import ArchiveOpenError, ResourceReadError
from stringsutil.lib.resources import FileResource, MemoryResource

from .. import TestBase, make_zip


class TestArchive(TestBase):

    def setUp(self):
        super().setUp()
        self.data = make_zip({
            'META-INF/': B'',
            'META-INF/MANIFEST.MF': B'Manifest-Version: 1.0\r\n',
            'pkg/Foo.class': B'\xCA\xFE\xBA\xBE',
            'README.txt': B'read me',
        })

    def test_members_in_central_directory_order(self):
        with Archive.Open(MemoryResource(self.data, 'app.jar')) as archive:
            names = [member.name for member in archive.members()]
        self.assertEqual(names, ['META-INF/MANIFEST.MF', 'pkg/Foo.class', 'README.txt'])

    def test_member_filter(self):
        with Archive.Open(MemoryResource(self.data, 'app.jar')) as archive:
            names = [member.name for member in archive.members(lambda p: p.endswith('.class'))]
        self.assertEqual(names, ['pkg/Foo.class'])

    def test_member_resources(self):
        with Archive.Open(MemoryResource(self.data, 'app.jar')) as archive:
            member = next(m for m in archive.members() if m.name == 'README.txt')
            self.assertEqual(member.path, 'app.jar!/README.txt')
            self.assertEqual(member.size(), 7)
            self.assertEqual(member.read(), B'read me')
            with member.open() as stream:
                self.assertEqual(stream.read(4), B'read')

    def test_file_archive(self):
        with tempfile.TemporaryDirectory() as root:
            path = Path(root) / 'app.jar'
            path.write_bytes(self.data)
            with Archive.Open(FileResource(path)) as archive:
                self.assertEqual(archive.path, str(path))
                self.assertEqual(len(list(archive.members())), 3)

    def test_invalid_archive(self):
        with self.assertRaises(ArchiveOpenError) as context:
            Archive.Open(MemoryResource(B'PK\x03\x04' + bytes(100), 'broken.jar'))
        self.assertEqual(context.exception.path, 'broken.jar')
        self.assertIsInstance(context.exception, OSError)

    def test_corrupted_member(self):
        text = B'The quick brown fox jumps over the lazy dog.'
        data = make_zip({'fox.txt': text}, zipfile.ZIP_STORED)
        data = data.replace(text, text.upper(), 1)
        with Archive.Open(MemoryResource(data, 'fox.zip')) as archive:
            member, = archive.members()
            with self.assertRaises(ResourceReadError) as context:
                member.read()
        self.assertEqual(context.exception.path, 'fox.zip!/fox.txt')
