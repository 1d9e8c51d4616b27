import os
import tempfile

from pathlib import Path

from stringsutil.lib.exceptions import ResourceReadError
from stringsutil.lib.filetree import FileTree

from .. import TestBase


class TestFileTree(TestBase):

    FILES = [
        'c/d.class',
        'b.class',
        'a.txt',
        'a/z.class',
        'a/b/c.class',
        'a/b/TestC.class',
    ]

    def setUp(self):
        super().setUp()
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        for name in self.FILES:
            path = self.root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(name.encode('utf8'))

    def tearDown(self):
        self._tmp.cleanup()
        super().tearDown()

    def listing(self, tree: FileTree, *defaults: str):
        return [path.relative_to(self.root).as_posix() for path in tree.stream(self.root, *defaults)]

    def test_lexicographic_depth_first(self):
        self.assertEqual(self.listing(FileTree()), [
            'a/b/TestC.class',
            'a/b/c.class',
            'a/z.class',
            'a.txt',
            'b.class',
            'c/d.class',
        ])

    def test_includes_and_excludes(self):
        tree = FileTree(['**/*.class'], ['**/Test*.class', 'c/**'])
        self.assertEqual(self.listing(tree), [
            'a/b/c.class',
            'a/z.class',
            'b.class',
        ])

    def test_defaults_are_used_without_includes(self):
        tree = FileTree()
        tree.add_excludes(['a/**'])
        self.assertEqual(self.listing(tree, '*.class'), ['b.class'])

    def test_added_includes(self):
        tree = FileTree()
        tree.add_includes(['*.txt'])
        self.assertEqual(self.listing(tree, '**'), ['a.txt'])

    def test_symlinked_directories_are_not_followed(self):
        try:
            os.symlink(self.root / 'a', self.root / 'link', target_is_directory=True)
        except (OSError, NotImplementedError):
            self.skipTest('symbolic links are not supported')
        self.assertNotIn('link/z.class', self.listing(FileTree()))

    def test_unreadable_directory_raises(self):
        with self.unreadable_directories('b'):
            with self.assertRaises(ResourceReadError) as context:
                self.listing(FileTree())
        self.assertEqual(context.exception.path, str(self.root / 'a' / 'b'))
        self.assertIsInstance(context.exception, OSError)

    def test_unreadable_directory_is_reported_and_skipped(self):
        errors = []
        with self.unreadable_directories('b'):
            files = [
                path.relative_to(self.root).as_posix()
                for path in FileTree().stream(self.root, onerror=errors.append)
            ]
        self.assertEqual(files, ['a/z.class', 'a.txt', 'b.class', 'c/d.class'])
        self.assertEqual([error.path for error in errors], [str(self.root / 'a' / 'b')])
