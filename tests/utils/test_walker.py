import os
import tempfile
import unittest
from pathlib import Path

from romdex.utils.walker import WalkPolicy, list_entries, normalize_extensions, walk_with_policy


class ListEntriesTest(unittest.TestCase):
    """Test candidate listing with extension filters."""

    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.directory = Path(self._tmpdir.name)
        for name in ('Zelda.SFC', 'metroid.sfc', 'readme.txt', 'noext'):
            (self.directory / name).write_bytes(b'rom')
        (self.directory / 'hacks').mkdir()
        (self.directory / 'hacks' / 'kaizo.smc').write_bytes(b'rom')

    def tearDown(self):
        self._tmpdir.cleanup()

    def names(self, paths):
        return [path.relative_to(self.directory).as_posix() for path in paths]

    def test_sorted_by_name(self):
        """Test that entries come back in name order, directories skipped."""
        self.assertEqual(['Zelda.SFC', 'metroid.sfc', 'noext', 'readme.txt'],
                         self.names(list_entries(self.directory)))

    def test_extension_filter_is_case_insensitive(self):
        self.assertEqual(['Zelda.SFC', 'metroid.sfc'], self.names(list_entries(self.directory, 'sfc')))

    def test_pipe_separated_extensions(self):
        self.assertEqual(['Zelda.SFC', 'hacks/kaizo.smc', 'metroid.sfc'],
                         self.names(list_entries(self.directory, 'sfc|smc', recursive=True)))

    def test_empty_filter_matches_nothing(self):
        self.assertEqual([], list_entries(self.directory, ''))

    def test_missing_directory(self):
        with self.assertRaises(FileNotFoundError):
            list_entries(self.directory / 'missing')

    def test_file_is_not_a_directory(self):
        with self.assertRaises(NotADirectoryError):
            list_entries(self.directory / 'readme.txt')

    @unittest.skipUnless(hasattr(os, 'symlink'), "symlinks not supported")
    def test_symlinked_file_is_followed(self):
        (self.directory / 'link.sfc').symlink_to(self.directory / 'metroid.sfc')
        (self.directory / 'dangling.sfc').symlink_to(self.directory / 'gone.sfc')

        with self.assertLogs('romdex.utils.walker', level='WARNING'):
            names = self.names(list_entries(self.directory, 'sfc'))

        self.assertEqual(['Zelda.SFC', 'link.sfc', 'metroid.sfc'], names)

    def test_excluded_names(self):
        policy = WalkPolicy(frozenset({'sfc', 'smc'}), recursive=True, excluded_names=frozenset({'hacks'}))
        self.assertEqual(['Zelda.SFC', 'metroid.sfc'], self.names(walk_with_policy(self.directory, policy)))

    def test_list_entries_excluded(self):
        """Test that excluded names drop both files and whole subdirectories."""
        self.assertEqual(['Zelda.SFC', 'hacks/kaizo.smc', 'metroid.sfc'],
                         self.names(list_entries(self.directory, 'sfc|smc', recursive=True)))
        self.assertEqual(['Zelda.SFC', 'metroid.sfc'],
                         self.names(list_entries(self.directory, 'sfc|smc', recursive=True, excluded=['hacks'])))
        self.assertEqual(['metroid.sfc', 'noext'],
                         self.names(list_entries(self.directory, excluded=('Zelda.SFC', 'readme.txt'))))


class NormalizeExtensionsTest(unittest.TestCase):
    def test_forms(self):
        self.assertIsNone(normalize_extensions(None))
        self.assertEqual(frozenset({'nes', 'sfc'}), normalize_extensions('nes|sfc'))
        self.assertEqual(frozenset({'nes', 'sfc'}), normalize_extensions(['.NES', ' sfc ']))
        self.assertEqual(frozenset(), normalize_extensions('|'))


if __name__ == '__main__':
    unittest.main()
