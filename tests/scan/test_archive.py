"""Tests for zip archive enumeration."""
import tempfile
import unittest
import zipfile
from pathlib import Path

from romdex.scan import ArchiveMember, for_each_member, is_archive


def make_zip(path: Path, members: dict[str, bytes], directories: tuple[str, ...] = (),
             compression: int = zipfile.ZIP_DEFLATED):
    with zipfile.ZipFile(path, 'w', compression=compression) as archive:
        for directory in directories:
            archive.writestr(zipfile.ZipInfo(directory.rstrip('/') + '/'), b'')
        for name, data in members.items():
            archive.writestr(name, data)


class ForEachMemberTest(unittest.TestCase):
    def test_members_with_data(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / 'roms.zip'
            make_zip(path, {'a.sfc': b'123456789', 'sub/b.sfc': b'abc'}, directories=('sub',))
            seen: list[tuple[ArchiveMember, bytes]] = []

            visited = for_each_member(path, lambda member, data: seen.append((member, data)) is None)

        self.assertEqual(2, visited)
        self.assertEqual(['a.sfc', 'sub/b.sfc'], [member.name for member, _ in seen])
        member, data = seen[0]
        self.assertEqual(b'123456789', data)
        self.assertEqual(9, member.size)
        self.assertEqual(zipfile.ZIP_DEFLATED, member.compress_type)
        self.assertEqual(0xCBF43926, member.header_crc32)

    def test_visitor_stops_enumeration(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / 'roms.zip'
            make_zip(path, {'a.sfc': b'a', 'b.sfc': b'b', 'c.sfc': b'c'})
            seen = []

            def visitor(member, data):
                seen.append(member.name)
                return False

            self.assertEqual(1, for_each_member(path, visitor))
        self.assertEqual(['a.sfc'], seen)

    def test_not_a_zip(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / 'broken.zip'
            path.write_bytes(b'definitely not a zip')
            with self.assertRaises(zipfile.BadZipFile):
                for_each_member(path, lambda member, data: True)

    def test_missing_archive(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(FileNotFoundError):
                for_each_member(Path(tmpdir) / 'missing.zip', lambda member, data: True)

    def test_is_archive(self):
        self.assertTrue(is_archive('roms.zip'))
        self.assertTrue(is_archive(Path('ROMS.ZIP')))
        self.assertFalse(is_archive('game.sfc'))
        self.assertFalse(is_archive('zip'))


if __name__ == '__main__':
    unittest.main()
