#!/usr/bin/env python3
import errno
import os
import shutil
import tempfile
import unittest

import pytest

from copyup_harness import CopyupSuite, Status, libc
from copyup_harness.dirent_check import (
    DIRENT64_HEADER,
    DT_DIR,
    DT_REG,
    DirentParseError,
    enumerate_directory,
    parse_dirents,
)
from copyup_harness.main import SCENARIOS
from copyup_harness.trigger_operations.syscall_helpers import open_fd

needs_getdents64 = pytest.mark.skipif(libc.getdents64_syscall_number() is None,
                                      reason='getdents64 syscall number unknown on this host')


def make_record(name: bytes, d_type: int = DT_REG, ino: int = 1234, offset: int = 1, reclen: int | None = None) -> bytes:
    body = name + b'\0'
    size = DIRENT64_HEADER.size + len(body)
    # kernel pads records to 8 bytes
    padded = (size + 7) & ~7
    if reclen is None:
        reclen = padded
    return DIRENT64_HEADER.pack(ino, offset, reclen, d_type) + body + b'\0' * (padded - size)


class TestParseDirents(unittest.TestCase):
    def test_parse_records(self):
        buf = make_record(b'.', DT_DIR, ino=1) + make_record(b'..', DT_DIR, ino=2) + make_record(b'test.txt', DT_REG, ino=3)
        entries = parse_dirents(buf)
        self.assertEqual([e.name for e in entries], ['.', '..', 'test.txt'])
        self.assertEqual(entries[2].type, DT_REG)
        self.assertEqual(entries[2].ino, 3)
        self.assertEqual(sum(e.reclen for e in entries), len(buf))

    def test_empty_buffer(self):
        self.assertEqual(parse_dirents(b''), [])

    def test_zero_reclen_is_fatal(self):
        buf = make_record(b'test.txt', reclen=0)
        with self.assertRaises(DirentParseError):
            parse_dirents(buf)

    def test_reclen_past_buffer_is_fatal(self):
        buf = make_record(b'test.txt')
        with self.assertRaises(DirentParseError):
            parse_dirents(buf + make_record(b'other', reclen=4096))

    def test_truncated_header_is_fatal(self):
        with self.assertRaises(DirentParseError):
            parse_dirents(make_record(b'test.txt') + b'\x01\x02')

    def test_unterminated_name_is_fatal(self):
        record = DIRENT64_HEADER.pack(1, 1, DIRENT64_HEADER.size + 4, DT_REG) + b'abcd'
        with self.assertRaises(DirentParseError):
            parse_dirents(record)

    def test_empty_name_is_fatal(self):
        record = DIRENT64_HEADER.pack(1, 1, DIRENT64_HEADER.size + 1, DT_REG) + b'\0'
        with self.assertRaises(DirentParseError):
            parse_dirents(record)
        #a valid record followed by a nameless one
        with self.assertRaises(DirentParseError):
            parse_dirents(make_record(b'test.txt') + make_record(b''))


@needs_getdents64
class TestGetdents64(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.file_path = os.path.join(self.temp_dir, 'test.txt')
        with open(self.file_path, 'w') as f:
            f.write('test')
        self.scenario = next(s for s in SCENARIOS if s.name == 'getdents64')

    def test_enumerate_directory(self):
        for i in range(200):
            with open(os.path.join(self.temp_dir, f'file_{i:03d}_with_a_longer_name'), 'w') as f:
                f.write('x')
        with open_fd(self.temp_dir, os.O_RDONLY | os.O_DIRECTORY) as fd:
            #small buffer forces several getdents64 calls
            entries = enumerate_directory(fd, buffer_size=512)
        names = {e.name for e in entries}
        self.assertIn('test.txt', names)
        self.assertEqual(names - {'.', '..'}, set(os.listdir(self.temp_dir)))

    def test_closed_descriptor(self):
        fd = os.open(self.temp_dir, os.O_RDONLY | os.O_DIRECTORY)
        os.close(fd)
        with self.assertRaises(OSError) as ctx:
            libc.getdents64(fd, 4096)
        self.assertEqual(ctx.exception.errno, errno.EBADF)

    def test_regular_file(self):
        with open_fd(self.file_path, os.O_RDONLY) as fd:
            with self.assertRaises(OSError) as ctx:
                libc.getdents64(fd, 4096)
        self.assertEqual(ctx.exception.errno, errno.ENOTDIR)

    def test_scenario_passes(self):
        outcome = CopyupSuite(self.temp_dir).run_scenario(self.scenario)
        self.assertEqual(outcome.status, Status.PASSED, outcome.reason)

    def test_scenario_skips_without_fixture(self):
        os.unlink(self.file_path)
        outcome = CopyupSuite(self.temp_dir).run_scenario(self.scenario)
        self.assertEqual(outcome.status, Status.SKIPPED)

    def test_scenario_fails_when_fixture_is_not_a_regular_file(self):
        os.unlink(self.file_path)
        os.mkdir(self.file_path)
        outcome = CopyupSuite(self.temp_dir).run_scenario(self.scenario)
        self.assertEqual(outcome.status, Status.FAILED)
        self.assertIn('regular file', outcome.reason)

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)


if __name__ == '__main__':
    unittest.main()
