import os
import errno
import struct
from dataclasses import dataclass
from typing import List

from . import libc
from .outcome import InvariantViolation, ScenarioOutcome, errno_name
from .trigger_operations.syscall_helpers import fixture_missing, open_fd

SCENARIO = 'getdents64'
FIXTURE = 'test.txt'
BUFFER_SIZE = 4096

# d_type values from <dirent.h>
DT_UNKNOWN = 0
DT_FIFO = 1
DT_CHR = 2
DT_DIR = 4
DT_BLK = 6
DT_REG = 8
DT_LNK = 10
DT_SOCK = 12

# struct linux_dirent64: d_ino, d_off, d_reclen, d_type, then the NUL terminated d_name
DIRENT64_HEADER = struct.Struct('=QqHB')


class DirentParseError(InvariantViolation):
    """A getdents64 record could not be decoded."""


@dataclass(frozen=True)
class DirEntry:
    ino: int
    offset: int
    reclen: int
    type: int
    name: str


def parse_dirents(buf: bytes) -> List[DirEntry]:
    """
    Decode the records of one getdents64 buffer.

    Each record advances the cursor by its own d_reclen. A record length that
    cannot hold the header plus a terminated name, or that runs past the end
    of the buffer, is a fatal error rather than something to skip over.

    Raises:
        DirentParseError: On a truncated or malformed record, including one
            whose d_name is empty.
    """
    entries: List[DirEntry] = []
    pos = 0
    while pos < len(buf):
        if len(buf) - pos < DIRENT64_HEADER.size:
            raise DirentParseError(f"truncated dirent header at offset {pos}")
        ino, offset, reclen, d_type = DIRENT64_HEADER.unpack_from(buf, pos)
        if reclen <= DIRENT64_HEADER.size:
            raise DirentParseError(f"invalid d_reclen {reclen} at offset {pos}")
        if pos + reclen > len(buf):
            raise DirentParseError(f"d_reclen {reclen} at offset {pos} overruns buffer of {len(buf)} bytes")
        raw_name = buf[pos + DIRENT64_HEADER.size:pos + reclen]
        end = raw_name.find(b'\0')
        if end == -1:
            raise DirentParseError(f"unterminated d_name at offset {pos}")
        if end == 0:
            raise DirentParseError(f"empty d_name at offset {pos}")
        entries.append(DirEntry(ino, offset, reclen, d_type, os.fsdecode(raw_name[:end])))
        pos += reclen
    return entries


def enumerate_directory(fd: int, buffer_size: int = BUFFER_SIZE) -> List[DirEntry]:
    """Call getdents64 until it reports end of directory (a zero-byte read)."""
    entries: List[DirEntry] = []
    while True:
        chunk = libc.getdents64(fd, buffer_size)
        if not chunk:
            return entries
        entries.extend(parse_dirents(chunk))


def expect_errno(fd: int, expected: int, label: str) -> None:
    try:
        libc.getdents64(fd, BUFFER_SIZE)
    except OSError as e:
        if e.errno == expected:
            return
        raise InvariantViolation(f"{label} should fail with {errno.errorcode[expected]}, got {errno_name(e.errno)}")
    raise InvariantViolation(f"{label} should fail with {errno.errorcode[expected]}, but succeeded")


def getdents64_operation(self, path):
    if libc.getdents64_syscall_number() is None:
        return ScenarioOutcome.skipped(SCENARIO, 'getdents64 syscall not available on this host')

    fixture_path = os.path.join(path, FIXTURE)
    if not os.path.lexists(fixture_path):
        return fixture_missing(SCENARIO, fixture_path)

    with open_fd(path, os.O_RDONLY | os.O_DIRECTORY) as fd:
        entries = enumerate_directory(fd)
        closed_fd = fd
    expect_errno(closed_fd, errno.EBADF, 'getdents64 on closed descriptor')

    self.log.debug('getdents64(%s) => %d entries', path, len(entries))
    if not entries:
        raise InvariantViolation('getdents64 should return at least one entry')
    matches = [entry for entry in entries if entry.name == FIXTURE]
    if not matches:
        raise InvariantViolation(f"should find {FIXTURE} in directory listing")
    if matches[0].type != DT_REG:
        raise InvariantViolation(f"{FIXTURE} should be a regular file, d_type is {matches[0].type}")

    with open_fd(fixture_path, os.O_RDONLY) as fd:
        expect_errno(fd, errno.ENOTDIR, 'getdents64 on regular file')

    return ScenarioOutcome.passed(SCENARIO)
