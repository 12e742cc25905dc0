import os
from ..outcome import InvariantViolation, ScenarioOutcome, TriggerResult
from .syscall_helpers import attempt, fixture_missing, open_fd

SCENARIO = 'copyup/write'
FIXTURE = 'copyup_write_test.txt'
APPENDED_DATA = b" appended data"
OVERWRITE_DATA = b"pwrite"


def _write_all(fd: int, data: bytes) -> None:
    written = os.write(fd, data)
    if written != len(data):
        raise InvariantViolation(f"short write: {written} of {len(data)} bytes")


def _pwrite_all(fd: int, data: bytes, offset: int) -> None:
    written = os.pwrite(fd, data, offset)
    if written != len(data):
        raise InvariantViolation(f"short pwrite: {written} of {len(data)} bytes")


def append_fd(self, fd: int, data: bytes = APPENDED_DATA) -> TriggerResult:
    return attempt(self, 'write', _write_all, fd, data)


def overwrite_fd(self, fd: int, data: bytes = OVERWRITE_DATA, offset: int = 0) -> TriggerResult:
    return attempt(self, 'pwrite', _pwrite_all, fd, data, offset)


def write_operation(self, path):
    orig_ino = self.snapshot(path)
    if orig_ino is None:
        return fixture_missing(SCENARIO, path)

    # Opening for writing is what forces the copy-up
    with open_fd(path, os.O_WRONLY | os.O_APPEND) as fd:
        result = append_fd(self, fd)
        if not result.applied:
            return result.to_outcome(SCENARIO)

    self.assert_stable(path, orig_ino, 'write')
    with open_fd(path, os.O_RDONLY) as fd:
        self.assert_stable_open(fd, orig_ino, 'write')

    with open_fd(path, os.O_WRONLY) as fd:
        result = overwrite_fd(self, fd)
        if not result.applied:
            return result.to_outcome(SCENARIO)
        self.assert_stable_open(fd, orig_ino, 'pwrite')
        self.assert_stable(path, orig_ino, 'pwrite')

    return ScenarioOutcome.passed(SCENARIO)
