import os
from .. import libc
from ..outcome import ScenarioOutcome, TriggerResult
from .syscall_helpers import NOT_PERMITTED, attempt, fixture_missing, open_fd

SCENARIO = 'copyup/fallocate'
FIXTURE = 'copyup_fallocate_test.txt'
PREALLOCATE_LENGTH = 1024


def fallocate_fd(self, fd: int, length: int = PREALLOCATE_LENGTH) -> TriggerResult:
    return attempt(self, 'fallocate', libc.fallocate, fd, 0, 0, length, denied=NOT_PERMITTED)


def fallocate_operation(self, path):
    orig_ino = self.snapshot(path)
    if orig_ino is None:
        return fixture_missing(SCENARIO, path)

    with open_fd(path, os.O_RDWR) as fd:
        result = fallocate_fd(self, fd)
        if not result.applied:
            return result.to_outcome(SCENARIO)
        self.assert_stable_open(fd, orig_ino, 'fallocate')

    self.assert_stable_everywhere(path, orig_ino, 'fallocate')
    return ScenarioOutcome.passed(SCENARIO)
