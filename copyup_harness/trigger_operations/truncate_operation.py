import os
from ..outcome import ScenarioOutcome, TriggerResult
from .syscall_helpers import attempt, fixture_missing, open_fd

SCENARIO = 'copyup/truncate'
FIXTURE = 'copyup_truncate_test.txt'


def truncate_path(self, path: str, length: int) -> TriggerResult:
    return attempt(self, 'truncate', os.truncate, path, length)


def truncate_fd(self, fd: int, length: int) -> TriggerResult:
    return attempt(self, 'ftruncate', os.ftruncate, fd, length)


def truncate_operation(self, path):
    orig_ino = self.snapshot(path)
    if orig_ino is None:
        return fixture_missing(SCENARIO, path)

    result = truncate_path(self, path, 10)
    if not result.applied:
        return result.to_outcome(SCENARIO)
    self.assert_stable_everywhere(path, orig_ino, 'truncate')

    with open_fd(path, os.O_WRONLY) as fd:
        result = truncate_fd(self, fd, 5)
        if not result.applied:
            return result.to_outcome(SCENARIO)
        self.assert_stable_open(fd, orig_ino, 'ftruncate')
        self.assert_stable(path, orig_ino, 'ftruncate')

    return ScenarioOutcome.passed(SCENARIO)
