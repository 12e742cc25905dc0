import os
from ..outcome import ScenarioOutcome, TriggerResult
from .syscall_helpers import attempt, fixture_missing, open_fd

SCENARIO = 'copyup/chmod'
FIXTURE = 'copyup_chmod_test.txt'


def chmod_path(self, path: str, mode: int) -> TriggerResult:
    return attempt(self, 'chmod', os.chmod, path, mode)


def chmod_fd(self, fd: int, mode: int) -> TriggerResult:
    return attempt(self, 'fchmod', os.fchmod, fd, mode)


def chmod_operation(self, path):
    orig_ino = self.snapshot(path)
    if orig_ino is None:
        return fixture_missing(SCENARIO, path)

    result = chmod_path(self, path, 0o755)
    if not result.applied:
        return result.to_outcome(SCENARIO)
    self.assert_stable_everywhere(path, orig_ino, 'chmod')

    with open_fd(path, os.O_RDONLY) as fd:
        result = chmod_fd(self, fd, 0o700)
        if not result.applied:
            return result.to_outcome(SCENARIO)
        self.assert_stable_open(fd, orig_ino, 'fchmod')
        self.assert_stable(path, orig_ino, 'fchmod')

    return ScenarioOutcome.passed(SCENARIO)
