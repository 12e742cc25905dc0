import os
from ..outcome import ScenarioOutcome, TriggerResult
from .syscall_helpers import attempt, fixture_missing, open_fd

SCENARIO = 'copyup/utimes'
FIXTURE = 'copyup_utimes_test.txt'
NS_PER_SEC = 1_000_000_000
# Fixed timestamps, one per calling convention
LEGACY_TIME = 1000000000
PATH_NS_TIME = 1000000001 * NS_PER_SEC
FD_NS_TIME = 1000000002 * NS_PER_SEC


def utimes_path(self, path: str, seconds: int) -> TriggerResult:
    return attempt(self, 'utimes', os.utime, path, (seconds, seconds))


def utimensat_path(self, path: str, ns: int) -> TriggerResult:
    return attempt(self, 'utimensat', os.utime, path, ns=(ns, ns))


def futimens_fd(self, fd: int, ns: int) -> TriggerResult:
    return attempt(self, 'futimens', os.utime, fd, ns=(ns, ns))


def utimens_operation(self, path):
    orig_ino = self.snapshot(path)
    if orig_ino is None:
        return fixture_missing(SCENARIO, path)

    result = utimes_path(self, path, LEGACY_TIME)
    if not result.applied:
        return result.to_outcome(SCENARIO)
    self.assert_stable_everywhere(path, orig_ino, 'utimes')

    result = utimensat_path(self, path, PATH_NS_TIME)
    if not result.applied:
        return result.to_outcome(SCENARIO)
    self.assert_stable_everywhere(path, orig_ino, 'utimensat')

    with open_fd(path, os.O_RDWR) as fd:
        result = futimens_fd(self, fd, FD_NS_TIME)
        if not result.applied:
            return result.to_outcome(SCENARIO)
        self.assert_stable_open(fd, orig_ino, 'futimens')
        self.assert_stable(path, orig_ino, 'futimens')

    return ScenarioOutcome.passed(SCENARIO)
