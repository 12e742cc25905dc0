import os
from ..outcome import ScenarioOutcome, TriggerResult
from .syscall_helpers import NOT_PERMITTED, attempt, fixture_missing, open_fd

SCENARIO = 'copyup/xattr'
FIXTURE = 'copyup_xattr_test.txt'
ATTR_NAME = 'user.test_attr'
ATTR_NAME_NOFOLLOW = 'user.test_attr2'
ATTR_NAME_FD = 'user.test_attr3'
ATTR_VALUE = b'test_value'


def setxattr_path(self, path: str, name: str, value: bytes, follow_symlinks: bool = True) -> TriggerResult:
    label = 'setxattr' if follow_symlinks else 'lsetxattr'
    return attempt(self, label, os.setxattr, path, name, value, follow_symlinks=follow_symlinks, denied=NOT_PERMITTED)


def setxattr_fd(self, fd: int, name: str, value: bytes) -> TriggerResult:
    return attempt(self, 'fsetxattr', os.setxattr, fd, name, value, denied=NOT_PERMITTED)


def removexattr_path(self, path: str, name: str, follow_symlinks: bool = True) -> TriggerResult:
    label = 'removexattr' if follow_symlinks else 'lremovexattr'
    return attempt(self, label, os.removexattr, path, name, follow_symlinks=follow_symlinks, denied=NOT_PERMITTED)


def xattr_operation(self, path):
    if not hasattr(os, 'setxattr'):
        return ScenarioOutcome.skipped(SCENARIO, 'extended attributes not available on this platform')

    orig_ino = self.snapshot(path)
    if orig_ino is None:
        return fixture_missing(SCENARIO, path)

    result = setxattr_path(self, path, ATTR_NAME, ATTR_VALUE)
    if not result.applied:
        return result.to_outcome(SCENARIO)
    self.assert_stable_everywhere(path, orig_ino, 'setxattr')

    result = setxattr_path(self, path, ATTR_NAME_NOFOLLOW, ATTR_VALUE, follow_symlinks=False)
    if not result.applied:
        return result.to_outcome(SCENARIO)
    self.assert_stable_everywhere(path, orig_ino, 'lsetxattr')

    with open_fd(path, os.O_RDONLY) as fd:
        result = setxattr_fd(self, fd, ATTR_NAME_FD, ATTR_VALUE)
        if not result.applied:
            return result.to_outcome(SCENARIO)
        self.assert_stable_open(fd, orig_ino, 'fsetxattr')
        self.assert_stable(path, orig_ino, 'fsetxattr')

    result = removexattr_path(self, path, ATTR_NAME)
    if not result.applied:
        return result.to_outcome(SCENARIO)
    self.assert_stable_everywhere(path, orig_ino, 'removexattr')

    result = removexattr_path(self, path, ATTR_NAME_NOFOLLOW, follow_symlinks=False)
    if not result.applied:
        return result.to_outcome(SCENARIO)
    self.assert_stable_everywhere(path, orig_ino, 'lremovexattr')

    return ScenarioOutcome.passed(SCENARIO)
