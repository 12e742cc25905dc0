import os
from ..outcome import ScenarioOutcome, TriggerResult
from .syscall_helpers import NOT_PERMITTED, attempt, fixture_missing, open_fd

SCENARIO = 'copyup/chown'
FIXTURE = 'copyup_chown_test.txt'


def chown_path(self, path: str, uid: int, gid: int) -> TriggerResult:
    return attempt(self, 'chown', os.chown, path, uid, gid, denied=NOT_PERMITTED)


def chown_fd(self, fd: int, uid: int, gid: int) -> TriggerResult:
    return attempt(self, 'fchown', os.fchown, fd, uid, gid, denied=NOT_PERMITTED)


def lchown_path(self, path: str, uid: int, gid: int) -> TriggerResult:
    return attempt(self, 'lchown', os.lchown, path, uid, gid, denied=NOT_PERMITTED)


def chown_operation(self, path):
    """Chown to the current owner: no ownership change, still a copy-up."""
    orig_ino = self.snapshot(path)
    if orig_ino is None:
        return fixture_missing(SCENARIO, path)

    st = os.stat(path)

    result = chown_path(self, path, st.st_uid, st.st_gid)
    if not result.applied:
        return result.to_outcome(SCENARIO)
    self.assert_stable_everywhere(path, orig_ino, 'chown')

    with open_fd(path, os.O_RDONLY) as fd:
        result = chown_fd(self, fd, st.st_uid, st.st_gid)
        if not result.applied:
            return result.to_outcome(SCENARIO)
        self.assert_stable_open(fd, orig_ino, 'fchown')
        self.assert_stable(path, orig_ino, 'fchown')

    result = lchown_path(self, path, st.st_uid, st.st_gid)
    if not result.applied:
        return result.to_outcome(SCENARIO)
    self.assert_stable_everywhere(path, orig_ino, 'lchown')

    return ScenarioOutcome.passed(SCENARIO)
