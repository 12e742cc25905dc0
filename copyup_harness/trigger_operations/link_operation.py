import os
from ..outcome import ScenarioOutcome, TriggerResult
from .syscall_helpers import attempt, fixture_missing, open_fd, remove_stale

SCENARIO = 'copyup/link'
FIXTURE = 'copyup_link_test.txt'
HARDLINK = 'copyup_link_test_hardlink.txt'
HARDLINK2 = 'copyup_link_test_hardlink2.txt'


def link_path(self, src: str, dst: str) -> TriggerResult:
    return attempt(self, 'link', os.link, src, dst)


def unlink_path(self, path: str) -> TriggerResult:
    return attempt(self, 'unlink', os.unlink, path)


def link_operation(self, path):
    """
    Create hard links to a base layer file, then drop one of them.

    Every name of the object, and a descriptor opened before the first
    link, must report the original identity throughout.
    """
    orig_ino = self.snapshot(path)
    if orig_ino is None:
        return fixture_missing(SCENARIO, path)

    directory = os.path.dirname(path)
    first_link = os.path.join(directory, HARDLINK)
    second_link = os.path.join(directory, HARDLINK2)
    remove_stale(first_link)
    remove_stale(second_link)

    with open_fd(path, os.O_RDONLY) as fd:
        result = link_path(self, path, first_link)
        if not result.applied:
            return result.to_outcome(SCENARIO)
        self.assert_stable(path, orig_ino, 'link (original)')
        self.assert_stable(first_link, orig_ino, 'link (hard link)')
        self.assert_stable_open(fd, orig_ino, 'link (open descriptor)')
        self.assert_link_count(path, 2, 'link')

    result = link_path(self, path, second_link)
    if not result.applied:
        return result.to_outcome(SCENARIO)
    self.assert_stable(second_link, orig_ino, 'link (second hard link)')
    self.assert_stable(path, orig_ino, 'link (after second link)')
    self.assert_link_count(path, 2, 'second link')

    self.assert_stable_link(path, orig_ino, 'link (original)')
    self.assert_stable_link(first_link, orig_ino, 'link (hard link)')

    result = unlink_path(self, first_link)
    if not result.applied:
        return result.to_outcome(SCENARIO)
    self.assert_absent(first_link, 'unlink')
    self.assert_stable(path, orig_ino, 'link (after unlink)')
    self.assert_stable(second_link, orig_ino, 'link (remaining link)')

    os.unlink(second_link)
    return ScenarioOutcome.passed(SCENARIO)
