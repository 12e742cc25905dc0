import os
from ..outcome import ScenarioOutcome, TriggerResult
from .syscall_helpers import attempt, fixture_missing, open_fd, remove_stale

SCENARIO = 'copyup/rename'
FIXTURE = 'copyup_rename_test.txt'
RENAMED = 'copyup_rename_test_renamed.txt'


def rename_path(self, old: str, new: str) -> TriggerResult:
    return attempt(self, 'rename', os.rename, old, new)


def rename_operation(self, path):
    """
    Rename a base layer file within the mount.

    The identity must follow the file to its new name and the vacated name
    must stop resolving. A descriptor opened before the rename must keep
    reporting the same identity too.
    """
    orig_ino = self.snapshot(path)
    if orig_ino is None:
        return fixture_missing(SCENARIO, path)

    new_path = os.path.join(os.path.dirname(path), RENAMED)
    remove_stale(new_path)

    with open_fd(path, os.O_RDONLY) as fd:
        result = rename_path(self, path, new_path)
        if not result.applied:
            return result.to_outcome(SCENARIO)
        self.assert_stable_everywhere(new_path, orig_ino, 'rename', fd=fd)

    self.assert_absent(path, 'rename')

    os.unlink(new_path)
    return ScenarioOutcome.passed(SCENARIO)
