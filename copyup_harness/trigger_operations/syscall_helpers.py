import os
import errno
from contextlib import contextmanager
from typing import Any, Callable, FrozenSet, Iterator

from ..outcome import ScenarioOutcome, TriggerResult, TriggerStatus

UNSUPPORTED_ERRNOS: FrozenSet[int] = frozenset({errno.ENOSYS, errno.EOPNOTSUPP, errno.ENOTSUP})
NOT_PERMITTED: FrozenSet[int] = frozenset({errno.EPERM})


def attempt(self, label: str, func: Callable[..., Any], *args: Any,
            denied: FrozenSet[int] = frozenset(), **kwargs: Any) -> TriggerResult:
    """
    Run one mutating syscall variant and tag what happened.

    Args:
        label (str): Variant name used in diagnostics (``fchmod``, ``lsetxattr``...).
        func (Callable): The os-level call.
        *args: Positional arguments for func.
        denied (FrozenSet[int]): Errnos reported as DENIED for this operation.
        **kwargs: Keyword arguments for func.

    Returns:
        TriggerResult: APPLIED, UNSUPPORTED, DENIED or FAILED. Only OSError is
        classified; anything else propagates.
    """
    try:
        func(*args, **kwargs)
        result = TriggerResult(label, TriggerStatus.APPLIED)
    except OSError as e:
        if e.errno in UNSUPPORTED_ERRNOS:
            result = TriggerResult(label, TriggerStatus.UNSUPPORTED, e.errno)
        elif e.errno in denied:
            result = TriggerResult(label, TriggerStatus.DENIED, e.errno)
        else:
            result = TriggerResult(label, TriggerStatus.FAILED, e.errno)
            self.log.error('%s raised %s', label, e)
    self.log.debug('%s(%s) => %s', label, ', '.join(repr(a) for a in args), result.describe())
    return result


@contextmanager
def open_fd(path: str, flags: int) -> Iterator[int]:
    """Descriptor scoped to a with block, closed on every exit path."""
    fd = os.open(path, flags)
    try:
        yield fd
    finally:
        os.close(fd)


def fixture_missing(scenario: str, path: str) -> ScenarioOutcome:
    return ScenarioOutcome.skipped(scenario, f"{os.path.basename(path)} not in base layer")


def remove_stale(path: str) -> None:
    """Remove leftovers of an earlier run (rename targets, extra hard links)."""
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass


__all__ = ['attempt', 'open_fd', 'fixture_missing', 'remove_stale', 'UNSUPPORTED_ERRNOS', 'NOT_PERMITTED']
