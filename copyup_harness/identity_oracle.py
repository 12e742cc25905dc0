import os
import errno
from dataclasses import dataclass
from typing import Optional

# A vanished parent directory is reported as ENOTDIR when the parent became a file
_ABSENT_ERRNOS = (errno.ENOENT, errno.ENOTDIR)


@dataclass(frozen=True, order=True)
class Identity:
    """Filesystem-assigned identity of a storage object (its inode number)."""
    ino: int

    def __str__(self):
        return str(self.ino)


def _lookup(path: str, follow_symlinks: bool) -> Optional[os.stat_result]:
    try:
        return os.stat(path, follow_symlinks=follow_symlinks)
    except OSError as e:
        if e.errno in _ABSENT_ERRNOS:
            return None
        raise


def identity_of(path: str) -> Optional[Identity]:
    """
    Return the identity of the object at path, following symlinks.

    Returns:
        Identity | None: None when no entry exists at path.

    Raises:
        OSError: For any lookup failure other than a missing entry
            (e.g. EACCES), so callers can tell absence from restriction.
    """
    st = _lookup(path, follow_symlinks=True)
    return Identity(st.st_ino) if st is not None else None


def identity_of_link(path: str) -> Optional[Identity]:
    """Same as identity_of but does not follow a terminal symlink."""
    st = _lookup(path, follow_symlinks=False)
    return Identity(st.st_ino) if st is not None else None


def identity_of_open(fd: int) -> Identity:
    return Identity(os.fstat(fd).st_ino)


def link_count(path: str) -> Optional[int]:
    st = _lookup(path, follow_symlinks=False)
    return st.st_nlink if st is not None else None


class IdentityOracle:
    """Read-side helper bundling the identity queries.

    The invariant checker talks to an instance of this class rather than to
    the module functions so a different oracle can be swapped in.
    """

    def identity_of(self, path: str) -> Optional[Identity]:
        return identity_of(path)

    def identity_of_link(self, path: str) -> Optional[Identity]:
        return identity_of_link(path)

    def identity_of_open(self, fd: int) -> Identity:
        return identity_of_open(fd)

    def link_count(self, path: str) -> Optional[int]:
        return link_count(path)
