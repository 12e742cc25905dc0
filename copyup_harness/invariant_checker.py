import logging
from typing import Optional

from .identity_oracle import Identity, IdentityOracle
from .outcome import InvariantViolation


class InvariantCheckerMixIn:
    """Mixin re-resolving identity after each mutating call.

    Expects the host class to provide ``oracle`` (an IdentityOracle) and
    ``log`` (a logging.Logger).
    """

    oracle: IdentityOracle
    log: logging.Logger

    def _compare(self, observed: Optional[Identity], expected: Identity, op_name: str, query: str) -> None:
        if observed is None:
            raise InvariantViolation(f"{query} after {op_name} failed: no such entry (expected inode {expected})")
        if observed != expected:
            raise InvariantViolation(f"INODE CHANGED after {op_name} ({query}): was {expected}, now {observed}")
        self.log.debug('%s after %s => inode %s', query, op_name, observed)

    def snapshot(self, path: str) -> Optional[Identity]:
        """
        Capture the base-layer identity of a fixture.

        The identity is queried twice; without an intervening mutation both
        queries must agree.

        Returns:
            Identity | None: None if the fixture is not present.
        """
        first = self.oracle.identity_of(path)
        if first is None:
            return None
        second = self.oracle.identity_of(path)
        if second != first:
            raise InvariantViolation(f"inode of {path} drifted without mutation: was {first}, now {second}")
        return first

    def assert_stable(self, path: str, expected: Identity, op_name: str) -> None:
        self._compare(self.oracle.identity_of(path), expected, op_name, 'stat')

    def assert_stable_link(self, path: str, expected: Identity, op_name: str) -> None:
        self._compare(self.oracle.identity_of_link(path), expected, op_name, 'lstat')

    def assert_stable_open(self, fd: int, expected: Identity, op_name: str) -> None:
        self._compare(self.oracle.identity_of_open(fd), expected, op_name, 'fstat')

    def assert_stable_everywhere(self, path: str, expected: Identity, op_name: str, fd: Optional[int] = None) -> None:
        """Check path, link and (when given) descriptor identity in turn."""
        self.assert_stable(path, expected, op_name)
        self.assert_stable_link(path, expected, op_name)
        if fd is not None:
            self.assert_stable_open(fd, expected, op_name)

    def assert_absent(self, path: str, op_name: str) -> None:
        observed = self.oracle.identity_of(path)
        if observed is not None:
            raise InvariantViolation(f"{path} still resolves after {op_name} (inode {observed})")

    def assert_link_count(self, path: str, minimum: int, op_name: str) -> None:
        nlink = self.oracle.link_count(path)
        if nlink is None or nlink < minimum:
            raise InvariantViolation(f"link count after {op_name} is {nlink}, expected at least {minimum}")
