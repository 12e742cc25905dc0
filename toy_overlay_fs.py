#!/usr/bin/env python3
"""A two-layer FUSE filesystem used by test_fs.py to exercise the harness."""
import errno
import os
import shutil
import sys
from typing import Dict
from refuse import _refactor
_refactor.sys = sys # type: ignore
from refuse.high import FUSE, FuseOSError, Operations


class ToyOverlayFS(Operations):
    """Copies files up to the upper directory on first modification.

    With preserve_ino the copied-up file keeps reporting the inode number it
    had in the lower directory; without it the upper file's inode leaks
    through, which is the bug the harness exists to catch.
    """

    def __init__(self, lower, upper, preserve_ino=True):
        self.lower = lower
        self.upper = upper
        self.preserve_ino = preserve_ino
        self.origin: Dict[str, int] = {}

    def get_lower_path(self, path):
        return os.path.join(self.lower, path.lstrip('/'))

    def get_upper_path(self, path):
        return os.path.join(self.upper, path.lstrip('/'))

    def get_right_path(self, path):
        upper_path = self.get_upper_path(path)
        if os.path.lexists(upper_path):
            return upper_path
        return self.get_lower_path(path)

    def copy_up(self, path):
        upper_path = self.get_upper_path(path)
        if not os.path.lexists(upper_path):
            lower_path = self.get_lower_path(path)
            if not os.path.lexists(lower_path):
                raise FuseOSError(errno.ENOENT)
            self.origin[path] = os.lstat(lower_path).st_ino
            shutil.copy2(lower_path, upper_path)
        return upper_path

    # Filesystem methods
    def getattr(self, path, fh=None):
        right_path = self.get_right_path(path)
        if not os.path.lexists(right_path):
            raise FuseOSError(errno.ENOENT)
        st = os.lstat(right_path)
        st_dict = dict((key, getattr(st, key)) for key in (
            'st_atime', 'st_ctime', 'st_gid', 'st_mtime',
            'st_nlink', 'st_size', 'st_uid', 'st_mode', 'st_ino'))
        if self.preserve_ino and path in self.origin:
            st_dict['st_ino'] = self.origin[path]
        return st_dict

    def readdir(self, path, fh):
        dirents = {'.', '..'}
        for layer_path in (self.get_lower_path(path), self.get_upper_path(path)):
            if os.path.isdir(layer_path):
                dirents.update(os.listdir(layer_path))
        return dirents

    def open(self, path, flags):
        if flags & (os.O_WRONLY | os.O_RDWR | os.O_APPEND | os.O_TRUNC):
            return os.open(self.copy_up(path), flags)
        return os.open(self.get_right_path(path), flags)

    def read(self, path, length, offset, fh):
        return os.pread(fh, length, offset)

    def write(self, path, buf, offset, fh):
        return os.pwrite(fh, buf, offset)

    def truncate(self, path, length, fh=None):
        os.truncate(self.copy_up(path), length)

    def chmod(self, path, mode):
        os.chmod(self.copy_up(path), mode)

    def release(self, path, fh):
        os.close(fh)

    def flush(self, path, fh):
        return 0

    def fsync(self, path, datasync, fh):
        return 0


def start_toy_overlay(mountpoint, lower, upper, preserve_ino=True):
    FUSE(ToyOverlayFS(lower, upper, preserve_ino), mountpoint, foreground=True, nothreads=True,
         use_ino=True, attr_timeout=0, entry_timeout=0)
