"""Raw libc entry points the os module does not expose as-is.

``os.posix_fallocate`` falls back to writing zeros when the filesystem lacks
fallocate support and ``os.scandir`` hides the getdents64 record layout, so
both are called through ctypes instead.
"""
import ctypes
import ctypes.util
import errno
import os
import platform
import sys
from typing import Optional

# getdents64 syscall numbers per machine (Linux only)
SYS_GETDENTS64 = {
    'x86_64': 217,
    'amd64': 217,
    'i386': 220,
    'i686': 220,
    'aarch64': 61,
    'arm64': 61,
    'riscv64': 61,
    'loongarch64': 61,
    'armv7l': 217,
    'armv6l': 217,
    'ppc64': 202,
    'ppc64le': 202,
    's390x': 220,
}

_libc: Optional[ctypes.CDLL] = None


def get_libc() -> ctypes.CDLL:
    global _libc
    if _libc is None:
        _libc = ctypes.CDLL(ctypes.util.find_library('c') or 'libc.so.6', use_errno=True)
        _libc.syscall.restype = ctypes.c_long
    return _libc


def _raise_errno() -> None:
    err = ctypes.get_errno()
    raise OSError(err, os.strerror(err))


def getdents64_syscall_number() -> Optional[int]:
    if not sys.platform.startswith('linux'):
        return None
    return SYS_GETDENTS64.get(platform.machine().lower())


def getdents64(fd: int, size: int) -> bytes:
    """
    Invoke the raw getdents64 syscall once.

    Args:
        fd (int): Descriptor of an open directory.
        size (int): Size of the buffer handed to the kernel.

    Returns:
        bytes: The filled part of the buffer; empty at end of directory.

    Raises:
        OSError: With the syscall's errno (EBADF, ENOTDIR, ...), or ENOSYS
            when the host has no known getdents64 syscall number.
    """
    nr = getdents64_syscall_number()
    if nr is None:
        raise OSError(errno.ENOSYS, f"getdents64 is not available on {sys.platform}/{platform.machine()}")
    buf = ctypes.create_string_buffer(size)
    ret = get_libc().syscall(ctypes.c_long(nr), ctypes.c_int(fd), buf, ctypes.c_size_t(size))
    if ret < 0:
        _raise_errno()
    return buf.raw[:ret]


def fallocate(fd: int, mode: int, offset: int, length: int) -> None:
    """Call fallocate(2) without the glibc posix_fallocate write fallback."""
    if not sys.platform.startswith('linux'):
        raise OSError(errno.ENOSYS, f"fallocate is not available on {sys.platform}")
    libc = get_libc()
    func = getattr(libc, 'fallocate64', None) or libc.fallocate
    func.argtypes = [ctypes.c_int, ctypes.c_int, ctypes.c_int64, ctypes.c_int64]
    func.restype = ctypes.c_int
    if func(fd, mode, offset, length) != 0:
        _raise_errno()
