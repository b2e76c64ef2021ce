# Copyright (c) 2021 DDN. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found in the LICENSE file.


import collections
import errno
import os


DirEntry = collections.namedtuple("DirEntry", ["name", "is_dir"])

NOT_FOUND_ERRNOS = [errno.ENOENT, errno.ENOTDIR]


def is_not_found(os_error):
    """True if the OSError means the path is simply not there"""
    return getattr(os_error, "errno", None) in NOT_FOUND_ERRNOS


class HostProbe(object):
    """
    The host filesystem operations that device discovery and removal depend on.

    Every operation raises OSError on failure, with errno ENOENT (or ENOTDIR)
    when the path does not exist. Subclass this to provide a different view of
    the host, OsHostProbe is the real one.
    """

    def read_dir(self, path):
        """Return a list of DirEntry for the entries of path, in host listing order"""
        raise NotImplementedError()

    def lstat(self, path):
        """Stat path without following symlinks"""
        raise NotImplementedError()

    def eval_symlinks(self, path):
        """Return the canonical path that path refers to"""
        raise NotImplementedError()

    def write_file(self, path, data, mode=0o666):
        raise NotImplementedError()


class OsHostProbe(HostProbe):
    def read_dir(self, path):
        # readdir order is arbitrary, listings are by name
        return [DirEntry(entry.name, entry.is_dir()) for entry in sorted(os.scandir(path), key=lambda e: e.name)]

    def lstat(self, path):
        return os.lstat(path)

    def eval_symlinks(self, path):
        # realpath never fails for a missing path, so check the result is there
        real_path = os.path.realpath(path)
        os.lstat(real_path)
        return real_path

    def write_file(self, path, data, mode=0o666):
        if isinstance(data, str):
            data = data.encode("ascii")

        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        try:
            os.write(fd, data)
        finally:
            os.close(fd)
