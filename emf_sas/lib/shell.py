# Copyright (c) 2021 DDN. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found in the LICENSE file.


import collections
import os
import subprocess
import tempfile
import time


class BaseShell(object):
    # Effectively no autotimeout for commands.
    SHELLTIMEOUT = 0xFFFFFFF

    RunResult = collections.namedtuple("RunResult", ["rc", "stdout", "stderr", "timeout"])

    @classmethod
    def _run(cls, arg_list, logger, timeout):
        """Separate the bare inner of running a command, so that tests can
        stub this function while retaining the related behaviour of run()
        """

        assert type(arg_list) in [list, str], "arg list must be list or str :%s" % type(arg_list)

        if type(arg_list) is str:
            arg_list = arg_list.split()

        # Use real files rather than subprocess.PIPE so that the output is effectively limitless
        stdout_fd = tempfile.TemporaryFile()
        stderr_fd = tempfile.TemporaryFile()

        try:
            p = subprocess.Popen(arg_list, stdout=stdout_fd, stderr=stderr_fd, close_fds=True)

            # poll with backoff rather than p.wait() so the timeout can be honoured
            rc = None
            max_wait = 1.0
            wait = 1.0e-3
            timeout += time.time()
            while rc is None:
                rc = p.poll()
                if rc is None:
                    time.sleep(wait)

                    if time.time() > timeout:
                        p.kill()
                        if logger:
                            logger.warning("Shell.run: killed %s after timeout" % repr(arg_list))
                        return cls._result(254, stdout_fd, stderr_fd, True)
                    elif wait < max_wait:
                        wait *= 2.0
                else:
                    return cls._result(rc, stdout_fd, stderr_fd, False)
        finally:
            stdout_fd.close()
            stderr_fd.close()

    @classmethod
    def _result(cls, rc, stdout_fd, stderr_fd, timed_out):
        stdout_fd.seek(0)
        stderr_fd.seek(0)
        return cls.RunResult(
            rc,
            stdout_fd.read().decode("ascii", "ignore"),
            stderr_fd.read().decode("ascii", "ignore"),
            timed_out,
        )

    @classmethod
    def run(cls, arg_list, logger=None, timeout=SHELLTIMEOUT):
        """Run a subprocess, and return a tuple of rc, stdout, stderr.

        Note: we buffer all output, so do not run subprocesses with large outputs
        using this function.
        """

        if logger:
            logger.debug("Shell.run: %s" % repr(arg_list))

        os.environ["TERM"] = ""

        return cls._run(arg_list, logger, timeout)


# emf_sas modules run commands through Shell rather than BaseShell directly
Shell = BaseShell
