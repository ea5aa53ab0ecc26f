"""
   Convenience utilities for inframanager.
"""

import logging
import os
import subprocess
import time


class TimeOutException(Exception):
    pass


class TimedCommand:
    """
    -----------------------------------------------------------------------
    class to run external commands.
    It encapsulates calls to subprocess.run()
    Can implement a timeout and abort execution if needed.
    -----------------------------------------------------------------------
    Public Interface:
        self.cmd
        self.output
        self.error
        self.status
        self.time
    -----------------------------------------------------------------------
    cmd is a list of arguments, it is never passed through a shell.
    """

    def __init__(self, cmd, timeout=None, env=None, input=None):
        self.log = logging.getLogger('inframanager.utils')
        self.cmd = list(cmd)
        self.timeout = timeout
        self.env = env
        self.input = input
        self.output = None
        self.error = None
        self.status = None

        now = time.time()
        self.run()
        self.time = time.time() - now

    def run(self):
        environ = None
        if self.env:
            environ = dict(os.environ)
            environ.update(self.env)
        self.log.debug('running command: %s' % ' '.join(self.cmd))
        try:
            p = subprocess.run(self.cmd,
                               input=self.input,
                               stdout=subprocess.PIPE,
                               stderr=subprocess.PIPE,
                               env=environ,
                               timeout=self.timeout,
                               universal_newlines=True,
                               close_fds=True)
        except subprocess.TimeoutExpired as ex:
            self.log.error('command %s killed after %s seconds' % (self.cmd[0], self.timeout))
            raise TimeOutException('command %s timed out after %s seconds' % (self.cmd[0], self.timeout)) from ex
        self.output = p.stdout
        self.error = p.stderr
        self.status = p.returncode
        self.log.debug('command %s finished with status %s' % (self.cmd[0], self.status))


def which(file):
    for path in os.environ["PATH"].split(":"):
        if os.path.exists(path + "/" + file):
            return path + "/" + file


def ensuredir(dirpath):
    if not os.path.exists(dirpath):
        os.makedirs(dirpath)


def writefile(filepath, content, mode=None):
    """
    writes content in filepath. When mode is given, the file is created
    with those permissions before anything is written into it.
    """
    ensuredir(os.path.dirname(filepath) or '.')
    if mode is None:
        mode = 0o644
    fd = os.open(filepath, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, 'w') as fh:
        fh.write(content)
    os.chmod(filepath, mode)
    return filepath
