#
# inframanager job service plugin for plain SSH hosts
#

import os
import shlex

from inframanager import context
from inframanager import mappings
from inframanager.exceptions import ContextFailure, JobServiceFailure
from inframanager.plugins.jobservice.CommandBase import CommandBase
from inframanager.resources import getParameterValue
from inframanager.utils import which


def remotequote(path):
    """
    quotes path for the remote shell. A leading ~/ is left out of the
    quotes, so it is still expanded to the remote home directory.
    """
    if path == '~':
        return path
    if path.startswith('~/'):
        return '~/' + shlex.quote(path[2:])
    return shlex.quote(path)


class SSH(CommandBase):
    """
    Runs the task in background on the remote host, in
    <remotedir>/<task id>. The job id is the remote pid.
    With a password in the session, ssh and scp run under sshpass,
    which reads it from the SSHPASS environment variable.
    """

    def __init__(self, jobservice, params):
        super(SSH, self).__init__(jobservice, params)
        endpoint = jobservice.endpoint
        self.host = endpoint.hostname
        self.port = endpoint.port or 22
        self.remotedir = getParameterValue(params, 'remotedir', '.inframanager')

        ctx = jobservice.getContext('UserPass')
        self.user = self._attribute(ctx, context.USERID) or endpoint.username
        self.password = self._attribute(ctx, context.USERPASS)
        self.knownhosts = ''
        if ctx.hasAttribute(context.DATASERVICEATTRIBUTES):
            for value in ctx.getVectorAttribute(context.DATASERVICEATTRIBUTES):
                key, _, value = value.partition('=')
                if key == 'sftp.KnownHosts':
                    self.knownhosts = value
        if self.password is not None and which('sshpass') is None:
            raise JobServiceFailure('sshpass is needed for password access to %s' % self.host)
        self.log.info('SSH: Object initialized for %s' % self._target())

    def _attribute(self, ctx, name):
        try:
            return ctx.getAttribute(name)
        except ContextFailure:
            return None

    def _target(self):
        if self.user:
            return '%s@%s' % (self.user, self.host)
        return self.host

    def _options(self):
        if self.knownhosts:
            options = ['-o', 'UserKnownHostsFile=%s' % os.path.expanduser(self.knownhosts)]
        else:
            options = ['-o', 'StrictHostKeyChecking=no', '-o', 'UserKnownHostsFile=/dev/null']
        if self.password is None:
            options += ['-o', 'BatchMode=yes']
        return options

    def _wrap(self, cmd):
        """
        returns the command and its environment
        """
        if self.password is None:
            return cmd, None
        return ['sshpass', '-e'] + cmd, {'SSHPASS': self.password}

    def _ssh(self, remotecmd, check=True):
        cmd, env = self._wrap(['ssh', '-p', str(self.port)] + self._options() + [self._target(), remotecmd])
        return self._run(cmd, env=env, check=check)

    def _scp(self, files, remotedir):
        cmd, env = self._wrap(['scp', '-P', str(self.port)] + self._options() +
                              list(files) + ['%s:%s/' % (self._target(), remotedir)])
        return self._run(cmd, env=env)

    def submit(self, task):
        remotedir = '%s/%s' % (self.remotedir, task.id)
        self._ssh('mkdir -p %s' % remotequote(remotedir))

        files = list(task.inputfiles)
        executable = task.executable
        if os.path.isfile(executable):
            files.insert(0, executable)
            executable = './%s' % os.path.basename(executable)
        if files:
            self._scp(files, remotedir)

        cmdline = ' '.join(shlex.quote(arg) for arg in [executable] + task.arguments)
        remotecmd = 'cd %s && nohup %s > stdout 2> stderr < /dev/null & echo $!' % (remotequote(remotedir), cmdline)
        command = self._ssh(remotecmd)
        lines = command.output.split()
        if not lines or not lines[-1].isdigit():
            raise JobServiceFailure('No pid returned by %s for task %s' % (self.host, task.id),
                                    status=command.status,
                                    output=command.output)
        return lines[-1]

    def status(self, jobid):
        self._checkpid(jobid)
        command = self._ssh('kill -0 %s' % jobid, check=False)
        if command.status == 0:
            return mappings.RUNNING
        # 255 is the exit status of ssh itself
        if command.status == 255:
            raise JobServiceFailure('%s not reachable: %s' % (self.host, (command.error or '').strip()),
                                    status=command.status,
                                    output=command.error)
        return mappings.DONE

    def cancel(self, jobid):
        self._checkpid(jobid)
        self._ssh('kill %s' % jobid)

    def _checkpid(self, jobid):
        if not jobid.isdigit():
            raise JobServiceFailure('%s is not a process id' % jobid)
