#
# inframanager job service plugin for OCCI clouds, through the rOCCI client
#

import re
import shlex

from inframanager import context
from inframanager import defaults
from inframanager import mappings
from inframanager.exceptions import JobServiceFailure, MissingParameterFailure
from inframanager.plugins.jobservice.CommandBase import CommandBase
from inframanager.resources import getParameterValue


STATERE = re.compile(r'occi\.compute\.state\s*[=:]\s*"?([A-Za-z]+)')


class ROCCI(CommandBase):
    """
    Every task is a new VM. The task runs from the user_data script
    of the VM, and the public key of the session is injected so the
    VM can be reached as root.
    The job id is the location of the compute resource.
    """

    def __init__(self, jobservice, params):
        super(ROCCI, self).__init__(jobservice, params)
        endpoint = jobservice.endpoint
        self.endpoint = 'https://%s%s' % (endpoint.netloc, endpoint.path or '/')
        self.ostpl = getParameterValue(params, 'os_tpl')
        if not self.ostpl:
            raise MissingParameterFailure('os_tpl', self.name)
        self.resourcetpl = getParameterValue(params, 'resource_tpl', defaults.RESOURCETPL)
        self.log.info('ROCCI: Object initialized for %s (%s, %s)' % (self.endpoint, self.ostpl, self.resourcetpl))

    def _base(self):
        return ['occi',
                '--endpoint', self.endpoint,
                '--auth', 'x509',
                '--user-cred', self.jobservice.getProxyFile(),
                '--voms']

    def _userdata(self, task):
        taskdir = '/tmp/inframanager-%s' % task.id
        cmdline = ' '.join(shlex.quote(arg) for arg in [task.executable] + task.arguments)
        return ('#!/bin/sh\n'
                'mkdir -p %s && cd %s\n'
                '%s > stdout 2> stderr\n') % (taskdir, taskdir, cmdline)

    def submit(self, task):
        if task.inputfiles or task.outputfiles:
            self.log.warning('task %s: files are not staged to OCCI resources' % task.id)
        ctx = self.jobservice.getContext('rocci')
        publickey = ctx.getAttribute(context.USERCERT)
        userdata = self.jobservice.taskfile(task, 'user_data.sh', self._userdata(task))
        cmd = self._base() + ['--action', 'create',
                              '--resource', 'compute',
                              '--mixin', 'os_tpl#%s' % self.ostpl,
                              '--mixin', 'resource_tpl#%s' % self.resourcetpl,
                              '--attribute', 'occi.core.title=%s' % task.id,
                              '--context', 'public_key=file://%s' % publickey,
                              '--context', 'user_data=file://%s' % userdata]
        command = self._run(cmd)
        for line in reversed(command.output.splitlines()):
            line = line.strip()
            if line.startswith('http'):
                return line
        raise JobServiceFailure('No compute location returned by %s for task %s' % (self.endpoint, task.id),
                                status=command.status,
                                output=command.output)

    def status(self, jobid):
        command = self._run(self._base() + ['--action', 'describe', '--resource', jobid])
        m = STATERE.search(command.output)
        if m is None:
            self.log.warning('No state found for compute %s' % jobid)
            return mappings.UNKNOWN
        return mappings.map2state(m.group(1), mappings.OCCISTATES)

    def cancel(self, jobid):
        self._run(self._base() + ['--action', 'delete', '--resource', jobid])
