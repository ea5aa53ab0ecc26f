#
# inframanager job service plugin for gLite WMS
#

import os
import re

from inframanager import context
from inframanager import mappings
from inframanager.exceptions import ContextFailure, JobServiceFailure
from inframanager.plugins.jobservice.CommandBase import CommandBase


STATUSRE = re.compile(r'Current Status:\s+(.+)')

# JDL attributes (case insensitive) written as expressions, not strings
EXPRESSIONS = ['rank', 'requirements']


class GliteWMS(CommandBase):
    """
    Submission with the glite-wms-job-* clients, delegating the
    proxy of the session at every submission.
    The JobServiceAttributes of the VOMS context (wms.<Attribute>=<value>)
    are added to the JDL.
    """

    def __init__(self, jobservice, params):
        super(GliteWMS, self).__init__(jobservice, params)
        endpoint = jobservice.endpoint
        self.endpoint = 'https://%s%s' % (endpoint.netloc, endpoint.path)
        self.log.info('GliteWMS: Object initialized for %s' % self.endpoint)

    def _env(self):
        return {'X509_USER_PROXY': self.jobservice.getProxyFile()}

    def _jdlattributes(self):
        ctx = self.jobservice.getContext('VOMS')
        try:
            values = ctx.getVectorAttribute(context.JOBSERVICEATTRIBUTES)
        except ContextFailure:
            return []
        attributes = []
        for value in values:
            key, _, value = value.partition('=')
            if key.startswith('wms.'):
                key = key[len('wms.'):]
            if not value:
                continue
            attributes.append((key, value))
        return attributes

    def _jdl(self, task):
        lines = []
        if os.path.isfile(task.executable):
            executable = os.path.basename(task.executable)
            inputs = [task.executable] + list(task.inputfiles)
        else:
            executable = task.executable
            inputs = list(task.inputfiles)
        outputs = ['stdout', 'stderr'] + list(task.outputfiles)

        lines.append('Executable = %s;' % jdlstring(executable))
        if task.arguments:
            lines.append('Arguments = %s;' % jdlstring(' '.join(task.arguments)))
        lines.append('StdOutput = "stdout";')
        lines.append('StdError = "stderr";')
        if inputs:
            lines.append('InputSandbox = {%s};' % ','.join(jdlstring(f) for f in inputs))
        lines.append('OutputSandbox = {%s};' % ','.join(jdlstring(f) for f in outputs))
        for key, value in self._jdlattributes():
            if key.lower() in EXPRESSIONS or value.isdigit():
                lines.append('%s = %s;' % (key, value))
            else:
                lines.append('%s = %s;' % (key, jdlstring(value)))
        return '[\n%s\n]\n' % '\n'.join('  ' + line for line in lines)

    def submit(self, task):
        jdlfile = self.jobservice.taskfile(task, 'job.jdl', self._jdl(task))
        self.log.debug('JDL for task %s written to %s' % (task.id, jdlfile))
        cmd = ['glite-wms-job-submit', '-a', '--nomsg', '-e', self.endpoint, jdlfile]
        command = self._run(cmd, env=self._env())
        for line in reversed(command.output.splitlines()):
            line = line.strip()
            if line.startswith('https://'):
                return line
        raise JobServiceFailure('No job id returned by %s for task %s' % (self.endpoint, task.id),
                                status=command.status,
                                output=command.output)

    def status(self, jobid):
        command = self._run(['glite-wms-job-status', '--noint', jobid], env=self._env())
        m = STATUSRE.search(command.output)
        if m is None:
            self.log.warning('No status found for job %s' % jobid)
            return mappings.UNKNOWN
        status = m.group(1).strip()
        state = mappings.map2state(status.split()[0], mappings.WMSSTATES)
        # Done (Success), Done (Exit Code !=0), Done (Failed)
        if status.lower().startswith('done') and 'success' not in status.lower():
            state = mappings.FAILED
        return state

    def cancel(self, jobid):
        self._run(['glite-wms-job-cancel', '--noint', jobid], env=self._env())


def jdlstring(value):
    return '"%s"' % value.replace('\\', '\\\\').replace('"', '\\"')
