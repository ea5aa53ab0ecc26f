#
# inframanager job service plugin for HTCondor-G
#

import logging
import os
import re
import traceback

from inframanager import mappings
from inframanager.exceptions import JobServiceFailure
from inframanager.htcondorlib import HTCondorSchedd, JobSubmissionDescription
from inframanager.interfaces import JobServiceInterface
from inframanager.resources import getParameterValue


JOBIDRE = re.compile(r'^\d+\.\d+$')


class CondorBase(JobServiceInterface):
    """
    Grid universe submission through a local (or remote) schedd.
    Subclasses set gridtype, the first token of grid_resource.
    """
    gridtype = None

    def __init__(self, jobservice, params):
        self.log = logging.getLogger('inframanager.jobservice.%s' % jobservice.infraid)
        self.jobservice = jobservice
        self.name = jobservice.infraid
        self.scheddname = getParameterValue(params, 'condor.schedd')
        self.pool = getParameterValue(params, 'condor.pool')
        self.gridresource = self._gridresource(jobservice.endpoint)
        self.schedd = None
        self.log.info('%s: Object initialized for %s' % (self.__class__.__name__, self.gridresource))

    def _gridresource(self, endpoint):
        return '%s %s%s' % (self.gridtype, endpoint.netloc, endpoint.path)

    def _getschedd(self):
        if self.schedd is None:
            try:
                self.schedd = HTCondorSchedd(self.scheddname, self.pool)
            except Exception as ex:
                raise JobServiceFailure('No schedd available for %s: %s' % (self.name, ex), ex) from ex
        return self.schedd

    def submit(self, task):
        jsd = JobSubmissionDescription()
        self._addJSD(jsd, task)
        self.log.debug('submit description for task %s:\n%s' % (task.id, jsd.dumps()))
        try:
            clusterid = self._getschedd().condor_submit(jsd)
        except JobServiceFailure:
            raise
        except Exception as ex:
            self.log.error('Exception during submission of task %s: %s' % (task.id, ex))
            self.log.debug(traceback.format_exc())
            raise JobServiceFailure('Submission of task %s to %s failed' % (task.id, self.name), ex) from ex
        return '%s.0' % clusterid

    def _addJSD(self, jsd, task):
        """
        add things to the JSD object
        """
        taskdir = self.jobservice.taskdir(task)
        jsd.add('universe', 'grid')
        jsd.add('grid_resource', self.gridresource)
        jsd.add('executable', task.executable)
        jsd.add('transfer_executable', 'True' if os.path.isfile(task.executable) else 'False')
        if task.arguments:
            jsd.add('arguments', condorarguments(task.arguments))
        jsd.add('initialdir', taskdir)
        jsd.add('output', os.path.join(taskdir, 'stdout'))
        jsd.add('error', os.path.join(taskdir, 'stderr'))
        jsd.add('log', os.path.join(taskdir, 'job.log'))
        jsd.add('x509userproxy', self.jobservice.getProxyFile())
        jsd.add('should_transfer_files', 'YES')
        jsd.add('when_to_transfer_output', 'ON_EXIT')
        if task.inputfiles:
            jsd.add('transfer_input_files', ','.join(task.inputfiles))
        if task.outputfiles:
            jsd.add('transfer_output_files', ','.join(task.outputfiles))
        jsd.add('+InfraManagerTask', '"%s"' % task.id)

    def status(self, jobid):
        constraint_l = self._constraint(jobid)
        attribute_l = ['JobStatus', 'ExitCode']
        try:
            schedd = self._getschedd()
            out = schedd.condor_q(attribute_l, constraint_l)
            if not out:
                self.log.debug('job %s not in the queue, checking history' % jobid)
                out = schedd.condor_history(attribute_l, constraint_l)
        except JobServiceFailure:
            raise
        except Exception as ex:
            self.log.error('Exception querying job %s: %s' % (jobid, ex))
            raise JobServiceFailure('Status of job %s on %s not available' % (jobid, self.name), ex) from ex
        if not out:
            return mappings.UNKNOWN
        ad = out[0]
        state = mappings.map2state(int(ad['JobStatus']), mappings.CONDORSTATES)
        if state == mappings.DONE and int(ad.get('ExitCode', 0)) != 0:
            state = mappings.FAILED
        return state

    def cancel(self, jobid):
        self._constraint(jobid)
        try:
            self._getschedd().condor_rm([jobid])
        except JobServiceFailure:
            raise
        except Exception as ex:
            self.log.error('Exception removing job %s: %s' % (jobid, ex))
            raise JobServiceFailure('Job %s on %s cannot be canceled' % (jobid, self.name), ex) from ex

    def cleanup(self):
        self.log.debug('Cleanup called. Noop.')

    def _constraint(self, jobid):
        if not JOBIDRE.match(jobid):
            raise JobServiceFailure('%s is not a condor job id' % jobid)
        clusterid, procid = jobid.split('.')
        return ['ClusterId == %s' % clusterid, 'ProcId == %s' % procid]


def condorarguments(arguments):
    """
    arguments in the new syntax of the submit files:
    the whole string in double quotes, single quotes around
    the arguments with white spaces.
    """
    out = []
    for arg in arguments:
        arg = arg.replace('"', '""').replace("'", "''")
        if not arg or re.search(r'\s', arg):
            arg = "'%s'" % arg
        out.append(arg)
    return '"%s"' % ' '.join(out)
