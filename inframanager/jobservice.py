"""
    Job services: job submission handles bound to an infrastructure.

    JobServiceFactory resolves the infrastructure of a task, opens a session
    on it and picks the submission backend for its type tag
    (see mappings.JOBSERVICEPLUGINS). The endpoint is the 'jobservice'
    parameter of the infrastructure, e.g.

        gatekeeper://ce.example.org:2119/jobmanager-pbs
        wms://wms.example.org:7443/glite_wms_wmproxy_server
        rocci://cloud.example.org:11443
        ssh://login.example.org:22
"""

import logging
import os
import tempfile
import traceback

from urllib.parse import urlsplit

from inframanager import context
from inframanager import mappings
from inframanager.exceptions import ContextFailure, InfraConfigFailure
from inframanager.exceptions import JobServiceFailure, MissingParameterFailure
from inframanager.pluginmanager import PluginManager
from inframanager.resources import getParameterValue, indexParameters
from inframanager.sessionbuilder import SessionBuilder
from inframanager.utils import ensuredir, writefile


class JobService:
    """
    -----------------------------------------------------------------------
    Submission handle for one infrastructure endpoint.
    -----------------------------------------------------------------------
    Public Interface:
            submit(task)
            status(jobid)
            cancel(jobid)
            close()
    -----------------------------------------------------------------------
    The session belongs to the JobService from now on: it is closed,
    and the credential files written from it are removed, by close().
    """

    def __init__(self, infrastructure, session, endpoint, pluginname, workdir=None):
        self.log = logging.getLogger('inframanager.jobservice')
        self.infrastructure = infrastructure
        self.infraid = infrastructure.id
        self.session = session
        self.endpoint = endpoint
        self.params = indexParameters(infrastructure.getParameters())
        if workdir is None:
            workdir = os.path.join(tempfile.gettempdir(), 'inframanager')
        self.workdir = os.path.expanduser(workdir)
        self.closed = False
        self._proxyfile = None
        self._credfiles = []

        self.backend = PluginManager().getplugin(self,
                                                 ['inframanager', 'plugins', 'jobservice'],
                                                 pluginname,
                                                 self.params)
        self.log.info('JobService for %s bound to %s with backend %s' % (self.infraid,
                                                                         endpoint.geturl(),
                                                                         pluginname))

    def submit(self, task):
        self._checkopen()
        jobid = self.backend.submit(task)
        self.log.info('Task %s submitted to %s with job id %s' % (task.id, self.infraid, jobid))
        return jobid

    def status(self, jobid):
        self._checkopen()
        state = self.backend.status(jobid)
        self.log.debug('Job %s on %s is %s' % (jobid, self.infraid, state))
        return state

    def cancel(self, jobid):
        self._checkopen()
        self.backend.cancel(jobid)
        self.log.info('Job %s on %s canceled' % (jobid, self.infraid))

    def close(self):
        if self.closed:
            return
        try:
            self.backend.cleanup()
        finally:
            for path in self._credfiles:
                try:
                    os.remove(path)
                    self.log.debug('credential file %s removed' % path)
                except FileNotFoundError:
                    pass
            self._credfiles = []
            self._proxyfile = None
            self.session.close()
            self.closed = True
            self.log.debug('JobService for %s closed' % self.infraid)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, tb):
        self.close()

    # -------------------------------------------------------------------------
    #   used by the backends
    # -------------------------------------------------------------------------

    def getContext(self, type=None):
        try:
            return self.session.getContext(type)
        except ContextFailure as ex:
            raise JobServiceFailure('No usable context for %s: %s' % (self.infraid, ex), ex) from ex

    def getProxyFile(self):
        """
        writes the proxy of the session in the work directory, once,
        and returns its path
        """
        self._checkopen()
        if self._proxyfile is None:
            ctx = self.getContext()
            try:
                proxy = ctx.getAttribute(context.USERPROXY)
            except ContextFailure as ex:
                raise JobServiceFailure('No proxy in the session for %s' % self.infraid, ex) from ex
            path = os.path.join(self.workdir, 'x509up_%s' % self.session.id)
            try:
                writefile(path, proxy, 0o600)
            except OSError as ex:
                self.log.error('Cannot write the proxy file %s: %s' % (path, ex))
                raise JobServiceFailure('Cannot write the proxy file for %s' % self.infraid, ex) from ex
            self._credfiles.append(path)
            self._proxyfile = path
            self.log.debug('proxy for %s written to %s' % (self.infraid, path))
        return self._proxyfile

    def taskdir(self, task):
        """
        local directory for the files of a task
        """
        path = os.path.join(self.workdir, str(task.id))
        try:
            ensuredir(path)
        except OSError as ex:
            self.log.error('Cannot create the task directory %s: %s' % (path, ex))
            raise JobServiceFailure('Cannot create the directory of task %s for %s' % (task.id, self.infraid), ex) from ex
        return path

    def taskfile(self, task, name, content):
        """
        writes name in the directory of the task and returns its path
        """
        path = os.path.join(self.taskdir(task), name)
        try:
            return writefile(path, content)
        except OSError as ex:
            self.log.error('Cannot write %s: %s' % (path, ex))
            raise JobServiceFailure('Cannot write %s of task %s for %s' % (name, task.id, self.infraid), ex) from ex

    def _checkopen(self):
        if self.closed:
            raise JobServiceFailure('JobService for %s is closed' % self.infraid)


class JobServiceFactory:
    """
    Builds JobService objects for tasks.
    config is an optional Config object; the option jobservice.workdir
    of section [InfraManager] sets the base directory for job files.
    """

    def __init__(self, config=None):
        self.log = logging.getLogger('inframanager.jobservice')
        self.config = config
        self.workdir = None
        if config is not None:
            self.workdir = config.generic_get('InfraManager', 'jobservice.workdir')

    def createJobService(self, task):
        """
        Create the JobService for the infrastructure of the task.

        Raises an InfrastructureException subclass if the infrastructure
        cannot be used for some problem in the configuration or in the
        infrastructure.
        """
        infra = task.getInfrastructure()
        if infra is None:
            raise InfraConfigFailure('No enabled infrastructure for task %s' % task.id)
        self.log.debug('Creating JobService for task %s on %s' % (task.id, infra.id))

        builder = SessionBuilder(infra, task.user)
        infratype = builder.getInfraType()
        pluginname = mappings.jobserviceplugin(infratype)
        endpoint = self._endpoint(infra)

        session = builder.createSession()
        try:
            return JobService(infra, session, endpoint, pluginname, self.workdir)
        except Exception:
            self.log.error('JobService for %s cannot be created' % infra.id)
            self.log.debug(traceback.format_exc())
            session.close()
            raise

    def _endpoint(self, infra):
        url = getParameterValue(infra.getParameters(), 'jobservice')
        if url is None:
            raise MissingParameterFailure('jobservice', infra.id)
        try:
            endpoint = urlsplit(url)
            endpoint.port
        except ValueError as ex:
            raise InfraConfigFailure('jobservice %s of %s is not a valid URL' % (url, infra.id), ex) from ex
        if not endpoint.hostname:
            raise InfraConfigFailure('jobservice %s of %s has no host' % (url, infra.id))
        return endpoint
