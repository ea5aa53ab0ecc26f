"""
    Interfaces implemented by the plugins.
"""


class SessionContextInterface:
    '''
    -----------------------------------------------------------------------
    Builds the security context for one kind of infrastructure.
    Parameters are read and validated when the plugin is initialized,
    so a wrong configuration fails before any session exists.
    -----------------------------------------------------------------------
    Public Interface:
            getContext()
    -----------------------------------------------------------------------
    '''
    def getContext(self):
        '''
        Returns a new, populated Context object.
        '''
        raise NotImplementedError


class JobServiceInterface:
    '''
    -----------------------------------------------------------------------
    Interacts with the submission backend of one kind of infrastructure.
    It is instantiated once per JobService.
    -----------------------------------------------------------------------
    Public Interface:
            submit(task)
            status(jobid)
            cancel(jobid)
            cleanup()
    -----------------------------------------------------------------------
    '''
    def submit(self, task):
        '''
        Submits the task. Returns the backend job id as a string.
        '''
        raise NotImplementedError

    def status(self, jobid):
        '''
        Returns the generic state of the job (see mappings).
        '''
        raise NotImplementedError

    def cancel(self, jobid):
        '''
        Cancels the job.
        '''
        raise NotImplementedError

    def cleanup(self):
        '''
        Called once when the JobService is closed.
        '''
        raise NotImplementedError
