#
# inframanager job service plugin base for command line clients
#

import logging

from inframanager import defaults
from inframanager.exceptions import InfraConfigFailure, JobServiceFailure
from inframanager.interfaces import JobServiceInterface
from inframanager.resources import getParameterValue
from inframanager.utils import TimedCommand, TimeOutException


class CommandBase(JobServiceInterface):
    """
    Backends driving an external client. Every command is run
    with the 'commandtimeout' parameter as timeout.
    """

    def __init__(self, jobservice, params):
        self.log = logging.getLogger('inframanager.jobservice.%s' % jobservice.infraid)
        self.jobservice = jobservice
        self.name = jobservice.infraid
        timeout = getParameterValue(params, 'commandtimeout', defaults.COMMANDTIMEOUT)
        try:
            self.timeout = int(timeout)
        except ValueError as ex:
            raise InfraConfigFailure('commandtimeout %r is not a number for %s' % (timeout, self.name), ex) from ex

    def _run(self, cmd, env=None, check=True):
        """
        runs cmd, a list of arguments, and returns the TimedCommand.
        With check, a non zero exit status raises JobServiceFailure.
        """
        try:
            command = TimedCommand(cmd, timeout=self.timeout, env=env)
        except TimeOutException as ex:
            raise JobServiceFailure('%s timed out for %s' % (cmd[0], self.name), ex) from ex
        except OSError as ex:
            self.log.error('%s cannot be executed: %s' % (cmd[0], ex))
            raise JobServiceFailure('%s cannot be executed for %s' % (cmd[0], self.name), ex) from ex
        if check and command.status != 0:
            self.log.error('%s failed with status %s: %s' % (cmd[0], command.status, command.error))
            raise JobServiceFailure('%s failed for %s: %s' % (cmd[0], self.name, (command.error or '').strip()),
                                    status=command.status,
                                    output=(command.output or '') + (command.error or ''))
        return command

    def cleanup(self):
        self.log.debug('Cleanup called. Noop.')
