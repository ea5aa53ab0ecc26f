"""
    Builds a valid session for an infrastructure.

    The infrastructure type tag selects the session plugin
    (see mappings.SESSIONPLUGINS). The plugin reads the parameters it needs
    and creates the context added to the new session.
"""

import logging
import traceback

from inframanager import context
from inframanager import mappings
from inframanager.exceptions import ContextCreationFailure, ContextFailure
from inframanager.exceptions import InfraConfigFailure
from inframanager.pluginmanager import PluginManager
from inframanager.resources import getParameterValue, indexParameters


class SessionBuilder:
    """
    -----------------------------------------------------------------------
    Session factory for one infrastructure.
    -----------------------------------------------------------------------
    Public Interface:
            addParameter(param)
            getParameterValue(name, default)
            getInfraType()
            createSession()
    -----------------------------------------------------------------------
    Parameters come either from an Infrastructure object or from a
    dictionary name -> Parameter. The dictionary is used as it is, so
    addParameter() modifies it.
    Not thread safe.
    """
    def __init__(self, infrastructure=None, user=None, params=None):
        """
        infrastructure: the Infrastructure requiring the session
        user: the user requiring the session, if known
        params: dictionary of Parameter objects, used when no
                infrastructure is provided
        """
        self.log = logging.getLogger('inframanager.sessionbuilder')
        self.infrastructure = infrastructure
        self.user = user
        if infrastructure is not None:
            self.params = indexParameters(infrastructure.getParameters())
            self.infraid = infrastructure.id
        else:
            self.params = params if params is not None else {}
            self.infraid = None
        self.pluginmanager = PluginManager()

    def addParameter(self, param):
        self.params[param.name] = param

    def getParameterValue(self, name, default=None):
        """
        Retrieves a parameter of the infrastructure.
        """
        return getParameterValue(self.params, name, default)

    def getInfraType(self):
        """
        returns the type tag: the 'type' parameter,
        the type of the infrastructure object,
        or the scheme of the 'jobservice' parameter.
        """
        infratype = self.getParameterValue('type')
        if infratype is None and self.infrastructure is not None:
            infratype = self.infrastructure.type
        if infratype is None:
            jobservice = self.getParameterValue('jobservice')
            if jobservice is None:
                raise InfraConfigFailure('Neither type nor jobservice defined for infrastructure %s' % self.infraid)
            if ':' not in jobservice:
                raise InfraConfigFailure('jobservice %s of infrastructure %s has no type prefix' % (jobservice, self.infraid))
            infratype = jobservice[:jobservice.index(':')]
        return infratype.strip().lower()

    def createSession(self):
        """
        Creates a new session with the context derived from the
        infrastructure parameters.

        Raises an InfrastructureException subclass when the type is
        not supported, the parameters are bad or missing,
        or the context cannot be created.
        """
        infratype = self.getInfraType()
        self.log.debug('Create a new session for the type: %s' % infratype)

        pluginname = mappings.sessionplugin(infratype)
        plugin = self.pluginmanager.getplugin(self,
                                              ['inframanager', 'plugins', 'session'],
                                              pluginname,
                                              self.params)
        try:
            newsession = context.createSession()
            newsession.addContext(plugin.getContext())
        except ContextFailure as ex:
            self.log.error('Impossible to create a valid context for %s: %s' % (self.infraid, ex))
            self.log.debug(traceback.format_exc())
            raise ContextCreationFailure('Impossible to open a session in the infrastructure %s' % self.infraid, ex) from ex
        self.log.info('Session %s created for infrastructure %s (%s)' % (newsession.id, self.infraid, infratype))
        return newsession
