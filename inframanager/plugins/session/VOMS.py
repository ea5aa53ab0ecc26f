"""
 Session plugin for infrastructures accessed with a VOMS proxy
 (gatekeeper and wsgram).
"""

import logging

from inframanager import context
from inframanager.interfaces import SessionContextInterface
from inframanager.remoteproxy import RemoteProxy


class VOMS(SessionContextInterface):
    """
    The proxy is retrieved from the remote location configured
    with proxyurl or etokenserverurl every time a context is built.
    """
    contexttype = 'VOMS'

    def __init__(self, builder, params):
        self.log = logging.getLogger('inframanager.plugins.session')
        self.builder = builder
        self.name = builder.infraid
        self.remoteproxy = RemoteProxy(params, builder.user, builder.infraid)
        self.log.debug('[%s] %s plugin initialized.' % (self.name, self.__class__.__name__))

    def getContext(self):
        ctx = context.createContext(self.contexttype)
        ctx.setAttribute(context.USERPROXY, self.remoteproxy.read())
        return ctx
