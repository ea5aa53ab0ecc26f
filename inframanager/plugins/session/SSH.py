"""
 Session plugin for plain SSH access.
"""

import logging

from inframanager import context
from inframanager import defaults
from inframanager.interfaces import SessionContextInterface
from inframanager.resources import getParameterValue


# Does not need any remote credential.
class SSH(SessionContextInterface):
    """
    user/password context. Both are optional: without them the ssh
    client falls back to the keys of the running account.
    """

    def __init__(self, builder, params):
        self.log = logging.getLogger('inframanager.plugins.session')
        self.builder = builder
        self.name = builder.infraid
        self.username = getParameterValue(params, 'username')
        self.password = getParameterValue(params, 'password')
        self.knownhosts = getParameterValue(params, 'knownhosts', defaults.KNOWNHOSTS)
        self.log.debug('[%s] SSH plugin initialized for user %s.' % (self.name, self.username))

    def getContext(self):
        ctx = context.createContext('UserPass')
        if self.username is not None:
            ctx.setAttribute(context.USERID, self.username)
        if self.password is not None:
            ctx.setAttribute(context.USERPASS, self.password)
        # an empty value disables the host key check
        ctx.setVectorAttribute(context.DATASERVICEATTRIBUTES,
                               ['sftp.KnownHosts=%s' % self.knownhosts])
        return ctx
