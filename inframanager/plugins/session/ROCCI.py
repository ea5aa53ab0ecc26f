"""
 Session plugin for OCCI cloud infrastructures (occi and rocci).
"""

import os

from inframanager import context
from inframanager import defaults
from inframanager.resources import getParameterValue

from inframanager.plugins.session.VOMS import VOMS


class ROCCI(VOMS):
    """
    Proxy for the cloud API, plus the key pair injected into the VMs.
    VMs are always accessed as root.
    """
    contexttype = 'rocci'

    def __init__(self, builder, params):
        super(ROCCI, self).__init__(builder, params)
        self.publickey = os.path.expanduser(getParameterValue(params, 'sshpublickey', defaults.SSHPUBLICKEY))
        self.privatekey = os.path.expanduser(getParameterValue(params, 'sshprivatekey', defaults.SSHPRIVATEKEY))

    def getContext(self):
        ctx = super(ROCCI, self).getContext()
        ctx.setAttribute(context.USERID, defaults.ROCCIUSERID)
        ctx.setAttribute(context.USERCERT, self.publickey)
        ctx.setAttribute(context.USERKEY, self.privatekey)
        return ctx
