"""
 Session plugin for gLite WMS infrastructures.
"""

from inframanager import context
from inframanager import defaults
from inframanager.exceptions import InfraConfigFailure
from inframanager.resources import getParameterValue

from inframanager.plugins.session.VOMS import VOMS


class WMS(VOMS):
    """
    VOMS context plus the WMS attributes used by the job service:
        wms.RetryCount       retrycount parameter
        wms.rank             fixed, free CPUs of the CE
        wms.MyProxyServer    myproxyserver parameter
    """

    def __init__(self, builder, params):
        super(WMS, self).__init__(builder, params)
        self.retrycount = getParameterValue(params, 'retrycount', str(defaults.RETRYCOUNT))
        try:
            if int(self.retrycount) < 0:
                raise ValueError(self.retrycount)
        except ValueError as ex:
            raise InfraConfigFailure('retrycount %r is not a valid number for %s' % (self.retrycount, self.name), ex) from ex
        self.myproxyserver = getParameterValue(params, 'myproxyserver', defaults.MYPROXYSERVER)

    def getContext(self):
        ctx = super(WMS, self).getContext()
        ctx.setVectorAttribute(context.JOBSERVICEATTRIBUTES,
                               ['wms.RetryCount=%s' % self.retrycount,
                                'wms.rank=%s' % defaults.WMSRANK,
                                'wms.MyProxyServer=%s' % self.myproxyserver])
        return ctx
