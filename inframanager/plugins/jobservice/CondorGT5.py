#
# inframanager job service plugin for WS-GRAM (GRAM5) services
#

from inframanager.plugins.jobservice.CondorBase import CondorBase


class CondorGT5(CondorBase):
    gridtype = 'gt5'
