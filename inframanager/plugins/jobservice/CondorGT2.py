#
# inframanager job service plugin for GRAM2 gatekeepers
#

from inframanager.plugins.jobservice.CondorBase import CondorBase


class CondorGT2(CondorBase):
    """
    grid_resource = gt2 <host>[:<port>]/<jobmanager>
    """
    gridtype = 'gt2'
