"""
    Default values for the infrastructure parameters.
    Used when a parameter is not defined for the infrastructure.
"""

RETRYCOUNT = 3
MYPROXYSERVER = ''
SSHPUBLICKEY = '~/.ssh/id_rsa.pub'
SSHPRIVATEKEY = '~/.ssh/id_rsa'
KNOWNHOSTS = ''

# eToken server query
ETOKENID = ''
VO = ''
VOROLES = ''
PROXYRENEWAL = 'true'
DISABLEVOMSPROXY = 'false'
RFCPROXY = 'false'

# seconds
PROXYTIMEOUT = 60
COMMANDTIMEOUT = 300

# rOCCI
RESOURCETPL = 'small'

# the root user is the only one available on freshly created VMs
ROCCIUSERID = 'root'

WMSRANK = 'other.GlueCEStateFreeCPUs'
