"""
classes and methods to map infrastructure type tags
to the plugins handling them, and backend job states
to the generic ones.
"""

import logging

from inframanager.exceptions import UnsupportedInfrastructure


log = logging.getLogger('inframanager.mappings')


# type tag -> session plugin (inframanager/plugins/session/)
SESSIONPLUGINS = {'wsgram': 'VOMS',
                  'gatekeeper': 'VOMS',
                  'wms': 'WMS',
                  'occi': 'ROCCI',
                  'rocci': 'ROCCI',
                  'ssh': 'SSH',
                  }

# type tag -> job service plugin (inframanager/plugins/jobservice/)
JOBSERVICEPLUGINS = {'gatekeeper': 'CondorGT2',
                     'wsgram': 'CondorGT5',
                     'wms': 'GliteWMS',
                     'occi': 'ROCCI',
                     'rocci': 'ROCCI',
                     'ssh': 'SSH',
                     }

# known to the parameter store, but without any implementation
UNSUPPORTED = ['unicore', 'ourgrid', 'bes-genesis2', 'gos']


# Generic job states
NEW = 'NEW'
PENDING = 'PENDING'
RUNNING = 'RUNNING'
SUSPENDED = 'SUSPENDED'
DONE = 'DONE'
FAILED = 'FAILED'
CANCELED = 'CANCELED'
UNKNOWN = 'UNKNOWN'

# HTCondor JobStatus codes
#       0       Unexpanded (the job has never run)
#       1       Idle
#       2       Running
#       3       Removed
#       4       Completed
#       5       Held
#       6       Transferring Output
CONDORSTATES = {0: NEW,
                1: PENDING,
                2: RUNNING,
                3: CANCELED,
                4: DONE,
                5: SUSPENDED,
                6: RUNNING,
                }

# gLite WMS "Current Status" values
WMSSTATES = {'submitted': NEW,
             'waiting': PENDING,
             'ready': PENDING,
             'scheduled': PENDING,
             'running': RUNNING,
             'done': DONE,
             'cleared': DONE,
             'aborted': FAILED,
             'cancelled': CANCELED,
             'canceled': CANCELED,
             }

# occi.compute.state values
OCCISTATES = {'waiting': PENDING,
              'inactive': PENDING,
              'active': RUNNING,
              'suspended': SUSPENDED,
              'error': FAILED,
              }


def _resolve(infratype, table):
    if infratype in UNSUPPORTED:
        raise UnsupportedInfrastructure(infratype, 'Infrastructure type %s not supported yet' % infratype)
    try:
        return table[infratype]
    except KeyError:
        raise UnsupportedInfrastructure(infratype, 'Unknown infrastructure type %s' % infratype)


def sessionplugin(infratype):
    """
    returns the name of the session plugin for the type tag
    """
    name = _resolve(infratype, SESSIONPLUGINS)
    log.debug('type %s handled by session plugin %s' % (infratype, name))
    return name


def jobserviceplugin(infratype):
    """
    returns the name of the job service plugin for the type tag
    """
    name = _resolve(infratype, JOBSERVICEPLUGINS)
    log.debug('type %s handled by job service plugin %s' % (infratype, name))
    return name


def map2state(value, table):
    """
    maps a backend specific job state to a generic one
    """
    if isinstance(value, str):
        value = value.strip().lower()
    return table.get(value, UNKNOWN)
