#!/usr/bin/env python

"""
Classes and tools to facilitate the usage of the HTCondor python bindings
to interact with a schedd.

What these classes provide:
    * A single, shared object per schedd, serializing the calls.
    * Exceptions for different wrong behaviors.
    * condor_submit, condor_q, condor_history and condor_rm equivalents.
    * JobSubmissionDescription, the content of a submit file.
    * Logging. NullHandler is used in case there is no need for logging,
      but otherwise, if a root logger is used, its setup will be inherited.

The htcondor module is imported only when a schedd has to be contacted,
so submit descriptions can be built on hosts without HTCondor.
"""

import logging
import threading


def _htcondor():
    import htcondor
    return htcondor


def _build_constraint_str(constraint_l=None):
    """
    builds the contraint string expression for different
    queries.
    Default is string 'true'.
    :param list constraint_l: list of constraints to be combined
    """
    if constraint_l:
        constraint_str = " && ".join(constraint_l)
    else:
        constraint_str = "true"
    return constraint_str


# =============================================================================
#              S C H E D D
# =============================================================================

class _HTCondorSchedd:

    def __init__(self, name=None, pool=None, schedd=None):
        """
        :param string name: [optional] name of a remote schedd.
            Otherwise, a local schedd is assumed.
        :param string pool: [optional] collector to locate the remote schedd
        :param schedd: [optional] an already built htcondor.Schedd object
        """
        self.log = logging.getLogger('inframanager.htcondorschedd')
        self.log.addHandler(logging.NullHandler())
        self.address = name or 'localhost'
        if schedd is not None:
            self.schedd = schedd
        else:
            try:
                htcondor = _htcondor()
                if name:
                    collector = htcondor.Collector(pool)
                    scheddad = collector.locate(htcondor.DaemonTypes.Schedd, name)
                    self.schedd = htcondor.Schedd(scheddad)
                else:
                    self.schedd = htcondor.Schedd()
            except Exception as ex:
                self.log.critical('Unable to instantiate an Schedd object for %s' % self.address)
                raise ScheddNotReachable(self.address) from ex
        # Lock object to serialize the submission and query calls
        self.lock = threading.Lock()
        self.log.debug('HTCondorSchedd object initialized for %s' % self.address)

    def condor_q(self, attribute_l, constraint_l=None):
        '''
        Returns a list of ClassAd objects, output of a condor_q query.
        :param list attribute_l: list of classads strings to be included
            in the query
        :param list constraint_l: [optional] list of constraints strings
            for the query
        :return list: list of ClassAd objects
        '''
        if type(attribute_l) is not list:
            raise IncorrectInputType("attribute_l", list)
        if constraint_l is not None and\
           type(constraint_l) is not list:
            raise IncorrectInputType("constraint_l", list)

        constraint_str = _build_constraint_str(constraint_l)
        self.log.debug('condor_q with constraint %s and attributes %s' % (constraint_str, attribute_l))
        with self.lock:
            out = self.schedd.query(constraint_str, attribute_l)
        out = list(out)
        self.log.debug('out = %s' % out)
        return out

    def condor_history(self, attribute_l, constraint_l=None, match=1):
        """
        Returns a list of ClassAd objects, output of a condor_history query.
        :param list attribute_l: list of classads strings to be included
            in the query
        :param list constraint_l: [optional] list of constraints strings
            for the query
        :param int match: maximum number of ads returned
        :return list: list of ClassAd objects
        """
        if type(attribute_l) is not list:
            raise IncorrectInputType("attribute_l", list)
        if constraint_l is not None and\
           type(constraint_l) is not list:
            raise IncorrectInputType("constraint_l", list)

        constraint_str = _build_constraint_str(constraint_l)
        self.log.debug('condor_history with constraint %s and attributes %s' % (constraint_str, attribute_l))
        with self.lock:
            out = list(self.schedd.history(constraint_str, attribute_l, match))
        self.log.debug('out = %s' % out)
        return out

    def condor_rm(self, jobid_l):
        """
        remove a list of jobs from the queue in this schedd.
        :param list jobid_l: list of strings "ClusterId.ProcId"
        """
        self.log.debug('list of jobs to kill = %s' % jobid_l)
        htcondor = _htcondor()
        with self.lock:
            self.schedd.act(htcondor.JobAction.Remove, jobid_l)
        self.log.debug('finished')

    def condor_submit(self, jsd):
        """
        performs job submission from a JobSubmissionDescription.
        The number of jobs is taken from it.
        :param JobSubmissionDescription jsd: the submission content
        :return int: the cluster id
        """
        submit_d = jsd.items()
        self.log.debug('dictionary for submission = %s' % submit_d)
        if not bool(submit_d):
            raise EmptySubmitFile()

        htcondor = _htcondor()
        with self.lock:
            submit = htcondor.Submit(submit_d)
            result = self.schedd.submit(submit, count=jsd.getnjobs())
        clusterid = result.cluster()
        self.log.debug('finished submission for clusterid %s' % clusterid)
        return clusterid


class HTCondorSchedd:
    """
    overriding __new__() to make HTCondorSchedd a Singleton
    per schedd address and pool.
    """
    instances = {}
    lock = threading.Lock()

    def __new__(cls, name=None, pool=None):
        key = (name or 'localhost', pool)
        with HTCondorSchedd.lock:
            if key not in HTCondorSchedd.instances:
                HTCondorSchedd.instances[key] = _HTCondorSchedd(name, pool)
            return HTCondorSchedd.instances[key]


# =============================================================================

class JobSubmissionDescription:
    """
    class to manage the content of the submission file,
    or its equivalent in several formats
    """

    def __init__(self):
        """
        _jsd_d is a dictionary of submission file expressions
        _n is the number of jobs to submit
        """
        self.log = logging.getLogger('inframanager.jobsubmissiondescription')
        self.log.addHandler(logging.NullHandler())
        self._jsd_d = {}
        self._n = 1

    def dumps(self):
        """
        returns the submission content as a single string
        :rtype str:
        """
        str = ""
        for pair in self._jsd_d.items():
            str += '%s = %s\n' % pair
        str += 'queue %s\n' % self._n
        return str

    def add(self, key, value):
        """
        adds a new key,value pair submission expression
        to the dictionary
        :param str key: the submission expression key
        :param str value: the submission expression value
        """
        self._jsd_d[key] = value

    def get(self, key, default=None):
        return self._jsd_d.get(key, default)

    def setnjobs(self, n):
        """
        sets the number of jobs to submit
        :param int n: the number of jobs to submit
        """
        if n < 0:
            raise NegativeSubmissionNumber(n)
        self._n = n

    def items(self):
        """
        returns the content as a dict of submission items
        :rtype dict:
        """
        return dict(self._jsd_d)

    def getnjobs(self):
        """
        returns the number of jobs to submit
        :rtype int:
        """
        return self._n


# =============================================================================
#   Exceptions
# =============================================================================

class ScheddNotReachable(Exception):
    def __init__(self, address):
        self.value = "Unable to reach schedd %s" % address
    def __str__(self):
        return repr(self.value)

class EmptySubmitFile(Exception):
    def __init__(self):
        self.value = "submit file is empty"
    def __str__(self):
        return repr(self.value)

class IncorrectInputType(Exception):
    def __init__(self, name, type):
        self.value = 'Input option %s is not type %s' % (name, type)
    def __str__(self):
        return repr(self.value)

class NegativeSubmissionNumber(Exception):
    def __init__(self, value):
        self.value = "Negative number of jobs to submit: %s" % value
    def __str__(self):
        return repr(self.value)
