#
# Stand-ins for the htcondor python bindings used in the tests.
#

from types import SimpleNamespace


class FakeSubmitResult:

    def __init__(self, clusterid):
        self.clusterid = clusterid

    def cluster(self):
        return self.clusterid


class FakeSchedd:
    """
    records the calls done by _HTCondorSchedd.
    queue and history are the lists of ads returned by the queries.
    """

    def __init__(self, clusterid=42):
        self.clusterid = clusterid
        self.queue = []
        self.hist = []
        self.submitted = []
        self.queries = []
        self.actions = []

    def submit(self, submit, count=1):
        self.submitted.append((submit, count))
        return FakeSubmitResult(self.clusterid)

    def query(self, constraint, attributes):
        self.queries.append(('query', constraint, attributes))
        return iter(self.queue)

    def history(self, constraint, attributes, match):
        self.queries.append(('history', constraint, attributes))
        return iter(self.hist)

    def act(self, action, jobids):
        self.actions.append((action, jobids))


def getFakeHTCondor():
    return SimpleNamespace(Submit=dict,
                           JobAction=SimpleNamespace(Remove='Remove'))
