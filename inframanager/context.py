"""
    Sessions and security contexts.

    A Context is a typed bag of attributes describing one credential
    (a VOMS proxy, a key pair, a user/password pair...). A Session holds the
    contexts used to authorize later operations against a remote backend.

    Attributes are either scalar (a string) or vector (a list of strings).
    The same name cannot be used for both kinds in one context.
"""

import logging
import uuid

from inframanager.exceptions import BadAttributeFailure, IncorrectStateFailure
from inframanager.exceptions import DoesNotExistFailure

# Attribute names
TYPE = 'Type'
USERPROXY = 'UserProxy'
USERID = 'UserID'
USERCERT = 'UserCert'
USERKEY = 'UserKey'
USERPASS = 'UserPass'
JOBSERVICEATTRIBUTES = 'JobServiceAttributes'
DATASERVICEATTRIBUTES = 'DataServiceAttributes'

# attributes never shown in clear, e.g. by the command line tool
SECRETATTRIBUTES = [USERPROXY, USERKEY, USERPASS]

CONTEXTTYPES = ['VOMS', 'rocci', 'UserPass']


class Context:
    """
    -----------------------------------------------------------------------
    Credential descriptor of a given type.
    -----------------------------------------------------------------------
    Public Interface:
            type
            setAttribute(name, value)
            getAttribute(name)
            setVectorAttribute(name, values)
            getVectorAttribute(name)
            listAttributes()
            isVectorAttribute(name)
    -----------------------------------------------------------------------
    """
    def __init__(self, type):
        self.log = logging.getLogger('inframanager.context')
        self.type = type
        self._attributes = {}
        self._vectorattributes = {}

    def setAttribute(self, name, value):
        self._checkname(name)
        if name == TYPE:
            raise BadAttributeFailure('Attribute %s is read only' % TYPE)
        if name in self._vectorattributes:
            raise BadAttributeFailure('Attribute %s is a vector attribute' % name)
        if not isinstance(value, str):
            raise BadAttributeFailure('Value of attribute %s must be a string, got %r' % (name, value))
        self._attributes[name] = value
        self.log.debug('[%s] attribute %s set' % (self.type, name))

    def getAttribute(self, name):
        if name == TYPE:
            return self.type
        if name in self._vectorattributes:
            raise BadAttributeFailure('Attribute %s is a vector attribute' % name)
        try:
            return self._attributes[name]
        except KeyError:
            raise DoesNotExistFailure('Attribute %s not set in %s context' % (name, self.type))

    def setVectorAttribute(self, name, values):
        self._checkname(name)
        if name in self._attributes or name == TYPE:
            raise BadAttributeFailure('Attribute %s is a scalar attribute' % name)
        if isinstance(values, str):
            raise BadAttributeFailure('Values of vector attribute %s must be a list of strings' % name)
        values = list(values)
        for v in values:
            if not isinstance(v, str):
                raise BadAttributeFailure('Values of vector attribute %s must be strings, got %r' % (name, v))
        self._vectorattributes[name] = values
        self.log.debug('[%s] vector attribute %s set with %d values' % (self.type, name, len(values)))

    def getVectorAttribute(self, name):
        if name in self._attributes:
            raise BadAttributeFailure('Attribute %s is a scalar attribute' % name)
        try:
            return list(self._vectorattributes[name])
        except KeyError:
            raise DoesNotExistFailure('Attribute %s not set in %s context' % (name, self.type))

    def hasAttribute(self, name):
        return name == TYPE or name in self._attributes or name in self._vectorattributes

    def isVectorAttribute(self, name):
        return name in self._vectorattributes

    def listAttributes(self):
        return [TYPE] + sorted(list(self._attributes) + list(self._vectorattributes))

    def _checkname(self, name):
        if not isinstance(name, str) or not name.strip():
            raise BadAttributeFailure('Invalid attribute name %r' % (name,))

    def __repr__(self):
        return 'Context(%r)' % self.type


class Session:
    """
    Container of contexts. Created by createSession(), closed by its owner.
    """
    def __init__(self):
        self.log = logging.getLogger('inframanager.session')
        self.id = uuid.uuid4().hex
        self._contexts = []
        self.closed = False
        self.log.debug('Session %s created.' % self.id)

    def addContext(self, context):
        if self.closed:
            raise IncorrectStateFailure('Session %s is closed' % self.id)
        if not isinstance(context, Context):
            raise BadAttributeFailure('Not a context: %r' % (context,))
        for c in self._contexts:
            if c is context:
                self.log.debug('Context %s already in session %s.' % (context.type, self.id))
                return
        self._contexts.append(context)
        self.log.debug('Context %s added to session %s.' % (context.type, self.id))

    def removeContext(self, context):
        if self.closed:
            raise IncorrectStateFailure('Session %s is closed' % self.id)
        try:
            self._contexts.remove(context)
        except ValueError:
            raise DoesNotExistFailure('Context %s not in session %s' % (context.type, self.id))

    def listContexts(self):
        return list(self._contexts)

    def getContext(self, type=None):
        """
        returns the first context of the given type,
        or the first context at all when type is None
        """
        for c in self._contexts:
            if type is None or c.type == type:
                return c
        raise DoesNotExistFailure('No %s context in session %s' % (type or 'any', self.id))

    def close(self):
        if not self.closed:
            self._contexts = []
            self.closed = True
            self.log.debug('Session %s closed.' % self.id)

    def __repr__(self):
        return 'Session(%s, contexts=%s)' % (self.id, [c.type for c in self._contexts])


def createContext(type):
    """
    returns a new, empty context of one of the known types
    """
    if type not in CONTEXTTYPES:
        raise DoesNotExistFailure('Unknown context type %s' % type)
    return Context(type)


def createSession():
    return Session()
