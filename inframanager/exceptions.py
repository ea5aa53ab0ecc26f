"""Exception classes for inframanager.

Everything a caller of SessionBuilder or JobServiceFactory can see is an
InfrastructureException. The subclasses keep the category of the problem,
and the original exception, when there is one, is kept in .cause
(and chained with 'raise ... from').

ContextFailure and its subclasses are raised by the context module only
and get wrapped into ContextCreationFailure by the session builder.
"""


class InfrastructureException(Exception):
    """
    The infrastructure cannot be used, because of its configuration
    or because of the infrastructure itself.
    """
    def __init__(self, value, cause=None):
        self.value = value
        self.cause = cause
        super(InfrastructureException, self).__init__(value)

    def __str__(self):
        return self.value


class InfraConfigFailure(InfrastructureException):
    pass


class MissingParameterFailure(InfraConfigFailure):
    def __init__(self, name, infraid=None):
        self.name = name
        self.infraid = infraid
        value = 'Mandatory parameter %s not present' % name
        if infraid is not None:
            value += ' for infrastructure %s' % infraid
        super(MissingParameterFailure, self).__init__(value)


class UnsupportedInfrastructure(InfrastructureException):
    """
    The type tag is recognized but not supported, or not recognized at all.
    """
    def __init__(self, infratype, value=None, cause=None):
        self.infratype = infratype
        if value is None:
            value = 'Infrastructure type %s not supported' % infratype
        super(UnsupportedInfrastructure, self).__init__(value, cause)


class ContextCreationFailure(InfrastructureException):
    pass


class AuthFailure(InfrastructureException):
    pass


class ProxyRetrievalFailure(InfrastructureException):
    pass


class ProxyTimeoutFailure(ProxyRetrievalFailure):
    pass


class JobServiceFailure(InfrastructureException):
    """
    A submission backend failed. For command based backends
    status and output of the command are kept.
    """
    def __init__(self, value, cause=None, status=None, output=None):
        self.status = status
        self.output = output
        super(JobServiceFailure, self).__init__(value, cause)


class ContextFailure(Exception):
    def __init__(self, value):
        self.value = value
        super(ContextFailure, self).__init__(value)

    def __str__(self):
        return self.value


class BadAttributeFailure(ContextFailure):
    pass


class IncorrectStateFailure(ContextFailure):
    pass


class NoSuccessFailure(ContextFailure):
    pass


class DoesNotExistFailure(ContextFailure):
    pass


class ConfigFailure(Exception):
    def __init__(self, value):
        self.value = value
        super(ConfigFailure, self).__init__(value)

    def __str__(self):
        return self.value
