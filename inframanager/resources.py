"""
    Records describing what the infrastructure manager works on:
    parameters, infrastructures and tasks.
"""


class Parameter:
    """
    A named configuration value of an infrastructure.
    """
    def __init__(self, name, value, description=None):
        self.name = name
        self.value = value
        self.description = description

    def __repr__(self):
        return 'Parameter(%r, %r)' % (self.name, self.value)

    def __eq__(self, other):
        if not isinstance(other, Parameter):
            return NotImplemented
        return self.name == other.name and self.value == other.value


class Infrastructure:
    """
    -----------------------------------------------------------------------
    A configured remote execution target.
    -----------------------------------------------------------------------
    Public Interface:
            id, type, name, description, enabled
            getParameters()
            addParameter(param)
            getParameterValue(name, default)
    -----------------------------------------------------------------------
    The type tag is optional here: most infrastructures carry it as the
    'type' parameter or as the scheme of the 'jobservice' parameter.
    """
    def __init__(self, id, parameters=None, type=None, name=None,
                 description=None, enabled=True):
        self.id = id
        self.type = type
        self.name = name or id
        self.description = description
        self.enabled = enabled
        self.parameters = list(parameters or [])

    def getParameters(self):
        return self.parameters

    def addParameter(self, param):
        self.parameters.append(param)

    def getParameterValue(self, name, default=None):
        return getParameterValue(self.parameters, name, default)

    def __repr__(self):
        return 'Infrastructure(%r, type=%r, %d parameters)' % (self.id,
                                                               self.type,
                                                               len(self.parameters))


class Task:
    """
    A job to run on one of the infrastructures listed in it.
    Only the first enabled infrastructure is used.
    """
    def __init__(self, id, executable, arguments=None, user=None,
                 infrastructures=None, inputfiles=None, outputfiles=None,
                 description=None):
        self.id = id
        self.executable = executable
        self.arguments = list(arguments or [])
        self.user = user
        self.infrastructures = list(infrastructures or [])
        self.inputfiles = list(inputfiles or [])
        self.outputfiles = list(outputfiles or [])
        self.description = description

    def getInfrastructure(self):
        """
        returns the first enabled infrastructure, or None
        """
        for infra in self.infrastructures:
            if infra.enabled:
                return infra
        return None

    def __repr__(self):
        return 'Task(%r, %r)' % (self.id, self.executable)


def getParameterValue(params, name, default=None):
    """
    Retrieves a parameter value from a list of Parameter objects or from
    a dictionary indexed by parameter name.

    Dictionary values can be Parameter objects or plain strings.
    In a list with the same name more than once, the last one wins,
    as it does when the list is loaded into a dictionary. This is not
    what a first-match search of the list would return.
    """
    if isinstance(params, dict):
        if name not in params:
            return default
        param = params[name]
        if isinstance(param, Parameter):
            return param.value
        return param

    found = default
    for param in params:
        if param.name == name:
            found = param.value
    return found


def indexParameters(params):
    """
    builds the name -> Parameter dictionary for a list of parameters
    """
    d = {}
    for param in params:
        d[param.name] = param
    return d
