"""
    Configuration object loader and storage component for inframanager.

    Infrastructures are stored one per section:

        [egi-ce01]
        name = CE at site X
        enabled = true
        jobservice = gatekeeper://ce01.example.org:2119/jobmanager-pbs
        etokenserverurl = http://etoken.example.org:8082/eTokenServer/eToken
        etokenid = 332576f78a4fe70a52048043e90cd11f
        vo = fedcloud.egi.eu

    name, description and enabled are attributes of the Infrastructure,
    every other option is one of its parameters.
"""

import io
import logging
import os
import traceback

from configparser import ConfigParser
from urllib.request import urlopen

from inframanager.exceptions import ConfigFailure
from inframanager.resources import Infrastructure, Parameter


# options of an infrastructure section that are not parameters
RESERVED = ['name', 'description', 'enabled']


class Config(ConfigParser):
    """
    -----------------------------------------------------------------------
    Class to handle config files.
    -----------------------------------------------------------------------
    Public Interface:
            The interface inherited from ConfigParser.
            merge(config, override=False)
            generic_get(section, option, get_function, default_value)
    -----------------------------------------------------------------------
    """
    def __init__(self):
        # values are taken verbatim, URLs carry percent escapes
        super(Config, self).__init__(interpolation=None)
        self.log = logging.getLogger('inframanager.config')
        self.optionxform = str

    def merge(self, config, override=False, includemissing=True):
        """
        merge the current Config object
        with the content of another Config object.

        When the merge is being done, values in the new config
        replace the values in the current one, unless override=True.

        includemissing determines if attributes in the new config
        object that do not exist in the current one should be added or not.
        """
        for section in config.sections():
            if section not in self.sections():
                if includemissing:
                    self._clonesection(section, config)
            else:
                self.log.warning('section %s is duplicated. Being merged anyway.' % section)
                self._mergesection(section, config, override, includemissing)

    def _clonesection(self, section, config):
        self.add_section(section)
        for opt in config.options(section):
            self.set(section, opt, config.get(section, opt, raw=True))

    def _mergesection(self, section, config, override, includemissing):
        for opt in config.options(section):
            value = config.get(section, opt, raw=True)
            if opt not in self.options(section):
                if includemissing:
                    self.set(section, opt, value)
            elif override is False:
                self.set(section, opt, value)

    def section2dict(self, section, raw=False):
        """
        converts a given section into a dictionary,
        in the order of the options in the section
        """
        d = {}
        for opt in self.options(section):
            d[opt] = self.get(section, opt, raw=raw)
        return d

    def clone(self):
        """
        makes an exact copy of the object
        """
        newconfig = Config()
        newconfig.merge(self)
        return newconfig

    def fixpathvalues(self):
        """
        looks for values that are likely pathnames beginning with "~".
        converts them to the full path using expanduser()
        """
        for section in self.sections():
            for key in self.options(section):
                value = self.get(section, key, raw=True)
                if value.startswith('~'):
                    self.set(section, key, os.path.expanduser(value))

    def generic_get(self, section, option, get_function='get', default_value=None):
        """
        generic get() method for Config objects.
        Inputs options are:

           section          is the ConfigParser section
           option           is the option in the ConfigParser section
           get_function     is the string representing the actual ConfigParser method:  "get", "getint", "getfloat", "getboolean"
           default_value    is the default value to be returned with variable is not mandatory and is not in the config file

        example of usage:
                x = generic_get("Sec1", "x", get_function='getint', default_value=0  )
        """
        self.log.debug('called for section %s option %s get_function %s default_value %s' % (section,
                                                                                             option,
                                                                                             get_function,
                                                                                             default_value))
        if not self.has_option(section, option):
            self.log.debug('option %s is not present in section %s. Return default %s' % (option, section, default_value))
            return default_value
        get_f = getattr(self, get_function)
        try:
            value = get_f(section, option)
        except ValueError as ex:
            raise ConfigFailure('option %s in section %s is not valid: %s' % (option, section, ex)) from ex
        if value == "None" or value == "none":
            value = None
        elif value == "False" or value == "false":
            value = False
        elif value == "True" or value == "true":
            value = True
        self.log.debug('option %s in section %s has value %s' % (option, section, value))
        return value

    def getSection(self, section):
        """
        creates and returns a new Config object,
        with the content of a single section
        """
        conf = Config()
        if self.has_section(section):
            conf.add_section(section)
            for key, value in self.items(section, raw=True):
                conf.set(section, key, value)
        return conf


class ConfigManager:
    """
    -----------------------------------------------------------------------
    Class to create config objects with info from different sources.
    -----------------------------------------------------------------------
    Public Interface:
            getConfig(sources)
            getInfrastructures(config)
    -----------------------------------------------------------------------
    """

    def __init__(self):
        self.log = logging.getLogger('inframanager.config')

    def getConfig(self, sources=None, configdir=None):
        """
        creates a Config object and returns it.

        -- sources is an split by comma string,
           where each items points to the info to feed the object:
                - path to physical file on disk, optionally with file://
                - an URL, with prefix uri://

        -- configdir is path to a directory with a
           set of configuration files (*.conf),
           all of them to be processed
        """
        self.log.debug("Beginning with sources=%s and configdir=%s" % (sources, configdir))
        try:
            config = Config()
            if sources:
                for src in sources.split(','):
                    src = src.strip()
                    self.log.debug("Calling _getConfig for source %s" % src)
                    config.merge(self._getConfig(src))
            elif configdir:
                self.log.debug("Processing configs for dir %s" % configdir)
                if not os.path.isdir(configdir):
                    raise ConfigFailure('configuration directory %s does not exist' % configdir)
                conffiles = sorted(os.path.join(configdir, f) for f in os.listdir(configdir) if f.endswith('.conf'))
                config.read(conffiles)
            config.fixpathvalues()
            self.log.debug("Finished creating config object.")
            return config
        except ConfigFailure:
            raise
        except Exception as ex:
            self.log.error("Exception: %s   %s " % (str(ex), traceback.format_exc()))
            raise ConfigFailure('creating config object from source %s failed' % sources) from ex

    def _getConfig(self, src):
        """
        returns a new Config object
        """
        tmpconfig = Config()
        tmpconfig.read_file(io.StringIO(self._getContent(src)), src)
        return tmpconfig

    def _getContent(self, src):
        """
        returns the content of the source as a string
        """
        if src.startswith('uri://'):
            return self._dataFromURI(src[len('uri://'):])
        if src.startswith('file://'):
            src = src[len('file://'):]
        return self._dataFromFile(src)

    def _dataFromFile(self, path):
        path = os.path.expanduser(path)
        self.log.debug("Opening config file at %s" % path)
        try:
            with open(path) as f:
                return f.read()
        except OSError as ex:
            raise ConfigFailure("Problem with config file %s: %s" % (path, ex)) from ex

    def _dataFromURI(self, uri):
        self.log.debug("Reading config from %s" % uri)
        try:
            with urlopen(uri) as f:
                return f.read().decode('utf-8')
        except (OSError, ValueError) as ex:
            self.log.error("Exception: %s   %s " % (str(ex), traceback.format_exc()))
            raise ConfigFailure("Problem with URI source %s" % uri) from ex

    def getInfrastructures(self, config):
        """
        returns the list of Infrastructure objects stored in the
        sources listed by option infraConf of section [InfraManager]
        """
        sources = config.generic_get('InfraManager', 'infraConf')
        if not sources:
            raise ConfigFailure('option infraConf not defined in section [InfraManager]')
        return config2infrastructures(self.getConfig(sources))


def config2infrastructures(config):
    """
    returns one Infrastructure per section of the Config object,
    in the order of the sections
    """
    return [section2infrastructure(config, section) for section in config.sections()]


def section2infrastructure(config, section):
    items = config.section2dict(section, raw=True)
    params = [Parameter(name, value) for name, value in items.items() if name not in RESERVED]
    enabled = config.generic_get(section, 'enabled', 'getboolean', True)
    return Infrastructure(section,
                          params,
                          name=items.get('name', section),
                          description=items.get('description'),
                          enabled=enabled)
