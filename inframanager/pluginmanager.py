"""
  Module to handle plugins dispatch.

  Plugins are kept in a hierarchy by 'kind':
    session:
       VOMS
       WMS
       ROCCI
       SSH
    jobservice:
       CondorGT2
       CondorGT5
       GliteWMS
       ROCCI
       SSH

  Each plugin module contains a class with the same name as the module.
  Plugins are initialized with a reference to the calling object
  and the infrastructure parameters. The assumption is that the classes
  themselves know how to look up the parameters they need.
"""

import importlib
import logging

from inframanager.exceptions import UnsupportedInfrastructure


class PluginManager:
    """
    Entry point for plugins creation and initialization.
    """

    def __init__(self):
        self.log = logging.getLogger('inframanager.pluginmanager')
        self.log.debug('PluginManager initialized.')

    def getplugin(self, parent, paths, name, params):
        """
        Provides a single initialized plugin object.
        parent: reference to the calling object
        paths: list of subdirectories from where to import the plugin
        name: name of the plugin to be imported
        params: dictionary name -> Parameter with the infrastructure parameters
        """
        ko = self.getpluginclass(paths, name)
        po = ko(parent, params)
        self.log.debug('returning a plugin = %s' % po)
        return po

    def getpluginclass(self, paths, name):
        """
        returns a plugin class.
        The __init__() methods have not been called yet.
        """
        ppath = '.'.join(paths) + '.' + name
        self.log.debug('trying to import %s from %s' % (name, ppath))
        try:
            plugin_module = importlib.import_module(ppath)
        except ImportError as ex:
            self.log.error('plugin %s cannot be imported: %s' % (ppath, ex))
            raise UnsupportedInfrastructure(name, 'No plugin %s available' % ppath, ex) from ex
        plugin_class = getattr(plugin_module, name)
        self.log.debug('Retrieved plugin with class name %s' % name)
        return plugin_class
