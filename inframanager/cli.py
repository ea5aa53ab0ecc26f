"""
    Command line front end: builds a session for the configured
    infrastructures and shows what the contexts contain.
"""

import logging
import logging.handlers
import os
import platform
import sys
import time
import traceback

from optparse import OptionParser

from inframanager import context
from inframanager.configloader import ConfigManager
from inframanager.exceptions import ConfigFailure, InfrastructureException
from inframanager.sessionbuilder import SessionBuilder


class InfraCLI:
    """class to handle the command line invocation.
       parse the input options,
       setup logging, and build the sessions
    """
    # log handlers added by the last InfraCLI
    installed = []

    def __init__(self, argv=None, out=None):
        self.options = None
        self.args = None
        self.log = None
        self.handlers = []
        self.out = out or sys.stdout

        self.__parseopts(argv)
        self.__setuplogging()
        self.__platforminfo()

    def __parseopts(self, argv):
        parser = OptionParser(usage="""%prog [OPTIONS]
infra-session builds the session of grid and cloud infrastructures
and prints the content of their contexts.""")

        parser.add_option("-d", "--debug",
                          dest="logLevel",
                          default=logging.WARNING,
                          action="store_const",
                          const=logging.DEBUG,
                          help="Set logging level to DEBUG [default WARNING]")
        parser.add_option("-v", "--info",
                          dest="logLevel",
                          default=logging.WARNING,
                          action="store_const",
                          const=logging.INFO,
                          help="Set logging level to INFO [default WARNING]")
        parser.add_option("--console",
                          dest="console",
                          default=False,
                          action="store_true",
                          help="Forces debug and info messages to be sent to the console")
        parser.add_option("--quiet", dest="logLevel",
                          default=logging.WARNING,
                          action="store_const",
                          const=logging.WARNING,
                          help="Set logging level to WARNING [default]")
        parser.add_option("--conf", dest="confFiles",
                          default="/etc/inframanager/inframanager.conf",
                          action="store",
                          metavar="FILE1[,FILE2,FILE3]",
                          help="Load configuration from FILEs (comma separated list)")
        parser.add_option("--log", dest="logfile",
                          default="stdout",
                          metavar="LOGFILE",
                          action="store",
                          help="Send logging output to LOGFILE or SYSLOG or stdout [default <stdout>]")
        parser.add_option("--infra", dest="infras",
                          default=[],
                          action="append",
                          metavar="ID",
                          help="Build the session of infrastructure ID only (can be repeated) [default all]")
        parser.add_option("--user", dest="user",
                          default=None,
                          action="store",
                          metavar="NAME",
                          help="User requiring the sessions, used for the eToken cn-label")
        parser.add_option("--list", dest="list",
                          default=False,
                          action="store_true",
                          help="List the infrastructures and exit")
        (self.options, self.args) = parser.parse_args(argv)

    def __setuplogging(self):
        """
        Setup logging

        All messages go to the selected log target,
        and also to the console when DEBUG or INFO levels are selected
        together with --console.
        """
        self.log = logging.getLogger('inframanager')
        # handlers of a previous InfraCLI are replaced
        for handler in InfraCLI.installed:
            self.log.removeHandler(handler)
            handler.close()
        if self.options.logfile == "stdout":
            logStream = logging.StreamHandler()
        elif self.options.logfile == 'syslog':
            logStream = logging.handlers.SysLogHandler('/dev/log')
        else:
            logdir = os.path.dirname(self.options.logfile)
            if logdir and not os.path.exists(logdir):
                os.makedirs(logdir)
            logStream = logging.FileHandler(filename=self.options.logfile)

        FORMAT = '%(asctime)s (UTC) [ %(levelname)s ] %(name)s %(filename)s:%(lineno)d %(funcName)s(): %(message)s'
        formatter = logging.Formatter(FORMAT)
        formatter.converter = time.gmtime  # to convert timestamps to UTC
        logStream.setFormatter(formatter)
        self.log.addHandler(logStream)
        self.handlers = [logStream]

        if self.options.logLevel in [logging.DEBUG, logging.INFO]:
            if self.options.console:
                console = logging.StreamHandler(sys.stdout)
                console.setFormatter(formatter)
                console.setLevel(self.options.logLevel)
                self.log.addHandler(console)
                self.handlers.append(console)
        InfraCLI.installed = self.handlers
        self.log.setLevel(self.options.logLevel)
        self.log.info('Logging initialized.')

    def __platforminfo(self):
        """
        display basic info about the platform, for debugging purposes
        """
        self.log.info('platform: uname = %s' % ' '.join(platform.uname()))
        self.log.info('platform: python version = %s' % platform.python_version())

    def run(self):
        """
        returns the exit status: 0 when every session was built
        """
        try:
            cm = ConfigManager()
            config = cm.getConfig(self.options.confFiles)
            infras = cm.getInfrastructures(config)
        except ConfigFailure as ex:
            self.log.error('Failed to load the configuration: %s' % ex)
            return 1

        if self.options.infras:
            known = dict((infra.id, infra) for infra in infras)
            unknown = [i for i in self.options.infras if i not in known]
            if unknown:
                self.log.error('Unknown infrastructures: %s' % ', '.join(unknown))
                return 1
            infras = [known[i] for i in self.options.infras]

        if self.options.list:
            for infra in infras:
                self._print('%s\t%s\t%s\t%s' % (infra.id,
                                                infra.name,
                                                'enabled' if infra.enabled else 'disabled',
                                                infra.getParameterValue('jobservice', '')))
            return 0

        rc = 0
        for infra in infras:
            if not infra.enabled:
                self.log.info('infrastructure %s disabled, skipped' % infra.id)
                continue
            if not self.buildsession(infra):
                rc = 1
        return rc

    def buildsession(self, infra):
        try:
            session = SessionBuilder(infra, self.options.user).createSession()
        except InfrastructureException as ex:
            self.log.debug(traceback.format_exc())
            self._print('[%s] FAILED %s: %s' % (infra.id, ex.__class__.__name__, ex))
            return False
        try:
            self._print('[%s] session %s' % (infra.id, session.id))
            for ctx in session.listContexts():
                self._print('  %s' % ctx.type)
                for name in ctx.listAttributes():
                    self._print('    %s = %s' % (name, self._value(ctx, name)))
        finally:
            session.close()
        return True

    def _value(self, ctx, name):
        if name in context.SECRETATTRIBUTES:
            return '********'
        if ctx.isVectorAttribute(name):
            return ', '.join(ctx.getVectorAttribute(name))
        return ctx.getAttribute(name)

    def _print(self, line):
        self.out.write(line + '\n')


def main():
    cli = InfraCLI()
    sys.exit(cli.run())
