#
#

import os
import shutil
import tempfile
import unittest

from inframanager.configloader import Config, ConfigManager, config2infrastructures
from inframanager.exceptions import ConfigFailure

from proxyserver import ProxyServer


INFRASTRUCTURES = """
[ce01]
name = Grid CE
description = GRAM2 gatekeeper
jobservice = gatekeeper://ce01.example.org:2119/jobmanager-pbs
etokenserverurl = http://etoken.example.org/eToken
etokenid = abc
vo = gridit

[login]
enabled = false
jobservice = ssh://login.example.org
username = griduser
"""


class TestConfig(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def _write(self, name, content):
        path = os.path.join(self.tmpdir, name)
        with open(path, 'w') as f:
            f.write(content)
        return path

    def test_generic_get(self):
        config = Config()
        config.read_string('[InfraManager]\nworkdir = /tmp/x\nflag = true\nnothing = None\nn = 3\n')
        self.assertEqual(config.generic_get('InfraManager', 'workdir'), '/tmp/x')
        self.assertIs(config.generic_get('InfraManager', 'flag'), True)
        self.assertIsNone(config.generic_get('InfraManager', 'nothing'))
        self.assertEqual(config.generic_get('InfraManager', 'n', 'getint'), 3)
        self.assertEqual(config.generic_get('InfraManager', 'missing', default_value='d'), 'd')
        self.assertRaises(ConfigFailure, config.generic_get, 'InfraManager', 'workdir', 'getint')

    def test_case_kept(self):
        config = Config()
        config.read_string('[InfraManager]\ninfraConf = a.conf\n')
        self.assertEqual(config.options('InfraManager'), ['infraConf'])

    def test_merge(self):
        first = Config()
        first.read_string('[A]\nx = 1\ny = 2\n')
        second = Config()
        second.read_string('[A]\ny = 3\nz = 4\n[B]\nw = 5\n')
        merged = first.clone()
        merged.merge(second)
        self.assertEqual(merged.section2dict('A'), {'x': '1', 'y': '3', 'z': '4'})
        self.assertEqual(merged.sections(), ['A', 'B'])
        kept = first.clone()
        kept.merge(second, override=True, includemissing=False)
        self.assertEqual(kept.section2dict('A'), {'x': '1', 'y': '2'})
        self.assertEqual(kept.sections(), ['A'])

    def test_getsection(self):
        config = Config()
        config.read_string('[A]\nx = 1\n[B]\nw = 5\n')
        self.assertEqual(config.getSection('B').sections(), ['B'])
        self.assertEqual(config.getSection('C').sections(), [])

    def test_files(self):
        main = self._write('inframanager.conf', '[InfraManager]\ninfraConf = %s\n' % self._write('infras.conf', INFRASTRUCTURES))
        cm = ConfigManager()
        config = cm.getConfig(main)
        infras = cm.getInfrastructures(config)
        self.assertEqual([i.id for i in infras], ['ce01', 'login'])

        ce = infras[0]
        self.assertEqual(ce.name, 'Grid CE')
        self.assertEqual(ce.description, 'GRAM2 gatekeeper')
        self.assertTrue(ce.enabled)
        self.assertEqual([p.name for p in ce.getParameters()],
                         ['jobservice', 'etokenserverurl', 'etokenid', 'vo'])
        self.assertEqual(ce.getParameterValue('etokenid'), 'abc')

        login = infras[1]
        self.assertEqual(login.name, 'login')
        self.assertFalse(login.enabled)
        self.assertIsNone(login.getParameterValue('enabled'))

    def test_paths_expanded(self):
        path = self._write('infras.conf', '[c]\nsshpublickey = ~/.ssh/c.pub\n')
        infras = config2infrastructures(ConfigManager().getConfig('file://' + path))
        self.assertEqual(infras[0].getParameterValue('sshpublickey'), os.path.expanduser('~/.ssh/c.pub'))

    def test_percent_values(self):
        path = self._write('infras.conf', '[c]\nproxyurl = http://proxy.example.org/p%20x\n')
        infras = config2infrastructures(ConfigManager().getConfig(path))
        self.assertEqual(infras[0].getParameterValue('proxyurl'), 'http://proxy.example.org/p%20x')

    def test_uri(self):
        server = ProxyServer(body=INFRASTRUCTURES).start()
        try:
            config = ConfigManager().getConfig('uri://' + server.url('/infras.conf'))
        finally:
            server.stop()
        self.assertEqual(config.sections(), ['ce01', 'login'])

    def test_missing_file(self):
        self.assertRaises(ConfigFailure, ConfigManager().getConfig, os.path.join(self.tmpdir, 'nothere.conf'))

    def test_no_infraconf(self):
        config = Config()
        config.read_string('[InfraManager]\n')
        self.assertRaises(ConfigFailure, ConfigManager().getInfrastructures, config)

    def test_configdir(self):
        self._write('b.conf', '[B]\nx = 1\n')
        self._write('a.conf', '[A]\nx = 1\n')
        self._write('ignored.txt', '[C]\nx = 1\n')
        config = ConfigManager().getConfig(configdir=self.tmpdir)
        self.assertEqual(config.sections(), ['A', 'B'])


if __name__ == '__main__':
    unittest.main()
