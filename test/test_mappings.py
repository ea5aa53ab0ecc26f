#
#

import unittest

from inframanager import mappings
from inframanager.exceptions import InfrastructureException, UnsupportedInfrastructure


class TestMappings(unittest.TestCase):

    def test_session_plugins(self):
        self.assertEqual(mappings.sessionplugin('wsgram'), 'VOMS')
        self.assertEqual(mappings.sessionplugin('gatekeeper'), 'VOMS')
        self.assertEqual(mappings.sessionplugin('wms'), 'WMS')
        self.assertEqual(mappings.sessionplugin('occi'), 'ROCCI')
        self.assertEqual(mappings.sessionplugin('rocci'), 'ROCCI')
        self.assertEqual(mappings.sessionplugin('ssh'), 'SSH')

    def test_jobservice_plugins(self):
        self.assertEqual(mappings.jobserviceplugin('gatekeeper'), 'CondorGT2')
        self.assertEqual(mappings.jobserviceplugin('wsgram'), 'CondorGT5')
        self.assertEqual(mappings.jobserviceplugin('wms'), 'GliteWMS')
        self.assertEqual(mappings.jobserviceplugin('rocci'), 'ROCCI')
        self.assertEqual(mappings.jobserviceplugin('ssh'), 'SSH')

    def test_unsupported(self):
        for infratype in ['unicore', 'ourgrid', 'bes-genesis2', 'gos']:
            with self.assertRaises(UnsupportedInfrastructure) as cm:
                mappings.sessionplugin(infratype)
            self.assertIn('not supported yet', str(cm.exception))
            self.assertEqual(cm.exception.infratype, infratype)

    def test_unknown(self):
        with self.assertRaises(InfrastructureException) as cm:
            mappings.jobserviceplugin('boinc')
        self.assertIsInstance(cm.exception, UnsupportedInfrastructure)
        self.assertIn('Unknown', str(cm.exception))

    def test_states(self):
        self.assertEqual(mappings.map2state(2, mappings.CONDORSTATES), mappings.RUNNING)
        self.assertEqual(mappings.map2state(99, mappings.CONDORSTATES), mappings.UNKNOWN)
        self.assertEqual(mappings.map2state(' Running ', mappings.WMSSTATES), mappings.RUNNING)
        self.assertEqual(mappings.map2state('active', mappings.OCCISTATES), mappings.RUNNING)


if __name__ == '__main__':
    unittest.main()
