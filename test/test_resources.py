#
#

import unittest

from inframanager.resources import Infrastructure, Parameter, Task
from inframanager.resources import getParameterValue, indexParameters


class TestGetParameterValue(unittest.TestCase):

    def setUp(self):
        self.params = [Parameter('vo', 'gridit'),
                       Parameter('etokenid', 'abc123'),
                       Parameter('vo', 'fedcloud.egi.eu')]

    def test_list_present(self):
        self.assertEqual(getParameterValue(self.params, 'etokenid'), 'abc123')

    def test_list_absent(self):
        self.assertIsNone(getParameterValue(self.params, 'voroles'))
        self.assertEqual(getParameterValue(self.params, 'voroles', 'none'), 'none')

    def test_list_last_wins(self):
        self.assertEqual(getParameterValue(self.params, 'vo'), 'fedcloud.egi.eu')

    def test_map_of_parameters(self):
        params = indexParameters(self.params)
        self.assertEqual(getParameterValue(params, 'vo'), 'fedcloud.egi.eu')
        self.assertEqual(getParameterValue(params, 'rfcproxy', 'false'), 'false')

    def test_map_of_strings(self):
        params = {'vo': 'gridit'}
        self.assertEqual(getParameterValue(params, 'vo'), 'gridit')
        self.assertEqual(getParameterValue(params, 'voroles', ''), '')


class TestInfrastructure(unittest.TestCase):

    def test_parameters(self):
        infra = Infrastructure('ce01', [Parameter('jobservice', 'ssh://host')])
        infra.addParameter(Parameter('username', 'griduser'))
        self.assertEqual(infra.name, 'ce01')
        self.assertEqual(infra.getParameterValue('username'), 'griduser')
        self.assertEqual(len(infra.getParameters()), 2)

    def test_task_first_enabled(self):
        off = Infrastructure('off', enabled=False)
        on1 = Infrastructure('on1')
        on2 = Infrastructure('on2')
        task = Task('1', '/bin/hostname', infrastructures=[off, on1, on2])
        self.assertIs(task.getInfrastructure(), on1)
        self.assertIsNone(Task('2', '/bin/hostname', infrastructures=[off]).getInfrastructure())


if __name__ == '__main__':
    unittest.main()
