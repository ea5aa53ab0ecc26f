#
#

import os
import shutil
import stat
import tempfile
import unittest

from inframanager.utils import TimedCommand, TimeOutException, writefile


class TestTimedCommand(unittest.TestCase):

    def test_output(self):
        cmd = TimedCommand(['sh', '-c', 'echo out; echo err >&2; exit 3'], timeout=10)
        self.assertEqual(cmd.output, 'out\n')
        self.assertEqual(cmd.error, 'err\n')
        self.assertEqual(cmd.status, 3)

    def test_env(self):
        cmd = TimedCommand(['sh', '-c', 'echo $INFRA_TEST'], env={'INFRA_TEST': 'value'})
        self.assertEqual(cmd.output, 'value\n')

    def test_no_shell(self):
        cmd = TimedCommand(['echo', '$HOME; ls'])
        self.assertEqual(cmd.output, '$HOME; ls\n')

    def test_timeout(self):
        self.assertRaises(TimeOutException, TimedCommand, ['sleep', '5'], 0.5)


class TestWritefile(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_mode(self):
        path = writefile(os.path.join(self.tmpdir, 'sub', 'x509up'), 'PROXYDATA\n', 0o600)
        self.assertEqual(stat.S_IMODE(os.stat(path).st_mode), 0o600)
        with open(path) as f:
            self.assertEqual(f.read(), 'PROXYDATA\n')


if __name__ == '__main__':
    unittest.main()
