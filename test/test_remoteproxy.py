#
#

import unittest

from urllib.parse import parse_qs, unquote, urlsplit

from inframanager.exceptions import AuthFailure, InfraConfigFailure, InfrastructureException
from inframanager.exceptions import ProxyRetrievalFailure, ProxyTimeoutFailure
from inframanager.remoteproxy import RemoteProxy
from inframanager.resources import Parameter, indexParameters

from proxyserver import ProxyServer


def getParams(**kwargs):
    return indexParameters([Parameter(k, v) for k, v in kwargs.items()])


class TestLocation(unittest.TestCase):

    def test_no_location(self):
        self.assertRaises(InfraConfigFailure, RemoteProxy, getParams(vo='gridit'), None, 'ce01')

    def test_proxyurl_precedence(self):
        rp = RemoteProxy(getParams(proxyurl='http://proxy.example.org/p',
                                   etokenserverurl='http://etoken.example.org/eToken'))
        self.assertEqual(rp.location(), 'http://proxy.example.org/p')

    def test_proxyurl_not_valid(self):
        rp = RemoteProxy(getParams(proxyurl='not a url'))
        self.assertRaises(InfraConfigFailure, rp.location)

    def test_bad_timeout(self):
        self.assertRaises(InfraConfigFailure, RemoteProxy,
                          getParams(proxyurl='http://proxy.example.org/p', proxytimeout='soon'))

    def test_etoken(self):
        rp = RemoteProxy(getParams(etokenserverurl='http://etoken.example.org:8082/eTokenServer/eToken',
                                   etokenid='332576f78a4fe70a52048043e90cd11f',
                                   vo='gridit',
                                   voroles='gridit/Role=pilot'),
                         user='jdoe')
        parts = urlsplit(rp.location())
        self.assertEqual(parts.netloc, 'etoken.example.org:8082')
        self.assertEqual(parts.path, '/eTokenServer/eToken/332576f78a4fe70a52048043e90cd11f')
        query = unquote(parts.query)
        self.assertTrue(query.startswith('voms=gridit:gridit/Role=pilot&'))
        self.assertEqual(query.split('&'),
                         ['voms=gridit:gridit/Role=pilot',
                          'proxy-renewal=true',
                          'disable-voms-proxy=false',
                          'rfc-proxy=false',
                          'cn-label=eToken:jdoe'])

    def test_etoken_existing_query(self):
        rp = RemoteProxy(getParams(etokenserverurl='https://etoken.example.org/eToken/?site=it',
                                   etokenid='abc',
                                   vo='vo',
                                   voroles='role',
                                   rfcproxy='true'))
        parts = urlsplit(rp.location())
        self.assertEqual(parts.path, '/eToken/abc')
        qs = parse_qs(parts.query, keep_blank_values=True)
        self.assertEqual(qs['site'], ['it'])
        self.assertEqual(qs['voms'], ['vo:role'])
        self.assertEqual(qs['rfc-proxy'], ['true'])
        self.assertEqual(qs['cn-label'], [''])

    def test_etoken_quoting(self):
        rp = RemoteProxy(getParams(etokenserverurl='http://etoken.example.org/eToken',
                                   etokenid='my token',
                                   vo='vo'),
                         user='John Doe')
        url = rp.location()
        self.assertNotIn(' ', url)
        self.assertIn('/eToken/my%20token', url)
        self.assertIn('cn-label=eToken:John%20Doe', url)


class TestRead(unittest.TestCase):

    def setUp(self):
        self.server = None

    def tearDown(self):
        if self.server is not None:
            self.server.stop()

    def _serve(self, **kwargs):
        self.server = ProxyServer(**kwargs).start()
        return self.server

    def test_read(self):
        server = self._serve()
        rp = RemoteProxy(getParams(proxyurl=server.url('/proxies/gridit')))
        self.assertEqual(rp.read(), 'PROXYDATA\n')
        self.assertEqual(server.requests, ['/proxies/gridit'])

    def test_lines(self):
        server = self._serve(body='-----BEGIN-----\r\nDATA\r\n-----END-----')
        rp = RemoteProxy(getParams(proxyurl=server.url()))
        self.assertEqual(rp.read(), '-----BEGIN-----\nDATA\n-----END-----\n')

    def test_lines_only_split_on_newlines(self):
        server = self._serve(body='A\x0cB\nC\x1dD\rE\n')
        rp = RemoteProxy(getParams(proxyurl=server.url()))
        self.assertEqual(rp.read(), 'A\x0cB\nC\x1dD\nE\n')

    def test_not_text(self):
        server = self._serve(body=b'\xff\xfePROXY\n')
        rp = RemoteProxy(getParams(proxyurl=server.url()))
        with self.assertRaises(ProxyRetrievalFailure) as cm:
            rp.read()
        self.assertIsInstance(cm.exception.cause, UnicodeDecodeError)

    def test_etoken_request(self):
        server = self._serve()
        rp = RemoteProxy(getParams(etokenserverurl=server.url('/eTokenServer/eToken'),
                                   etokenid='abc',
                                   vo='gridit',
                                   voroles='gridit'),
                         user='jdoe')
        self.assertEqual(rp.read(), 'PROXYDATA\n')
        path, _, query = server.requests[0].partition('?')
        self.assertEqual(path, '/eTokenServer/eToken/abc')
        self.assertTrue(unquote(query).startswith('voms=gridit:gridit&proxy-renewal=true'))

    def test_forbidden(self):
        server = self._serve(code=403, body='forbidden')
        rp = RemoteProxy(getParams(proxyurl=server.url()))
        with self.assertRaises(AuthFailure) as cm:
            rp.read()
        self.assertIsInstance(cm.exception, InfrastructureException)
        self.assertIsNotNone(cm.exception.cause)
        self.assertIs(cm.exception.__cause__, cm.exception.cause)

    def test_server_error(self):
        server = self._serve(code=500, body='oops')
        rp = RemoteProxy(getParams(proxyurl=server.url()))
        self.assertRaises(ProxyRetrievalFailure, rp.read)

    def test_empty(self):
        server = self._serve(body='')
        rp = RemoteProxy(getParams(proxyurl=server.url()))
        self.assertRaises(ProxyRetrievalFailure, rp.read)

    def test_timeout(self):
        server = self._serve(delay=1)
        rp = RemoteProxy(getParams(proxyurl=server.url(), proxytimeout='0.2'))
        with self.assertRaises(ProxyTimeoutFailure) as cm:
            rp.read()
        self.assertIsInstance(cm.exception, ProxyRetrievalFailure)

    def test_connection_refused(self):
        server = ProxyServer()
        url = server.url()
        server.httpd.server_close()
        rp = RemoteProxy(getParams(proxyurl=url, proxytimeout='2'))
        self.assertRaises(ProxyRetrievalFailure, rp.read)


if __name__ == '__main__':
    unittest.main()
