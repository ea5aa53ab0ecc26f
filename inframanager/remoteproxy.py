"""
    Retrieval of proxy certificates from a remote location.

    The location is taken from the infrastructure parameters:
        proxyurl            URL returning the proxy, used as is
        etokenserverurl     base URL of an eToken server. The request is
                            built adding the token id to the path and the
                            VO information to the query:

            <etokenserverurl>/<etokenid>?voms=<vo>:<voroles>&proxy-renewal=<proxyrenewal>
                &disable-voms-proxy=<disablevomsproxy>&rfc-proxy=<rfcproxy>&cn-label=eToken:<user>

    proxyurl has precedence when both are defined.
"""

import logging
import re
import socket
import traceback

from urllib.error import HTTPError, URLError
from urllib.parse import quote, unquote, urlsplit, urlunsplit
from urllib.request import urlopen

from inframanager import defaults
from inframanager.exceptions import AuthFailure, InfraConfigFailure
from inframanager.exceptions import ProxyRetrievalFailure, ProxyTimeoutFailure
from inframanager.resources import getParameterValue

# characters left as they are when the eToken URL is rebuilt
PATHSAFE = "/:@!$&'()*+,;=-._~"
QUERYSAFE = "/?:@!$&'()*+,;=-._~"

# line terminators of the proxy body
LINEBREAK = re.compile(r'\r\n|\r|\n')


class RemoteProxy:
    """
    -----------------------------------------------------------------------
    Remote proxy for one infrastructure.
    -----------------------------------------------------------------------
    Public Interface:
            location()
            read()
    -----------------------------------------------------------------------
    """
    def __init__(self, params, user=None, infraid=None):
        """
        params is the dictionary name -> Parameter of the infrastructure,
        user the identity used for the eToken cn-label.
        """
        self.log = logging.getLogger('inframanager.remoteproxy')
        self.params = params
        self.user = user
        self.infraid = infraid

        self.proxyurl = getParameterValue(params, 'proxyurl')
        self.etokenserverurl = getParameterValue(params, 'etokenserverurl')
        if self.proxyurl is None and self.etokenserverurl is None:
            raise InfraConfigFailure('No proxy location in configuration parameters for %s' % infraid)

        timeout = getParameterValue(params, 'proxytimeout', defaults.PROXYTIMEOUT)
        try:
            self.timeout = float(timeout)
        except ValueError as ex:
            raise InfraConfigFailure('proxytimeout %r is not a number for %s' % (timeout, infraid), ex) from ex

    def location(self):
        """
        returns the URL the proxy is read from
        """
        if self.proxyurl is not None:
            parts = urlsplit(self.proxyurl)
            if not parts.scheme or not parts.netloc:
                raise InfraConfigFailure('URL for the proxy is not valid, infrastructure %s is not accessible' % self.infraid)
            return self.proxyurl
        return self._etokenurl()

    def _etokenurl(self):
        try:
            parts = urlsplit(self.etokenserverurl)
            # raises ValueError for a bad port
            parts.port
        except ValueError as ex:
            raise InfraConfigFailure('etokenserverurl not properly configured for %s' % self.infraid, ex) from ex
        if not parts.scheme or not parts.netloc:
            raise InfraConfigFailure('etokenserverurl not properly configured for %s' % self.infraid)

        path = unquote(parts.path)
        if not path.endswith('/'):
            path += '/'
        path += self._get('etokenid', defaults.ETOKENID)

        query = ''
        if parts.query:
            query = unquote(parts.query) + '&'
        query += 'voms=%s:%s&' % (self._get('vo', defaults.VO), self._get('voroles', defaults.VOROLES))
        query += 'proxy-renewal=%s&' % self._get('proxyrenewal', defaults.PROXYRENEWAL)
        query += 'disable-voms-proxy=%s&' % self._get('disablevomsproxy', defaults.DISABLEVOMSPROXY)
        query += 'rfc-proxy=%s&' % self._get('rfcproxy', defaults.RFCPROXY)
        query += 'cn-label='
        if self.user is not None:
            query += 'eToken:%s' % self.user

        url = urlunsplit((parts.scheme,
                          parts.netloc,
                          quote(path, safe=PATHSAFE),
                          quote(query, safe=QUERYSAFE),
                          parts.fragment))
        self.log.debug('eToken URL for %s is %s' % (self.infraid, url))
        return url

    def _get(self, name, default):
        return getParameterValue(self.params, name, default)

    def read(self):
        """
        Reads the proxy. Returns its content with every line
        terminated by a newline.
        """
        url = self.location()
        self.log.debug('Accessing the proxy %s' % url)
        try:
            with urlopen(url, timeout=self.timeout) as f:
                body = f.read()
        except HTTPError as ex:
            self.log.error('Remote proxy server %s answered %s %s' % (url, ex.code, ex.reason))
            if ex.code in (401, 403):
                raise AuthFailure('Credentials rejected retrieving the proxy for %s' % self.infraid, ex) from ex
            raise ProxyRetrievalFailure('Impossible to retrieve the remote proxy for %s (HTTP %s)' % (self.infraid, ex.code), ex) from ex
        except URLError as ex:
            if isinstance(ex.reason, socket.timeout):
                self.log.error('Timeout retrieving the remote proxy from %s' % url)
                raise ProxyTimeoutFailure('Timeout retrieving the remote proxy for %s' % self.infraid, ex) from ex
            self.log.error('Impossible to retrieve the remote proxy certificate from: %s' % url)
            self.log.debug(traceback.format_exc())
            raise ProxyRetrievalFailure('Impossible to retrieve the remote proxy for %s' % self.infraid, ex) from ex
        except socket.timeout as ex:
            self.log.error('Timeout retrieving the remote proxy from %s' % url)
            raise ProxyTimeoutFailure('Timeout retrieving the remote proxy for %s' % self.infraid, ex) from ex
        except (OSError, ValueError) as ex:
            self.log.error('Impossible to retrieve the remote proxy certificate from: %s' % url)
            self.log.debug(traceback.format_exc())
            raise ProxyRetrievalFailure('Impossible to retrieve the remote proxy for %s' % self.infraid, ex) from ex

        try:
            text = body.decode('utf-8')
        except UnicodeDecodeError as ex:
            self.log.error('The proxy retrieved from %s is not valid text' % url)
            raise ProxyRetrievalFailure('Not a valid proxy retrieved for %s' % self.infraid, ex) from ex
        lines = LINEBREAK.split(text)
        if lines[-1] == '':
            lines.pop()
        proxy = ''.join(line + '\n' for line in lines)
        if not proxy:
            raise ProxyRetrievalFailure('Empty proxy retrieved for %s from %s' % (self.infraid, url))
        self.log.debug('Proxy of %d bytes retrieved for %s' % (len(proxy), self.infraid))
        return proxy
