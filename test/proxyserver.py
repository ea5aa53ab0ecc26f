#
# Local HTTP server standing in for a proxy / eToken server in the tests.
#

import threading
import time

from http.server import BaseHTTPRequestHandler, HTTPServer


class ProxyHandler(BaseHTTPRequestHandler):

    def do_GET(self):
        server = self.server
        server.requests.append(self.path)
        if server.delay:
            time.sleep(server.delay)
        body = server.body
        if isinstance(body, str):
            body = body.encode('utf-8')
        try:
            self.send_response(server.code)
            self.send_header('Content-Type', 'text/plain')
            self.send_header('Content-Length', str(len(body)))
            self.end_headers()
            self.wfile.write(body)
        except (BrokenPipeError, ConnectionResetError):
            # the client gave up already
            pass

    def log_message(self, format, *args):
        pass


class ProxyServer:
    """
    serves body with the given HTTP code to every GET,
    after waiting delay seconds.
    The paths requested are kept in requests.
    """

    def __init__(self, body='PROXYDATA\n', code=200, delay=0):
        self.httpd = HTTPServer(('127.0.0.1', 0), ProxyHandler)
        self.httpd.body = body
        self.httpd.code = code
        self.httpd.delay = delay
        self.httpd.requests = []
        self.thread = threading.Thread(target=self.httpd.serve_forever)
        self.thread.daemon = True

    @property
    def requests(self):
        return self.httpd.requests

    def url(self, path='/'):
        return 'http://127.0.0.1:%d%s' % (self.httpd.server_address[1], path)

    def start(self):
        self.thread.start()
        return self

    def stop(self):
        self.httpd.shutdown()
        self.httpd.server_close()
        self.thread.join()
