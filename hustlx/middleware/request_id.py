"""
Request ID middleware for request tracing and logging
"""
import uuid


class RequestIdMiddleware:
    """
    WSGI middleware that tags every request with an id.

    An incoming X-Request-ID header is kept so ids survive a proxy hop;
    otherwise a fresh one is generated. The id is stored in the WSGI environ
    (read by the error handlers when logging) and echoed on the response.
    """

    header_name = 'X-Request-ID'

    def __init__(self, app):
        self.app = app

    def __call__(self, environ, start_response):
        request_id = environ.get('HTTP_X_REQUEST_ID') or uuid.uuid4().hex
        environ['request_id'] = request_id

        def start_response_with_id(status, headers, exc_info=None):
            headers.append((self.header_name, request_id))
            return start_response(status, headers, exc_info)

        return self.app(environ, start_response_with_id)
