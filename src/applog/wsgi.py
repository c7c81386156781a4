"""WSGI middleware tracing and logging each request.

Example:
    >>> from applog.wsgi import RequestLoggingMiddleware
    >>> app = RequestLoggingMiddleware(app)
"""

from contextvars import Token
from functools import partial
from typing import Any, Callable, Dict, Iterable, Iterator, Optional

from applog.http import WsgiRequestView
from applog.logging.logger import Logger
from applog.tracing.context import RequestTracer

WsgiApp = Callable[..., Iterable[bytes]]


class RequestLoggingMiddleware:
    """Start a request trace and log a REQUEST_LOG event when done.

    The trace continues the one described by the ``X-Cloud-Trace-Context``
    or ``traceparent`` request header. Exceptions raised by the wrapped
    application are logged with status 500 and re-raised.
    """

    def __init__(
        self,
        app: WsgiApp,
        logger: Optional[Logger] = None,
        tracer: Optional[RequestTracer] = None,
    ) -> None:
        self.app = app
        self.logger = logger or Logger()
        self.tracer = tracer or RequestTracer()

    def __call__(self, environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        view = WsgiRequestView.from_environ(environ)
        token = self.tracer.start_from_headers(view.all_headers())
        status = {"code": 500}

        def _start_response(status_line: str, headers: list, exc_info: Any = None) -> Any:
            status["code"] = int(status_line.split(" ", 1)[0])
            return start_response(status_line, headers, exc_info)

        try:
            result = self.app(environ, _start_response)
        except Exception:
            self._finish(view, token, status, failed=True)
            raise
        return _LoggedResponse(result, partial(self._finish, view, token, status))

    def _finish(
        self, view: WsgiRequestView, token: Token, status: Dict[str, int], failed: bool
    ) -> None:
        try:
            if failed:
                self.logger.request(view, 500, "Request failed", {}, {})
            else:
                self.logger.request(view, status["code"], "Request completed", {}, {})
        finally:
            self.tracer.stop(token)


class _LoggedResponse:
    """Response iterable invoking a callback once when closed."""

    def __init__(self, result: Iterable[bytes], on_close: Callable[[bool], None]) -> None:
        self._result = result
        self._on_close = on_close
        self._failed = False
        self._closed = False

    def __iter__(self) -> Iterator[bytes]:
        try:
            yield from self._result
        except Exception:
            self._failed = True
            raise

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            close = getattr(self._result, "close", None)
            if close is not None:
                close()
        finally:
            self._on_close(self._failed)
