# COMPONENT: API REQUEST / RESPONSE LOGGING MIDDLEWARE
# REQUIREMENTS SATISFIED: receipt and send logging without handler cooperation
"""
exchange_tap/api/middleware/log_requests.py

Request logger middleware and its ASGI adapter.

request_logger_middleware() builds a framework-neutral middleware with the
signature ``(request, response, call_next)``. For every exchange it:
    - logs "RECV <<<" with the method, target and host, before anything else
    - swaps ``response.finalize`` for a finalize interceptor
    - subscribes to the response's completion signal to log "SEND >>>" with
      whatever ``response.content_body`` holds at that point
    - calls ``call_next()`` exactly once and returns its result

ExchangeLoggerASGI plugs that middleware into a Starlette / FastAPI app.
Every ``http.response.body`` message goes through the response's currently
installed finalize, so the first body chunk is captured and later chunks go
straight to the server. The completion signal fires once the last chunk (or
an ``http.response.pathsend``) has been handed off. When the app returns or
raises without sending one, completion still fires with nothing captured.
If the server's ``send`` itself fails, completion never fires.
"""
import inspect
from typing import Any, Callable, Optional

from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from exchange_tap.core.errors import MiddlewareConfigError
from exchange_tap.core.exchange import ExchangeRequest, ExchangeResponse
from exchange_tap.core.interceptor import finalize_interceptor

RECV_MARKER = "RECV <<<"
SEND_MARKER = "SEND >>>"


def request_logger_middleware(*, logger: Optional[Callable[..., None]] = None):
    """
    Build the request logger middleware around the ``logger`` capability.

    Raises MiddlewareConfigError right away when no usable logger is given.
    """
    if logger is None:
        raise MiddlewareConfigError("request_logger_middleware requires a logger")
    if not callable(logger):
        raise MiddlewareConfigError(f"logger must be callable, got {type(logger).__name__}")

    def middleware(request: ExchangeRequest, response: ExchangeResponse, call_next: Callable[[], Any]):
        logger(RECV_MARKER, request.method, request.url, request.hostname)
        response.finalize = finalize_interceptor(response, response.finalize)

        def log_send():
            logger(SEND_MARKER, response.content_body)

        response.on_finish(log_send)
        return call_next()

    return middleware



def build_exchange_request(scope: Scope) -> ExchangeRequest:
    """
    Build the request view from an HTTP scope. The target is the raw path as
    it arrived on the wire (percent-encoding intact) plus the query string.
    """
    url = Request(scope).url
    raw_path = scope.get("raw_path")
    if raw_path:
        target = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        target = url.path
    query = scope.get("query_string", b"").decode("latin-1")
    if query:
        target = f"{target}?{query}"
    return ExchangeRequest(method=scope["method"], url=target, hostname=url.hostname)


class ExchangeLoggerASGI:
    """
    ASGI middleware running request_logger_middleware for every HTTP exchange.

    ``logger`` is required; leaving it out raises MiddlewareConfigError.
    """

    def __init__(self, app: ASGIApp, logger: Optional[Callable[..., None]] = None):
        self.app = app
        self.middleware = request_logger_middleware(logger=logger)

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        more_body = False
        transport_failed = False

        async def send_body(content):
            await send({"type": "http.response.body", "body": content, "more_body": more_body})

        response = ExchangeResponse(send_body)

        # ------------------------------
        # Route body chunks through finalize
        # ------------------------------
        async def send_wrapper(message: Message):
            nonlocal more_body, transport_failed

            try:
                if message["type"] == "http.response.body":
                    more_body = message.get("more_body", False)
                    result = response.finalize(message.get("body", b""))
                    if inspect.isawaitable(result):
                        await result
                else:
                    await send(message)
            except Exception:
                transport_failed = True
                raise

            if message["type"] == "http.response.pathsend":
                response.emit_finish()
            elif message["type"] == "http.response.body" and not more_body:
                response.emit_finish()

        # ------------------------------
        # Run the app; an exchange that ends without a final body message
        # still completes, with nothing captured
        # ------------------------------
        request = build_exchange_request(scope)
        try:
            result = self.middleware(request, response, lambda: self.app(scope, receive, send_wrapper))
            if inspect.isawaitable(result):
                await result
        except Exception:
            if not transport_failed:
                response.emit_finish()
            raise

        if not transport_failed:
            response.emit_finish()
