# tests/unit/test_request_logger_middleware.py
#
# Unit tests for the framework-neutral request logger middleware.
#
# The middleware is driven directly with ExchangeRequest / ExchangeResponse
# objects so every step of an exchange (receipt, finalize, completion) can be
# triggered by hand and checked in isolation.
import pytest

from exchange_tap.api.middleware.log_requests import request_logger_middleware
from exchange_tap.core.errors import MiddlewareConfigError
from exchange_tap.core.exchange import ExchangeRequest, ExchangeResponse


class RecordingLogger:
    def __init__(self):
        self.entries = []

    def __call__(self, *values):
        self.entries.append(values)


def make_exchange(method="GET", url="/api/health", hostname="localhost"):
    sent = []
    return ExchangeRequest(method, url, hostname), ExchangeResponse(sent.append), sent


def test_receipt_logged_before_continuation():
    log = RecordingLogger()
    middleware = request_logger_middleware(logger=log)
    request, response, _ = make_exchange()
    seen_at_next = []

    middleware(request, response, lambda: seen_at_next.extend(log.entries))

    assert seen_at_next == [("RECV <<<", "GET", "/api/health", "localhost")]


def test_continuation_called_once_and_result_returned(mocker):
    middleware = request_logger_middleware(logger=RecordingLogger())
    request, response, _ = make_exchange()
    call_next = mocker.Mock(return_value="next-result")

    assert middleware(request, response, call_next) == "next-result"
    call_next.assert_called_once_with()


def test_send_log_carries_finalized_content():
    log = RecordingLogger()
    middleware = request_logger_middleware(logger=log)
    request, response, sent = make_exchange()
    original = response.finalize

    middleware(request, response, lambda: None)
    response.finalize({"message": "OK", "uptime": 1.5})
    response.emit_finish()

    assert sent == [{"message": "OK", "uptime": 1.5}]
    assert response.finalize is original
    assert log.entries[-1] == ("SEND >>>", {"message": "OK", "uptime": 1.5})


def test_finish_without_finalize_logs_none():
    log = RecordingLogger()
    middleware = request_logger_middleware(logger=log)
    request, response, sent = make_exchange()

    middleware(request, response, lambda: None)
    response.emit_finish()

    assert sent == []
    assert log.entries == [
        ("RECV <<<", "GET", "/api/health", "localhost"),
        ("SEND >>>", None),
    ]


def test_double_finalize_logs_first_only():
    log = RecordingLogger()
    middleware = request_logger_middleware(logger=log)
    request, response, sent = make_exchange()

    middleware(request, response, lambda: None)
    response.finalize("first")
    response.finalize("second")
    response.emit_finish()

    assert sent == ["first", "second"]
    assert log.entries[-1] == ("SEND >>>", "first")
    assert all("second" not in entry for entry in log.entries)


def test_no_send_log_until_finish():
    log = RecordingLogger()
    middleware = request_logger_middleware(logger=log)
    request, response, _ = make_exchange()

    middleware(request, response, lambda: None)
    response.finalize("body")

    assert log.entries == [("RECV <<<", "GET", "/api/health", "localhost")]


def test_interleaved_exchanges_keep_their_own_order():
    log = RecordingLogger()
    middleware = request_logger_middleware(logger=log)
    req_a, resp_a, _ = make_exchange("GET", "/a")
    req_b, resp_b, _ = make_exchange("POST", "/b")

    middleware(req_a, resp_a, lambda: None)
    middleware(req_b, resp_b, lambda: None)
    resp_b.finalize("from b")
    resp_a.finalize("from a")
    resp_b.emit_finish()
    resp_a.emit_finish()

    assert log.entries == [
        ("RECV <<<", "GET", "/a", "localhost"),
        ("RECV <<<", "POST", "/b", "localhost"),
        ("SEND >>>", "from b"),
        ("SEND >>>", "from a"),
    ]


def test_receipt_sink_failure_stops_exchange(mocker):
    logger = mocker.Mock(side_effect=IOError("disk full"))
    middleware = request_logger_middleware(logger=logger)
    request, response, _ = make_exchange()
    original = response.finalize
    call_next = mocker.Mock()

    with pytest.raises(IOError):
        middleware(request, response, call_next)

    call_next.assert_not_called()
    assert response.finalize is original


def test_send_sink_failure_surfaces_from_finish():
    calls = []

    def flaky_logger(*values):
        calls.append(values)
        if values[0] == "SEND >>>":
            raise RuntimeError("sink down")

    middleware = request_logger_middleware(logger=flaky_logger)
    request, response, _ = make_exchange()
    middleware(request, response, lambda: None)
    response.finalize("body")

    with pytest.raises(RuntimeError, match="sink down"):
        response.emit_finish()


@pytest.mark.parametrize("bad", [None, "stdout", 42])
def test_bad_logger_rejected_at_construction(bad):
    with pytest.raises(MiddlewareConfigError):
        request_logger_middleware(logger=bad)


def test_missing_logger_rejected_at_construction():
    with pytest.raises(MiddlewareConfigError):
        request_logger_middleware()


def test_unknown_option_rejected():
    with pytest.raises(TypeError):
        request_logger_middleware(logger=print, level="debug")
