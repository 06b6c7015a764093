# COMPONENT: EXCHANGE MODEL
# REQUIREMENTS SATISFIED: request view, replaceable finalize slot, one-shot completion signal
"""
exchange_tap/core/exchange.py

Per-exchange objects handed to the request logger middleware.

ExchangeRequest is a read-only view of the inbound call. ExchangeResponse is
the mutable side: it carries the replaceable ``finalize`` operation, the
captured ``content_body`` and a completion signal that fires at most once,
after the response has been fully handed to the server.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional


@dataclass(frozen=True)
class ExchangeRequest:
    method: str
    url: str
    hostname: Optional[str] = None


class ExchangeResponse:
    """
    Mutable response state for a single exchange.

    ``finalize`` is a plain attribute on purpose: middleware swaps it at
    runtime. ``content_body`` stays ``None`` until something captures it.
    """

    def __init__(self, finalize: Callable[[Any], Any]):
        self.finalize = finalize
        self.content_body: Any = None
        self._finish_listeners: List[Callable[[], None]] = []
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    def on_finish(self, listener: Callable[[], None]) -> None:
        self._finish_listeners.append(listener)

    def emit_finish(self) -> None:
        """
        Fire the completion signal. Listeners run in subscription order; a
        listener that raises stops the remaining ones and the error propagates.
        Only the first call has any effect.
        """
        if self._finished:
            return
        self._finished = True
        listeners, self._finish_listeners = self._finish_listeners, []
        for listener in listeners:
            listener()
