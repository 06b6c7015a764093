# COMPONENT: RESPONSE FINALIZE INTERCEPTOR
# REQUIREMENTS SATISFIED: capture of outbound response content at send time
"""
exchange_tap/core/interceptor.py

Decorator over a response's one-shot terminal send ("finalize") operation.

The interceptor is installed in place of ``response.finalize``. On its first
(and only) invocation it:

    1. stores the content on ``response.content_body``
    2. puts the original finalize back on the response
    3. calls the original finalize with the same content and hands back
       whatever it returns

Step 2 happens before step 3 so the original sees a response that looks as
if it was never intercepted. Any later call to ``response.finalize`` reaches
the original directly, so only the first content is ever captured.

Nothing here catches exceptions: if the original raises, the caller sees the
exact same exception. When the original is a coroutine function the awaitable
it returns is passed back untouched for the caller to await.
"""
from typing import Any, Callable

Finalize = Callable[[Any], Any]


def finalize_interceptor(response: Any, finalize: Finalize) -> Finalize:
    """
    Wrap ``finalize`` (the response's current finalize operation) and return
    the wrapper to be installed as ``response.finalize``.
    """

    def intercepted_finalize(content):
        response.content_body = content
        response.finalize = finalize
        return finalize(content)

    return intercepted_finalize
