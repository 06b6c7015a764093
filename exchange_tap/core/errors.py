# COMPONENT: EXCHANGE LOGGER ERRORS
# REQUIREMENTS SATISFIED: construction-time misconfiguration reporting
"""
exchange_tap/core/errors.py

Exceptions raised by the exchange logging layer itself. Failures coming from
the wrapped finalize operation or from the injected logger are never wrapped
in these types; they propagate to the caller unchanged.
"""


class MiddlewareConfigError(ValueError):
    """Raised when the request logger middleware is built with bad options."""
