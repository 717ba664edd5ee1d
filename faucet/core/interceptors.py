"""Composable request interceptors.

An interceptor has the same shape as an HTTP middleware: it receives the
request and the next handler, and either short-circuits with its own
response or awaits ``call_next``. Protected routes run an ordered chain
of them in front of the handler that performs the action.
"""

from __future__ import annotations

from functools import partial
from typing import Awaitable, Callable, Sequence

from fastapi import Request, Response

Handler = Callable[[Request], Awaitable[Response]]
Interceptor = Callable[[Request, Handler], Awaitable[Response]]


def build_chain(interceptors: Sequence[Interceptor], handler: Handler) -> Handler:
    """Wrap ``handler`` so that ``interceptors[0]`` runs first.

    Example:
        >>> chain = build_chain([limiter.intercept, captcha], send_payout)
        >>> response = await chain(request)
    """
    wrapped = handler
    for interceptor in reversed(interceptors):
        wrapped = partial(interceptor, call_next=wrapped)
    return wrapped
