"""Correlation ID middleware.

Propagates X-Correlation-ID (forwarded from the client, else the request ID)
for tracing a collect call across services. Raw ASGI.
"""

from typing import Callable

from arthub.middleware._headers import get_header, with_response_header
from arthub.middleware.request_id import sanitize_request_id


def CorrelationIDMiddleware(
    app: Callable, header_name: str = "X-Correlation-ID"
) -> Callable:
    """Add or forward X-Correlation-ID; fall back to the request ID on scope state."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        correlation_id = get_header(scope, header_name) or scope.get("state", {}).get(
            "request_id"
        )
        correlation_id = sanitize_request_id(correlation_id)
        scope.setdefault("state", {})["correlation_id"] = correlation_id
        await app(scope, receive, with_response_header(send, header_name, correlation_id))

    return asgi_app
