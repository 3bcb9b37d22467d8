"""HTTP middleware: timeout, request ID, correlation ID.

Applied in main app; order matters (last added = outermost).
"""

from arthub.middleware.correlation_id import CorrelationIDMiddleware
from arthub.middleware.request_id import RequestIDMiddleware
from arthub.middleware.timeout import TimeoutMiddleware

__all__ = [
    "CorrelationIDMiddleware",
    "RequestIDMiddleware",
    "TimeoutMiddleware",
]
