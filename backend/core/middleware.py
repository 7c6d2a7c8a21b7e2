import logging
import time

from django.conf import settings
from django.db import connection

logger = logging.getLogger(__name__)


class _QueryCounter:
    """Database execute wrapper that only counts executed statements."""

    def __init__(self):
        self.count = 0

    def __call__(self, execute, sql, params, many, context):
        self.count += 1
        return execute(sql, params, many, context)


class RequestLoggingMiddleware:
    """
    Logs one structured record per request with status, duration and the
    number of database queries it needed.

    Severity escalates for server errors, slow requests and query-heavy
    requests so N+1 regressions in budget reconciliation show up in the logs.
    """

    QUERY_THRESHOLDS = {"high": 50, "medium": 25}

    def __init__(self, get_response):
        self.get_response = get_response
        self.slow_request_seconds = getattr(settings, "SLOW_REQUEST_SECONDS", 1.0)

    def __call__(self, request):
        counter = _QueryCounter()
        started = time.monotonic()

        with connection.execute_wrapper(counter):
            response = self.get_response(request)

        duration = time.monotonic() - started
        self._log_request(request, response, counter.count, duration)
        return response

    def _log_request(self, request, response, query_count, duration):
        user = getattr(request, "user", None)
        extra_context = {
            "request_path": request.path,
            "request_method": request.method,
            "status_code": response.status_code,
            "user_id": user.id if user is not None and user.is_authenticated else None,
            "query_count": query_count,
            "duration_ms": round(duration * 1000, 2),
            "action": "request_completed",
            "component": "RequestLoggingMiddleware",
        }

        if response.status_code >= 500:
            logger.error(
                "Request failed with server error",
                extra={**extra_context, "severity": "high"},
            )
        elif (
            query_count >= self.QUERY_THRESHOLDS["high"]
            or duration >= self.slow_request_seconds
        ):
            logger.warning(
                "Slow or query-heavy request",
                extra={
                    **extra_context,
                    "severity": "medium",
                    "query_threshold": self.QUERY_THRESHOLDS["high"],
                    "recommendation": "Check for N+1 queries in list endpoints",
                },
            )
        elif query_count >= self.QUERY_THRESHOLDS["medium"]:
            logger.info("Request completed", extra={**extra_context, "severity": "low"})
        else:
            logger.debug("Request completed", extra=extra_context)
