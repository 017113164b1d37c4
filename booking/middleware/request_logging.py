# booking/middleware/request_logging.py
"""
Request timing middleware.

This file is part of the School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

import logging
import time
import uuid

from django.conf import settings

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware:
    """
    Log every request with its status and duration.

    Requests slower than ``SLOW_REQUEST_THRESHOLD_MS`` are logged at WARNING,
    failures that escape the views at ERROR before being re-raised.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.slow_threshold_ms = getattr(settings, 'SLOW_REQUEST_THRESHOLD_MS', 1000)

    def __call__(self, request):
        request_id = uuid.uuid4().hex[:8]
        start = time.monotonic()
        try:
            response = self.get_response(request)
        except Exception:
            duration_ms = (time.monotonic() - start) * 1000
            logger.error(
                f"[{request_id}] {request.method} {request.path} failed after {duration_ms:.0f}ms"
            )
            raise

        duration_ms = (time.monotonic() - start) * 1000
        message = (
            f"[{request_id}] {request.method} {request.path} -> {response.status_code} "
            f"in {duration_ms:.0f}ms"
        )
        if duration_ms >= self.slow_threshold_ms:
            logger.warning(f"Slow request {message}")
        else:
            logger.info(message)
        response['X-Request-ID'] = request_id
        return response
