"""Custom logging configuration to reduce noise from activity and polling endpoints."""

import logging
from typing import Optional, Set


class SuppressPollingEndpointsFilter(logging.Filter):
    """Filter that suppresses access logs for high-frequency endpoints.

    Editors post an activity signal on every keystroke and poll for open
    check-ins; successful calls to those routes would drown the access log.
    """

    SUPPRESSED_PATTERNS: Set[str] = {
        "/activity",
        "/checkin HTTP",
        "/status HTTP",
        "GET /api/healthz",
        "OPTIONS /api/",
    }

    SUCCESS_CODES: Set[int] = {200, 202}

    def filter(self, record: logging.LogRecord) -> bool:
        """Return False to suppress, True to keep."""

        status_code = self._extract_status_code(record)
        message: Optional[str] = None

        if status_code is None:
            # AccessFormatter builds "200 OK" later, so fall back to raw string
            message = record.getMessage()
            if not any(f" {code}" in message for code in self.SUCCESS_CODES):
                return True
        elif status_code not in self.SUCCESS_CODES:
            return True

        if message is None:
            message = record.getMessage()

        for pattern in self.SUPPRESSED_PATTERNS:
            if pattern in message:
                return False

        return True

    @staticmethod
    def _extract_status_code(record: logging.LogRecord) -> Optional[int]:
        """Extract numeric status code from uvicorn access log record."""
        args = getattr(record, "args", None)
        if not args:
            return None

        status_candidate = args[-1]

        try:
            return int(status_candidate)
        except (TypeError, ValueError):
            return None


def configure_logging():
    """Configure application logging with activity/polling suppression."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger = logging.getLogger(__name__)

    access_logger = logging.getLogger("uvicorn.access")
    filter_instance = SuppressPollingEndpointsFilter()

    for handler in access_logger.handlers:
        handler.addFilter(filter_instance)

    # Suppress external library INFO/DEBUG logs (keep WARNING+)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)

    # Scheduler decisions (arm / cancel / fire) are the interesting part
    logging.getLogger("app.services.scheduler").setLevel(logging.DEBUG)
    logging.getLogger("app.services.changes").setLevel(logging.INFO)

    logging.getLogger("uvicorn.error").setLevel(logging.INFO)

    logger.info(
        f"Logging configured: {len(SuppressPollingEndpointsFilter.SUPPRESSED_PATTERNS)} "
        "high-frequency patterns suppressed, scheduler logging verbose"
    )
