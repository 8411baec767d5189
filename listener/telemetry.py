"""Crash reporting for recovered payload errors."""
import structlog

from .errors import RecoveredError
from .metrics import Metrics

log = structlog.get_logger()


class CrashReporter:
    """
    Single sink for every failure the core recovers from.

    Logs the error together with the raw payload and counts it, so a
    malformed delivery stays diagnosable while the request still succeeds.
    """

    def __init__(self, metrics: Metrics | None = None):
        self.metrics = metrics

    def report(self, error: RecoveredError, payload: str | None = None, **context):
        log.error("payload.error", error=str(error), error_type=type(error).__name__, exc_info=error, **context)
        log.error("payload.causing_error", payload=payload, **context)
        if self.metrics is not None:
            self.metrics.record_recovered_error(type(error).__name__)
