"""Error taxonomy for the webhook listener."""


class ListenerError(Exception):
    """Base class for listener errors."""


class ConfigurationError(ListenerError):
    """Invalid process configuration, raised at startup."""


class RequestRejected(ListenerError):
    """A request that ends with a non-success response code."""

    status_code = 400


class RejectedSource(RequestRejected):
    """The caller's address is not in the allow-list."""

    status_code = 403

    def __init__(self, address: str | None):
        super().__init__(f"Payload sent from an invalid IP ({address})")
        self.address = address


class MissingPayload(RequestRejected):
    """No payload string could be obtained from the request."""

    status_code = 422

    def __init__(self):
        super().__init__("Request carries no payload")


class RecoveredError(ListenerError):
    """A payload problem that degrades the logged summary but never the request."""


class DecodeFailure(RecoveredError):
    """The payload string is not valid JSON."""


class ExtractionFailure(RecoveredError):
    """The decoded payload lacks an expected nested field."""


class EnqueueFailure(ListenerError):
    """The queue backend rejected the job or could not be reached."""

    def __init__(self, queue: str, reason: str):
        super().__init__(f"Failed to enqueue job on {queue}: {reason}")
        self.queue = queue
        self.reason = reason
