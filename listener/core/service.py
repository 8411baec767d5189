"""Webhook listener service: validation, classification and dispatch."""
import structlog

from ..adapters.base import JobQueue
from ..adapters.memory import InMemoryQueue
from ..adapters.sidekiq import SidekiqQueue
from ..config import ListenerConfig, Settings
from ..errors import MissingPayload, RejectedSource
from ..metrics import Metrics
from ..models import Dispatch, IncomingRequest
from ..telemetry import CrashReporter
from .classifier import classify
from .dispatcher import Dispatcher
from .extractor import Extractor
from .payload import PayloadDecoder
from .validator import SourceValidator

log = structlog.get_logger()


class Listener:
    """Entry point of the core; keeps no state between requests."""

    def __init__(
        self,
        config: ListenerConfig,
        queue: JobQueue,
        metrics: Metrics | None = None,
        reporter: CrashReporter | None = None,
    ):
        self.config = config
        self.queue = queue
        self.metrics = metrics
        self.validator = SourceValidator(config, metrics)
        self.dispatcher = Dispatcher(
            config,
            queue,
            Extractor(reporter or CrashReporter(metrics)),
            metrics,
        )

    async def receive(self, incoming: IncomingRequest) -> Dispatch | None:
        """
        Accept a delivery and dispatch it.

        Returns:
            The dispatch record, or None if the event was accepted but skipped

        Raises:
            RejectedSource: If IP validation is on and the address is not allowed
            MissingPayload: If the request carries no payload
            EnqueueFailure: If the queue backend fails
        """
        valid = self.validator.check(incoming.client_ip)
        if self.config.ip_validation and not valid:
            raise RejectedSource(incoming.client_ip)

        decoder = PayloadDecoder(incoming)
        if decoder.payload is None:
            if self.metrics is not None:
                self.metrics.record_no_payload()
            raise MissingPayload()

        event = classify(incoming)
        structlog.contextvars.bind_contextvars(uuid=event.uuid)
        return await self.dispatcher.dispatch(event, decoder)

    async def health_check(self) -> bool:
        return await self.queue.health_check()


def create_queue(settings: Settings) -> JobQueue:
    """
    Create the queue adapter based on configuration.

    Returns:
        JobQueue instance based on QUEUE_ADAPTER setting
    """
    if settings.QUEUE_ADAPTER == "sidekiq":
        if not settings.REDIS_URL:
            log.warning(
                "adapter.fallback",
                requested="sidekiq",
                actual="memory",
                reason="REDIS_URL not configured"
            )
            return InMemoryQueue()

        log.info("adapter.selected", type="sidekiq", url=str(settings.REDIS_URL))
        return SidekiqQueue(
            redis_url=str(settings.REDIS_URL),
            workers={
                settings.GATEKEEPER_QUEUE: settings.GATEKEEPER_WORKER,
                settings.SYNC_QUEUE: settings.SYNC_WORKER,
            },
            namespace=settings.REDIS_NAMESPACE,
            timeout=settings.REDIS_TIMEOUT,
        )
    else:
        log.info("adapter.selected", type="memory")
        return InMemoryQueue()


def create_listener(settings: Settings, metrics: Metrics | None = None) -> Listener:
    return Listener(
        config=ListenerConfig.from_settings(settings),
        queue=create_queue(settings),
        metrics=metrics,
    )
