"""Routing of classified events onto the downstream queues."""
import structlog

from ..adapters.base import JobQueue
from ..config import ListenerConfig
from ..metrics import Metrics
from ..models import ClassifiedEvent, Dispatch, DispatchJob, QueueTarget
from .classifier import is_app_event, is_handled, is_webhook_event
from .extractor import Extractor, slug
from .payload import PayloadDecoder

log = structlog.get_logger()

BUILD_REQUEST = "build_request"

# Sync job kind per app lifecycle event
SYNC_KINDS = {
    "installation": "install",
    "installation_repositories": "repos-sync",
}


class Dispatcher:
    """Maps a classified event to at most one queued job."""

    def __init__(
        self,
        config: ListenerConfig,
        queue: JobQueue,
        extractor: Extractor,
        metrics: Metrics | None = None,
    ):
        self.config = config
        self.queue = queue
        self.extractor = extractor
        self.metrics = metrics

    async def dispatch(self, event: ClassifiedEvent, decoder: PayloadDecoder) -> Dispatch | None:
        """
        Dispatch a handled event.

        Returns:
            The dispatch record, or None when the event type is not handled
            or no sync job exists for it

        Raises:
            EnqueueFailure: If the queue backend fails
        """
        if not is_handled(event):
            log.debug("event.skipped", type=event.event_type, uuid=event.uuid)
            return None

        log.debug("event.payload", uuid=event.uuid, payload=decoder.payload)

        summary = self.extractor.summarize(event.event_type, decoder.decoded, decoder.payload)
        basics = {
            "uuid": event.uuid,
            "delivery_guid": event.delivery_guid,
            "type": event.event_type,
        }
        if is_webhook_event(event):
            basics["repository"] = slug(decoder.decoded.tree)
        log.info("event.received", **{**basics, **summary.fields})

        if self.metrics is not None:
            self.metrics.record_event(event.event_type)

        if is_webhook_event(event):
            target, queue_name, kind = QueueTarget.GATEKEEPER, self.config.gatekeeper_queue, BUILD_REQUEST
        elif is_app_event(event):
            kind = SYNC_KINDS.get(event.event_type)
            if kind is None:
                log.warning("event.no_sync_job", type=event.event_type, uuid=event.uuid)
                return None
            target, queue_name = QueueTarget.SYNC, self.config.sync_queue
        else:
            return None

        job = build_job(event, decoder.payload)
        await self.queue.enqueue(queue_name, kind, job)
        if self.metrics is not None:
            self.metrics.record_job(queue_name, kind)

        return Dispatch(target=target, queue=queue_name, kind=kind, job=job, summary=summary.fields)


def build_job(event: ClassifiedEvent, payload: str) -> DispatchJob:
    return DispatchJob(
        type=event.event_type,
        payload=payload,
        uuid=event.uuid,
        github_guid=event.delivery_guid,
        github_event=event.event_type,
    )
