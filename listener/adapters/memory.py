"""In-memory job queue, for development and tests."""
import uuid
from dataclasses import dataclass

import structlog

from .base import JobQueue
from ..models import DispatchJob

log = structlog.get_logger()


@dataclass(frozen=True)
class QueuedJob:
    jid: str
    queue: str
    kind: str
    job: DispatchJob


class InMemoryQueue(JobQueue):
    """Keeps pushed jobs in a list."""

    def __init__(self):
        self.jobs: list[QueuedJob] = []

    async def enqueue(self, queue: str, kind: str, job: DispatchJob) -> str:
        jid = uuid.uuid4().hex
        self.jobs.append(QueuedJob(jid=jid, queue=queue, kind=kind, job=job))
        log.info("job.enqueued", jid=jid, queue=queue, kind=kind, adapter="memory")
        return jid

    async def health_check(self) -> bool:
        """In-memory queue is always healthy."""
        return True

    def clear(self):
        self.jobs.clear()
