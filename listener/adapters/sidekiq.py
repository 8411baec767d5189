"""Sidekiq-compatible job queue on Redis."""
import time
import uuid

import orjson
import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

from .base import JobQueue
from ..errors import EnqueueFailure
from ..models import DispatchJob

log = structlog.get_logger()


class SidekiqQueue(JobQueue):
    """
    Pushes jobs the way a Sidekiq client does.

    Each job is a JSON object on the ``<namespace>:queue:<name>`` list, and
    the queue name is registered in the ``<namespace>:queues`` set so the
    worker fleet and its dashboard can discover it.
    """

    def __init__(
        self,
        redis_url: str,
        workers: dict[str, str],
        namespace: str = "sidekiq",
        timeout: float = 5.0,
    ):
        """
        Initialize the Sidekiq queue.

        Args:
            redis_url: Redis connection URL
            workers: Worker class name per queue name
            namespace: Key prefix shared with the workers
            timeout: Socket connect and read timeout in seconds
        """
        self.redis_url = redis_url
        self.workers = workers
        self.namespace = namespace
        self.timeout = timeout
        self._client: Redis | None = None

    def _get_client(self) -> Redis:
        """Get or create Redis client."""
        if self._client is None:
            self._client = Redis.from_url(
                self.redis_url,
                decode_responses=False,
                socket_connect_timeout=self.timeout,
                socket_timeout=self.timeout,
            )
        return self._client

    def _key(self, *parts: str) -> str:
        return ":".join((self.namespace, *parts)) if self.namespace else ":".join(parts)

    def build_job(self, queue: str, kind: str, job: DispatchJob) -> dict:
        now = time.time()
        return {
            "class": self.workers[queue],
            "queue": queue,
            "args": [kind, job.model_dump()],
            "jid": uuid.uuid4().hex[:24],
            "retry": True,
            "created_at": now,
            "enqueued_at": now,
        }

    async def enqueue(self, queue: str, kind: str, job: DispatchJob) -> str:
        """
        Push a job onto the Sidekiq queue.

        Raises:
            EnqueueFailure: If Redis is unreachable or rejects the push
        """
        sidekiq_job = self.build_job(queue, kind, job)

        try:
            pipe = self._get_client().pipeline(transaction=True)
            pipe.sadd(self._key("queues"), queue)
            pipe.lpush(self._key("queue", queue), orjson.dumps(sidekiq_job))
            await pipe.execute()
        except RedisError as e:
            log.error("redis.enqueue_failed", error=str(e), queue=queue, kind=kind, uuid=job.uuid)
            raise EnqueueFailure(queue, str(e)) from e

        log.info("job.enqueued", jid=sidekiq_job["jid"], queue=queue, kind=kind, adapter="sidekiq")
        return sidekiq_job["jid"]

    async def health_check(self) -> bool:
        """
        Check Redis connection health.

        Returns:
            True if Redis is accessible, False otherwise
        """
        try:
            return bool(await self._get_client().ping())
        except RedisError as e:
            log.warning("redis.health_check_failed", error=str(e))
            return False

    async def close(self):
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
