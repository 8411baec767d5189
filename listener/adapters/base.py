"""Base interface for job queue backends."""
from abc import ABC, abstractmethod

from ..models import DispatchJob


class JobQueue(ABC):
    """Abstract interface for the downstream job queue."""

    @abstractmethod
    async def enqueue(self, queue: str, kind: str, job: DispatchJob) -> str:
        """
        Push a job onto a named queue.

        Args:
            queue: Target queue name
            kind: Job kind understood by the consuming workers
            job: The job envelope

        Returns:
            Backend-assigned job id

        Raises:
            EnqueueFailure: If the backend rejects the job or is unreachable
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the backend is reachable.

        Returns:
            True if backend is healthy, False otherwise
        """
        pass

    async def close(self):
        """Release backend connections."""
        pass
