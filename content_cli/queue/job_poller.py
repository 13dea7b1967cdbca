"""Polling for server-side asynchronous jobs.

Turns "create a job, then poll until it is done" into a single awaitable.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Protocol, TypeVar

from content_cli.config import get_settings

logger = logging.getLogger(__name__)


class JobHandle(Protocol):
    """Anything with a job id and a terminal classification."""
    id: str

    @property
    def is_terminal(self) -> bool: ...


H = TypeVar("H", bound=JobHandle)


class JobPollTimeoutError(Exception):
    """Raised when a job is still not terminal after the allowed attempts."""

    def __init__(self, job_id: str, attempts: int, last_handle: Any = None):
        self.job_id = job_id
        self.attempts = attempts
        self.last_handle = last_handle
        super().__init__(f"Job {job_id} did not finish after {attempts} status checks")


@dataclass
class PollPolicy:
    """Polling policy configuration."""
    delay_ms: int = 200
    max_attempts: Optional[int] = None  # None = poll until the job is terminal

    @classmethod
    def from_settings(cls) -> "PollPolicy":
        settings = get_settings()
        return cls(delay_ms=settings.job_poll_delay_ms, max_attempts=settings.job_poll_max_attempts)

    def allows(self, attempts: int) -> bool:
        """Whether another status fetch is allowed after `attempts` fetches."""
        return self.max_attempts is None or attempts < self.max_attempts


class AsyncJobPoller:
    """Re-fetch a job with a fixed delay until it reaches a terminal status."""

    def __init__(self, policy: Optional[PollPolicy] = None):
        self.policy = policy or PollPolicy.from_settings()

    async def poll_until_terminal(self, job_id: str, fetch_status: Callable[[str], Awaitable[H]]) -> H:
        """
        Poll a job until it is terminal.

        Every fetch after the first uses the id returned by the previous one,
        since the server may hand back an updated id.

        Args:
            job_id: Id of the job to poll
            fetch_status: Coroutine function returning the current job handle

        Returns:
            The terminal job handle

        Raises:
            JobPollTimeoutError: If the policy's attempt cap is reached first
        """
        handle = await fetch_status(job_id)
        attempts = 1

        while not handle.is_terminal:
            if not self.policy.allows(attempts):
                logger.warning(f"Job {handle.id} still not finished after {attempts} checks")
                raise JobPollTimeoutError(handle.id, attempts, handle)

            await asyncio.sleep(self.policy.delay_ms / 1000)
            handle = await fetch_status(handle.id)
            attempts += 1

        logger.debug(f"Job {handle.id} reached a terminal status after {attempts} checks")
        return handle
