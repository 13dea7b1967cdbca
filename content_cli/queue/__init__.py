"""Queue module for rate-limited bulk operations.

Features:
- Burstable token-bucket queue with a concurrency limit
- Fixed-delay polling of server-side jobs
"""

from .burstable_queue import BurstableQueue
from .job_poller import AsyncJobPoller, JobPollTimeoutError, PollPolicy

__all__ = [
    'BurstableQueue',
    'AsyncJobPoller',
    'JobPollTimeoutError',
    'PollPolicy',
]
