"""Data models for the content CLI."""

from .content import ContentItem, ContentItemPublishingStatus, ContentItemStatus, Hub
from .jobs import (
    CreatedJob,
    DeepSyncJobRequest,
    PublishingJob,
    PublishingJobState,
    SyncJob,
    SyncJobStatus,
    state_value,
)

__all__ = [
    'ContentItem',
    'ContentItemPublishingStatus',
    'ContentItemStatus',
    'Hub',
    'CreatedJob',
    'DeepSyncJobRequest',
    'PublishingJob',
    'PublishingJobState',
    'SyncJob',
    'SyncJobStatus',
    'state_value',
]
