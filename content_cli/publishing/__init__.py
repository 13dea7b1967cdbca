"""Bulk publish, unpublish and sync coordinators."""

from .publishing_service import ContentItemPublishingService
from .publishing_job_service import ContentItemPublishingJobService
from .unpublishing_service import ContentItemUnpublishingService
from .sync_service import ContentItemSyncService

__all__ = [
    'ContentItemPublishingService',
    'ContentItemPublishingJobService',
    'ContentItemUnpublishingService',
    'ContentItemSyncService',
]
