"""Bulk content item commands."""

from . import publish, sync, unpublish
from .common import BulkOptions
from .sync import SyncOptions

__all__ = ['publish', 'sync', 'unpublish', 'BulkOptions', 'SyncOptions']
