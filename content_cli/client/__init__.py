"""Management API client."""

from .hub_client import ContentHubApiError, ContentHubClient, HubResource

__all__ = ['ContentHubApiError', 'ContentHubClient', 'HubResource']
