"""Content item and hub models."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ContentItemStatus(str, Enum):
    """Lifecycle status of a content item."""
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"
    DELETED = "DELETED"


class ContentItemPublishingStatus(str, Enum):
    """Publishing status of a content item."""
    NONE = "NONE"
    EARLY = "EARLY"
    LATEST = "LATEST"
    UNPUBLISHED = "UNPUBLISHED"


# Only items with a live published version can be unpublished
UNPUBLISHABLE_STATUSES = frozenset([ContentItemPublishingStatus.EARLY, ContentItemPublishingStatus.LATEST])


class ContentItem(BaseModel):
    """A content item as returned by the management API."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    label: str = ""
    status: ContentItemStatus = ContentItemStatus.ACTIVE
    publishing_status: Optional[ContentItemPublishingStatus] = Field(default=None, alias="publishingStatus")
    content_repository_id: Optional[str] = Field(default=None, alias="contentRepositoryId")
    folder_id: Optional[str] = Field(default=None, alias="folderId")
    version: Optional[int] = None
    links: dict[str, Any] = Field(default_factory=dict, alias="_links")

    def link(self, name: str) -> Optional[str]:
        """Resolve a HAL link href, dropping any URI template suffix."""
        entry = self.links.get(name)
        if not entry:
            return None
        href = entry.get("href") if isinstance(entry, dict) else None
        if not href:
            return None
        return href.split("{", 1)[0]

    @property
    def can_unpublish(self) -> bool:
        return self.publishing_status in UNPUBLISHABLE_STATUSES


class Hub(BaseModel):
    """A hub (environment)."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    name: Optional[str] = None
    label: Optional[str] = None
