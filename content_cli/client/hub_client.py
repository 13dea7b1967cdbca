"""Async client for the content management API.

Covers only the calls the bulk commands need:
- OAuth2 client-credentials or personal access token auth
- Content item lookup and repository/folder listing
- Publish / unpublish and publishing job lookup
- Deep sync job creation and hub job lookup
"""

import asyncio
import logging
from typing import Any, Optional

import httpx

from content_cli.config import Settings, get_settings
from content_cli.models import (
    ContentItem,
    ContentItemStatus,
    CreatedJob,
    DeepSyncJobRequest,
    Hub,
    PublishingJob,
    SyncJob,
)

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


class ContentHubApiError(Exception):
    """Raised for non-2xx responses from the management API."""

    def __init__(self, status_code: int, message: str, url: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.url = url
        super().__init__(f"HTTP {status_code}: {message}" + (f" ({url})" if url else ""))


class ContentHubClient:
    """Thin async wrapper around the management API."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        pat_token: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._settings = settings or get_settings()
        self.api_url = self._settings.api_url.rstrip("/")
        self.auth_url = self._settings.auth_url.rstrip("/")
        self.client_id = client_id or self._settings.client_id
        self.client_secret = client_secret or self._settings.client_secret
        self.pat_token = pat_token or self._settings.pat_token

        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(self._settings.http_timeout_seconds, connect=30.0)
        )
        self._token: Optional[str] = None
        self._token_lock = asyncio.Lock()

    async def __aenter__(self) -> "ContentHubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ==================== Auth ====================

    async def _auth_header(self) -> str:
        if self.pat_token:
            return f"Bearer {self.pat_token}"

        async with self._token_lock:
            if self._token is None:
                self._token = await self._fetch_token()
        return f"Bearer {self._token}"

    async def _fetch_token(self) -> str:
        if not self.client_id or not self.client_secret:
            raise ContentHubApiError(401, "No credentials configured (client id/secret or PAT token)")

        response = await self._http.post(
            f"{self.auth_url}/oauth/token",
            data={
                "grant_type": "client_credentials",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
            },
        )
        if response.is_error:
            raise ContentHubApiError(response.status_code, "Authentication failed", f"{self.auth_url}/oauth/token")

        logger.debug("Obtained access token")
        return response.json()["access_token"]

    # ==================== Transport ====================

    def _url(self, path_or_href: str) -> str:
        if path_or_href.startswith("http://") or path_or_href.startswith("https://"):
            return path_or_href
        return f"{self.api_url}/{path_or_href.lstrip('/')}"

    async def _request(self, method: str, path_or_href: str, **kwargs) -> httpx.Response:
        url = self._url(path_or_href)
        headers = kwargs.pop("headers", {})
        headers["Authorization"] = await self._auth_header()

        response = await self._http.request(method, url, headers=headers, **kwargs)
        if response.status_code == 401 and not self.pat_token:
            # Token expired mid-run, fetch a new one once
            async with self._token_lock:
                self._token = None
            headers["Authorization"] = await self._auth_header()
            response = await self._http.request(method, url, headers=headers, **kwargs)

        if response.is_error:
            raise ContentHubApiError(response.status_code, _error_message(response), url)
        return response

    # ==================== Content ====================

    async def get_hub(self, hub_id: str) -> Hub:
        response = await self._request("GET", f"hubs/{hub_id}")
        return Hub.model_validate(response.json())

    async def get_content_item(self, content_item_id: str) -> ContentItem:
        response = await self._request("GET", f"content-items/{content_item_id}")
        return ContentItem.model_validate(response.json())

    async def list_content_items(
        self,
        repository_id: Optional[str] = None,
        folder_id: Optional[str] = None,
        status: ContentItemStatus = ContentItemStatus.ACTIVE,
    ) -> list[ContentItem]:
        """
        List every content item in a repository or folder, walking all pages.

        A folder takes precedence over a repository.
        """
        if folder_id:
            path = f"folders/{folder_id}/content-items"
        elif repository_id:
            path = f"content-repositories/{repository_id}/content-items"
        else:
            raise ValueError("Either repository_id or folder_id is required")

        items: list[ContentItem] = []
        page = 0
        while True:
            response = await self._request(
                "GET", path, params={"page": page, "size": PAGE_SIZE, "status": status.value}
            )
            body = response.json()
            embedded = body.get("_embedded", {}).get("content-items", [])
            items.extend(ContentItem.model_validate(entry) for entry in embedded)

            total_pages = body.get("page", {}).get("totalPages", 1)
            page += 1
            if page >= total_pages:
                break

        logger.debug(f"Listed {len(items)} content items from {path}")
        return items

    # ==================== Publishing ====================

    async def publish_content_item(self, item: ContentItem) -> str:
        """
        Start publishing a content item.

        Returns:
            Location of the publishing job
        """
        href = item.link("publish") or f"content-items/{item.id}/publish"
        response = await self._request("POST", href)

        location = response.headers.get("Location")
        if not location:
            raise ContentHubApiError(
                response.status_code, "Expected a publishing job location in the response", self._url(href)
            )
        return location

    async def get_publishing_job_by_location(self, location: str) -> PublishingJob:
        response = await self._request("GET", location)
        return PublishingJob.model_validate(response.json())

    async def get_publishing_job(self, job_id: str) -> PublishingJob:
        response = await self._request("GET", f"publishing-jobs/{job_id}")
        return PublishingJob.model_validate(response.json())

    async def unpublish_content_item(self, item: ContentItem) -> None:
        href = item.link("unpublish") or f"content-items/{item.id}/unpublish"
        await self._request("POST", href)

    # ==================== Jobs ====================

    async def create_deep_sync_job(self, hub_id: str, request: DeepSyncJobRequest) -> CreatedJob:
        response = await self._request("POST", f"hubs/{hub_id}/jobs/deep-sync", json=request.to_payload())
        return CreatedJob.model_validate(response.json())

    async def get_job(self, hub_id: str, job_id: str) -> SyncJob:
        response = await self._request("GET", f"hubs/{hub_id}/jobs/{job_id}")
        return SyncJob.model_validate(response.json())

    def hub(self, hub_id: str) -> "HubResource":
        return HubResource(self, hub_id)


class HubResource:
    """Job operations bound to one hub."""

    def __init__(self, client: ContentHubClient, hub_id: str):
        self.client = client
        self.id = hub_id

    async def create_deep_sync_job(self, request: DeepSyncJobRequest) -> CreatedJob:
        return await self.client.create_deep_sync_job(self.id, request)

    async def get_job(self, job_id: str) -> SyncJob:
        return await self.client.get_job(self.id, job_id)


def _error_message(response: httpx.Response) -> str:
    try:
        body: Any = response.json()
    except ValueError:
        return response.text[:500] or response.reason_phrase

    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            return "; ".join(str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors)
        if "message" in body:
            return str(body["message"])
    return str(body)[:500]
