"""Server-side job models: publishing jobs and deep sync jobs.

The server may report states this client does not know about. Those are kept
as plain strings: an unknown publishing state counts as still running, an
unknown sync status counts as finished.
"""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class PublishingJobState(str, Enum):
    """Publishing job states."""
    PREPARING = "PREPARING"
    WAITING = "WAITING"
    PUBLISHING = "PUBLISHING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in PUBLISHING_JOB_TERMINAL_STATES


PUBLISHING_JOB_TERMINAL_STATES = frozenset([PublishingJobState.COMPLETED, PublishingJobState.FAILED])


class SyncJobStatus(str, Enum):
    """Deep sync job states."""
    CREATED = "CREATED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self not in SYNC_JOB_PENDING_STATUSES


SYNC_JOB_PENDING_STATUSES = frozenset([SyncJobStatus.CREATED, SyncJobStatus.IN_PROGRESS])


def state_value(state: Union[Enum, str]) -> str:
    """Wire value of a known enum member or an unrecognised state string."""
    return state.value if isinstance(state, Enum) else state


class _ApiModel(BaseModel):
    """Base for wire models: camelCase aliases, unknown fields kept."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class PublishingJob(_ApiModel):
    """A publishing job started for one content item."""
    id: str
    state: Union[PublishingJobState, str] = Field(default=PublishingJobState.PREPARING, union_mode="left_to_right")
    publish_error_status: Optional[str] = Field(default=None, alias="publishErrorStatus")
    comment: Optional[str] = None
    created_by: Optional[str] = Field(default=None, alias="createdBy")
    created_date: Optional[str] = Field(default=None, alias="createdDate")

    @property
    def is_terminal(self) -> bool:
        return self.state in PUBLISHING_JOB_TERMINAL_STATES

    @property
    def is_failed(self) -> bool:
        return self.state == PublishingJobState.FAILED


class SyncJob(_ApiModel):
    """A hub job, as returned by the jobs endpoint."""
    id: str
    status: Union[SyncJobStatus, str] = Field(default=SyncJobStatus.CREATED, union_mode="left_to_right")
    label: Optional[str] = None
    errors: Optional[list[Any]] = None
    job_type: Optional[str] = Field(default=None, alias="jobType")
    created_date: Optional[str] = Field(default=None, alias="createdDate")

    @property
    def is_terminal(self) -> bool:
        return self.status not in SYNC_JOB_PENDING_STATUSES

    @property
    def is_failed(self) -> bool:
        return self.status == SyncJobStatus.FAILED


class DeepSyncInput(_ApiModel):
    root_content_item_ids: list[str] = Field(alias="rootContentItemIds")


class DeepSyncJobRequest(_ApiModel):
    """Payload for creating a deep sync job on the source hub."""
    label: str
    ignore_schema_validation: bool = Field(default=True, alias="ignoreSchemaValidation")
    destination_hub_id: str = Field(alias="destinationHubId")
    input: DeepSyncInput

    @classmethod
    def for_content_item(cls, destination_hub_id: str, content_item_id: str, label: str) -> "DeepSyncJobRequest":
        return cls(
            label=label,
            ignore_schema_validation=True,
            destination_hub_id=destination_hub_id,
            input=DeepSyncInput(root_content_item_ids=[content_item_id]),
        )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class CreatedJob(_ApiModel):
    """Response to a job creation request."""
    job_id: str = Field(alias="jobId")
