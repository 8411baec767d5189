from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class IncomingRequest(BaseModel):
    """Transport-level view of a webhook delivery."""

    model_config = ConfigDict(frozen=True)

    client_ip: str | None = None
    event_header: str | None = Field(None, description="X-GitHub-Event")
    request_id: str | None = Field(None, description="X-Request-ID")
    github_guid: str | None = Field(None, description="X-GitHub-GUID")
    github_delivery: str | None = Field(None, description="X-GitHub-Delivery")
    form_payload: str | None = Field(None, description="`payload` form or query field")
    body: bytes = b""


class ClassifiedEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_type: str
    uuid: str
    delivery_guid: str | None = None


class DispatchJob(BaseModel):
    """Job envelope pushed verbatim onto a queue."""

    type: str
    payload: str
    uuid: str
    github_guid: str | None = None
    github_event: str


class QueueTarget(str, Enum):
    GATEKEEPER = "gatekeeper"
    SYNC = "sync"


class Dispatch(BaseModel):
    """Outcome of a dispatched event, for logging and tests."""

    target: QueueTarget
    queue: str
    kind: str
    job: DispatchJob
    summary: dict[str, Any] = Field(default_factory=dict)
