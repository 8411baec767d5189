"""Event identity from transport headers."""
import uuid

from ..models import ClassifiedEvent, IncomingRequest

DEFAULT_EVENT_TYPE = "push"

# Events that trigger builds
WEBHOOK_EVENTS = frozenset({
    "push",
    "pull_request",
    "create",
    "delete",
    "repository",
})

# App installation lifecycle events, handled by the sync workers
APP_EVENTS = frozenset({
    "installation",
    "installation_repositories",
})

HANDLED_EVENTS = WEBHOOK_EVENTS | APP_EVENTS


def event_type(incoming: IncomingRequest) -> str:
    if incoming.event_header is None:
        return DEFAULT_EVENT_TYPE
    return incoming.event_header


def request_uuid(incoming: IncomingRequest) -> str:
    if incoming.request_id is None:
        return str(uuid.uuid4())
    return incoming.request_id


def delivery_guid(incoming: IncomingRequest) -> str | None:
    """First present of the GUID and Delivery headers."""
    if incoming.github_guid is not None:
        return incoming.github_guid
    return incoming.github_delivery


def classify(incoming: IncomingRequest) -> ClassifiedEvent:
    """Derive event type, request uuid and delivery guid from headers only."""
    return ClassifiedEvent(
        event_type=event_type(incoming),
        uuid=request_uuid(incoming),
        delivery_guid=delivery_guid(incoming),
    )


def is_handled(event: ClassifiedEvent) -> bool:
    return event.event_type in HANDLED_EVENTS


def is_webhook_event(event: ClassifiedEvent) -> bool:
    return event.event_type in WEBHOOK_EVENTS


def is_app_event(event: ClassifiedEvent) -> bool:
    return event.event_type in APP_EVENTS
