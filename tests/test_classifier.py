"""Tests for header-based event classification."""
import uuid
from listener.core.classifier import APP_EVENTS, HANDLED_EVENTS, WEBHOOK_EVENTS, classify, is_handled
from listener.models import IncomingRequest


def test_defaults_when_headers_missing():
    event = classify(IncomingRequest(body=b"{}"))

    assert event.event_type == "push"
    assert uuid.UUID(event.uuid)
    assert event.delivery_guid is None


def test_generated_uuid_is_fresh_per_request():
    first = classify(IncomingRequest())
    second = classify(IncomingRequest())
    assert first.uuid != second.uuid


def test_headers_are_used_verbatim():
    event = classify(
        IncomingRequest(
            event_header="pull_request",
            request_id="req-1",
            github_delivery="delivery-1",
        )
    )

    assert event.event_type == "pull_request"
    assert event.uuid == "req-1"
    assert event.delivery_guid == "delivery-1"


def test_guid_header_wins_over_delivery_header():
    event = classify(IncomingRequest(github_guid="guid-1", github_delivery="delivery-1"))
    assert event.delivery_guid == "guid-1"


def test_classification_ignores_payload():
    event = classify(IncomingRequest(event_header="create", body=b"not-json"))
    assert event.event_type == "create"


def test_handled_set_is_closed():
    assert HANDLED_EVENTS == {
        "push",
        "pull_request",
        "create",
        "delete",
        "repository",
        "installation",
        "installation_repositories",
    }
    assert WEBHOOK_EVENTS.isdisjoint(APP_EVENTS)


def test_membership_is_case_sensitive():
    assert not is_handled(classify(IncomingRequest(event_header="Push")))
    assert not is_handled(classify(IncomingRequest(event_header="issue_comment")))
    assert is_handled(classify(IncomingRequest(event_header="installation")))
