"""Best-effort event summaries for log lines."""
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..errors import ExtractionFailure, RecoveredError
from ..telemetry import CrashReporter
from .payload import Decoded

SHORT_SHA = 7


def dig(tree: Any, *path: str | int) -> Any:
    """Walk mappings and sequences, returning None at the first missing step."""
    current = tree
    for key in path:
        if isinstance(current, Mapping):
            current = current.get(key)
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)) and isinstance(key, int):
            try:
                current = current[key]
            except IndexError:
                return None
        else:
            return None
        if current is None:
            return None
    return current


def _mapping(tree: Any, *path: str) -> Mapping:
    value = dig(tree, *path) if path else tree
    if not isinstance(value, Mapping):
        raise ExtractionFailure(f"Expected an object at {'.'.join(path) or 'payload root'}")
    return value


def _short_sha(value: Any, where: str) -> str:
    if not isinstance(value, str):
        raise ExtractionFailure(f"Expected a commit sha at {where}")
    return value[:SHORT_SHA]


def pull_request_details(tree: Any) -> dict[str, Any]:
    _mapping(tree)
    head = _mapping(tree, "pull_request", "head")
    user = _mapping(tree, "pull_request", "user")
    return {
        "number": dig(tree, "number"),
        "action": dig(tree, "action"),
        "source": dig(head, "repo", "full_name"),
        "head": _short_sha(head.get("sha"), "pull_request.head.sha"),
        "ref": head.get("ref"),
        "user": user.get("login"),
    }


def push_details(tree: Any) -> dict[str, Any]:
    _mapping(tree)
    head_commit = dig(tree, "head_commit", "id")

    commits = dig(tree, "commits") or []
    if not isinstance(commits, list):
        raise ExtractionFailure("Expected a list at commits")

    return {
        "ref": dig(tree, "ref"),
        "head": head_commit[:SHORT_SHA] if isinstance(head_commit, str) else None,
        "commits": ",".join(
            _short_sha(dig(commit, "id"), f"commits.{index}.id")
            for index, commit in enumerate(commits)
        ),
    }


SUMMARIZERS = {
    "pull_request": pull_request_details,
    "push": push_details,
}


def slug(tree: Any) -> str:
    """``owner/name`` of the payload's repository; missing parts are blank."""
    owner = dig(tree, "repository", "owner") or {}
    login = dig(owner, "login") or dig(owner, "name") or ""
    name = dig(tree, "repository", "name") or ""
    return f"{login}/{name}"


@dataclass(frozen=True)
class Summary:
    """Summary fields, plus the failure when they had to be dropped."""

    fields: dict[str, Any] = field(default_factory=dict)
    failure: RecoveredError | None = None

    @property
    def recovered(self) -> bool:
        return self.failure is not None


class Extractor:
    """
    Builds per-type summaries without ever failing the request.

    Decode and extraction failures are handed to the crash reporter with
    the raw payload and replaced by an empty summary.
    """

    def __init__(self, reporter: CrashReporter):
        self.reporter = reporter

    def summarize(self, event_type: str, decoded: Decoded, payload: str | None = None) -> Summary:
        summarizer = SUMMARIZERS.get(event_type)
        if summarizer is None:
            return Summary()

        if decoded.failure is not None:
            return self._recover(decoded.failure, event_type, payload)

        try:
            return Summary(fields=summarizer(decoded.tree))
        except ExtractionFailure as e:
            return self._recover(e, event_type, payload)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            failure = ExtractionFailure(f"Unexpected payload shape: {e!r}")
            failure.__cause__ = e
            return self._recover(failure, event_type, payload)

    def _recover(self, failure: RecoveredError, event_type: str, payload: str | None) -> Summary:
        self.reporter.report(failure, payload=payload, event_type=event_type)
        return Summary(failure=failure)
