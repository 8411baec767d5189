"""Tests for event summaries and tolerant payload navigation."""
import pytest
from unittest.mock import MagicMock
from listener.core.extractor import Extractor, dig, slug
from listener.core.payload import Decoded, PayloadDecoder
from listener.errors import DecodeFailure, ExtractionFailure
from listener.models import IncomingRequest


PULL_REQUEST = {
    "number": 42,
    "action": "opened",
    "pull_request": {
        "head": {
            "sha": "0123456789abcdef",
            "ref": "feature",
            "repo": {"full_name": "fork/project"},
        },
        "user": {"login": "octocat"},
    },
}


@pytest.fixture
def reporter():
    return MagicMock()


@pytest.fixture
def extractor(reporter):
    return Extractor(reporter)


def test_dig_walks_mappings_and_lists():
    tree = {"a": {"b": [{"c": 1}]}}
    assert dig(tree, "a", "b", 0, "c") == 1
    assert dig(tree, "a", "x", "c") is None
    assert dig(tree, "a", "b", 5) is None
    assert dig("scalar", "a") is None
    assert dig(None, "a") is None


def test_pull_request_summary(extractor, reporter):
    summary = extractor.summarize("pull_request", Decoded(tree=PULL_REQUEST))

    assert summary.fields == {
        "number": 42,
        "action": "opened",
        "source": "fork/project",
        "head": "0123456",
        "ref": "feature",
        "user": "octocat",
    }
    assert not summary.recovered
    reporter.report.assert_not_called()


def test_pull_request_without_head_repo(extractor, reporter):
    tree = {
        "number": 7,
        "action": "synchronize",
        "pull_request": {
            "head": {"sha": "fedcba9876543210", "ref": "fix"},
            "user": {"login": "hubot"},
        },
    }

    summary = extractor.summarize("pull_request", Decoded(tree=tree))

    assert summary.fields["source"] is None
    assert summary.fields["head"] == "fedcba9"
    assert summary.fields["ref"] == "fix"
    assert summary.fields["user"] == "hubot"
    assert summary.fields["number"] == 7
    reporter.report.assert_not_called()


def test_pull_request_missing_head_is_recovered(extractor, reporter):
    summary = extractor.summarize("pull_request", Decoded(tree={"number": 1}), payload='{"number": 1}')

    assert summary.fields == {}
    assert isinstance(summary.failure, ExtractionFailure)
    reporter.report.assert_called_once()
    assert reporter.report.call_args.kwargs["payload"] == '{"number": 1}'


def test_push_summary_without_head_commit(extractor):
    tree = {"ref": "refs/heads/main", "commits": [{"id": "abcdef1234567890"}]}

    summary = extractor.summarize("push", Decoded(tree=tree))

    assert summary.fields == {"ref": "refs/heads/main", "head": None, "commits": "abcdef1"}


def test_push_summary_with_head_commit(extractor):
    tree = {
        "ref": "refs/heads/main",
        "head_commit": {"id": "1111111222222"},
        "commits": [{"id": "aaaaaaabbbb"}, {"id": "1111111222222"}],
    }

    summary = extractor.summarize("push", Decoded(tree=tree))

    assert summary.fields["head"] == "1111111"
    assert summary.fields["commits"] == "aaaaaaa,1111111"


def test_push_without_commits(extractor):
    summary = extractor.summarize("push", Decoded(tree={"ref": "refs/tags/v1"}))
    assert summary.fields == {"ref": "refs/tags/v1", "head": None, "commits": ""}


def test_push_commit_without_id_is_recovered(extractor, reporter):
    summary = extractor.summarize("push", Decoded(tree={"commits": [{"message": "x"}]}))

    assert summary.fields == {}
    assert summary.recovered
    reporter.report.assert_called_once()


def test_non_object_payload_is_recovered(extractor):
    summary = extractor.summarize("push", Decoded(tree=[1, 2, 3]))
    assert summary.fields == {}
    assert isinstance(summary.failure, ExtractionFailure)


def test_decode_failure_is_reported_with_raw_payload(extractor, reporter):
    decoder = PayloadDecoder(IncomingRequest(body=b"not-json"))

    summary = extractor.summarize("push", decoder.decoded, decoder.payload)

    assert summary.fields == {}
    assert isinstance(summary.failure, DecodeFailure)
    error = reporter.report.call_args.args[0]
    assert isinstance(error, DecodeFailure)
    assert reporter.report.call_args.kwargs["payload"] == "not-json"


@pytest.mark.parametrize("event_type", ["create", "installation", "issue_comment"])
def test_other_types_have_empty_summary(extractor, reporter, event_type):
    summary = extractor.summarize(event_type, Decoded(failure=DecodeFailure("bad")))

    assert summary.fields == {}
    assert not summary.recovered
    reporter.report.assert_not_called()


def test_slug_prefers_owner_login():
    tree = {"repository": {"name": "project", "owner": {"login": "octocat", "name": "Octo Cat"}}}
    assert slug(tree) == "octocat/project"


def test_slug_falls_back_to_owner_name():
    tree = {"repository": {"name": "project", "owner": {"name": "octocat"}}}
    assert slug(tree) == "octocat/project"


@pytest.mark.parametrize("tree", [None, {}, {"repository": None}, {"repository": "x"}, [1]])
def test_slug_never_raises(tree):
    assert slug(tree) == "/"
