"""Test configuration and fixtures."""

import threading
from collections.abc import Callable, Iterable
from typing import Any

import pytest

from issue_graph.jira_client.client import JiraApiError
from issue_graph.jira_client.models import SearchPage

RawIssue = dict[str, Any]


def make_raw_issue(
    issue_id: str,
    key: str,
    *,
    summary: str = "",
    description: str | None = None,
    created: str = "2013-01-01T00:00:00.000+0000",
    comments: list[dict[str, Any]] | None = None,
    parent_id: str | None = None,
    links: list[dict[str, Any]] | None = None,
    histories: list[dict[str, Any]] | None = None,
) -> RawIssue:
    """Build an issue as returned by the Jira search endpoint."""
    fields: dict[str, Any] = {
        "summary": summary or f"Issue {key}",
        "description": description,
        "created": created,
        "comment": {
            "maxResults": len(comments or []),
            "comments": comments or [],
        },
        "issuelinks": links or [],
    }
    if parent_id is not None:
        fields["parent"] = {"id": parent_id}
    return {
        "id": issue_id,
        "key": key,
        "fields": fields,
        "changelog": {"histories": histories or []},
    }


def make_inward_link(link_id: str, other_id: str, link_type: str) -> dict[str, Any]:
    """Build an issue-link record naming the inward endpoint."""
    return {
        "id": link_id,
        "type": {"name": "Blocker", "inward": link_type, "outward": "blocks"},
        "inwardIssue": {"id": other_id},
    }


def make_outward_link(link_id: str, other_id: str) -> dict[str, Any]:
    """Build an issue-link record naming only the outward endpoint."""
    return {
        "id": link_id,
        "type": {"name": "Blocker", "inward": "is blocked by", "outward": "blocks"},
        "outwardIssue": {"id": other_id},
    }


def make_link_history(created: str, to_key: str | None) -> dict[str, Any]:
    """Build a changelog entry adding a link to ``to_key``."""
    return {"created": created, "items": [{"field": "Link", "to": to_key}]}


class FakeJira:
    """Thread-safe stand-in for JiraClient serving a fixed list of issues."""

    def __init__(
        self,
        issues: list[RawIssue],
        page_size: int = 2,
        fail_at: Iterable[int] = (),
    ):
        self.issues = issues
        self.page_size = page_size
        self.fail_at = set(fail_at)
        self.requests: list[dict[str, str]] = []
        self._lock = threading.Lock()

    def search(self, params: dict[str, str]) -> SearchPage:
        start = int(params["startAt"])
        with self._lock:
            self.requests.append(params)
        if start in self.fail_at:
            raise JiraApiError("connection reset", url="https://jira.test/search")
        return SearchPage.model_validate(
            {
                "startAt": start,
                "maxResults": self.page_size,
                "total": len(self.issues),
                "issues": self.issues[start : start + self.page_size],
            }
        )

    def requested_offsets(self) -> list[int]:
        with self._lock:
            return sorted(int(p["startAt"]) for p in self.requests)


@pytest.fixture
def raw_issue() -> Callable[..., RawIssue]:
    """Factory for raw Jira issue documents."""
    return make_raw_issue


@pytest.fixture
def inward_link() -> Callable[..., dict[str, Any]]:
    return make_inward_link


@pytest.fixture
def outward_link() -> Callable[..., dict[str, Any]]:
    return make_outward_link


@pytest.fixture
def link_history() -> Callable[..., dict[str, Any]]:
    return make_link_history


@pytest.fixture
def fake_jira() -> type[FakeJira]:
    """The FakeJira class, for tests that need custom datasets."""
    return FakeJira


@pytest.fixture
def linked_dataset() -> list[RawIssue]:
    """Five issues with a sub-task, links seen from both sides and link history.

    - P-2 is a sub-task of P-1
    - P-1 is blocked by P-3 (link 100, reported by both endpoints)
    - P-4 duplicates P-5 (link 101)
    - P-5 is related to itself (link 102)
    """
    return [
        make_raw_issue(
            "1",
            "P-1",
            created="2013-01-01T10:00:00.000+0000",
            links=[make_inward_link("100", "3", "is blocked by")],
            histories=[
                make_link_history("2013-03-01T00:00:00.000+0000", "P-3"),
                make_link_history("2013-02-01T00:00:00.000+0000", "P-3"),
            ],
        ),
        make_raw_issue(
            "2",
            "P-2",
            created="2013-01-02T10:00:00.000+0000",
            parent_id="1",
            comments=[
                {
                    "created": "2013-01-03T10:00:00.000+0000",
                    "body": "first",
                    "author": {"displayName": "Ann", "emailAddress": "ann@x.org"},
                },
                {
                    "created": "2013-01-04T10:00:00.000+0000",
                    "body": "second",
                    "author": {"displayName": "Bob", "emailAddress": "bob@x.org"},
                },
            ],
        ),
        make_raw_issue(
            "3",
            "P-3",
            created="2013-01-03T10:00:00.000+0000",
            links=[make_outward_link("100", "1")],
        ),
        make_raw_issue(
            "4",
            "P-4",
            created="2013-01-04T10:00:00.000+0000",
            links=[make_inward_link("101", "5", "duplicates")],
            histories=[make_link_history("2013-04-01T00:00:00.000+0000", "P-5")],
        ),
        make_raw_issue(
            "5",
            "P-5",
            created="2013-01-05T10:00:00.000+0000",
            links=[
                make_outward_link("101", "4"),
                make_inward_link("102", "5", "relates to"),
            ],
        ),
    ]
