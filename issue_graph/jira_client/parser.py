"""Convert raw Jira search records into issue graph models.

All functions are pure and safe to call from any worker thread.
"""

from datetime import datetime

from ..models import Comment, Id, Issue, Link
from ..utils.date_parser import parse_jira_datetime
from .models import JiraIssueLinkRecord, JiraIssueRecord, JiraRawComment

LINK_FIELD = "Link"


def parse_comment(raw: JiraRawComment) -> Comment:
    """Convert a raw Jira comment."""
    return Comment(
        author_name=raw.author.display_name,
        author_email=raw.author.email_address,
        created=parse_jira_datetime(raw.created),
        body=raw.body,
    )


def parse_issue(record: JiraIssueRecord) -> Issue:
    """Convert a raw Jira issue.

    Comments keep the order returned by the API (chronological).
    """
    fields = record.fields
    return Issue(
        id=record.id,
        name=record.key,
        title=fields.summary,
        body=fields.description,
        created=parse_jira_datetime(fields.created),
        comments=tuple(parse_comment(c) for c in fields.comment.comments),
    )


def parent_id(record: JiraIssueRecord) -> Id | None:
    """Id of the parent issue, if the issue is a sub-task."""
    parent = record.fields.parent
    if parent is None or not parent.id:
        return None
    return parent.id


def inward_link(source: Id, raw: JiraIssueLinkRecord) -> Link | None:
    """Build the graph edge for a link seen from its inward side.

    Links reported only with an outward endpoint return None; they are
    recorded when the other endpoint's own record is ingested.

    Args:
        source: Id of the issue the link record was found on
        raw: Raw issue-link record

    Returns:
        Link from ``source`` to the inward issue, or None
    """
    other = raw.inward_issue
    if other is None or not other.id:
        return None
    return Link(from_id=source, to_id=other.id, type=raw.type.inward)


def link_change_events(record: JiraIssueRecord) -> list[tuple[str, datetime]]:
    """Extract link-creation evidence from the issue changelog.

    Returns:
        (target issue key, change timestamp) for every "Link" history item
        with a non-empty new value
    """
    events = []
    for history in record.changelog.histories:
        for item in history.items:
            # skip history items that don't concern links
            if item.field != LINK_FIELD or not item.to:
                continue
            events.append((item.to, parse_jira_datetime(history.created)))
    return events
