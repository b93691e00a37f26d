"""Pydantic models for Jira REST API search responses.

These models describe the subset of the ``/rest/api/latest/search`` response
that the harvester reads. They are deliberately lenient: ``null`` values and
non-object payloads are discarded before validation, and optional text or
list fields holding a value of the wrong type fall back to empty, so that one
odd issue never fails the page it arrived on. Only ``id`` and ``key`` of an
issue are required.
API Reference: https://developer.atlassian.com/server/jira/platform/rest-apis/
"""

from typing import Any, get_origin

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


class JiraPayload(BaseModel):
    """Base model for raw Jira JSON objects (camelCase keys)."""

    model_config = ConfigDict(
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return {}
        return {key: value for key, value in data.items() if value is not None}

    @field_validator("*", mode="before")
    @classmethod
    def _empty_on_wrong_type(cls, value: Any, info: ValidationInfo) -> Any:
        field = cls.model_fields[info.field_name]
        if field.is_required():
            return value
        expected = get_origin(field.annotation) or field.annotation
        if expected is str:
            # Rich-text (document) values are not plain strings
            if isinstance(value, bool) or not isinstance(value, (str, int, float)):
                return ""
        elif expected is list and not isinstance(value, list):
            return []
        return value


class JiraAuthor(JiraPayload):
    """Comment author.

    Maps to Jira REST API User object (only the fields used here).
    """

    display_name: str = Field("", description="Display name of the user")
    email_address: str = Field("", description="Email address (may be hidden)")


class JiraRawComment(JiraPayload):
    """Jira issue comment as returned inside ``fields.comment.comments``."""

    created: str = Field("", description="Creation timestamp (Jira date format)")
    body: str = Field("", description="Comment text (wiki markup)")
    author: JiraAuthor = Field(default_factory=JiraAuthor)


class JiraCommentPage(JiraPayload):
    """Comment container of an issue (``fields.comment``)."""

    comments: list[JiraRawComment] = Field(default_factory=list)


class JiraIssueRef(JiraPayload):
    """Reference to another issue (parent or linked issue)."""

    id: str = Field("", description="Issue id of the referenced issue")


class JiraLinkType(JiraPayload):
    """Issue link type, seen from the inward side."""

    inward: str = Field("", description="Inward description, e.g. 'is blocked by'")


class JiraIssueLinkRecord(JiraPayload):
    """One entry of ``fields.issuelinks``.

    Records found on the outward endpoint carry ``outwardIssue`` instead of
    ``inwardIssue``; that side is not read, so ``inward_issue`` stays None.
    """

    id: str = Field("", description="Link identifier, unique per link")
    type: JiraLinkType = Field(default_factory=JiraLinkType)
    inward_issue: JiraIssueRef | None = Field(None, description="Inward endpoint")


class JiraFields(JiraPayload):
    """The ``fields`` object of an issue, limited to the requested fields."""

    summary: str = ""
    description: str = ""
    created: str = ""
    comment: JiraCommentPage = Field(default_factory=JiraCommentPage)
    parent: JiraIssueRef | None = None
    issuelinks: list[JiraIssueLinkRecord] = Field(default_factory=list)


class JiraHistoryItem(JiraPayload):
    """Single field change within a changelog history entry."""

    field: str = Field("", description="Name of the changed field, e.g. 'Link'")
    to: str = Field("", description="New raw value (issue key for links)")


class JiraHistory(JiraPayload):
    """Changelog entry: a set of field changes made at one time."""

    created: str = Field("", description="Timestamp of the change")
    items: list[JiraHistoryItem] = Field(default_factory=list)


class JiraChangelog(JiraPayload):
    """Expanded ``changelog`` of an issue."""

    histories: list[JiraHistory] = Field(default_factory=list)


class JiraIssueRecord(JiraPayload):
    """Issue as returned by the search endpoint.

    ``id`` and ``key`` are always returned by Jira and are required here.
    """

    id: str = Field(..., description="Issue id (string of digits)")
    key: str = Field(..., description="Issue key, e.g. 'YARN-499'")
    fields: JiraFields = Field(default_factory=JiraFields)
    changelog: JiraChangelog = Field(default_factory=JiraChangelog)


class SearchPage(JiraPayload):
    """One page of search results."""

    max_results: int | None = Field(
        None, description="Page size honored by the server"
    )
    total: int = Field(0, description="Total number of issues matching the query")
    issues: list[JiraIssueRecord] = Field(default_factory=list)
