"""Pydantic models for the harvested issue graph.

Field names are snake_case in Python and PascalCase in the serialized
output document (``Issues``/``Tree``/``Graph``), e.g. ``author_name`` is
written as ``AuthorName``.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

from .utils.date_parser import ZERO_TIME

# Opaque, stable issue identifier assigned by the tracker
Id = str


def _trim(text: str, length: int) -> str:
    """Shorten potentially large titles and bodies for display."""
    if len(text) > length:
        return text[: length - 3] + "..."
    return text


class _GraphModel(BaseModel):
    """Immutable value type serialized with PascalCase keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_pascal,
        populate_by_name=True,
    )


class Comment(_GraphModel):
    """Comment on an issue. Value type, no identity of its own."""

    author_name: str = Field("", description="Display name of the comment author")
    author_email: str = Field("", description="Email address of the comment author")
    created: datetime = Field(ZERO_TIME, description="Timestamp of comment creation")
    body: str = Field("", description="Text content of the comment")

    def __str__(self) -> str:
        return f"[{self.author_name} <{self.author_email}> {_trim(self.body, 30)}]"


class Issue(_GraphModel):
    """Issue as stored in the database.

    Re-fetching an issue with the same id replaces the stored value.
    """

    id: Id = Field(..., description="Opaque issue identifier (e.g. '12345678')")
    title: str = Field("", description="Issue summary")
    body: str = Field("", description="Issue description")
    name: str = Field("", description="Human-readable key (e.g. 'YARN-499')")
    created: datetime = Field(ZERO_TIME, description="Timestamp of issue creation")
    comments: tuple[Comment, ...] = Field(
        default=(), description="Comments in the order returned by the API"
    )

    def __str__(self) -> str:
        comments = ", ".join(str(c) for c in self.comments)
        return (
            f"Issue[Id={self.id}, Title={_trim(self.title, 30)}, "
            f"Body={_trim(self.body, 30)}, Comments=[{comments}]]"
        )


class Link(_GraphModel):
    """Directed, typed relationship between two issues.

    Self-loops (``from_id == to_id``) are allowed. ``created`` stays at the
    zero time until date reconciliation resolves it.
    """

    from_id: Id = Field(..., alias="From", description="Source issue id")
    to_id: Id = Field(..., alias="To", description="Target issue id")
    type: str = Field("", description="Relationship name, e.g. 'is blocked by'")
    created: datetime = Field(ZERO_TIME, description="Link creation timestamp")
