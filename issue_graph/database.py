"""Thread-safe store of harvested issues, the parent tree and the link graph."""

import threading
from datetime import datetime
from typing import Any

from .models import Id, Issue, Link


class Database:
    """Database of discovered issues and relationships among them.

    Holds three independent collections:

    - issues: issue id -> Issue (last write wins)
    - tree: child issue id -> parent issue id (a forest, cycles unchecked)
    - graph: issue id -> outgoing links, in discovery order

    Every mutation goes through a method that holds the collection's lock for
    a single map insert or append. Reads return snapshots and may race
    benignly with writers while a harvest is running.
    """

    def __init__(self) -> None:
        self._issues: dict[Id, Issue] = {}
        self._tree: dict[Id, Id] = {}
        self._graph: dict[Id, list[Link]] = {}
        self._issues_lock = threading.Lock()
        self._tree_lock = threading.Lock()
        self._graph_lock = threading.Lock()

    def add_issue(self, issue: Issue) -> None:
        """Insert or replace an issue by id."""
        with self._issues_lock:
            self._issues[issue.id] = issue

    def set_parent(self, child: Id, parent: Id) -> None:
        """Record the parent of an issue, replacing any previous parent."""
        with self._tree_lock:
            self._tree[child] = parent

    def add_link(self, link: Link) -> None:
        """Append a link to the outgoing edges of ``link.from_id``.

        Self-loops are allowed. Uniqueness is not checked here; callers
        deduplicate before adding.
        """
        with self._graph_lock:
            self._graph.setdefault(link.from_id, []).append(link)

    def set_link_created(self, source: Id, index: int, created: datetime) -> None:
        """Replace the creation date of the ``index``-th link of ``source``."""
        with self._graph_lock:
            links = self._graph[source]
            links[index] = links[index].model_copy(update={"created": created})

    @property
    def issues(self) -> dict[Id, Issue]:
        """Snapshot of the issues collection."""
        with self._issues_lock:
            return dict(self._issues)

    @property
    def tree(self) -> dict[Id, Id]:
        """Snapshot of the child -> parent mapping."""
        with self._tree_lock:
            return dict(self._tree)

    @property
    def graph(self) -> dict[Id, list[Link]]:
        """Snapshot of the link graph."""
        with self._graph_lock:
            return {source: list(links) for source, links in self._graph.items()}

    def links_from(self, source: Id) -> list[Link]:
        """Outgoing links of an issue (empty if it has none)."""
        with self._graph_lock:
            return list(self._graph.get(source, []))

    def issue_count(self) -> int:
        return len(self._issues)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON output document.

        Returns:
            Dictionary with ``Issues``, ``Tree`` and ``Graph`` keys
        """
        return {
            "Issues": {
                issue_id: issue.model_dump(mode="json", by_alias=True)
                for issue_id, issue in self.issues.items()
            },
            "Tree": self.tree,
            "Graph": {
                source: [link.model_dump(mode="json", by_alias=True) for link in links]
                for source, links in self.graph.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Database":
        """Rebuild a database from a JSON output document.

        Raises:
            ValueError: If the document is not a JSON object or holds invalid
                records
        """
        if not isinstance(data, dict):
            raise ValueError(
                f"Database document must be a JSON object, got {type(data).__name__}"
            )
        db = cls()
        for raw_issue in (data.get("Issues") or {}).values():
            db.add_issue(Issue.model_validate(raw_issue))
        for child, parent in (data.get("Tree") or {}).items():
            db.set_parent(child, parent)
        for raw_links in (data.get("Graph") or {}).values():
            for raw_link in raw_links or []:
                db.add_link(Link.model_validate(raw_link))
        return db
