"""Link creation dates recovered from issue change history.

Jira's issue-link records carry no timestamp. The changelog of the source
issue does: each "Link" history item names the linked issue's key. Dates are
collected per (source id, target key) while pages are fetched and attached to
graph edges in a single pass once every fetch has finished.
"""

import logging
import threading
from datetime import datetime

from .database import Database
from .models import Id

logger = logging.getLogger(__name__)


class PendingLinkDates:
    """Thread-safe store of the earliest observed date per (source, target key)."""

    def __init__(self) -> None:
        self._dates: dict[tuple[Id, str], datetime] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._dates)

    def add(self, source: Id, target_key: str, created: datetime) -> None:
        """Record link-change evidence; an earlier timestamp always wins.

        Args:
            source: Id of the issue whose changelog reported the change
            target_key: Human-readable key of the linked issue
            created: Timestamp of the change
        """
        key = (source, target_key)
        with self._lock:
            previous = self._dates.get(key)
            if previous is not None and created > previous:
                return
            self._dates[key] = created

    def get(self, source: Id, target_key: str) -> datetime | None:
        with self._lock:
            return self._dates.get((source, target_key))

    def _drain(self) -> dict[Id, dict[str, datetime]]:
        """Remove all pending entries, grouped by source issue."""
        by_source: dict[Id, dict[str, datetime]] = {}
        with self._lock:
            for (source, target_key), created in self._dates.items():
                by_source.setdefault(source, {})[target_key] = created
            self._dates.clear()
        return by_source

    def reconcile(self, database: Database) -> int:
        """Attach pending dates to the matching links in the database.

        Must run after all writers have finished. A link matches when the key
        of its target issue equals the recorded target key; evidence for
        targets that were never fetched is dropped.

        Args:
            database: Database whose graph edges receive the dates

        Returns:
            Number of links whose creation date was set
        """
        keys = {issue_id: issue.name for issue_id, issue in database.issues.items()}
        resolved = 0
        dropped = 0
        for source, dates in self._drain().items():
            matched: set[str] = set()
            for index, link in enumerate(database.links_from(source)):
                target_key = keys.get(link.to_id)
                if target_key is None or target_key not in dates:
                    continue
                database.set_link_created(source, index, dates[target_key])
                matched.add(target_key)
                resolved += 1
            dropped += len(dates.keys() - matched)

        logger.info(
            "Resolved creation dates for %d links (%d unmatched change records)",
            resolved,
            dropped,
        )
        return resolved
