"""Synchronized set of remote link identifiers."""

import threading


class LinkIdSet:
    """Thread-safe set of link identifiers assigned by the remote tracker.

    Used to ingest each issue link once per harvest, even when the same link
    is reported on both of its endpoints.
    """

    def __init__(self) -> None:
        self._ids: set[str] = set()
        self._lock = threading.Lock()

    def __contains__(self, link_id: object) -> bool:
        with self._lock:
            return link_id in self._ids

    def __len__(self) -> int:
        with self._lock:
            return len(self._ids)

    def add(self, link_id: str) -> bool:
        """Mark a link identifier as seen.

        Args:
            link_id: Identifier of the link in the remote tracker

        Returns:
            True if the identifier was not seen before, False otherwise
        """
        with self._lock:
            if link_id in self._ids:
                return False
            self._ids.add(link_id)
            return True
