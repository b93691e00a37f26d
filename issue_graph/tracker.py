"""Concurrent harvesting of a Jira instance into a Database."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from enum import Enum

from .database import Database
from .dedup import LinkIdSet
from .jira_client.client import JiraApiError, JiraClient
from .jira_client.models import JiraIssueLinkRecord, JiraIssueRecord
from .jira_client.parser import inward_link, link_change_events, parent_id, parse_issue
from .jira_client.search import INITIAL_MAX_RESULTS, build_search_params
from .link_dates import PendingLinkDates
from .models import Id

logger = logging.getLogger(__name__)


class HarvestState(str, Enum):
    """Lifecycle of a single ``fetch_all`` run."""

    IDLE = "idle"
    FETCHING_FIRST_PAGE = "fetching_first_page"
    COMPLETE = "complete"
    DISPATCHING = "dispatching"
    WORKERS_RUNNING = "workers_running"
    ALL_JOINED = "all_joined"
    RECONCILING = "reconciling"
    DONE = "done"


@dataclass(frozen=True)
class HarvestProgress:
    """Point-in-time view of harvest progress."""

    fetched: int
    total: int
    max_results: int


class JiraTracker:
    """Harvests every issue of a Jira instance with parallel page fetches.

    The tracker owns the pagination state (``total`` and the page size the
    server honors), the set of link ids already ingested and the pending
    link dates. A tracker performs one harvest; create a new one to fetch
    again.
    """

    def __init__(
        self,
        client: JiraClient,
        database: Database | None = None,
        max_results: int = INITIAL_MAX_RESULTS,
    ):
        """Initialize tracker.

        Args:
            client: Jira client used for all page fetches
            database: Database to fill (a new one if None)
            max_results: Initially requested page size
        """
        self.client = client
        self.db = database if database is not None else Database()
        self.total = 0
        self.max_results = max_results
        self.link_ids = LinkIdSet()
        self.link_dates = PendingLinkDates()
        self.state = HarvestState.IDLE
        self._paging_lock = threading.Lock()

    def fetch_all(self, parallelism: int = 1) -> Database:
        """Fetch all issues with ``parallelism`` concurrent page fetches.

        Blocks until every scheduled page has been fetched (or has failed)
        and link dates have been reconciled. Failed pages are logged and
        skipped, so the result may be incomplete.

        Args:
            parallelism: Number of worker threads

        Returns:
            The filled database

        Raises:
            ValueError: If parallelism is less than 1
            RuntimeError: If this tracker has already run a harvest
        """
        if parallelism < 1:
            raise ValueError(f"Parallelism must be at least 1, got {parallelism}")
        if self.state is not HarvestState.IDLE:
            raise RuntimeError(f"Harvest already started (state: {self.state.value})")

        self.state = HarvestState.FETCHING_FIRST_PAGE
        try:
            first_batch_end = self.fetch_page(0)
        except JiraApiError as e:
            logger.error("Initial fetch failed: %s", e)
            first_batch_end = 0

        offsets = self.remaining_offsets(first_batch_end)
        if not offsets:
            # the first search returned all the results
            self.state = HarvestState.COMPLETE
        else:
            self.state = HarvestState.DISPATCHING
            logger.info(
                "Fetching %d more pages with %d workers", len(offsets), parallelism
            )
            self._run_workers(offsets, parallelism)
            self.state = HarvestState.ALL_JOINED

        self.state = HarvestState.RECONCILING
        self.link_dates.reconcile(self.db)
        self.state = HarvestState.DONE

        logger.info(
            "Harvest finished: %d of %d issues fetched",
            self.db.issue_count(),
            self.total,
        )
        return self.db

    def remaining_offsets(self, first_batch_end: int) -> list[int]:
        """Start offsets of the pages still to fetch after the first one."""
        with self._paging_lock:
            return list(range(first_batch_end, self.total, self.max_results))

    def _run_workers(self, offsets: list[int], parallelism: int) -> None:
        with ThreadPoolExecutor(
            max_workers=parallelism, thread_name_prefix="jira-fetch"
        ) as executor:
            self.state = HarvestState.WORKERS_RUNNING
            futures = {
                executor.submit(self._fetch_offset, start): start for start in offsets
            }
            for future in as_completed(futures):
                future.result()
                progress = self.progress()
                logger.debug(
                    "finished: %d total: %d maxResults: %d",
                    progress.fetched,
                    progress.total,
                    progress.max_results,
                )

    def _fetch_offset(self, start: int) -> int:
        try:
            return self.fetch_page(start)
        except JiraApiError as e:
            logger.warning("Fetch from %d failed: %s", start, e)
            return 0

    def fetch_page(self, start: int) -> int:
        """Fetch one page of issues and ingest it into the database.

        Args:
            start: Offset of the first issue of the page

        Returns:
            Number of issues on the page

        Raises:
            JiraApiError: If the page could not be fetched or decoded
        """
        with self._paging_lock:
            max_results = self.max_results
        page = self.client.search(build_search_params(start, max_results))

        with self._paging_lock:
            if page.max_results:
                self.max_results = page.max_results
            if self.total == 0:
                self.total = page.total

        for record in page.issues:
            self.ingest(record)
        return len(page.issues)

    def ingest(self, record: JiraIssueRecord) -> None:
        """Store one issue with its parent, links and link dates."""
        issue = parse_issue(record)
        self.db.add_issue(issue)

        parent = parent_id(record)
        if parent is not None:
            self.db.set_parent(issue.id, parent)

        for raw_link in record.fields.issuelinks:
            self.add_issue_link(issue.id, raw_link)

        # history (for link creation dates)
        for target_key, created in link_change_events(record):
            self.link_dates.add(issue.id, target_key, created)

    def add_issue_link(self, source: Id, raw_link: JiraIssueLinkRecord) -> None:
        """Add a link to the graph unless its link id was already ingested.

        Only the inward side of a link is recorded, and only that side claims
        the link id. A link that is only ever seen from its outward side
        never enters the graph.
        """
        link = inward_link(source, raw_link)
        if link is None:
            return
        if not self.link_ids.add(raw_link.id):
            return
        self.db.add_link(link)

    def get_all(self) -> Database:
        """Get the database fetched so far."""
        return self.db

    def progress(self) -> HarvestProgress:
        with self._paging_lock:
            return HarvestProgress(
                fetched=self.db.issue_count(),
                total=self.total,
                max_results=self.max_results,
            )
