"""Jira REST API client using httpx."""

import logging
from types import TracebackType

import httpx
from pydantic import ValidationError

from .. import __version__
from .models import SearchPage

logger = logging.getLogger(__name__)

API_PATH = "/rest/api/latest"


class JiraApiError(RuntimeError):
    """A search request failed in transport or its response could not be decoded."""

    def __init__(self, message: str, *, url: str, status: int | None = None):
        super().__init__(message)
        self.url = url
        self.status = status


class JiraClient:
    """Jira REST API client for the issue search endpoint."""

    def __init__(
        self,
        base_url: str,
        user: str | None = None,
        api_token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize Jira client.

        Args:
            base_url: Base URL of the Jira instance (e.g. https://issues.apache.org/jira)
            user: User name or email for basic auth. Anonymous if None.
            api_token: API token or password for basic auth
            timeout: HTTP timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        if (user is None) != (api_token is None):
            raise ValueError("Jira user and API token must be provided together.")

        self.base_url = base_url.rstrip("/")
        auth = httpx.BasicAuth(user, api_token) if user and api_token else None
        self._http = httpx.Client(
            auth=auth,
            timeout=timeout,
            headers={
                "Accept": "application/json",
                "User-Agent": f"issue-graph/{__version__}",
            },
            transport=transport,
        )

    def url(self, path: str) -> str:
        """Absolute URL of a REST API resource."""
        return self.base_url + API_PATH + path

    def search(self, params: dict[str, str]) -> SearchPage:
        """Run one issue search request.

        Args:
            params: Query parameters (see ``build_search_params``)

        Returns:
            Decoded page of search results

        Raises:
            JiraApiError: On transport errors, error status codes, invalid JSON
                or a response that does not describe a search page
        """
        url = self.url("/search")
        try:
            response = self._http.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise JiraApiError(
                f"Jira search failed with HTTP {e.response.status_code}",
                url=url,
                status=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise JiraApiError(f"Jira search request failed: {e}", url=url) from e

        try:
            data = response.json()
        except ValueError as e:
            raise JiraApiError(
                f"Invalid JSON in search response: {e}",
                url=url,
                status=response.status_code,
            ) from e
        if not isinstance(data, dict):
            raise JiraApiError(
                "Search response is not a JSON object",
                url=url,
                status=response.status_code,
            )

        try:
            page = SearchPage.model_validate(data)
        except ValidationError as e:
            raise JiraApiError(
                f"Unexpected search response shape: {e.error_count()} errors",
                url=url,
                status=response.status_code,
            ) from e

        logger.debug(
            "Fetched %d issues at startAt=%s (total=%d)",
            len(page.issues),
            params.get("startAt"),
            page.total,
        )
        return page

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "JiraClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
