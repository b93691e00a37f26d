"""Jira client package for API interaction."""

from .client import JiraApiError, JiraClient
from .models import JiraIssueRecord, SearchPage
from .search import INITIAL_MAX_RESULTS, build_search_params

__all__ = [
    "JiraApiError",
    "JiraClient",
    "JiraIssueRecord",
    "SearchPage",
    "INITIAL_MAX_RESULTS",
    "build_search_params",
]
