"""Jira search query building."""

# Requested page size; the server may honor a smaller one
INITIAL_MAX_RESULTS = 250

# Creation order keeps result offsets stable between page requests
SEARCH_JQL = "ORDER BY Created Asc"

# Only affects the ``fields`` object; id, key and self are always returned
SEARCH_FIELDS = "summary,description,comment,parent,issuelinks,created"

SEARCH_EXPAND = "changelog"


def build_search_params(start: int, max_results: int) -> dict[str, str]:
    """Build query parameters for one page of the issue search.

    A new dictionary is returned on every call, so concurrent page fetches
    never share parameter state.

    Args:
        start: Offset of the first result
        max_results: Requested page size

    Returns:
        Query parameters for ``/rest/api/latest/search``

    Example:
        >>> build_search_params(500, 250)["startAt"]
        '500'
    """
    return {
        "jql": SEARCH_JQL,
        "startAt": str(start),
        "maxResults": str(max_results),
        "fields": SEARCH_FIELDS,
        "expand": SEARCH_EXPAND,
    }
