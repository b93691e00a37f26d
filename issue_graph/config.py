"""Configuration for the Jira harvester."""

import os
from typing import Optional

DEFAULT_JIRA_URL = "https://issues.apache.org/jira"
DEFAULT_OUTPUT = "apache.json"


class JiraConfig:
    """Configuration class for harvesting a Jira instance."""

    def __init__(self) -> None:
        """Initialize Jira configuration from environment variables."""
        self.url: str = os.getenv("JIRA_URL", DEFAULT_JIRA_URL)
        self.user: Optional[str] = os.getenv("JIRA_USER")
        self.api_token: Optional[str] = os.getenv("JIRA_API_TOKEN")
        self.parallelism: int = int(os.getenv("JIRA_PARALLELISM", "1"))
        self.output: str = os.getenv("JIRA_OUTPUT", DEFAULT_OUTPUT)
        self.timeout: float = float(os.getenv("JIRA_TIMEOUT", "30"))

    def is_authenticated(self) -> bool:
        """Check if basic-auth credentials are configured."""
        return self.user is not None and self.api_token is not None

    def validate(self) -> None:
        """Validate configuration and raise error if invalid."""
        if self.parallelism < 1:
            raise ValueError(
                f"Parallelism must be at least 1, got {self.parallelism}"
            )
        if self.timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {self.timeout}")
        if (self.user is None) != (self.api_token is None):
            raise ValueError(
                "JIRA_USER and JIRA_API_TOKEN must be set together for authentication"
            )
