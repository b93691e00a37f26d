"""Harvest Jira issues into an in-memory issue/link graph."""

__version__ = "0.1.0"
