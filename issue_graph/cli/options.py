"""Standardized CLI option definitions shared by the harvest commands.

Defaults of None mean "use the environment configuration" (see
``issue_graph.config.JiraConfig``).
"""

import typer

URL_OPTION = typer.Option(
    None, "--url", "-u", help="Base Jira URL (defaults to JIRA_URL env var)"
)

PARALLELISM_OPTION = typer.Option(
    None, "--parallelism", "-n", help="Number of concurrent page fetches"
)

OUTPUT_OPTION = typer.Option(
    None, "--output", "-o", help="Output file for the database (JSON)"
)

USER_OPTION = typer.Option(
    None, "--user", help="Jira user for basic auth (defaults to JIRA_USER env var)"
)

TOKEN_OPTION = typer.Option(
    None,
    "--token",
    "-t",
    help="Jira API token (defaults to JIRA_API_TOKEN env var)",
)

TIMEOUT_OPTION = typer.Option(None, "--timeout", help="HTTP timeout in seconds")

DEBUG_OPTION = typer.Option(True, "--debug/--no-debug", help="Debug output")

LOG_FILE_OPTION = typer.Option(
    None, "--log-file", help="Also write a debug log to this file"
)

DATABASE_ARGUMENT = typer.Argument(
    ..., exists=True, dir_okay=False, help="Database JSON file written by harvest"
)
