"""CLI commands for harvesting Jira issues."""

import time
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ..config import JiraConfig
from ..database import Database
from ..jira_client.client import JiraApiError, JiraClient
from ..storage.manager import StorageManager
from ..tracker import JiraTracker
from ..utils.date_parser import format_elapsed
from ..utils.logging import setup_logging
from .options import (
    DATABASE_ARGUMENT,
    DEBUG_OPTION,
    LOG_FILE_OPTION,
    OUTPUT_OPTION,
    PARALLELISM_OPTION,
    TIMEOUT_OPTION,
    TOKEN_OPTION,
    URL_OPTION,
    USER_OPTION,
)

console = Console()
app = typer.Typer(
    help="Harvest Jira issues into an issue graph",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _load_config(
    url: str | None,
    parallelism: int | None,
    output: Path | None,
    user: str | None,
    token: str | None,
    timeout: float | None,
) -> JiraConfig:
    """Environment configuration with command-line overrides applied."""
    config = JiraConfig()
    if url is not None:
        config.url = url
    if parallelism is not None:
        config.parallelism = parallelism
    if output is not None:
        config.output = str(output)
    if user is not None:
        config.user = user
    if token is not None:
        config.api_token = token
    if timeout is not None:
        config.timeout = timeout
    config.validate()
    return config


def _stats_table(title: str, stats: dict[str, int]) -> Table:
    table = Table(title=title)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")

    table.add_row("Issues", str(stats["issues"]))
    table.add_row("Parent Links", str(stats["parent_links"]))
    table.add_row("Linked Issues", str(stats["link_sources"]))
    table.add_row("General Links", str(stats["links"]))
    table.add_row("Dated Links", str(stats["dated_links"]))
    return table


@app.command()
def harvest(
    url: str | None = URL_OPTION,
    parallelism: int | None = PARALLELISM_OPTION,
    output: Path | None = OUTPUT_OPTION,
    user: str | None = USER_OPTION,
    token: str | None = TOKEN_OPTION,
    timeout: float | None = TIMEOUT_OPTION,
    debug: bool = DEBUG_OPTION,
    log_file: Path | None = LOG_FILE_OPTION,
) -> None:
    """Fetch every issue of a Jira instance and save the issue graph.

    Examples:
        issue-graph harvest --url https://issues.apache.org/jira -n 8
        issue-graph harvest -o data/apache.json --no-debug
    """
    start_time = time.monotonic()
    setup_logging(debug=debug, log_file=log_file)

    try:
        config = _load_config(url, parallelism, output, user, token, timeout)
    except ValueError as e:
        console.print(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    console.print(
        f"🔍 Harvesting issues from {config.url} "
        f"with {config.parallelism} concurrent fetches"
    )
    if config.is_authenticated():
        console.print(f"🔑 Authenticating as {config.user}")

    with JiraClient(
        config.url,
        user=config.user,
        api_token=config.api_token,
        timeout=config.timeout,
    ) as client:
        tracker = JiraTracker(client)
        db = tracker.fetch_all(config.parallelism)

    storage = StorageManager()
    if debug:
        stats = storage.database_stats(db)
        console.print(
            f"{stats['issues']} issues, {stats['parent_links']} parent links, "
            f"{stats['link_sources']} general links"
        )
        console.print(_stats_table("Harvest Results", stats))

    try:
        path = storage.save_database(db, config.output)
    except OSError:
        console.print("❌ Could not output json!")
        raise typer.Exit(1)

    console.print(f"💾 Database saved to {path}")
    console.print(f"⏱️ Run took {format_elapsed(time.monotonic() - start_time)}")


@app.command()
def probe(
    url: str | None = URL_OPTION,
    user: str | None = USER_OPTION,
    token: str | None = TOKEN_OPTION,
    timeout: float | None = TIMEOUT_OPTION,
) -> None:
    """Fetch only the first page of issues and print what was found."""
    try:
        config = _load_config(url, None, None, user, token, timeout)
    except ValueError as e:
        console.print(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    with JiraClient(
        config.url,
        user=config.user,
        api_token=config.api_token,
        timeout=config.timeout,
    ) as client:
        tracker = JiraTracker(client)
        try:
            tracker.fetch_page(0)
        except JiraApiError as e:
            console.print(f"❌ Fetch failed: {e}")
            raise typer.Exit(1)

    progress = tracker.progress()
    db = tracker.get_all()
    console.print(
        f"finished: {progress.fetched} total: {progress.total} "
        f"maxResults: {progress.max_results}"
    )
    console.print(f"Issues: {db.issue_count()}")
    console.print("Tree:", db.tree)
    graph = {
        source: [link.to_id for link in links] for source, links in db.graph.items()
    }
    console.print("Graph:", graph)


@app.command()
def stats(path: Path = DATABASE_ARGUMENT) -> None:
    """Show statistics of a saved issue database."""
    storage = StorageManager()
    try:
        db: Database = storage.load_database(path)
    except ValueError as e:
        console.print(f"❌ Could not read database {path}: {e}")
        raise typer.Exit(1)

    console.print(_stats_table(f"Database {path.name}", storage.database_stats(db)))


if __name__ == "__main__":
    app()
