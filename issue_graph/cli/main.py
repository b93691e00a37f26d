"""Main CLI entry point."""

import typer
from dotenv import load_dotenv
from rich.console import Console

from .harvest import harvest, probe, stats

load_dotenv()

app = typer.Typer(
    name="issue-graph",
    help="Jira issue and link graph harvesting",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


app.command(name="harvest", context_settings={"help_option_names": ["-h", "--help"]})(
    harvest
)
app.command(name="probe", context_settings={"help_option_names": ["-h", "--help"]})(
    probe
)
app.command(name="stats", context_settings={"help_option_names": ["-h", "--help"]})(
    stats
)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from issue_graph import __version__

    console.print(f"Issue Graph v{__version__}")


if __name__ == "__main__":
    app()
