"""Storage manager for harvested issue databases."""

import json
from pathlib import Path
from typing import Any

from rich.console import Console

from ..database import Database
from ..utils.date_parser import is_zero_time

console = Console()


class StorageManager:
    """Reads and writes issue databases as JSON documents."""

    def save_database(self, db: Database, path: str | Path) -> Path:
        """Save a database to a JSON file.

        Args:
            db: Database to save
            path: Output file path; parent directories are created

        Returns:
            Path to the saved file

        Raises:
            OSError: If the file cannot be written
        """
        file_path = Path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(file_path, "w", encoding="utf-8") as f:
                json.dump(db.to_dict(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            console.print(f"Error saving database to {file_path}: {e}")
            raise

        return file_path

    def load_database(self, path: str | Path) -> Database:
        """Load a database from a JSON file written by ``save_database``.

        Args:
            path: Path of the JSON document

        Returns:
            Database with the stored issues, tree and graph
        """
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return Database.from_dict(data)

    def database_stats(self, db: Database) -> dict[str, Any]:
        """Get statistics about a database.

        Returns:
            Dictionary with issue, parent link and link counts
        """
        graph = db.graph
        links = [link for source_links in graph.values() for link in source_links]
        return {
            "issues": len(db.issues),
            "parent_links": len(db.tree),
            "link_sources": len(graph),
            "links": len(links),
            "dated_links": sum(1 for link in links if not is_zero_time(link.created)),
        }
