"""Tests for the thread-safe issue database."""

import threading
from datetime import datetime, timezone

import pytest

from issue_graph.database import Database
from issue_graph.models import Comment, Issue, Link
from issue_graph.utils.date_parser import ZERO_TIME


class TestDatabase:
    """Test Database class."""

    def test_add_issue_last_write_wins(self) -> None:
        """Test that re-adding an issue id replaces the stored issue."""
        db = Database()
        db.add_issue(Issue(id="1", title="old"))
        db.add_issue(Issue(id="1", title="new"))

        assert db.issue_count() == 1
        assert db.issues["1"].title == "new"

    def test_set_parent_last_write_wins(self) -> None:
        """Test that a child keeps only the most recently set parent."""
        db = Database()
        db.set_parent("2", "1")
        db.set_parent("2", "3")

        assert db.tree == {"2": "3"}

    def test_add_link_keeps_order_and_duplicates(self) -> None:
        """Test that links are appended in discovery order without dedup."""
        db = Database()
        first = Link(from_id="1", to_id="2", type="blocks")
        second = Link(from_id="1", to_id="3", type="relates to")
        db.add_link(first)
        db.add_link(second)
        db.add_link(first)

        assert db.links_from("1") == [first, second, first]
        assert db.links_from("missing") == []

    def test_snapshots_are_copies(self) -> None:
        """Test that mutating a snapshot does not change the database."""
        db = Database()
        db.add_issue(Issue(id="1"))
        db.add_link(Link(from_id="1", to_id="2"))

        db.issues.clear()
        db.graph["1"].clear()

        assert db.issue_count() == 1
        assert len(db.links_from("1")) == 1

    def test_set_link_created(self) -> None:
        """Test replacing the creation date of one link."""
        db = Database()
        db.add_link(Link(from_id="1", to_id="2", type="blocks"))
        db.add_link(Link(from_id="1", to_id="3", type="blocks"))
        created = datetime(2013, 2, 1, tzinfo=timezone.utc)

        db.set_link_created("1", 1, created)

        links = db.links_from("1")
        assert links[0].created == ZERO_TIME
        assert links[1].created == created
        assert links[1].to_id == "3"

    def test_concurrent_writers(self) -> None:
        """Test that concurrent writers lose no updates."""
        db = Database()

        def writer(worker: int) -> None:
            for i in range(200):
                issue_id = f"{worker}-{i}"
                db.add_issue(Issue(id=issue_id))
                db.set_parent(issue_id, str(worker))
                db.add_link(Link(from_id=str(worker), to_id=issue_id))

        threads = [threading.Thread(target=writer, args=(w,)) for w in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert db.issue_count() == 1600
        assert len(db.tree) == 1600
        assert all(len(links) == 200 for links in db.graph.values())

    def test_to_dict_round_trip(self) -> None:
        """Test conversion to and from the output document."""
        db = Database()
        db.add_issue(
            Issue(
                id="1",
                name="P-1",
                created=datetime(2013, 1, 1, tzinfo=timezone.utc),
                comments=(Comment(author_name="Ann", body="hi"),),
            )
        )
        db.set_parent("2", "1")
        db.add_link(
            Link(
                from_id="1",
                to_id="2",
                type="blocks",
                created=datetime(2013, 2, 1, tzinfo=timezone.utc),
            )
        )

        data = db.to_dict()
        assert set(data) == {"Issues", "Tree", "Graph"}
        assert data["Tree"] == {"2": "1"}
        assert data["Graph"]["1"][0]["From"] == "1"
        assert data["Graph"]["1"][0]["Type"] == "blocks"

        loaded = Database.from_dict(data)
        assert loaded.issues == db.issues
        assert loaded.tree == db.tree
        assert loaded.graph == db.graph

    def test_from_dict_empty_document(self) -> None:
        """Test loading a document with null collections."""
        db = Database.from_dict({"Issues": None, "Tree": None, "Graph": None})
        assert db.issue_count() == 0
        assert db.tree == {}
        assert db.graph == {}

    def test_from_dict_rejects_non_object(self) -> None:
        """Test that a document which is not an object is rejected."""
        with pytest.raises(ValueError, match="JSON object"):
            Database.from_dict([1, 2])  # type: ignore[arg-type]
