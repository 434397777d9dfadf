"""Tests for bucket rosters and index pages."""

import json
import re
from pathlib import Path

import pytest

from javadoc_publisher.core.exceptions import ExtractionError
from javadoc_publisher.core.models import Artifact, PublishedSet
from javadoc_publisher.publish.decision import write_marker
from javadoc_publisher.publish.index import (
    BucketRoster,
    IndexBuilder,
    is_path_segment,
    render_index,
)


def published_of(*artifacts: Artifact) -> PublishedSet:
    published = PublishedSet()
    for artifact in artifacts:
        published.add(artifact)
    return published


def listed(index_html: str) -> list[str]:
    return re.findall(r'<a href="([^"]+)">', index_html)


class TestIsPathSegment:
    """Tests for is_path_segment."""

    @pytest.mark.parametrize("name", ["2.x", "widgets", "widgets-bom", ".5", "v1_0"])
    def test_plain_names(self, name: str) -> None:
        """Ordinary bucket and artifact names are single segments."""
        assert is_path_segment(name)

    @pytest.mark.parametrize(
        "name", ["", ".", "..", "/tmp/evil", "../../outside", "a/b", "a\\b"]
    )
    def test_rejects_paths(self, name: str) -> None:
        """Empty, relative-parent, absolute and nested names are rejected."""
        assert not is_path_segment(name)


class TestRenderIndex:
    """Tests for render_index."""

    def test_markup(self) -> None:
        """Title, heading and one link per artifact."""
        roster = BucketRoster(bucket="1.x", artifacts={"widgets": "1.0", "gadgets": "1.1"})
        page = render_index("com.example", roster)

        assert page.startswith("<!DOCTYPE html>")
        assert "<title>com.example</title>" in page
        assert "<h1>com.example</h1>" in page
        assert '<li><a href="gadgets/">gadgets</a></li>' in page
        assert listed(page) == ["gadgets/", "widgets/"]

    def test_escapes_text(self) -> None:
        """Group ids are HTML-escaped."""
        page = render_index("a<b>&c", BucketRoster(bucket="1.x"))
        assert "<title>a&lt;b&gt;&amp;c</title>" in page


class TestIndexBuilder:
    """Tests for IndexBuilder."""

    def test_paths(self, temp_dir: Path) -> None:
        """Paths are built from bucket and artifact id."""
        builder = IndexBuilder(temp_dir)
        assert builder.artifact_dir("2.x", "widgets") == temp_dir / "2.x" / "widgets"
        assert builder.index_path("2.x") == temp_dir / "2.x" / "index.html"
        assert builder.roster_path("2.x") == temp_dir / "2.x" / "artifacts.json"

    def test_one_index_per_bucket(self, temp_dir: Path) -> None:
        """Each bucket gets its own index listing only its artifacts."""
        builder = IndexBuilder(temp_dir)
        written = builder.rebuild(
            "com.example",
            published_of(
                Artifact.create("com.example", "a-lib", "1.0.0"),
                Artifact.create("com.example", "b-lib", "2.0.0"),
            ),
        )

        indexes = sorted(p for p in temp_dir.rglob("index.html"))
        assert indexes == [temp_dir / "1.x" / "index.html", temp_dir / "2.x" / "index.html"]
        assert listed((temp_dir / "1.x" / "index.html").read_text()) == ["a-lib/"]
        assert listed((temp_dir / "2.x" / "index.html").read_text()) == ["b-lib/"]
        assert set(written) == {
            temp_dir / "1.x" / "index.html",
            temp_dir / "1.x" / "artifacts.json",
            temp_dir / "2.x" / "index.html",
            temp_dir / "2.x" / "artifacts.json",
        }

    def test_sorted_by_artifact_id(self, temp_dir: Path) -> None:
        """Listing order does not depend on publish order."""
        builder = IndexBuilder(temp_dir)
        builder.rebuild(
            "com.example",
            published_of(
                Artifact.create("com.example", "zeta", "1.0"),
                Artifact.create("com.example", "alpha", "1.1"),
                Artifact.create("com.example", "mid", "1.2"),
            ),
        )
        assert listed(builder.index_path("1.x").read_text()) == ["alpha/", "mid/", "zeta/"]

    def test_nothing_published_writes_nothing(self, temp_dir: Path) -> None:
        """An empty run leaves the tree untouched."""
        assert IndexBuilder(temp_dir).rebuild("com.example", PublishedSet()) == []
        assert list(temp_dir.iterdir()) == []

    def test_keeps_previously_published(self, temp_dir: Path) -> None:
        """A partial run still lists artifacts from earlier runs."""
        builder = IndexBuilder(temp_dir)
        builder.rebuild(
            "com.example",
            published_of(
                Artifact.create("com.example", "alpha", "1.0"),
                Artifact.create("com.example", "beta", "1.0"),
            ),
        )
        builder.rebuild(
            "com.example", published_of(Artifact.create("com.example", "beta", "1.1"))
        )

        assert listed(builder.index_path("1.x").read_text()) == ["alpha/", "beta/"]
        roster = json.loads(builder.roster_path("1.x").read_text())
        assert roster["artifacts"] == {"alpha": "1.0", "beta": "1.1"}
        assert roster["group_id"] == "com.example"

    def test_seeds_roster_from_markers(self, temp_dir: Path) -> None:
        """Trees without a roster are recovered from version markers."""
        builder = IndexBuilder(temp_dir)
        write_marker(builder.artifact_dir("1.x", "legacy"), "1.4")
        (temp_dir / "1.x" / "stray-dir").mkdir()
        (temp_dir / "1.x" / "notes.txt").write_text("x")

        roster = builder.load_roster("1.x")
        assert roster.artifacts == {"legacy": "1.4"}

        builder.rebuild("com.example", published_of(Artifact.create("com.example", "new", "1.5")))
        assert listed(builder.index_path("1.x").read_text()) == ["legacy/", "new/"]

    def test_unreadable_roster_falls_back_to_markers(self, temp_dir: Path) -> None:
        """A corrupt roster is rebuilt from the markers on disk."""
        builder = IndexBuilder(temp_dir)
        write_marker(builder.artifact_dir("1.x", "legacy"), "1.4")
        builder.roster_path("1.x").write_text("{not json")

        assert builder.load_roster("1.x").artifacts == {"legacy": "1.4"}

    def test_overwrites_existing_index(self, temp_dir: Path) -> None:
        """The index is regenerated, not patched."""
        builder = IndexBuilder(temp_dir)
        builder.bucket_dir("1.x").mkdir()
        builder.index_path("1.x").write_text("<html>hand edited</html>")

        builder.rebuild("com.example", published_of(Artifact.create("com.example", "a", "1.0")))

        page = builder.index_path("1.x").read_text()
        assert "hand edited" not in page
        assert listed(page) == ["a/"]

    def test_write_failure_is_typed(self, temp_dir: Path) -> None:
        """A file in the bucket directory's place raises ExtractionError."""
        builder = IndexBuilder(temp_dir)
        builder.bucket_dir("1.x").write_text("not a directory")

        with pytest.raises(ExtractionError) as exc_info:
            builder.rebuild(
                "com.example", published_of(Artifact.create("com.example", "a", "1.0"))
            )

        assert exc_info.value.destination == str(builder.bucket_dir("1.x"))
        assert "path" in exc_info.value.details
