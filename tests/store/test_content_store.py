"""Tests for committing records to the content store."""

import pytest

from collect.errors import CommitError
from collect.models import CommitRecord, ContentType, MatchCandidate
from store.content_store import ContentStore
from store.db import ContentDatabase


@pytest.fixture
def store(tmp_path):
    store = ContentStore(ContentDatabase(tmp_path / "collect.db"))
    store.init_schema()
    return store


@pytest.fixture
def dune():
    return CommitRecord(
        match=MatchCandidate(
            external_id="openlibrary-OL893415W",
            external_source="openlibrary",
            title="듄",
            creator="Frank Herbert",
            metadata={"publisher": "Chilton", "publishDate": "1965"},
        ),
        content_type=ContentType.BOOK,
        status="FINISHED",
        review="Spice must flow",
        rating=4.5,
        title_original="Dune",
    )


@pytest.fixture
def hades():
    return CommitRecord(
        match=MatchCandidate(external_id="igdb-113112", external_source="igdb", title="Hades"),
        content_type=ContentType.GAME,
        status="IN_PROGRESS",
        source_url="https://item.example/hades",
    )


class TestContentStore:
    """Tests for ContentStore.commit."""

    def test_commit_links_records_to_subject(self, store, dune, hades):
        result = store.commit([dune, hades], "ada", "https://origin.example")

        assert result.saved_count == 2
        rows = store.list_for_subject("ada")
        assert [r["title"] for r in rows] == ["듄", "Hades"]

        book = rows[0]
        assert book["type"] == "BOOK"
        assert book["creator"] == "Frank Herbert"
        assert book["metadata"] == {
            "publisher": "Chilton",
            "publishDate": "1965",
            "titleOriginal": "Dune",
        }
        assert (book["status"], book["review"], book["rating"]) == ("FINISHED", "Spice must flow", 4.5)
        assert book["source_url"] == "https://origin.example"

        game = rows[1]
        assert game["creator"] is None
        assert game["source_url"] == "https://item.example/hades"
        assert "titleOriginal" not in game["metadata"]

    def test_records_sharing_a_match_count_once(self, store):
        """Two items matched to the same film end up as one stored link."""
        film = MatchCandidate(external_id="tmdb-movie-1", external_source="tmdb", title="Parasite")
        records = [
            CommitRecord(match=film, content_type=ContentType.VIDEO, status="FINISHED"),
            CommitRecord(
                match=film, content_type=ContentType.VIDEO, status="FINISHED", review="Again"
            ),
        ]

        result = store.commit(records, "ada", None)

        rows = store.list_for_subject("ada")
        assert (result.saved_count, len(rows)) == (1, 1)
        assert rows[0]["review"] == "Again"

    def test_existing_content_is_updated_not_duplicated(self, store, dune):
        store.commit([dune], "ada", None)
        dune.match.title = "Dune"
        store.commit([dune], "grace", None)

        with store.db.transaction() as db:
            count = db.fetchscalar("SELECT COUNT(*) FROM contents")

        assert count == 1
        assert store.list_for_subject("ada")[0]["title"] == "Dune"
        assert len(store.list_for_subject("grace")) == 1

    def test_recommitting_updates_the_link(self, store, dune):
        store.commit([dune], "ada", None)
        dune.status = "ABANDONED"

        store.commit([dune], "ada", None)

        rows = store.list_for_subject("ada")
        assert len(rows) == 1
        assert rows[0]["status"] == "ABANDONED"

    def test_failure_rolls_back_everything(self, store, dune, hades):
        hades.rating = 9.0  # violates the rating CHECK constraint

        with pytest.raises(CommitError):
            store.commit([dune, hades], "ada", None)

        assert store.list_for_subject("ada") == []

    def test_missing_schema(self, tmp_path, dune):
        store = ContentStore(ContentDatabase(tmp_path / "empty.db"))

        with pytest.raises(CommitError):
            store.commit([dune], "ada", None)

    def test_nothing_to_commit(self, tmp_path):
        store = ContentStore(ContentDatabase(tmp_path / "never.db"))

        assert store.commit([], "ada", None).saved_count == 0
        assert not (tmp_path / "never.db").exists()
