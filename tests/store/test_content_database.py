"""Tests for the SQLite content database."""

import pytest

from store.db import ContentDatabase, DatabaseError, IntegrityError

INSERT_DUNE = (
    "INSERT INTO contents (type, external_source, external_id, title) "
    "VALUES ('BOOK', 'openlibrary', 'openlibrary-OL1W', 'Dune')"
)


@pytest.fixture
def db(tmp_path):
    db = ContentDatabase(tmp_path / "collect.db")
    with db.transaction():
        db.create_schema()
    return db


class TestContentDatabase:
    """Tests for ContentDatabase."""

    def test_not_created_until_used(self, tmp_path):
        db = ContentDatabase(tmp_path / "nested" / "dir" / "collect.db")
        assert not db.exists()
        assert not db.connected

        with db.transaction():
            assert db.connected

        assert db.exists()
        assert not db.connected

    def test_create_schema(self, db):
        with db.transaction():
            assert db.table_names() == ["contents", "subject_contents"]

    def test_create_schema_is_repeatable(self, db):
        with db.transaction():
            db.create_schema()

    def test_fetch_helpers(self, db):
        with db.transaction():
            db.execute(
                "INSERT INTO contents (type, external_source, external_id, title) VALUES (?, ?, ?, ?)",
                ("BOOK", "openlibrary", "openlibrary-OL1W", "Dune"),
            )

            assert db.fetchone("SELECT title, metadata FROM contents") == {
                "title": "Dune",
                "metadata": "{}",
            }
            assert db.fetchall("SELECT type FROM contents") == [{"type": "BOOK"}]
            assert db.fetchscalar("SELECT COUNT(*) FROM contents") == 1
            assert db.fetchone("SELECT title FROM contents WHERE id = ?", (99,)) is None

    def test_block_commits_on_success(self, db):
        with db.transaction():
            db.execute(INSERT_DUNE)

        with db.transaction():
            assert db.fetchscalar("SELECT COUNT(*) FROM contents") == 1

    def test_block_rolls_back_on_error(self, db):
        with pytest.raises(IntegrityError):
            with db.transaction():
                db.execute(
                    "INSERT INTO contents (type, external_source, external_id, title) "
                    "VALUES ('GAME', 'igdb', 'igdb-1', 'Hades')"
                )
                db.execute(INSERT_DUNE)
                db.execute(INSERT_DUNE)

        assert not db.connected
        with db.transaction():
            assert db.fetchscalar("SELECT COUNT(*) FROM contents") == 0

    def test_rating_constraint(self, db):
        with db.transaction():
            db.execute(INSERT_DUNE)

        with pytest.raises(IntegrityError):
            with db.transaction():
                db.execute(
                    "INSERT INTO subject_contents (subject_id, content_id, status, rating) "
                    "VALUES ('ada', 1, 'FINISHED', 7.5)"
                )

    def test_foreign_keys_enforced(self, db):
        with pytest.raises(IntegrityError):
            with db.transaction():
                db.execute(
                    "INSERT INTO subject_contents (subject_id, content_id, status) "
                    "VALUES ('ada', 42, 'FINISHED')"
                )

    def test_requires_transaction(self, db):
        with pytest.raises(DatabaseError, match="No open transaction"):
            db.execute("SELECT 1")

    def test_nested_transaction_rejected(self, db):
        with db.transaction():
            with pytest.raises(DatabaseError, match="already open"):
                with db.transaction():
                    pass

    def test_bad_query(self, db):
        with pytest.raises(DatabaseError, match="Query failed"):
            with db.transaction():
                db.execute("SELECT * FROM missing_table")

    def test_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "env.db"))

        assert ContentDatabase.from_env().db_path == tmp_path / "env.db"
