"""Persist approved content records for a subject."""

import json

from collect.errors import CommitError
from collect.interfaces import PersistenceService
from collect.models import CommitRecord, CommitResult
from common.logger import get_logger

from .db import ContentDatabase, DatabaseError

logger = get_logger(__name__)

UPSERT_CONTENT = """
    INSERT INTO contents
        (type, external_source, external_id, title, creator, cover_image_url, metadata)
    VALUES (?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT (external_source, external_id) DO UPDATE SET
        type = excluded.type,
        title = excluded.title,
        creator = excluded.creator,
        cover_image_url = excluded.cover_image_url,
        metadata = excluded.metadata,
        updated_at = CURRENT_TIMESTAMP
"""

SELECT_CONTENT_ID = "SELECT id FROM contents WHERE external_source = ? AND external_id = ?"

UPSERT_SUBJECT_CONTENT = """
    INSERT INTO subject_contents (subject_id, content_id, status, review, rating, source_url)
    VALUES (?, ?, ?, ?, ?, ?)
    ON CONFLICT (subject_id, content_id) DO UPDATE SET
        status = excluded.status,
        review = excluded.review,
        rating = excluded.rating,
        source_url = excluded.source_url,
        updated_at = CURRENT_TIMESTAMP
"""


SELECT_FOR_SUBJECT = """
    SELECT c.type, c.external_source, c.external_id, c.title, c.creator,
           c.metadata, sc.status, sc.review, sc.rating, sc.source_url
    FROM subject_contents sc
    JOIN contents c ON c.id = sc.content_id
    WHERE sc.subject_id = ?
    ORDER BY sc.id
"""


class ContentStore(PersistenceService):
    """SQLite-backed persistence for committed items.

    Each `commit()` call is one transaction: either every record is stored
    and linked to the subject, or nothing is.

    Example:
        >>> store = ContentStore.from_env()
        >>> store.init_schema()
        >>> store.commit(records, subject_id="ada", origin_url=None)
    """

    def __init__(self, db: ContentDatabase):
        self.db = db

    @classmethod
    def from_env(cls) -> "ContentStore":
        return cls(ContentDatabase.from_env())

    def init_schema(self) -> None:
        """Create the tables if they do not exist."""
        with self.db.transaction() as db:
            db.create_schema()

    def commit(
        self, records: list[CommitRecord], subject_id: str, origin_url: str | None
    ) -> CommitResult:
        if not records:
            return CommitResult(saved_count=0)

        linked: set[int] = set()
        try:
            with self.db.transaction() as db:
                for record in records:
                    content_id = self._upsert_content(db, record)
                    linked.add(content_id)
                    db.execute(
                        UPSERT_SUBJECT_CONTENT,
                        (
                            subject_id,
                            content_id,
                            record.status,
                            record.review,
                            record.rating,
                            record.source_url or origin_url,
                        ),
                    )
        except DatabaseError as e:
            logger.error(f"Commit for subject {subject_id} failed, nothing was saved: {e}")
            raise CommitError(str(e)) from e

        if len(linked) < len(records):
            logger.warning(
                f"{len(records) - len(linked)} record(s) matched content already in this commit"
            )
        logger.info(f"Saved {len(linked)} item(s) for subject {subject_id}")
        return CommitResult(saved_count=len(linked))

    @staticmethod
    def _upsert_content(db: ContentDatabase, record: CommitRecord) -> int:
        match = record.match
        metadata = dict(match.metadata)
        if record.title_original:
            metadata["titleOriginal"] = record.title_original

        db.execute(
            UPSERT_CONTENT,
            (
                record.content_type.value,
                match.external_source,
                match.external_id,
                match.title,
                match.creator or None,
                match.cover_image_url,
                json.dumps(metadata, ensure_ascii=False),
            ),
        )
        return db.fetchscalar(SELECT_CONTENT_ID, (match.external_source, match.external_id))

    def list_for_subject(self, subject_id: str) -> list[dict]:
        """Return the stored contents linked to `subject_id`, oldest first."""
        with self.db.transaction() as db:
            rows = db.fetchall(SELECT_FOR_SUBJECT, (subject_id,))

        for row in rows:
            row["metadata"] = json.loads(row["metadata"])
        return rows
