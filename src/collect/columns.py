"""Per-content-type display columns for search results.

Provider metadata has a different shape for every content type; these
tables decide which keys are shown and how they are summarized.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .models import ContentType, MatchCandidate


@dataclass(frozen=True)
class ColumnSchema:
    """Headers and row extractor for one content type."""

    headers: tuple[str, ...]
    row: Callable[[MatchCandidate], list[str]]


def _text(value: Any) -> str:
    return str(value) if value not in (None, "") else "-"


def _first(values: Any, count: int = 2) -> str:
    if not values:
        return "-"
    return ", ".join(str(v) for v in list(values)[:count]) or "-"


def _score(value: Any) -> str:
    if not value:
        return "-"
    return f"{float(value):.1f}"


COLUMN_SCHEMAS: dict[ContentType, ColumnSchema] = {
    ContentType.BOOK: ColumnSchema(
        headers=("Title", "Author", "Publisher", "Published", "ISBN"),
        row=lambda c: [
            c.title,
            _text(c.creator),
            _text(c.metadata.get("publisher")),
            _text(c.metadata.get("publishDate")),
            _text(c.metadata.get("isbn")),
        ],
    ),
    ContentType.VIDEO: ColumnSchema(
        headers=("Title", "Original title", "Released", "Rating", "Genres"),
        row=lambda c: [
            c.title,
            _text(c.metadata.get("originalTitle")),
            _text(c.metadata.get("releaseDate")),
            _score(c.metadata.get("voteAverage")),
            _first(c.metadata.get("genres")),
        ],
    ),
    ContentType.GAME: ColumnSchema(
        headers=("Title", "Developer", "Released", "Platforms", "Rating"),
        row=lambda c: [
            c.title,
            _text(c.metadata.get("developer") or c.creator),
            _text(c.metadata.get("releaseDate")),
            _first(c.metadata.get("platforms")),
            _text(c.metadata.get("rating")),
        ],
    ),
    ContentType.MUSIC: ColumnSchema(
        headers=("Title", "Artist", "Released", "Album type", "Tracks"),
        row=lambda c: [
            c.title,
            _first(c.metadata.get("artists") or [c.creator], count=10),
            _text(c.metadata.get("releaseDate")),
            _text(c.metadata.get("albumType")),
            _text(c.metadata.get("totalTracks")),
        ],
    ),
    ContentType.CERTIFICATE: ColumnSchema(
        headers=("Certificate", "Issuer", "Grade", "Field"),
        row=lambda c: [
            c.title,
            _text(c.creator),
            _text(c.metadata.get("grade")),
            _text(c.metadata.get("field")),
        ],
    ),
}


def row_for(candidate: MatchCandidate, content_type: ContentType) -> list[str]:
    """Column values of `candidate` for the manual-search table."""
    return COLUMN_SCHEMAS[content_type].row(candidate)


def metadata_summary(candidate: MatchCandidate, content_type: ContentType) -> str:
    """One-line metadata summary shown under a matched item.

    Example:
        >>> metadata_summary(album, ContentType.MUSIC)
        '2019-05-03 · album · 12 tracks'
    """
    meta = candidate.metadata
    parts: list[str] = []

    if content_type == ContentType.BOOK:
        parts = [meta.get("publisher"), meta.get("publishDate")]
        if meta.get("isbn"):
            parts.append(f"ISBN: {meta['isbn']}")
    elif content_type == ContentType.VIDEO:
        parts = [meta.get("releaseDate")]
        if meta.get("voteAverage"):
            parts.append(f"rated {float(meta['voteAverage']):.1f}")
        if meta.get("genres"):
            parts.append(", ".join(meta["genres"][:2]))
    elif content_type == ContentType.GAME:
        parts = [meta.get("developer"), meta.get("releaseDate")]
        if meta.get("platforms"):
            parts.append(", ".join(meta["platforms"][:2]))
    elif content_type == ContentType.MUSIC:
        parts = [meta.get("releaseDate"), meta.get("albumType")]
        if meta.get("totalTracks"):
            parts.append(f"{meta['totalTracks']} tracks")

    return " · ".join(str(p) for p in parts if p)
