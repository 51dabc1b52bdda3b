"""Data models for content collection sessions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from common.constants import DEFAULT_STATUS


class ContentType(str, Enum):
    """Kinds of consumed content."""

    BOOK = "BOOK"
    VIDEO = "VIDEO"
    GAME = "GAME"
    MUSIC = "MUSIC"
    CERTIFICATE = "CERTIFICATE"


# Types a structured (JSON) input may declare
STRUCTURED_INPUT_TYPES: tuple[ContentType, ...] = (
    ContentType.BOOK,
    ContentType.VIDEO,
    ContentType.GAME,
    ContentType.MUSIC,
)


class MatchSource(str, Enum):
    """Where the selected match of a processed item came from."""

    LOCALIZED = "localized"
    ORIGINAL = "original"
    MANUAL = "manual"


def is_valid_rating(rating: float) -> bool:
    """Ratings run from 0 to 5 in steps of 0.5."""
    return 0 <= rating <= 5 and float(rating * 2).is_integer()


@dataclass
class ExtractedItem:
    """One candidate piece of consumed content in the working list."""

    type: ContentType
    title: str
    title_localized: str | None = None
    creator: str | None = None
    creator_localized: str | None = None
    review: str | None = None
    rating: float | None = None
    source_url: str | None = None

    def __post_init__(self):
        if not isinstance(self.type, ContentType):
            self.type = ContentType(self.type)
        if self.rating is not None and not is_valid_rating(self.rating):
            raise ValueError(f"Rating must be between 0 and 5 in steps of 0.5, got {self.rating}")

    @property
    def display_title(self) -> str:
        """Localized title when present, else the original title."""
        return self.title_localized or self.title


@dataclass
class MatchCandidate:
    """One record returned by an external content-search provider."""

    external_id: str
    external_source: str
    title: str
    creator: str = ""
    cover_image_url: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class ProcessedItem:
    """Match-orchestration result for one extracted item."""

    localized_results: list[MatchCandidate] = field(default_factory=list)
    original_results: list[MatchCandidate] = field(default_factory=list)
    selected_match: MatchCandidate | None = None
    match_source: MatchSource = MatchSource.MANUAL
    status: str = DEFAULT_STATUS
    last_search_query: str = ""


@dataclass
class SearchPage:
    """One page of provider search results."""

    items: list[MatchCandidate]
    total: int
    has_more: bool


@dataclass
class ExtractionResult:
    """Items returned by the extraction service."""

    items: list[ExtractedItem]
    source_url: str | None = None


@dataclass
class CommitRecord:
    """A finalized item handed to the persistence service."""

    match: MatchCandidate
    content_type: ContentType
    status: str
    source_url: str | None = None
    review: str | None = None
    rating: float | None = None
    title_original: str | None = None


@dataclass
class CommitResult:
    """Outcome of a persistence call."""

    saved_count: int
