"""Abstract collaborators used by a collection session.

Concrete implementations live in the `extraction`, `search` and `store`
packages; tests substitute in-memory fakes.
"""

from abc import ABC, abstractmethod

from .models import CommitRecord, CommitResult, ContentType, ExtractionResult, SearchPage


class ExtractionService(ABC):
    """Turns free text or a web page into extracted items."""

    @abstractmethod
    def extract_from_text(self, text: str, hint: str | None = None) -> ExtractionResult:
        """Extract items from free text.

        Args:
            text: Raw text mentioning consumed content
            hint: Optional name of the person whose consumption is described

        Raises:
            ExtractionError: With the service's own message
        """
        pass

    @abstractmethod
    def extract_from_url(self, url: str, hint: str | None = None) -> ExtractionResult:
        """Extract items from the page at `url`.

        Raises:
            ExtractionError: With the service's own message
        """
        pass


class ContentSearch(ABC):
    """Searches external providers for content records."""

    @abstractmethod
    def search(
        self,
        content_type: ContentType,
        query: str,
        page: int = 1,
        prefer_provider: str | None = None,
    ) -> SearchPage:
        """Search providers for `query`.

        An empty page is a valid answer, not an error.

        Raises:
            APIError: A single request failed
            ServiceUnavailableError: The provider cannot be reached or is not configured
        """
        pass


class PersistenceService(ABC):
    """Durably stores approved items."""

    @abstractmethod
    def commit(
        self, records: list[CommitRecord], subject_id: str, origin_url: str | None
    ) -> CommitResult:
        """Store `records` for `subject_id`, all or nothing.

        Raises:
            CommitError: Nothing was stored
        """
        pass
