"""Manual search used to override or supply an item's match."""

from dataclasses import dataclass

from common.logger import get_logger
from search.clients.base import SearchClientError

from .errors import SearchError
from .interfaces import ContentSearch
from .matcher import rank_by_creator
from .models import ContentType, SearchPage

logger = get_logger(__name__)


@dataclass
class SearchHints:
    """Optional hints for a manual search.

    Attributes:
        prefer_provider: Provider to ask first (books only offer a choice)
        creator: Creator of the item being resolved, used to rank results
    """

    prefer_provider: str | None = None
    creator: str | None = None


class ManualSearch:
    """Paginated pass-through to the content-search service.

    Results are never auto-selected; the caller shows them and the user picks
    one row, which is then applied with `CollectSession.select_manual_result`.
    """

    def __init__(self, search: ContentSearch):
        self.search = search

    def search_page(
        self,
        content_type: ContentType,
        query: str,
        page: int = 1,
        hints: SearchHints | None = None,
    ) -> SearchPage:
        """Fetch one page of results exactly as the provider ranked them.

        Raises:
            SearchError: If the provider request failed
        """
        hints = hints or SearchHints()
        query = query.strip()
        if not query:
            return SearchPage(items=[], total=0, has_more=False)

        try:
            result = self.search.search(content_type, query, page, hints.prefer_provider)
        except SearchClientError as e:
            raise SearchError(f"Search failed for '{query}': {e}") from e

        logger.debug(
            f"Manual search '{query}' page {page}: {len(result.items)} of {result.total}"
        )
        return result

    def ranked_page(
        self,
        content_type: ContentType,
        query: str,
        page: int = 1,
        hints: SearchHints | None = None,
    ) -> SearchPage:
        """Fetch one page with creator-matching rows moved to the top."""
        hints = hints or SearchHints()
        result = self.search_page(content_type, query, page, hints)
        return SearchPage(
            items=rank_by_creator(result.items, hints.creator),
            total=result.total,
            has_more=result.has_more,
        )
