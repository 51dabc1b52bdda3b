"""Batch matching of extracted items against external content search."""

import time

from common.constants import MAX_CANDIDATES_PER_BRANCH
from common.logger import get_logger
from search.clients.base import SearchClientError

from .errors import SearchError
from .interfaces import ContentSearch
from .matcher import pick_best
from .models import ContentType, ExtractedItem, MatchCandidate, MatchSource, ProcessedItem

logger = get_logger(__name__)


def build_query(item: ExtractedItem, title: str) -> str:
    """Build the provider query for one title variant.

    Book providers match noticeably better with the author appended.
    """
    if item.type == ContentType.BOOK and item.creator:
        return f"{title} - {item.creator}"
    return title


def build_processed_item(
    item: ExtractedItem,
    localized_results: list[MatchCandidate],
    original_results: list[MatchCandidate],
) -> ProcessedItem:
    """Choose the default branch and match for one item.

    The localized branch wins when it has results, then the original branch;
    with neither the item is left for manual resolution.
    """
    localized_title = item.title_localized or item.title

    if localized_results:
        source = MatchSource.LOCALIZED
        selected = pick_best(localized_results, item.creator)
        query = localized_title
    elif original_results:
        source = MatchSource.ORIGINAL
        selected = pick_best(original_results, item.creator)
        query = item.title
    else:
        source = MatchSource.MANUAL
        selected = None
        query = item.title

    return ProcessedItem(
        localized_results=localized_results,
        original_results=original_results,
        selected_match=selected,
        match_source=source,
        last_search_query=query,
    )


class MatchOrchestrator:
    """Resolve a batch of extracted items against a content-search service.

    Each item is searched with its localized title and with its original
    title. A failed request, whether an HTTP error or an unconfigured
    provider, only empties that branch of that item; the batch fails as a
    whole only when every request failed.
    Results are returned only for a completed batch.
    """

    def __init__(
        self,
        search: ContentSearch,
        prefer_provider: str | None = None,
        delay_seconds: float = 0.0,
        max_candidates: int = MAX_CANDIDATES_PER_BRANCH,
    ):
        """Initialize orchestrator.

        Args:
            search: Content-search collaborator
            prefer_provider: Provider hint forwarded with every query
            delay_seconds: Pause between items, to spread load on providers
            max_candidates: Candidates kept per branch
        """
        self.search = search
        self.prefer_provider = prefer_provider
        self.delay_seconds = delay_seconds
        self.max_candidates = max_candidates

    def resolve(self, items: dict[int, ExtractedItem]) -> dict[int, ProcessedItem]:
        """Search and auto-select a match for every item of the batch.

        Args:
            items: Extracted items keyed by their working-list index

        Returns:
            ProcessedItem per index

        Raises:
            SearchError: If the batch could not be searched at all
        """
        if not items:
            return {}

        attempted = 0
        failed = 0
        last_error: SearchClientError | None = None
        results: dict[int, ProcessedItem] = {}

        logger.info(f"Matching {len(items)} item(s)")
        for position, (index, item) in enumerate(items.items()):
            if position > 0 and self.delay_seconds > 0:
                time.sleep(self.delay_seconds)

            localized_title = item.title_localized or item.title
            localized, error = self._search_branch(item, localized_title)
            attempted += 1
            if error:
                failed += 1
                last_error = error

            original: list[MatchCandidate] = []
            if item.title != localized_title:
                original, error = self._search_branch(item, item.title)
                attempted += 1
                if error:
                    failed += 1
                    last_error = error

            processed = build_processed_item(item, localized, original)
            logger.debug(
                f"[{position + 1}/{len(items)}] '{localized_title}': "
                f"{len(localized)} localized, {len(original)} original, "
                f"source={processed.match_source.value}"
            )
            results[index] = processed

        if failed and failed == attempted:
            raise SearchError(
                f"All {attempted} search request(s) failed: {last_error}"
            ) from last_error

        matched = sum(1 for p in results.values() if p.selected_match is not None)
        logger.info(f"Matched {matched}/{len(results)} item(s)")
        return results

    def _search_branch(
        self, item: ExtractedItem, title: str
    ) -> tuple[list[MatchCandidate], SearchClientError | None]:
        """Search one title variant; returns (candidates, error or None)."""
        query = build_query(item, title)
        try:
            page = self.search.search(item.type, query, 1, self.prefer_provider)
        except SearchClientError as e:
            logger.warning(f"Search failed for '{query}': {e}")
            return [], e
        return page.items[: self.max_candidates], None
