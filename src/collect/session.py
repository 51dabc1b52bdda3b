"""Session controller for collecting a person's consumed content.

A session owns the working list of extracted items and everything keyed by
their positions: selection, exclusion, collapse state and match results. It
calls three collaborators (extraction, content search, persistence) one at a
time; everything between those calls is plain in-memory bookkeeping.

Example:
    >>> session = CollectSession("subject-1", search=search, store=store)
    >>> session.load(json_text, InputMode.JSON)
    3
    >>> session.toggle_exclude(2)
    >>> session.run_matching()
    2
    >>> session.commit()
    2
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace

from common.logger import get_logger

from .errors import ExtractionError, SessionBusyError
from .interfaces import ContentSearch, ExtractionService, PersistenceService
from .manual_search import ManualSearch, SearchHints
from .models import MatchCandidate, MatchSource, ProcessedItem, SearchPage
from .orchestrator import MatchOrchestrator
from .parser import InputMode, parse_input
from .state import (
    SessionState,
    build_commit_record,
    committable_indices,
    compact,
    display_order,
)

logger = get_logger(__name__)


class CollectSession:
    """Owns the working state of one collection session.

    Only one collaborator call may be in flight at a time; a second one
    raises SessionBusyError. Collaborator failures leave the state exactly
    as it was before the call.
    """

    def __init__(
        self,
        subject_id: str,
        subject_name: str | None = None,
        extractor: ExtractionService | None = None,
        search: ContentSearch | None = None,
        store: PersistenceService | None = None,
        prefer_provider: str | None = None,
        delay_seconds: float = 0.0,
    ):
        """Initialize session.

        Args:
            subject_id: Id of the person the collected content is attached to
            subject_name: Display name, passed to the extraction service as a hint
            extractor: Extraction collaborator (text and URL input)
            search: Content-search collaborator
            store: Persistence collaborator
            prefer_provider: Provider hint used for batch matching
            delay_seconds: Pause between items of a batch search
        """
        self.subject_id = subject_id
        self.subject_name = subject_name
        self.extractor = extractor
        self.search = search
        self.store = store
        self.prefer_provider = prefer_provider
        self.delay_seconds = delay_seconds

        self.state = SessionState()
        self._busy: str | None = None
        self._generation = 0

    # Collaborator calls

    @contextmanager
    def _operation(self, name: str) -> Iterator[int]:
        if self._busy:
            raise SessionBusyError(f"Cannot start {name} while {self._busy} is in progress")
        self._busy = name
        try:
            yield self._generation
        finally:
            self._busy = None

    def _is_current(self, generation: int, name: str) -> bool:
        if generation != self._generation:
            logger.debug(f"Session was discarded during {name}; result not applied")
            return False
        return True

    @property
    def busy(self) -> str | None:
        """Name of the collaborator call in flight, if any."""
        return self._busy

    def load(self, raw: str, mode: InputMode | str) -> int:
        """Replace the working list with items parsed from raw input.

        Every loaded item starts selected. On failure the previous working
        list is kept.

        Returns:
            Number of items loaded

        Raises:
            ValidationError: Malformed structured input
            ExtractionError: Reported by the extraction service
        """
        with self._operation("extraction") as generation:
            result = parse_input(raw, mode, self.extractor, self.subject_name)
            if not result.items:
                raise ExtractionError("No content was found in the input")
            if not self._is_current(generation, "extraction"):
                return 0

            self.state = SessionState(
                items=list(result.items),
                selected=set(range(len(result.items))),
                source_url=result.source_url,
            )

        logger.info(f"Loaded {len(result.items)} item(s)")
        return len(result.items)

    def run_matching(self) -> int:
        """Match every selected item against content search.

        Returns:
            Number of items that received a ProcessedItem

        Raises:
            SearchError: The batch failed; no results were written
        """
        if self.search is None:
            raise ValueError("A content-search service is required for matching")

        with self._operation("matching") as generation:
            batch = {i: self.state.items[i] for i in sorted(self.state.selected)}
            if not batch:
                return 0

            orchestrator = MatchOrchestrator(
                self.search,
                prefer_provider=self.prefer_provider,
                delay_seconds=self.delay_seconds,
            )
            results = orchestrator.resolve(batch)
            if not self._is_current(generation, "matching"):
                return 0

            self.state.processed.update(results)

        return len(results)

    def commit(self, target_indices: list[int] | set[int] | None = None) -> int:
        """Persist approved items and drop them from the working list.

        Only targets that are selected and have a selected match are persisted;
        others are skipped silently. After a successful commit the remaining
        items are re-indexed densely and the selection is cleared.

        Args:
            target_indices: Indices to commit (default: the current selection)

        Returns:
            Number of items the persistence service reported as saved

        Raises:
            CommitError: Nothing was saved and the state is unchanged
        """
        if self.store is None:
            raise ValueError("A persistence service is required for commit")

        with self._operation("commit") as generation:
            targets = self.state.selected if target_indices is None else target_indices
            indices = committable_indices(self.state, targets)
            if not indices:
                logger.info("Nothing to commit")
                return 0

            records = [build_commit_record(self.state, i) for i in indices]
            result = self.store.commit(records, self.subject_id, self.state.source_url)
            if not self._is_current(generation, "commit"):
                return result.saved_count

            self.state = compact(self.state, set(indices))

        logger.info(
            f"Committed {result.saved_count} item(s), {len(self.state.items)} remaining"
        )
        return result.saved_count

    def manual_search(
        self, index: int, query: str | None = None, page: int = 1, prefer_provider: str | None = None
    ) -> SearchPage:
        """Search for an item by hand, creator matches first.

        Nothing is selected; apply the chosen row with `select_manual_result`.
        """
        if self.search is None:
            raise ValueError("A content-search service is required for manual search")
        self._check_index(index)

        item = self.state.items[index]
        hints = SearchHints(prefer_provider=prefer_provider, creator=item.creator)
        return ManualSearch(self.search).ranked_page(
            item.type, query or item.display_title, page, hints
        )

    def discard(self) -> None:
        """Drop the working state; in-flight results will not be applied."""
        self._generation += 1
        self.state = SessionState()
        logger.debug("Session discarded")

    # Selection and exclusion

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.state.items):
            raise IndexError(f"Item index {index} out of range (0..{len(self.state.items) - 1})")

    def toggle_select(self, index: int) -> None:
        """Flip selection of one item; excluded items cannot be selected."""
        self._check_index(index)
        if index in self.state.excluded:
            logger.debug(f"Item {index} is excluded; selection unchanged")
            return
        self.state.selected ^= {index}

    def toggle_select_all(self) -> None:
        """Select every non-excluded item, or clear the selection if all are selected."""
        selectable = {i for i in range(len(self.state.items)) if i not in self.state.excluded}
        if self.state.selected == selectable:
            self.state.selected = set()
        else:
            self.state.selected = selectable

    def toggle_exclude(self, index: int) -> None:
        """Exclude an item (deselecting and collapsing it), or restore it."""
        self._check_index(index)
        if index in self.state.excluded:
            self.state.excluded.discard(index)
        else:
            self.state.excluded.add(index)
            self.state.collapsed.add(index)
            self.state.selected.discard(index)

    def toggle_collapse(self, index: int) -> None:
        self._check_index(index)
        self.state.collapsed ^= {index}

    def toggle_collapse_all(self) -> None:
        """Collapse everything, or expand everything if all are collapsed."""
        all_indices = set(range(len(self.state.items)))
        if all_indices <= self.state.collapsed:
            self.state.collapsed = set()
        else:
            self.state.collapsed = all_indices

    # Item and match edits

    def update_item(self, index: int, **changes) -> None:
        """Replace fields of an extracted item (e.g. a corrected title)."""
        self._check_index(index)
        self.state.items[index] = replace(self.state.items[index], **changes)

    def set_status(self, index: int, status: str) -> None:
        """Change the workflow status of a processed item."""
        processed = self.state.processed.get(index)
        if processed is None:
            raise KeyError(f"Item {index} has not been matched")
        processed.status = status

    def apply_match_choice(
        self, index: int, candidate: MatchCandidate, source: MatchSource | str, query: str
    ) -> None:
        """Set the selected match of an item and mirror its identity onto the item.

        A manual choice on an item that was never matched creates its
        ProcessedItem; other sources require an existing one.
        """
        self._check_index(index)
        source = MatchSource(source)
        processed = self.state.processed.get(index)

        if processed is None:
            if source != MatchSource.MANUAL:
                raise KeyError(f"Item {index} has not been matched")
            processed = ProcessedItem(match_source=MatchSource.MANUAL)
            self.state.processed[index] = processed

        processed.selected_match = candidate
        processed.match_source = source
        processed.last_search_query = query

        self.update_item(
            index,
            title_localized=candidate.title,
            creator=candidate.creator,
            creator_localized=None,
        )

    def choose_candidate(self, index: int, source: MatchSource | str, position: int) -> None:
        """Pick another candidate from the localized or original branch."""
        source = MatchSource(source)
        processed = self.state.processed.get(index)
        if processed is None:
            raise KeyError(f"Item {index} has not been matched")

        if source == MatchSource.LOCALIZED:
            candidates = processed.localized_results
        elif source == MatchSource.ORIGINAL:
            candidates = processed.original_results
        else:
            raise ValueError("Manual results are applied with select_manual_result")

        if not 0 <= position < len(candidates):
            raise IndexError(f"No {source.value} candidate at position {position}")

        item = self.state.items[index]
        query = item.display_title if source == MatchSource.LOCALIZED else item.title
        self.apply_match_choice(index, candidates[position], source, query)

    def select_manual_result(self, index: int, candidate: MatchCandidate, query: str) -> None:
        """Apply a row the user picked from a manual search."""
        self.apply_match_choice(index, candidate, MatchSource.MANUAL, query)

    # Derived views

    def display_order(self) -> list[int]:
        return display_order(self.state)

    def savable_count(self) -> int:
        """Selected items that have a selected match."""
        return len(committable_indices(self.state, self.state.selected))

    def is_dirty(self) -> bool:
        """True while there is uncommitted work or a call in flight."""
        return bool(self.state.items) or self._busy is not None
