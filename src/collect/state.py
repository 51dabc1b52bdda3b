"""Working state of a collection session and its pure transitions.

All per-item collections are keyed by position in `items`. Positions shift
when committed items leave the working list, so `compact` rebuilds every
collection from scratch rather than deleting keys in place.
"""

from dataclasses import dataclass, field, replace

from .models import CommitRecord, ExtractedItem, ProcessedItem


@dataclass
class SessionState:
    """Everything a session holds between collaborator calls.

    Invariants:
        - `selected` and `excluded` never share an index
        - every index in `selected`, `excluded`, `collapsed` and `processed`
          is a valid position in `items`
    """

    items: list[ExtractedItem] = field(default_factory=list)
    selected: set[int] = field(default_factory=set)
    excluded: set[int] = field(default_factory=set)
    collapsed: set[int] = field(default_factory=set)
    processed: dict[int, ProcessedItem] = field(default_factory=dict)
    source_url: str | None = None


def display_order(state: SessionState) -> list[int]:
    """Non-excluded indices first, then excluded ones, each in list order."""
    indices = range(len(state.items))
    kept = [i for i in indices if i not in state.excluded]
    excluded = [i for i in indices if i in state.excluded]
    return kept + excluded


def committable_indices(state: SessionState, target_indices: list[int] | set[int]) -> list[int]:
    """Targets that are selected and have a match, in ascending order.

    Anything else is left out of the commit silently.
    """
    result = []
    for index in sorted(set(target_indices)):
        processed = state.processed.get(index)
        if index in state.selected and processed and processed.selected_match:
            result.append(index)
    return result


def build_commit_record(state: SessionState, index: int) -> CommitRecord:
    """Finalize one item for persistence.

    The committed title prefers the (possibly user-edited) localized title and
    the committed creator prefers the item's own creator over the match's.
    The original title travels along when it differs from the committed one.
    """
    item = state.items[index]
    processed = state.processed[index]
    match = processed.selected_match
    if match is None:
        raise ValueError(f"Item {index} has no selected match")

    final_title = item.title_localized or item.title
    final_match = replace(
        match,
        title=final_title,
        creator=item.creator or match.creator,
        metadata=dict(match.metadata),
    )

    return CommitRecord(
        match=final_match,
        content_type=item.type,
        status=processed.status,
        source_url=item.source_url,
        review=item.review,
        rating=item.rating,
        title_original=item.title if item.title != final_title else None,
    )


def compact(state: SessionState, committed: set[int]) -> SessionState:
    """Drop committed items and re-key every collection densely.

    Args:
        state: State before the commit
        committed: Indices that were persisted

    Returns:
        New state; selection is always cleared

    Example:
        Committing {0, 2} from four items where 3 was excluded leaves the old
        items 1 and 3 at new indices 0 and 1, with 1 excluded.
    """
    new_state = SessionState(source_url=state.source_url)

    for old_index, item in enumerate(state.items):
        if old_index in committed:
            continue

        new_index = len(new_state.items)
        new_state.items.append(item)

        if old_index in state.processed:
            new_state.processed[new_index] = state.processed[old_index]
        if old_index in state.excluded:
            new_state.excluded.add(new_index)
        if old_index in state.collapsed:
            new_state.collapsed.add(new_index)

    return new_state
