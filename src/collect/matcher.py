"""Creator-based selection among provider search results.

Providers rank by title relevance only; the creator recorded on the extracted
item is used to prefer the right edition, film or album. Two creator strings
agree when, after trimming and lower-casing, either contains the other, so
"rowling" agrees with "J.K. Rowling" and the reverse.
"""

from .models import MatchCandidate


def normalize_creator(creator: str | None) -> str:
    """Trim and lower-case a creator name (None becomes '')."""
    return (creator or "").strip().lower()


def creator_matches(candidate: MatchCandidate, normalized_target: str) -> bool:
    """Check bidirectional containment against an already-normalized target."""
    creator = normalize_creator(candidate.creator)
    return normalized_target in creator or creator in normalized_target


def pick_best(
    candidates: list[MatchCandidate], target_creator: str | None = None
) -> MatchCandidate | None:
    """Pick the best candidate for an item.

    Args:
        candidates: Provider results in provider rank order
        target_creator: Creator recorded on the extracted item

    Returns:
        The first candidate whose creator agrees with `target_creator`, else
        the first candidate; None only when `candidates` is empty

    Example:
        >>> pick_best([hamlet_by_lamb, hamlet_by_shakespeare], "Shakespeare")
        hamlet_by_shakespeare
    """
    if not candidates:
        return None

    target = normalize_creator(target_creator)
    if not target:
        return candidates[0]

    for candidate in candidates:
        if creator_matches(candidate, target):
            return candidate

    return candidates[0]


def rank_by_creator(
    candidates: list[MatchCandidate], target_creator: str | None = None
) -> list[MatchCandidate]:
    """Move creator-matching candidates to the top, keeping relative order.

    Used for display only; nothing is selected.
    """
    target = normalize_creator(target_creator)
    if not target:
        return list(candidates)

    # sorted() is stable, so ties keep provider order
    return sorted(candidates, key=lambda c: 0 if creator_matches(c, target) else 1)
