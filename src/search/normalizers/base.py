"""Abstract base class for provider response normalizers."""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from collect.models import MatchCandidate


class Normalizer(ABC):
    """Base class for provider document normalizers.

    Normalizers convert one raw provider document (a search hit) into a
    MatchCandidate. Per-type details go into `metadata` under the keys the
    display columns expect (publisher, releaseDate, genres, ...).
    """

    @abstractmethod
    def normalize(self, document: dict[str, Any]) -> MatchCandidate:
        """Convert a provider document to a candidate.

        Args:
            document: One raw search hit

        Returns:
            Normalized candidate

        Raises:
            ValueError: If the document lacks an id or a title
        """
        pass

    def _safe_get(self, data: dict[str, Any], *keys: str | int, default: Any = None) -> Any:
        """Safely navigate nested dictionaries and lists.

        Example:
            >>> self._safe_get({'a': [{'b': 1}]}, 'a', 0, 'b')
            1
            >>> self._safe_get({'a': []}, 'a', 0, 'b', default='missing')
            'missing'
        """
        current: Any = data
        for key in keys:
            if isinstance(key, int):
                if isinstance(current, list) and -len(current) <= key < len(current):
                    current = current[key]
                else:
                    return default
            elif isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default
        return current if current is not None else default

    def _require(self, document: dict[str, Any], *keys: str) -> None:
        missing = [key for key in keys if document.get(key) in (None, "")]
        if missing:
            raise ValueError(f"Provider document is missing {', '.join(missing)}")

    def _date_from_timestamp(self, timestamp: int | float | None) -> str:
        """Convert a unix timestamp to YYYY-MM-DD ('' when absent)."""
        if not timestamp:
            return ""
        return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d")
