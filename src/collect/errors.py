"""Exceptions raised by the collection pipeline."""


class CollectError(Exception):
    """Base exception for collection errors."""

    pass


class ValidationError(CollectError):
    """Structured input is malformed.

    Attributes:
        positions: 1-based positions of the offending elements (empty when the
            payload as a whole is malformed)
    """

    def __init__(self, message: str, positions: list[int] | None = None):
        super().__init__(message)
        self.positions = positions or []


class ExtractionError(CollectError):
    """The extraction service reported a failure."""

    pass


class SearchError(CollectError):
    """A batch or manual search failed as a whole."""

    pass


class CommitError(CollectError):
    """The persistence service failed; nothing was saved."""

    pass


class SessionBusyError(CollectError):
    """Another extraction, matching or commit call is still in flight."""

    pass
