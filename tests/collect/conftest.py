"""In-memory collaborators shared by the collection tests."""

import pytest

from collect.interfaces import ContentSearch, ExtractionService, PersistenceService
from collect.models import (
    CommitResult,
    ContentType,
    ExtractedItem,
    ExtractionResult,
    MatchCandidate,
    SearchPage,
)


class FakeSearch(ContentSearch):
    """Answers queries from a dict; queries listed in `errors` raise."""

    def __init__(self, responses=None, errors=None):
        self.responses = responses or {}
        self.errors = errors or {}
        self.calls = []

    def search(self, content_type, query, page=1, prefer_provider=None):
        self.calls.append((content_type, query, page, prefer_provider))
        if query in self.errors:
            raise self.errors[query]
        items = list(self.responses.get(query, []))
        return SearchPage(items=items, total=len(items), has_more=False)


class FakeStore(PersistenceService):
    """Records commits; raises `error` when set."""

    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def commit(self, records, subject_id, origin_url):
        if self.error:
            raise self.error
        self.calls.append((list(records), subject_id, origin_url))
        return CommitResult(saved_count=len(records))


class FakeExtractor(ExtractionService):
    """Returns fixed items, or raises `error` when set."""

    def __init__(self, items=None, error=None, source_url=None):
        self.items = items or []
        self.error = error
        self.source_url = source_url
        self.calls = []

    def extract_from_text(self, text, hint=None):
        self.calls.append(("text", text, hint))
        if self.error:
            raise self.error
        return ExtractionResult(items=list(self.items))

    def extract_from_url(self, url, hint=None):
        self.calls.append(("url", url, hint))
        if self.error:
            raise self.error
        return ExtractionResult(items=list(self.items), source_url=self.source_url or url)


@pytest.fixture
def make_candidate():
    """Factory for match candidates."""

    def _make(title, creator="", external_id=None, source="test", **metadata):
        return MatchCandidate(
            external_id=external_id or f"{source}-{title.lower().replace(' ', '-')}",
            external_source=source,
            title=title,
            creator=creator,
            metadata=metadata,
        )

    return _make


@pytest.fixture
def make_item():
    """Factory for extracted items."""

    def _make(title, content_type=ContentType.BOOK, **fields):
        return ExtractedItem(type=content_type, title=title, **fields)

    return _make


@pytest.fixture
def fake_search():
    return FakeSearch()


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def fake_extractor():
    return FakeExtractor()
