"""Open Library API client for book search."""

from collect.models import SearchPage
from common.constants import MANUAL_SEARCH_PAGE_SIZE
from common.logger import get_logger

from ..normalizers.books import OpenLibraryNormalizer
from .base import ProviderClient

logger = get_logger(__name__)


class OpenLibraryClient(ProviderClient):
    """Client for the Open Library search API.

    Rate limit: Conservative 60 requests per minute (unofficial limit).

    API Documentation: https://openlibrary.org/dev/docs/api/search
    """

    name = "openlibrary"
    BASE_URL = "https://openlibrary.org"
    SEARCH_URL = f"{BASE_URL}/search.json"
    FIELDS = "key,title,author_name,first_publish_year,publisher,isbn,cover_i"

    def __init__(self, requests_per_minute: int = 60, page_size: int = MANUAL_SEARCH_PAGE_SIZE):
        super().__init__(requests_per_minute)
        self.page_size = page_size
        self.normalizer = OpenLibraryNormalizer()

    def search(self, query: str, page: int = 1) -> SearchPage:
        # "Title - Author" queries are split so each half hits its own index
        title, _, author = query.partition(" - ")
        params: dict[str, str | int] = {
            "page": page,
            "limit": self.page_size,
            "fields": self.FIELDS,
        }
        if author.strip():
            params["title"] = title.strip()
            params["author"] = author.strip()
        else:
            params["q"] = query

        logger.debug(f"Searching Open Library for '{query}' (page {page})")
        data = self._request("GET", self.SEARCH_URL, params=params)

        items = self._normalize_all(self.normalizer, data.get("docs", []))
        total = int(data.get("numFound", 0))
        return SearchPage(items=items, total=total, has_more=page * self.page_size < total)
