"""Google Books API client."""

from collect.models import SearchPage
from common.constants import MANUAL_SEARCH_PAGE_SIZE
from common.logger import get_logger

from ..normalizers.books import GoogleBooksNormalizer
from .base import ProviderClient

logger = get_logger(__name__)


class GoogleBooksClient(ProviderClient):
    """Client for the Google Books volumes API.

    Works anonymously; an API key raises the daily quota.

    API Documentation: https://developers.google.com/books/docs/v1/using
    """

    name = "googlebooks"
    VOLUMES_URL = "https://www.googleapis.com/books/v1/volumes"

    def __init__(
        self,
        api_key: str | None = None,
        requests_per_minute: int = 60,
        page_size: int = MANUAL_SEARCH_PAGE_SIZE,
    ):
        super().__init__(requests_per_minute)
        self.api_key = api_key
        self.page_size = page_size
        self.normalizer = GoogleBooksNormalizer()

    def search(self, query: str, page: int = 1) -> SearchPage:
        params: dict[str, str | int] = {
            "q": query,
            "startIndex": (page - 1) * self.page_size,
            "maxResults": self.page_size,
        }
        if self.api_key:
            params["key"] = self.api_key

        logger.debug(f"Searching Google Books for '{query}' (page {page})")
        data = self._request("GET", self.VOLUMES_URL, params=params)

        items = self._normalize_all(self.normalizer, data.get("items", []))
        total = int(data.get("totalItems", 0))
        return SearchPage(items=items, total=total, has_more=page * self.page_size < total)
