"""TMDB API client for films and TV series."""

from collect.models import SearchPage
from common.logger import get_logger

from ..normalizers.media import TmdbNormalizer
from .base import ProviderClient, ServiceUnavailableError

logger = get_logger(__name__)


class TmdbClient(ProviderClient):
    """Client for The Movie Database multi search.

    Movies and TV shows come back in one ranked list; people are dropped.

    API Documentation: https://developer.themoviedb.org/docs
    """

    name = "tmdb"
    BASE_URL = "https://api.themoviedb.org/3"

    def __init__(self, api_key: str | None, language: str = "en-US", requests_per_minute: int = 60):
        super().__init__(requests_per_minute)
        self.api_key = api_key
        self.language = language
        self.normalizer = TmdbNormalizer()

    def search(self, query: str, page: int = 1) -> SearchPage:
        if not self.api_key:
            raise ServiceUnavailableError("TMDB_API_KEY is not set")

        params = {
            "api_key": self.api_key,
            "query": query,
            "page": page,
            "language": self.language,
            "include_adult": "false",
        }

        logger.debug(f"Searching TMDB for '{query}' (page {page})")
        data = self._request("GET", f"{self.BASE_URL}/search/multi", params=params)

        results = [r for r in data.get("results", []) if r.get("media_type") in ("movie", "tv")]
        return SearchPage(
            items=self._normalize_all(self.normalizer, results),
            total=int(data.get("total_results", 0)),
            has_more=data.get("page", page) < data.get("total_pages", 0),
        )
