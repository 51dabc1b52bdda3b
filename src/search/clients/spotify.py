"""Spotify Web API client for album search."""

from collect.models import SearchPage
from common.constants import MANUAL_SEARCH_PAGE_SIZE
from common.logger import get_logger

from ..normalizers.media import SpotifyNormalizer
from .auth import ClientCredentialsToken
from .base import ProviderClient

logger = get_logger(__name__)


class SpotifyClient(ProviderClient):
    """Client for Spotify album search (client-credentials flow).

    API Documentation: https://developer.spotify.com/documentation/web-api
    """

    name = "spotify"
    BASE_URL = "https://api.spotify.com/v1"
    TOKEN_URL = "https://accounts.spotify.com/api/token"

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        market: str = "US",
        requests_per_minute: int = 60,
        page_size: int = MANUAL_SEARCH_PAGE_SIZE,
    ):
        super().__init__(requests_per_minute)
        self.market = market
        self.page_size = page_size
        self.token = ClientCredentialsToken(
            "Spotify", self.TOKEN_URL, client_id, client_secret, self.session
        )
        self.normalizer = SpotifyNormalizer()

    def search(self, query: str, page: int = 1) -> SearchPage:
        headers = {"Authorization": f"Bearer {self.token.get()}"}
        params = {
            "q": query,
            "type": "album",
            "market": self.market,
            "limit": self.page_size,
            "offset": (page - 1) * self.page_size,
        }

        logger.debug(f"Searching Spotify for '{query}' (page {page})")
        data = self._request("GET", f"{self.BASE_URL}/search", params=params, headers=headers)

        albums = data.get("albums", {})
        return SearchPage(
            items=self._normalize_all(self.normalizer, albums.get("items", [])),
            total=int(albums.get("total", 0)),
            has_more=albums.get("next") is not None,
        )
