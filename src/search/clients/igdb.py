"""IGDB API client for game search."""

from collect.models import SearchPage
from common.constants import MANUAL_SEARCH_PAGE_SIZE
from common.logger import get_logger

from ..normalizers.media import IgdbNormalizer
from .auth import ClientCredentialsToken
from .base import ProviderClient

logger = get_logger(__name__)


class IgdbClient(ProviderClient):
    """Client for IGDB game search, authenticated through Twitch.

    IGDB queries are written in its Apicalypse language and it reports no
    total, so `total` is an estimate from the page size.

    API Documentation: https://api-docs.igdb.com/
    """

    name = "igdb"
    BASE_URL = "https://api.igdb.com/v4"
    TOKEN_URL = "https://id.twitch.tv/oauth2/token"
    FIELDS = (
        "name, slug, summary, first_release_date, cover.image_id, genres.name, "
        "platforms.name, involved_companies.company.name, involved_companies.developer, "
        "involved_companies.publisher, rating, aggregated_rating, total_rating"
    )

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        requests_per_minute: int = 60,
        page_size: int = MANUAL_SEARCH_PAGE_SIZE,
    ):
        super().__init__(requests_per_minute)
        self.client_id = client_id
        self.page_size = page_size
        self.token = ClientCredentialsToken(
            "IGDB", self.TOKEN_URL, client_id, client_secret, self.session, credentials_in_query=True
        )
        self.normalizer = IgdbNormalizer()

    def search(self, query: str, page: int = 1) -> SearchPage:
        headers = {
            "Client-ID": self.client_id or "",
            "Authorization": f"Bearer {self.token.get()}",
            "Content-Type": "text/plain",
        }
        offset = (page - 1) * self.page_size
        escaped = query.replace("\\", "\\\\").replace('"', '\\"')
        body = (
            f'search "{escaped}"; fields {self.FIELDS}; '
            f"limit {self.page_size}; offset {offset};"
        )

        logger.debug(f"Searching IGDB for '{query}' (page {page})")
        data = self._request("POST", f"{self.BASE_URL}/games", data=body.encode("utf-8"), headers=headers)

        items = self._normalize_all(self.normalizer, data or [])
        full_page = len(data or []) == self.page_size
        return SearchPage(
            items=items,
            total=offset + len(items) + (1 if full_page else 0),
            has_more=full_page,
        )
