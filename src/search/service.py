"""Content search across providers, dispatched by content type."""

from collect.interfaces import ContentSearch
from collect.models import ContentType, SearchPage
from common.logger import get_logger

from .clients.base import APIError, ProviderClient

logger = get_logger(__name__)


class ContentSearchService(ContentSearch):
    """Route searches to the providers registered for each content type.

    When a type has several providers they are tried in order (the preferred
    one first) until one returns results; a failed request falls through to
    the next provider and is re-raised only when every provider failed.

    Example:
        >>> service = ContentSearchService.from_env()
        >>> page = service.search(ContentType.BOOK, "Demian - Hermann Hesse")
    """

    def __init__(self, providers: dict[ContentType, list[ProviderClient]]):
        """Initialize service.

        Args:
            providers: Provider clients per content type, in default order
        """
        self.providers = providers

    @classmethod
    def from_env(cls) -> "ContentSearchService":
        """Build the standard provider set from environment configuration."""
        from common.env import env

        from .clients.google_books import GoogleBooksClient
        from .clients.igdb import IgdbClient
        from .clients.openlibrary import OpenLibraryClient
        from .clients.spotify import SpotifyClient
        from .clients.tmdb import TmdbClient

        rpm = env.search_requests_per_minute()
        return cls(
            {
                ContentType.BOOK: [
                    GoogleBooksClient(env.google_books_api_key(), requests_per_minute=rpm),
                    OpenLibraryClient(requests_per_minute=rpm),
                ],
                ContentType.VIDEO: [TmdbClient(env.tmdb_api_key(), requests_per_minute=rpm)],
                ContentType.GAME: [
                    IgdbClient(
                        env.twitch_client_id(), env.twitch_client_secret(), requests_per_minute=rpm
                    )
                ],
                ContentType.MUSIC: [
                    SpotifyClient(
                        env.spotify_client_id(),
                        env.spotify_client_secret(),
                        requests_per_minute=rpm,
                    )
                ],
            }
        )

    def provider_names(self, content_type: ContentType) -> list[str]:
        return [client.name for client in self.providers.get(content_type, [])]

    def _ordered(self, content_type: ContentType, prefer_provider: str | None) -> list[ProviderClient]:
        clients = list(self.providers.get(content_type, []))
        if prefer_provider:
            # Stable: preferred provider first, the rest keep their order
            clients.sort(key=lambda c: 0 if c.name == prefer_provider else 1)
        return clients

    def search(
        self,
        content_type: ContentType,
        query: str,
        page: int = 1,
        prefer_provider: str | None = None,
    ) -> SearchPage:
        content_type = ContentType(content_type)
        clients = self._ordered(content_type, prefer_provider)
        if not clients:
            logger.debug(f"No provider for {content_type.value}; returning empty page")
            return SearchPage(items=[], total=0, has_more=False)

        last_error: APIError | None = None
        failures = 0
        result = SearchPage(items=[], total=0, has_more=False)
        for client in clients:
            try:
                result = client.search(query, page)
            except APIError as e:
                logger.warning(f"{client.name} search failed for '{query}': {e}")
                last_error = e
                failures += 1
                continue
            if result.items:
                return result
            logger.debug(f"{client.name}: no results for '{query}'")

        if last_error is not None and failures == len(clients):
            raise last_error
        return result

    def close(self) -> None:
        """Close every provider session."""
        for clients in self.providers.values():
            for client in clients:
                client.close()
