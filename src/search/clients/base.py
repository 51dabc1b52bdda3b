"""Base class and errors for content-search provider clients."""

from abc import ABC, abstractmethod
from typing import Any

import requests

from collect.models import MatchCandidate, SearchPage
from common.constants import REQUEST_TIMEOUT, USER_AGENT
from common.logger import get_logger

from .rate_limiter import RateLimiter

logger = get_logger(__name__)


class SearchClientError(Exception):
    """Base exception for provider client errors."""

    pass


class APIError(SearchClientError):
    """A single provider request failed."""

    pass


class RateLimitError(APIError):
    """Rate limit exceeded."""

    pass


class ServiceUnavailableError(SearchClientError):
    """The provider cannot be reached or is not configured."""

    pass


class ProviderClient(ABC):
    """Base class for all content-search provider clients.

    Subclasses implement `search` on top of `_request`, which applies the
    rate limit and turns transport failures into client errors:

    - connection failures become ServiceUnavailableError
    - timeouts and HTTP errors become APIError
    - HTTP 429 becomes RateLimitError
    """

    #: Provider tag stored on every candidate (e.g. 'tmdb')
    name: str = ""

    def __init__(self, requests_per_minute: int = 60):
        """Initialize client.

        Args:
            requests_per_minute: Rate limit for this provider
        """
        self.rate_limiter = RateLimiter(requests_per_period=requests_per_minute, period_seconds=60)
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    @abstractmethod
    def search(self, query: str, page: int = 1) -> SearchPage:
        """Search the provider.

        Args:
            query: Free-text query
            page: 1-based page number

        Returns:
            One page of candidates (possibly empty)

        Raises:
            APIError: If the request fails
            ServiceUnavailableError: If the provider is unreachable or unconfigured
        """
        pass

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send one rate-limited request and decode its JSON body."""
        self.rate_limiter.wait_if_needed()
        kwargs.setdefault("timeout", REQUEST_TIMEOUT)

        try:
            response = self.session.request(method, url, **kwargs)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.ConnectionError as e:
            raise ServiceUnavailableError(f"{self.name} is unreachable: {e}") from e
        except requests.exceptions.Timeout as e:
            raise APIError(f"{self.name} request timed out") from e
        except requests.exceptions.RequestException as e:
            status = getattr(getattr(e, "response", None), "status_code", None)
            if status == 429:
                raise RateLimitError(f"{self.name} rate limit exceeded") from e
            raise APIError(f"{self.name} API error: {e}") from e
        except ValueError as e:
            raise APIError(f"{self.name} returned invalid JSON") from e

    def _normalize_all(self, normalizer: Any, documents: list[dict[str, Any]]) -> list[MatchCandidate]:
        """Normalize provider documents, skipping the malformed ones."""
        candidates = []
        for document in documents:
            try:
                candidates.append(normalizer.normalize(document))
            except (ValueError, KeyError, TypeError) as e:
                logger.debug(f"Skipping malformed {self.name} result: {e}")
        return candidates

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False
