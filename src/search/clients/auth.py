"""OAuth client-credentials tokens for providers that require them."""

import time
from collections.abc import Callable

import requests

from common.constants import REQUEST_TIMEOUT
from common.logger import get_logger

from .base import APIError, ServiceUnavailableError

logger = get_logger(__name__)

# Refresh tokens this long before the provider says they expire
EXPIRY_MARGIN_SECONDS = 300


class ClientCredentialsToken:
    """Fetches and caches a client-credentials access token.

    Spotify expects the credentials as HTTP basic auth in a form body, Twitch
    (for IGDB) as query parameters; `credentials_in_query` picks the style.
    """

    def __init__(
        self,
        provider: str,
        token_url: str,
        client_id: str | None,
        client_secret: str | None,
        session: requests.Session,
        credentials_in_query: bool = False,
        clock: Callable[[], float] = time.time,
    ):
        self.provider = provider
        self.token_url = token_url
        self.client_id = client_id
        self.client_secret = client_secret
        self.session = session
        self.credentials_in_query = credentials_in_query
        self._clock = clock
        self._token: str | None = None
        self._expires_at = 0.0

    def get(self) -> str:
        """Return a valid access token, fetching a new one when needed.

        Raises:
            ServiceUnavailableError: If credentials are missing or the token endpoint is unreachable
            APIError: If the token endpoint rejects the request
        """
        if self._token and self._clock() < self._expires_at:
            return self._token

        if not self.client_id or not self.client_secret:
            raise ServiceUnavailableError(f"{self.provider} credentials are not configured")

        try:
            if self.credentials_in_query:
                response = self.session.post(
                    self.token_url,
                    params={
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "grant_type": "client_credentials",
                    },
                    timeout=REQUEST_TIMEOUT,
                )
            else:
                response = self.session.post(
                    self.token_url,
                    auth=(self.client_id, self.client_secret),
                    data={"grant_type": "client_credentials"},
                    timeout=REQUEST_TIMEOUT,
                )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.ConnectionError as e:
            raise ServiceUnavailableError(f"{self.provider} token endpoint is unreachable") from e
        except requests.exceptions.RequestException as e:
            raise APIError(f"{self.provider} token request failed: {e}") from e

        self._token = data["access_token"]
        self._expires_at = self._clock() + int(data.get("expires_in", 3600)) - EXPIRY_MARGIN_SECONDS
        logger.debug(f"Obtained {self.provider} access token")
        return self._token

    def invalidate(self) -> None:
        self._token = None
        self._expires_at = 0.0
