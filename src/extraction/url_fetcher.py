"""Fetch a web page and reduce it to readable text."""

import re

import requests
from bs4 import BeautifulSoup

from collect.errors import ExtractionError
from common.constants import REQUEST_TIMEOUT, USER_AGENT
from common.logger import get_logger

logger = get_logger(__name__)

# Elements that never carry article text
NOISE_TAGS = ("script", "style", "noscript", "nav", "header", "footer", "aside", "form", "svg")

# Keep prompts within a comfortable context size
DEFAULT_MAX_CHARS = 30000


def html_to_text(html: str, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """Strip markup and boilerplate from an HTML document.

    Args:
        html: Raw HTML
        max_chars: Truncate the result to this many characters

    Returns:
        Visible text with runs of blank lines collapsed
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(NOISE_TAGS):
        tag.decompose()

    text = soup.get_text("\n")
    lines = [line.strip() for line in text.splitlines()]
    text = re.sub(r"\n{3,}", "\n\n", "\n".join(lines)).strip()
    return text[:max_chars]


class UrlFetcher:
    """Download pages for URL-mode extraction."""

    def __init__(self, max_chars: int = DEFAULT_MAX_CHARS):
        self.max_chars = max_chars
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def fetch(self, url: str) -> str:
        """Fetch `url` and return its readable text.

        Raises:
            ExtractionError: If the page cannot be fetched or has no text
        """
        if not url.startswith(("http://", "https://")):
            raise ExtractionError(f"Not an http(s) URL: {url}")

        try:
            logger.debug(f"Fetching {url}")
            response = self.session.get(url, timeout=REQUEST_TIMEOUT)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ExtractionError(f"Could not fetch page content: {e}") from e

        text = html_to_text(response.text, self.max_chars)
        if not text:
            raise ExtractionError("The page has no readable text")

        logger.debug(f"Fetched {len(text)} characters from {url}")
        return text

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
